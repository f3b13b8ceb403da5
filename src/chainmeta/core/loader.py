# chainmeta/core/loader.py
"""
Config file helpers: YAML loading, ``${VAR}`` expansion and class lookup.
"""
from __future__ import annotations

import importlib
import logging
import os
import re
from glob import glob
from pathlib import Path
from typing import Any, Iterable

import yaml

logger = logging.getLogger(__name__)

# ${VAR} or ${VAR:-default}
ENV_VAR_PATTERN = re.compile(r"\$\{([^}:]+)(?::-([^}]*))?\}")


def import_attr(path: str) -> Any:
    """Resolve ``'package.module:Name'`` to the named attribute.

    Raises:
        ValueError: If ``path`` has no ``:`` separator
        ImportError: If the module cannot be imported
        AttributeError: If the module lacks the attribute
    """
    module_name, sep, attr = path.partition(":")
    if not sep or not attr:
        raise ValueError(f"Invalid import path '{path}', expected 'module:attr'")

    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        raise ImportError(f"Cannot import module '{module_name}'") from exc

    if not hasattr(module, attr):
        raise AttributeError(f"Module '{module_name}' has no attribute '{attr}'")
    return getattr(module, attr)


def _expand(match: re.Match) -> str:
    name, default = match.group(1), match.group(2)
    value = os.environ.get(name, default)
    if value is None:
        raise ValueError(
            f"Environment variable '{name}' is not set and no default provided"
        )
    return value


def substitute_env_vars(value: Any) -> Any:
    """Expand ``${VAR}`` / ``${VAR:-default}`` in strings, recursing into
    dicts and lists. Other values pass through unchanged.

    Raises:
        ValueError: If a variable without default is unset
    """
    if isinstance(value, str):
        return ENV_VAR_PATTERN.sub(_expand, value)
    if isinstance(value, dict):
        return {key: substitute_env_vars(item) for key, item in value.items()}
    if isinstance(value, list):
        return [substitute_env_vars(item) for item in value]
    return value


def load_yaml_files(patterns: Iterable[str]) -> list[dict[str, Any]]:
    """Parse every YAML file matched by ``patterns``, in sorted path order.

    Empty files yield ``{}``; no match yields ``[]``.
    """
    patterns = list(patterns)
    paths = sorted({Path(p).resolve() for pattern in patterns for p in glob(pattern)})

    if not paths:
        logger.warning("No config files found matching patterns: %s", patterns)
        return []

    logger.info("Loading config files: %s", [str(p) for p in paths])
    documents = []
    for path in paths:
        try:
            documents.append(yaml.safe_load(path.read_text(encoding="utf-8")) or {})
        except (OSError, yaml.YAMLError) as exc:
            logger.error("Failed to load YAML file '%s': %s", path, exc)
            raise
    return documents
