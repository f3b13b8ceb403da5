# chainmeta/core/accessors/loader.py
"""
Accessor loader – builds one accessor per configured network.
"""
from __future__ import annotations

import logging
from typing import Iterable

from chainmeta.contracts.accessor import RemoteAccessor
from chainmeta.core.accessors.networks import NetworkSpec, load_networks_config
from chainmeta.core.accessors.registry import AccessorsRegistry
from chainmeta.core.loader import import_attr

logger = logging.getLogger(__name__)


def build_accessor(spec: NetworkSpec) -> RemoteAccessor:
    """Instantiate the accessor class of ``spec`` against its endpoint.

    Raises:
        TypeError: If the class is not a ``RemoteAccessor``.
    """
    cls = import_attr(spec.accessor)
    if not (isinstance(cls, type) and issubclass(cls, RemoteAccessor)):
        raise TypeError(
            f"Network '{spec.name}' accessor '{spec.accessor}' is not a RemoteAccessor"
        )
    return cls(**spec.accessor_kwargs())


def load_and_register_accessors(
    *,
    patterns: Iterable[str],
    registry: AccessorsRegistry,
) -> None:
    cfg = load_networks_config(patterns)

    for spec in cfg.networks:
        registry.register(spec, build_accessor(spec))

    logger.info("Accessors ready for network(s): %s", registry.list())
