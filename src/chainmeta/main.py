# chainmeta/main.py
"""
Fetcher factory.

Wires settings, logging and configured networks into a ready
``BatchMetadataFetcher``.
"""
from __future__ import annotations

import logging

from chainmeta.contracts.accessor import RemoteAccessor
from chainmeta.core.accessors.json_rpc import JsonRpcContractURIAccessor
from chainmeta.core.accessors.loader import load_and_register_accessors
from chainmeta.core.accessors.registry import AccessorsRegistry
from chainmeta.core.config import Settings, settings as default_settings
from chainmeta.core.fetcher import BatchMetadataFetcher
from chainmeta.core.logging import configure_logging

logger = logging.getLogger(__name__)


def _resolve_accessor(cfg: Settings, registry: AccessorsRegistry) -> RemoteAccessor:
    if registry.has(cfg.default_network):
        return registry.get(cfg.default_network)

    logger.info(
        "Network '%s' not configured, using JSON-RPC endpoint %s",
        cfg.default_network,
        cfg.rpc_url,
    )
    return JsonRpcContractURIAccessor(base_url=cfg.rpc_url, timeout=cfg.rpc_timeout)


def create_fetcher(
    settings: Settings | None = None,
    *,
    registry: AccessorsRegistry | None = None,
) -> BatchMetadataFetcher:
    """Build a fetcher for ``settings.default_network``.

    The fetcher owns its accessor: close it with ``await fetcher.aclose()``
    or use it as ``async with create_fetcher() as fetcher``. Other accessors
    loaded into ``registry`` stay open and are closed by ``registry.aclose()``.

    Args:
        settings: Settings to use (module defaults if omitted).
        registry: Pre-populated registry; networks from
            ``networks_config_paths`` are added to it.
    """
    cfg = settings or default_settings
    configure_logging(cfg.log_level, json=cfg.log_json)

    registry = registry if registry is not None else AccessorsRegistry()
    load_and_register_accessors(patterns=cfg.networks_config_paths, registry=registry)

    accessor = _resolve_accessor(cfg, registry)
    logger.info(
        "Fetcher ready: accessor=%s max_in_flight=%d batch_timeout=%s env=%s",
        type(accessor).__name__,
        cfg.max_in_flight,
        cfg.batch_timeout,
        cfg.app_env,
    )
    return BatchMetadataFetcher(
        accessor,
        max_in_flight=cfg.max_in_flight,
        timeout=cfg.batch_timeout,
    )
