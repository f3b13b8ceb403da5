# chainmeta/core/accessors/__init__.py
"""Remote accessor implementations and per-network loading."""

from chainmeta.core.accessors.registry import AccessorsRegistry
from chainmeta.core.accessors.loader import build_accessor, load_and_register_accessors
from chainmeta.core.accessors.networks import NetworkSpec, NetworksConfig, load_networks_config
from chainmeta.core.accessors.json_rpc import JsonRpcContractURIAccessor

__all__ = [
    "AccessorsRegistry",
    "build_accessor",
    "load_and_register_accessors",
    "NetworkSpec",
    "NetworksConfig",
    "load_networks_config",
    "JsonRpcContractURIAccessor",
]
