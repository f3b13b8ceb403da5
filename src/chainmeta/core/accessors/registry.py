# chainmeta/core/accessors/registry.py
"""
Accessors registry – live accessors addressable by network name or chain id.
"""
from __future__ import annotations

import logging

from chainmeta.contracts.accessor import RemoteAccessor
from chainmeta.core.accessors.networks import NetworkSpec

logger = logging.getLogger(__name__)


class AccessorsRegistry:
    """Accessor per configured network."""

    def __init__(self) -> None:
        self._accessors: dict[str, RemoteAccessor] = {}
        self._specs: dict[str, NetworkSpec] = {}
        self._by_chain: dict[int, str] = {}

    def register(self, spec: NetworkSpec, accessor: RemoteAccessor) -> None:
        if spec.name in self._accessors:
            raise ValueError(f"Network '{spec.name}' already registered")
        if spec.chain_id in self._by_chain:
            raise ValueError(
                f"chain_id {spec.chain_id} already served by "
                f"'{self._by_chain[spec.chain_id]}'"
            )
        self._accessors[spec.name] = accessor
        self._specs[spec.name] = spec
        self._by_chain[spec.chain_id] = spec.name
        logger.info(
            "Registered accessor for %s (chain %d): %s",
            spec.name,
            spec.chain_id,
            type(accessor).__name__,
        )

    def get(self, network: str) -> RemoteAccessor:
        try:
            return self._accessors[network]
        except KeyError:
            raise KeyError(
                f"Network '{network}' not found. Available: {list(self._accessors)}"
            )

    def for_chain(self, chain_id: int) -> RemoteAccessor:
        try:
            return self._accessors[self._by_chain[chain_id]]
        except KeyError:
            raise KeyError(
                f"No network for chain_id {chain_id}. Available: {sorted(self._by_chain)}"
            )

    def spec(self, network: str) -> NetworkSpec:
        self.get(network)
        return self._specs[network]

    def has(self, network: str) -> bool:
        return network in self._accessors

    def __contains__(self, network: object) -> bool:
        return network in self._accessors

    def list(self) -> list[str]:
        return list(self._accessors.keys())

    async def aclose(self) -> None:
        """Close every registered accessor."""
        for name, accessor in self._accessors.items():
            logger.debug("Closing accessor for %s", name)
            await accessor.aclose()
