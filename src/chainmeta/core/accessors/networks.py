# chainmeta/core/accessors/networks.py
"""
Network definitions for remote accessors.

Each network names a chain, the JSON-RPC endpoint that serves it and the
accessor class that reads ``contractURI()`` through that endpoint.
"""
from __future__ import annotations

import logging
from typing import Any, Iterable

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from chainmeta.core.loader import load_yaml_files, substitute_env_vars

logger = logging.getLogger(__name__)

DEFAULT_ACCESSOR = "chainmeta.core.accessors.json_rpc:JsonRpcContractURIAccessor"


class NetworkSpec(BaseModel):
    """A chain reachable over JSON-RPC.

    Attributes:
        name: Network key in the config file (e.g. ``mainnet``).
        chain_id: EIP-155 chain id, unique across networks.
        rpc_url: HTTP(S) JSON-RPC endpoint.
        timeout: Per-call timeout in seconds.
        block: Block tag or number the reads are pinned to.
        headers: Extra HTTP headers, typically provider API keys.
        accessor: Import path ``module:Class`` of the ``RemoteAccessor``.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str
    chain_id: int = Field(ge=1)
    rpc_url: str
    timeout: float = Field(default=10.0, gt=0)
    block: str = "latest"
    headers: dict[str, str] = Field(default_factory=dict)
    accessor: str = DEFAULT_ACCESSOR

    @field_validator("rpc_url")
    @classmethod
    def _http_endpoint(cls, value: str) -> str:
        if not value.startswith(("http://", "https://")):
            raise ValueError(f"rpc_url must be an http(s) URL, got '{value}'")
        return value

    @field_validator("accessor")
    @classmethod
    def _import_path(cls, value: str) -> str:
        if ":" not in value:
            raise ValueError(f"accessor must be 'module:Class', got '{value}'")
        return value

    def accessor_kwargs(self) -> dict[str, Any]:
        return {
            "base_url": self.rpc_url,
            "timeout": self.timeout,
            "block": self.block,
            "headers": dict(self.headers),
        }


class NetworksConfig(BaseModel):
    networks: list[NetworkSpec] = Field(default_factory=list)

    @model_validator(mode="after")
    def _unique_chain_ids(self) -> NetworksConfig:
        seen: dict[int, str] = {}
        for spec in self.networks:
            if spec.chain_id in seen:
                raise ValueError(
                    f"chain_id {spec.chain_id} used by both "
                    f"'{seen[spec.chain_id]}' and '{spec.name}'"
                )
            seen[spec.chain_id] = spec.name
        return self


def load_networks_config(patterns: Iterable[str]) -> NetworksConfig:
    """
    Load network definitions from YAML files.

    Expected YAML::

        networks:
          mainnet:
            chain_id: 1
            rpc_url: "${MAINNET_RPC_URL:-http://localhost:8545}"
            timeout: 10.0
            headers:
              X-Api-Key: "${RPC_API_KEY:-}"

    A network defined in a later file replaces the earlier definition.

    Raises:
        ValueError: On unset env vars, invalid fields or duplicate chain ids
    """
    raw_networks: dict[str, dict[str, Any]] = {}
    for document in load_yaml_files(patterns):
        raw_networks.update(document.get("networks") or {})

    specs: list[NetworkSpec] = []
    for name, raw in raw_networks.items():
        try:
            specs.append(
                NetworkSpec.model_validate({**substitute_env_vars(raw or {}), "name": name})
            )
        except ValidationError as exc:
            raise ValueError(f"Network '{name}' is invalid: {exc}") from exc
        except ValueError as exc:
            raise ValueError(f"Network '{name}' config error: {exc}") from exc

    try:
        cfg = NetworksConfig(networks=specs)
    except ValidationError as exc:
        raise ValueError(f"Invalid networks config: {exc}") from exc

    logger.info(
        "Loaded %d network(s): %s",
        len(cfg.networks),
        {s.name: s.chain_id for s in cfg.networks},
    )
    return cfg
