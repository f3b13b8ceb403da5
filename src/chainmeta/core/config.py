# chainmeta/core/config.py
"""
Central configuration for metadata retrieval.

Environment variables override defaults.
"""
from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment-driven settings with sensible defaults."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"
    log_json: bool = True

    # Network definitions (glob patterns)
    networks_config_paths: list[str] = Field(
        default_factory=lambda: ["config/networks.yaml"]
    )
    default_network: str = Field(
        default="mainnet",
        description="Configured network the fetcher reads from",
    )

    # Fallback JSON-RPC endpoint when the default network is not configured
    rpc_url: str = Field(
        default="http://localhost:8545",
        description="JSON-RPC endpoint for contractURI() reads",
    )
    rpc_timeout: float = Field(default=10.0, gt=0)

    # Batch behaviour
    max_in_flight: int = Field(default=16, ge=1)
    batch_timeout: float | None = Field(
        default=None,
        description="Batch timeout in seconds (unset = unbounded)",
    )


settings = Settings()
