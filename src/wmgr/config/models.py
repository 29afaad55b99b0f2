"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, wmgr.toml only contains overrides.
An empty (or absent) wmgr.toml is a valid configuration.
"""

from __future__ import annotations

from pydantic import BaseModel, field_validator

# --- wmgr.toml sections ---


class SvpiConfig(BaseModel):
    """[svpi] section."""

    model_config = {"frozen": True}

    enabled: bool = False
    command: str = "svpi"
    file: str | None = None
    name: str | None = None
    protocol: str = "json"

    @field_validator("protocol")
    @classmethod
    def _known_protocol(cls, value: str) -> str:
        value = value.strip().lower()
        if value not in ("json", "log"):
            msg = f"svpi.protocol must be 'json' or 'log', got {value!r}"
            raise ValueError(msg)
        return value


class SolanaConfig(BaseModel):
    """[solana] section."""

    model_config = {"frozen": True}

    cluster: str = "mainnet-beta"
    rpc: str | None = None
    commitment: str = "confirmed"
    mnemonic_profile: str = "trustwallet"


class EvmConfig(BaseModel):
    """[evm] section."""

    model_config = {"frozen": True}

    network: str = "mainnet"
    rpc: str | None = None
    gas_price: str | None = None
    gas_limit: int | None = None

