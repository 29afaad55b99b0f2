"""Static registries: Solana clusters, EVM networks, derivation profiles.

All tables are immutable and module-level.  Lookups fall back to a named
default when no value is supplied; unknown names raise and enumerate the
valid choices so the CLI stays discoverable without interactive help.
"""

from __future__ import annotations

from enum import StrEnum
from types import MappingProxyType

from pydantic import BaseModel

from wmgr.domain.errors import ConfigurationError, UnknownDerivationProfile, UnknownNetworkName


class Commitment(StrEnum):
    """Solana confirmation levels, weakest first."""

    PROCESSED = "processed"
    CONFIRMED = "confirmed"
    FINALIZED = "finalized"


DEFAULT_CLUSTER = "mainnet-beta"
DEFAULT_COMMITMENT = Commitment.CONFIRMED
DEFAULT_EVM_NETWORK = "mainnet"
DEFAULT_DERIVATION_PROFILE = "trustwallet"
DEFAULT_EVM_PATH = "m/44'/60'/0'/0/0"

USDC_DECIMALS = 6

_MAINNET_USDC = "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v"
_DEVNET_USDC = "4zMMC9srt5Ri5X14GAgXhaHii3GnPAEERYPJgZJDncDU"


class ClusterProfile(BaseModel):
    """A Solana cluster endpoint."""

    model_config = {"frozen": True}

    name: str
    rpc_url: str
    usdc_mint: str
    commitment: Commitment = DEFAULT_COMMITMENT


class EvmNetwork(BaseModel):
    """An EVM chain endpoint."""

    model_config = {"frozen": True}

    name: str
    chain_id: int
    rpc_url: str


class DerivationProfile(BaseModel):
    """Default HD path for a wallet vendor's mnemonic layout."""

    model_config = {"frozen": True}

    name: str
    path: str


CLUSTERS: MappingProxyType[str, ClusterProfile] = MappingProxyType(
    {
        "mainnet-beta": ClusterProfile(
            name="mainnet-beta",
            rpc_url="https://api.mainnet-beta.solana.com",
            usdc_mint=_MAINNET_USDC,
        ),
        "devnet": ClusterProfile(
            name="devnet",
            rpc_url="https://api.devnet.solana.com",
            usdc_mint=_DEVNET_USDC,
        ),
        "testnet": ClusterProfile(
            name="testnet",
            rpc_url="https://api.testnet.solana.com",
            usdc_mint=_DEVNET_USDC,
        ),
        "localnet": ClusterProfile(
            name="localnet",
            rpc_url="http://127.0.0.1:8899",
            usdc_mint=_MAINNET_USDC,
        ),
    }
)

# Free public endpoints; override with --rpc for anything serious.
EVM_NETWORKS: MappingProxyType[str, EvmNetwork] = MappingProxyType(
    {
        net.name: net
        for net in (
            EvmNetwork(name="mainnet", chain_id=1, rpc_url="https://cloudflare-eth.com"),
            EvmNetwork(name="sepolia", chain_id=11155111, rpc_url="https://rpc.sepolia.org"),
            EvmNetwork(
                name="holesky",
                chain_id=17000,
                rpc_url="https://ethereum-holesky.publicnode.com",
            ),
            EvmNetwork(name="polygon", chain_id=137, rpc_url="https://polygon-rpc.com"),
            EvmNetwork(
                name="polygon_amoy",
                chain_id=80002,
                rpc_url="https://rpc-amoy.polygon.technology",
            ),
            EvmNetwork(name="bsc", chain_id=56, rpc_url="https://bsc-dataseed.binance.org"),
            EvmNetwork(
                name="bsc_testnet",
                chain_id=97,
                rpc_url="https://data-seed-prebsc-1-s1.binance.org:8545",
            ),
            EvmNetwork(
                name="avalanche",
                chain_id=43114,
                rpc_url="https://api.avax.network/ext/bc/C/rpc",
            ),
            EvmNetwork(
                name="avalanche_fuji",
                chain_id=43113,
                rpc_url="https://api.avax-test.network/ext/bc/C/rpc",
            ),
            EvmNetwork(name="optimism", chain_id=10, rpc_url="https://mainnet.optimism.io"),
            EvmNetwork(name="arbitrum", chain_id=42161, rpc_url="https://arb1.arbitrum.io/rpc"),
        )
    }
)

# Trust Wallet, Phantom and Solflare use the non-change path at account 0.
DERIVATION_PROFILES: MappingProxyType[str, DerivationProfile] = MappingProxyType(
    {
        "trustwallet": DerivationProfile(name="trustwallet", path="m/44'/501'/0'"),
        "phantom": DerivationProfile(name="phantom", path="m/44'/501'/0'"),
        "solflare": DerivationProfile(name="solflare", path="m/44'/501'/0'"),
        "solana_cli": DerivationProfile(name="solana_cli", path="m/44'/501'/0'/0'"),
    }
)


def _blank(value: str | None) -> bool:
    return value is None or not value.strip()


def get_cluster(name: str | None = None, rpc_override: str | None = None) -> ClusterProfile:
    """Look up a Solana cluster, applying an optional RPC URL override."""
    key = DEFAULT_CLUSTER if _blank(name) else str(name).strip()
    profile = CLUSTERS.get(key)
    if profile is None:
        valid = ", ".join(CLUSTERS)
        raise UnknownNetworkName(f"Unknown cluster: {name} (valid: {valid})")
    if not _blank(rpc_override):
        profile = profile.model_copy(update={"rpc_url": str(rpc_override).strip()})
    return profile


def get_evm_network(name: str | None = None, rpc_override: str | None = None) -> EvmNetwork:
    """Look up an EVM network; names are case-insensitive and ``-`` == ``_``."""
    key = DEFAULT_EVM_NETWORK if _blank(name) else str(name).strip().lower().replace("-", "_")
    network = EVM_NETWORKS.get(key)
    if network is None:
        valid = ", ".join(EVM_NETWORKS)
        raise UnknownNetworkName(f"Unknown EVM network: {name} (valid: {valid})")
    if not _blank(rpc_override):
        network = network.model_copy(update={"rpc_url": str(rpc_override).strip()})
    return network


def get_derivation_profile(name: str | None = None) -> DerivationProfile:
    """Look up a mnemonic derivation profile by name."""
    key = DEFAULT_DERIVATION_PROFILE if _blank(name) else str(name).strip().lower()
    profile = DERIVATION_PROFILES.get(key)
    if profile is None:
        valid = ", ".join(DERIVATION_PROFILES)
        raise UnknownDerivationProfile(f"Unknown mnemonic profile: {name} (valid: {valid})")
    return profile


def parse_commitment(value: str | None = None) -> Commitment:
    """Parse a commitment level, defaulting to ``confirmed``."""
    if _blank(value):
        return DEFAULT_COMMITMENT
    try:
        return Commitment(str(value).strip().lower())
    except ValueError:
        valid = ", ".join(c.value for c in Commitment)
        raise ConfigurationError(f"Unknown commitment: {value} (valid: {valid})") from None


def list_clusters() -> list[str]:
    return list(CLUSTERS)


def list_evm_networks() -> list[str]:
    return list(EVM_NETWORKS)


def list_derivation_profiles() -> list[str]:
    return list(DERIVATION_PROFILES)
