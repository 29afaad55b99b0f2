"""wmgr: wallet manager CLI for Solana and EVM transfers."""

__version__ = "1.0.0"
