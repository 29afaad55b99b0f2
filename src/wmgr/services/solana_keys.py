"""Solana key resolution: keyfile, BIP-39 mnemonic, or svpi.

Mnemonics are derived with SLIP-0010 ed25519 (all path segments must be
hardened), matching Phantom / Solflare / ``solana-keygen``.
"""

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Any

from bip_utils import (
    Bip32KeyError,
    Bip32PathError,
    Bip32Slip10Ed25519,
    Bip39MnemonicValidator,
    Bip39SeedGenerator,
)
from solders.keypair import Keypair

from wmgr.domain.credentials import (
    ExternalSecretCredential,
    KeyfileCredential,
    MnemonicCredential,
)
from wmgr.domain.errors import (
    DerivationFailed,
    InvalidMnemonic,
    InvalidPrivateKeyFormat,
    KeyfileMalformed,
    KeyfileNotFound,
)
from wmgr.services.resolvers import ExternalSecretResolver, KeyResolver, Prompter, ResolverChain

KEYPAIR_LENGTH = 64
SEED_LENGTH = 32

_HEX_KEY = re.compile(r"^(0x)?([0-9a-fA-F]{64}|[0-9a-fA-F]{128})$")


def keypair_from_file(path: Path) -> Keypair:
    """Load a Solana CLI keypair file (JSON array of 64 bytes)."""
    path = Path(path).expanduser()
    if not path.is_file():
        raise KeyfileNotFound(f"Keyfile does not exist or is not a file: {path}")
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise KeyfileMalformed(f"Keypair file must be a JSON array of numbers: {exc}") from exc
    except OSError as exc:
        raise KeyfileNotFound(f"Cannot read keyfile {path}: {exc.strerror or exc}") from exc

    if not isinstance(data, list) or not all(
        isinstance(b, int) and not isinstance(b, bool) and 0 <= b <= 255 for b in data
    ):
        raise KeyfileMalformed("Keypair file must be a JSON array of byte values (0-255)")
    if len(data) != KEYPAIR_LENGTH:
        raise KeyfileMalformed(f"Keypair file must contain 64 bytes, found {len(data)}")
    try:
        return Keypair.from_bytes(bytes(data))
    except ValueError as exc:
        raise KeyfileMalformed(f"Failed to parse keypair: {exc}") from exc


def keypair_from_mnemonic(mnemonic: str, derivation_path: str, passphrase: str = "") -> Keypair:
    """Derive an ed25519 keypair from a BIP-39 phrase at *derivation_path*."""
    phrase = " ".join(mnemonic.split())
    if not Bip39MnemonicValidator().IsValid(phrase):
        raise InvalidMnemonic("Invalid BIP39 mnemonic")
    seed = Bip39SeedGenerator(phrase).Generate(passphrase)
    try:
        node = Bip32Slip10Ed25519.FromSeed(seed).DerivePath(derivation_path)
    except (Bip32KeyError, Bip32PathError, ValueError) as exc:
        raise DerivationFailed(f"Failed to derive Solana key at {derivation_path}: {exc}") from exc
    key = node.PrivateKey().Raw().ToBytes()
    if len(key) != SEED_LENGTH:
        raise DerivationFailed("Failed to derive ed25519 key from seed")
    return Keypair.from_seed(key)


def looks_like_hex_key(value: str) -> bool:
    """A 32-byte seed or 64-byte keypair in hex, optionally ``0x``-prefixed."""
    return bool(_HEX_KEY.match(value.strip()))


def keypair_from_hex(value: str) -> Keypair:
    text = value.strip()
    text = text[2:] if text.lower().startswith("0x") else text
    try:
        raw = bytes.fromhex(text)
    except ValueError as exc:
        raise InvalidPrivateKeyFormat("Solana private key must be hex") from exc
    if len(raw) == SEED_LENGTH:
        return Keypair.from_seed(raw)
    if len(raw) == KEYPAIR_LENGTH:
        try:
            return Keypair.from_bytes(raw)
        except ValueError as exc:
            raise InvalidPrivateKeyFormat(f"Failed to parse Solana keypair: {exc}") from exc
    raise InvalidPrivateKeyFormat("Solana private key must be 32 or 64 bytes")


class KeyfileResolver(KeyResolver[Keypair]):
    kind = "keyfile"

    def resolve(self, ref: KeyfileCredential) -> Keypair:
        return keypair_from_file(ref.path)


class MnemonicResolver(KeyResolver[Keypair]):
    kind = "mnemonic"

    def __init__(self, default_path: str) -> None:
        self.default_path = default_path

    def resolve(self, ref: MnemonicCredential) -> Keypair:
        return keypair_from_mnemonic(
            ref.phrase.get_secret_value(),
            ref.derivation_path or self.default_path,
            ref.passphrase.get_secret_value(),
        )


class SvpiResolver(ExternalSecretResolver[Keypair]):
    """svpi secret: hex keys are used as-is, anything else is a mnemonic."""

    def __init__(self, default_path: str, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.default_path = default_path

    def from_secret(self, secret: str, ref: ExternalSecretCredential) -> Keypair:
        if looks_like_hex_key(secret):
            return keypair_from_hex(secret)
        return keypair_from_mnemonic(
            secret,
            ref.derivation_path or self.default_path,
            ref.passphrase.get_secret_value(),
        )


def solana_chain(default_path: str, prompter: Prompter | None = None) -> ResolverChain[Keypair]:
    """Built-in Solana resolvers in order: keyfile, mnemonic, svpi."""
    return ResolverChain(
        "solana",
        [
            KeyfileResolver(),
            MnemonicResolver(default_path),
            SvpiResolver(default_path, prompter=prompter),
        ],
    )
