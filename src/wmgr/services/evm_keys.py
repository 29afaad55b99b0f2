"""EVM key resolution: raw hex key, key file, BIP-39 mnemonic, or svpi.

Mnemonics derive secp256k1 keys via BIP-32 (default ``m/44'/60'/0'/0/0``).
"""

from __future__ import annotations

import re
from pathlib import Path

from bip_utils import Bip39MnemonicValidator
from eth_account import Account
from eth_account.signers.local import LocalAccount

from wmgr.domain.credentials import (
    ExternalSecretCredential,
    MnemonicCredential,
    PrivateKeyCredential,
)
from wmgr.domain.errors import (
    DerivationFailed,
    InvalidMnemonic,
    InvalidPrivateKeyFormat,
    KeyfileNotFound,
)
from wmgr.domain.networks import DEFAULT_EVM_PATH
from wmgr.services.resolvers import ExternalSecretResolver, KeyResolver, Prompter, ResolverChain

Account.enable_unaudited_hdwallet_features()

_HEX64 = re.compile(r"^[0-9a-fA-F]{64}$")


def normalize_private_key(value: str) -> str:
    """Return ``0x`` + 64 lowercase hex chars, or raise InvalidPrivateKeyFormat."""
    text = (value or "").strip()
    if not text:
        raise InvalidPrivateKeyFormat("Private key is required")
    bare = text[2:] if text.lower().startswith("0x") else text
    if not _HEX64.match(bare):
        raise InvalidPrivateKeyFormat(
            "Private key must be 64 hex chars (with or without 0x prefix)"
        )
    return f"0x{bare.lower()}"


def looks_like_private_key(value: str) -> bool:
    text = value.strip()
    bare = text[2:] if text.lower().startswith("0x") else text
    return bool(_HEX64.match(bare))


def account_from_private_key(value: str) -> LocalAccount:
    key = normalize_private_key(value)
    try:
        return Account.from_key(key)
    except ValueError as exc:
        # Well-formed hex at or above the secp256k1 group order.
        raise InvalidPrivateKeyFormat(f"Invalid private key: {exc}") from exc


def account_from_private_key_file(path: Path) -> LocalAccount:
    path = Path(path).expanduser()
    if not path.is_file():
        raise KeyfileNotFound(f"Private key file does not exist or is not a file: {path}")
    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise InvalidPrivateKeyFormat(f"Private key file is not text: {path}") from exc
    except OSError as exc:
        msg = f"Cannot read private key file {path}: {exc.strerror or exc}"
        raise KeyfileNotFound(msg) from exc
    return account_from_private_key(text)


def account_from_mnemonic(
    mnemonic: str,
    derivation_path: str = DEFAULT_EVM_PATH,
    passphrase: str = "",
) -> LocalAccount:
    """Derive a secp256k1 account from a BIP-39 phrase."""
    phrase = " ".join(mnemonic.split())
    if not Bip39MnemonicValidator().IsValid(phrase):
        raise InvalidMnemonic("Invalid BIP39 mnemonic for EVM wallet")
    try:
        return Account.from_mnemonic(phrase, passphrase=passphrase, account_path=derivation_path)
    except ValueError as exc:
        raise DerivationFailed(f"Failed to derive EVM wallet at {derivation_path}: {exc}") from exc


class PrivateKeyResolver(KeyResolver[LocalAccount]):
    kind = "private_key"

    def resolve(self, ref: PrivateKeyCredential) -> LocalAccount:
        if ref.path is not None:
            return account_from_private_key_file(ref.path)
        return account_from_private_key(ref.key.get_secret_value() if ref.key else "")


class MnemonicResolver(KeyResolver[LocalAccount]):
    kind = "mnemonic"

    def resolve(self, ref: MnemonicCredential) -> LocalAccount:
        return account_from_mnemonic(
            ref.phrase.get_secret_value(),
            ref.derivation_path or DEFAULT_EVM_PATH,
            ref.passphrase.get_secret_value(),
        )


class SvpiResolver(ExternalSecretResolver[LocalAccount]):
    """svpi secret: a 64-hex value is a raw key, anything else a mnemonic."""

    name_prompt = "SVPI wallet name (EVM):"

    def from_secret(self, secret: str, ref: ExternalSecretCredential) -> LocalAccount:
        if looks_like_private_key(secret):
            return account_from_private_key(secret)
        return account_from_mnemonic(
            secret,
            ref.derivation_path or DEFAULT_EVM_PATH,
            ref.passphrase.get_secret_value(),
        )


def evm_chain(prompter: Prompter | None = None) -> ResolverChain[LocalAccount]:
    """Built-in EVM resolvers in order: private key, mnemonic, svpi."""
    return ResolverChain(
        "evm",
        [
            PrivateKeyResolver(),
            MnemonicResolver(),
            SvpiResolver(prompter=prompter),
        ],
    )
