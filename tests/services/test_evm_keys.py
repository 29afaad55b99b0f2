"""Tests for EVM key resolution (raw key, key file, mnemonic, svpi)."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import SecretStr

from wmgr.domain.credentials import (
    ExternalSecretCredential,
    KeyfileCredential,
    MnemonicCredential,
    PrivateKeyCredential,
)
from wmgr.domain.errors import (
    ConfigurationError,
    InvalidMnemonic,
    InvalidPrivateKeyFormat,
    KeyfileNotFound,
)
from wmgr.services.evm_keys import (
    SvpiResolver,
    account_from_mnemonic,
    account_from_private_key,
    account_from_private_key_file,
    evm_chain,
    normalize_private_key,
)

PHRASE = "test test test test test test test test test test test junk"
ADDRESS = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"
KEY_HEX = "ac0974bec39a17e36ba4a6b4d238ff944bacb478cbed5efcae784d7bf4f2ff80"
SECOND_ADDRESS = "0x70997970C51812dc3A010C7d01b50e0d17dc79C8"


class _Source:
    def __init__(self, secret: str) -> None:
        self.secret = secret

    def fetch_mnemonic(self, name: str, password: str, file_scope: Path | None = None) -> str:
        return self.secret


class TestPrivateKey:
    @pytest.mark.parametrize("value", [KEY_HEX, "0x" + KEY_HEX, f"  0X{KEY_HEX.upper()}\n"])
    def test_accepted_forms(self, value: str) -> None:
        assert account_from_private_key(value).address == ADDRESS

    @pytest.mark.parametrize("value", [KEY_HEX[:63], KEY_HEX + "a", "zz" * 32, ""])
    def test_rejected_forms(self, value: str) -> None:
        with pytest.raises(InvalidPrivateKeyFormat):
            normalize_private_key(value)

    def test_out_of_range_scalar(self) -> None:
        with pytest.raises(InvalidPrivateKeyFormat):
            account_from_private_key("ff" * 32)

    def test_key_file(self, tmp_path: Path) -> None:
        path = tmp_path / "key.hex"
        path.write_text(f"0x{KEY_HEX}\n")
        assert account_from_private_key_file(path).address == ADDRESS

    def test_missing_key_file(self, tmp_path: Path) -> None:
        with pytest.raises(KeyfileNotFound):
            account_from_private_key_file(tmp_path / "absent.hex")

    def test_binary_key_file(self, tmp_path: Path) -> None:
        path = tmp_path / "key.hex"
        path.write_bytes(b"\xff\xfe\x00\x80" * 16)
        with pytest.raises(InvalidPrivateKeyFormat, match="not text"):
            account_from_private_key_file(path)

    def test_unreadable_key_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        path = tmp_path / "key.hex"
        path.write_text(KEY_HEX)

        def denied(self: Path, *args: object, **kwargs: object) -> str:
            raise PermissionError(13, "Permission denied")

        monkeypatch.setattr(Path, "read_text", denied)
        with pytest.raises(KeyfileNotFound, match="Permission denied"):
            account_from_private_key_file(path)


class TestMnemonic:
    def test_default_path(self) -> None:
        assert account_from_mnemonic(PHRASE).address == ADDRESS

    def test_second_index(self) -> None:
        assert account_from_mnemonic(PHRASE, "m/44'/60'/0'/0/1").address == SECOND_ADDRESS

    def test_passphrase_changes_address(self) -> None:
        assert account_from_mnemonic(PHRASE, passphrase="x").address != ADDRESS

    def test_invalid(self) -> None:
        with pytest.raises(InvalidMnemonic):
            account_from_mnemonic("test " * 12)


class TestChain:
    def test_default_order(self) -> None:
        kinds = [r.kind for r in evm_chain().resolvers]
        assert kinds == ["private_key", "mnemonic", "external_secret"]

    def test_private_key_ref(self) -> None:
        ref = PrivateKeyCredential(key=SecretStr(KEY_HEX))
        assert evm_chain().resolve(ref).address == ADDRESS

    def test_mnemonic_ref(self) -> None:
        ref = MnemonicCredential(phrase=SecretStr(PHRASE))
        assert evm_chain().resolve(ref).address == ADDRESS

    def test_keyfile_ref_not_accepted(self) -> None:
        with pytest.raises(ConfigurationError, match="No evm resolver accepts keyfile"):
            evm_chain().resolve(KeyfileCredential(path=Path("id.json")))


class TestSvpiResolver:
    @pytest.mark.parametrize("secret", [PHRASE, KEY_HEX, "0x" + KEY_HEX])
    def test_secret_forms(self, secret: str) -> None:
        resolver = SvpiResolver(source_factory=lambda protocol, command: _Source(secret))
        ref = ExternalSecretCredential(name="evm", password=SecretStr("pw"))
        assert resolver.resolve(ref).address == ADDRESS

    def test_name_prompt_mentions_evm(self) -> None:
        asked: list[str] = []

        def prompter(text: str, *, hidden: bool = False) -> str:
            asked.append(text)
            return "x"

        resolver = SvpiResolver(
            prompter=prompter, source_factory=lambda protocol, command: _Source(PHRASE)
        )
        resolver.resolve(ExternalSecretCredential())
        assert asked[0] == "SVPI wallet name (EVM):"
