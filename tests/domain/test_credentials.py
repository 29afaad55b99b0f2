"""Tests for credential references and source selection."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import SecretStr, TypeAdapter, ValidationError

from wmgr.domain.credentials import (
    EVM_SOURCES,
    SOLANA_SOURCES,
    CredentialReference,
    ExternalSecretCredential,
    KeyfileCredential,
    KeyOptions,
    MnemonicCredential,
    PrivateKeyCredential,
)
from wmgr.domain.errors import AmbiguousCredentialSource, ConfigurationError

PHRASE = "test test test test test test test test test test test junk"


class TestSourceSelection:
    def test_no_source(self) -> None:
        with pytest.raises(AmbiguousCredentialSource, match="Provide one of --keyfile"):
            KeyOptions().to_credential(SOLANA_SOURCES, chain="solana")

    def test_keyfile_and_seed_conflict(self, tmp_path: Path) -> None:
        """Fails before any file I/O: the keyfile does not even exist."""
        opts = KeyOptions(keyfile=tmp_path / "missing.json", seed=PHRASE)
        with pytest.raises(AmbiguousCredentialSource, match="Use only one of"):
            opts.to_credential(SOLANA_SOURCES, chain="solana")

    def test_svpi_name_alone_implies_svpi(self) -> None:
        opts = KeyOptions(svpi_name="main")
        assert opts.uses_svpi
        assert opts.provided_sources() == ["external_secret"]

    def test_svpi_flag_conflicts_with_seed(self) -> None:
        with pytest.raises(AmbiguousCredentialSource):
            KeyOptions(svpi=True, seed=PHRASE).to_credential(EVM_SOURCES, chain="evm")

    def test_blank_seed_is_not_a_source(self) -> None:
        assert KeyOptions(seed="   ").provided_sources() == []

    def test_keyfile_unsupported_on_evm(self, tmp_path: Path) -> None:
        opts = KeyOptions(keyfile=tmp_path / "id.json")
        with pytest.raises(ConfigurationError, match="--keyfile not supported for evm"):
            opts.to_credential(EVM_SOURCES, chain="evm")

    def test_privkey_unsupported_on_solana(self) -> None:
        with pytest.raises(ConfigurationError, match="--privkey"):
            KeyOptions(private_key="00" * 32).to_credential(SOLANA_SOURCES, chain="solana")


class TestVariants:
    def test_keyfile(self, tmp_path: Path) -> None:
        ref = KeyOptions(keyfile=tmp_path / "id.json").to_credential(
            SOLANA_SOURCES, chain="solana"
        )
        assert isinstance(ref, KeyfileCredential)
        assert ref.path == tmp_path / "id.json"

    def test_mnemonic_with_path_and_passphrase(self) -> None:
        opts = KeyOptions(seed=PHRASE, path="m/44'/501'/1'", seed_passphrase="pw")
        ref = opts.to_credential(SOLANA_SOURCES, chain="solana")
        assert isinstance(ref, MnemonicCredential)
        assert ref.derivation_path == "m/44'/501'/1'"
        assert ref.passphrase.get_secret_value() == "pw"

    def test_mnemonic_default_path(self) -> None:
        ref = KeyOptions(seed=PHRASE).to_credential(
            EVM_SOURCES, chain="evm", default_path="m/44'/60'/0'/0/1"
        )
        assert isinstance(ref, MnemonicCredential)
        assert ref.derivation_path == "m/44'/60'/0'/0/1"

    def test_private_key_inline_and_file(self, tmp_path: Path) -> None:
        inline = KeyOptions(private_key="ab" * 32).to_credential(EVM_SOURCES, chain="evm")
        from_file = KeyOptions(private_key_file=tmp_path / "k").to_credential(
            EVM_SOURCES, chain="evm"
        )
        assert isinstance(inline, PrivateKeyCredential)
        assert inline.path is None
        assert isinstance(from_file, PrivateKeyCredential)
        assert from_file.key is None

    def test_external_secret_defaults(self) -> None:
        ref = KeyOptions(svpi=True).to_credential(SOLANA_SOURCES, chain="solana")
        assert isinstance(ref, ExternalSecretCredential)
        assert ref.name is None
        assert ref.password is None
        assert ref.command == "svpi"
        assert ref.protocol == "json"

    def test_secrets_hidden_in_repr(self) -> None:
        ref = KeyOptions(seed=PHRASE).to_credential(SOLANA_SOURCES, chain="solana")
        assert "junk" not in repr(ref)

    def test_private_key_needs_exactly_one(self) -> None:
        with pytest.raises(ValidationError):
            PrivateKeyCredential()
        with pytest.raises(ValidationError):
            PrivateKeyCredential(key=SecretStr("aa"), path=Path("k"))

    def test_discriminated_union(self) -> None:
        adapter = TypeAdapter(CredentialReference)
        ref = adapter.validate_python({"kind": "keyfile", "path": "id.json"})
        assert isinstance(ref, KeyfileCredential)

    def test_frozen(self, tmp_path: Path) -> None:
        ref = KeyfileCredential(path=tmp_path)
        with pytest.raises(ValidationError):
            ref.path = Path("other")  # type: ignore[misc]
