"""Credential references: one tagged variant per credential source.

A :class:`KeyOptions` bag mirrors the CLI flags.  :meth:`KeyOptions.to_credential`
validates that exactly one source is populated and returns the matching
variant, before any file or process I/O happens.  Resolvers then dispatch
on ``kind`` once.
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Literal

from pydantic import BaseModel, Field, SecretStr, model_validator

from wmgr.domain.errors import AmbiguousCredentialSource, ConfigurationError

DEFAULT_SVPI_COMMAND = "svpi"
DEFAULT_SVPI_PROTOCOL = "json"

# Source name -> CLI flag, in the order listed in error messages.
SOURCE_FLAGS: dict[str, str] = {
    "keyfile": "--keyfile",
    "private_key": "--privkey",
    "private_key_file": "--privkey-file",
    "mnemonic": "--seed",
    "external_secret": "--svpi",
}

SOLANA_SOURCES: tuple[str, ...] = ("keyfile", "mnemonic", "external_secret")
EVM_SOURCES: tuple[str, ...] = ("private_key", "private_key_file", "mnemonic", "external_secret")


class KeyfileCredential(BaseModel):
    """Solana CLI keypair file (JSON array of 64 bytes)."""

    model_config = {"frozen": True}

    kind: Literal["keyfile"] = "keyfile"
    path: Path


class MnemonicCredential(BaseModel):
    """BIP-39 phrase plus optional derivation path and passphrase."""

    model_config = {"frozen": True}

    kind: Literal["mnemonic"] = "mnemonic"
    phrase: SecretStr
    derivation_path: str | None = None
    passphrase: SecretStr = SecretStr("")


class PrivateKeyCredential(BaseModel):
    """Raw hex private key, given inline or as a file path (exactly one)."""

    model_config = {"frozen": True}

    kind: Literal["private_key"] = "private_key"
    key: SecretStr | None = None
    path: Path | None = None

    @model_validator(mode="after")
    def _exactly_one(self) -> PrivateKeyCredential:
        if (self.key is None) == (self.path is None):
            msg = "Private key credential needs exactly one of key or path"
            raise ValueError(msg)
        return self


class ExternalSecretCredential(BaseModel):
    """Mnemonic (or hex key) held by the external ``svpi`` secret store.

    ``name`` and ``password`` may be omitted; the resolver prompts for them.
    ``derivation_path`` and ``passphrase`` apply once the mnemonic arrives.
    """

    model_config = {"frozen": True}

    kind: Literal["external_secret"] = "external_secret"
    name: str | None = None
    password: SecretStr | None = None
    file_scope: Path | None = None
    command: str = DEFAULT_SVPI_COMMAND
    protocol: str = DEFAULT_SVPI_PROTOCOL
    derivation_path: str | None = None
    passphrase: SecretStr = SecretStr("")


CredentialReference = Annotated[
    KeyfileCredential | MnemonicCredential | PrivateKeyCredential | ExternalSecretCredential,
    Field(discriminator="kind"),
]


class KeyOptions(BaseModel):
    """Raw credential flags as collected from the command line."""

    model_config = {"frozen": True}

    keyfile: Path | None = None
    private_key: str | None = None
    private_key_file: Path | None = None
    seed: str | None = None
    path: str | None = None
    seed_passphrase: str | None = None
    svpi: bool = False
    svpi_name: str | None = None
    svpi_file: Path | None = None
    svpi_command: str | None = None
    svpi_password: str | None = None
    svpi_protocol: str | None = None

    @property
    def uses_svpi(self) -> bool:
        """Any svpi-specific flag implies the external-secret source."""
        return self.svpi or any(
            v is not None
            for v in (self.svpi_name, self.svpi_file, self.svpi_command, self.svpi_password)
        )

    def provided_sources(self) -> list[str]:
        """Names of every populated source, in :data:`SOURCE_FLAGS` order."""
        present = {
            "keyfile": self.keyfile is not None,
            "private_key": self.private_key is not None,
            "private_key_file": self.private_key_file is not None,
            "mnemonic": self.seed is not None and bool(self.seed.strip()),
            "external_secret": self.uses_svpi,
        }
        return [name for name in SOURCE_FLAGS if present[name]]

    def to_credential(
        self,
        allowed: tuple[str, ...],
        *,
        chain: str,
        default_path: str | None = None,
    ) -> CredentialReference:
        """Build the single credential variant these options describe.

        Raises:
            AmbiguousCredentialSource: zero or several sources are populated.
            ConfigurationError: a source not supported on *chain* was given.
        """
        provided = self.provided_sources()
        unsupported = [s for s in provided if s not in allowed]
        if unsupported:
            flags = ", ".join(SOURCE_FLAGS[s] for s in unsupported)
            raise ConfigurationError(f"{flags} not supported for {chain}")

        choices = ", ".join(SOURCE_FLAGS[s] for s in allowed)
        if not provided:
            raise AmbiguousCredentialSource(f"Provide one of {choices} for {chain}")
        if len(provided) > 1:
            raise AmbiguousCredentialSource(f"Use only one of {choices} for {chain}")

        source = provided[0]
        derivation_path = self.path or default_path
        passphrase = SecretStr(self.seed_passphrase or "")
        if source == "keyfile":
            return KeyfileCredential(path=self.keyfile)
        if source == "private_key":
            return PrivateKeyCredential(key=SecretStr(self.private_key or ""))
        if source == "private_key_file":
            return PrivateKeyCredential(path=self.private_key_file)
        if source == "mnemonic":
            return MnemonicCredential(
                phrase=SecretStr(self.seed or ""),
                derivation_path=derivation_path,
                passphrase=passphrase,
            )
        return ExternalSecretCredential(
            name=self.svpi_name,
            password=SecretStr(self.svpi_password) if self.svpi_password is not None else None,
            file_scope=self.svpi_file,
            command=self.svpi_command or DEFAULT_SVPI_COMMAND,
            protocol=self.svpi_protocol or DEFAULT_SVPI_PROTOCOL,
            derivation_path=derivation_path,
            passphrase=passphrase,
        )
