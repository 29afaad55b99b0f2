"""Resolver chain: turns a CredentialReference into a signing identity.

Each chain (Solana, EVM) is an ordered list of resolvers.  A resolver owns
its applicability check; the first one that accepts a reference resolves
it.  Plugins and callers extend a chain with :meth:`ResolverChain.register`.

Resolution happens fresh on every command; identities are never cached.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable
from pathlib import Path
from typing import TYPE_CHECKING, Any, ClassVar, Generic, Protocol, TypeVar

from wmgr.domain.errors import ConfigurationError
from wmgr.infrastructure.svpi import SecretSource, build_secret_source

if TYPE_CHECKING:
    from wmgr.config.models import SvpiConfig
    from wmgr.domain.credentials import ExternalSecretCredential, KeyOptions

IdentityT = TypeVar("IdentityT")

logger = logging.getLogger(__name__)


class Prompter(Protocol):
    """Ask the user for a value; ``hidden`` prompts must not echo input."""

    def __call__(self, text: str, *, hidden: bool = False) -> str: ...


class KeyResolver(ABC, Generic[IdentityT]):
    """Strategy that resolves one kind of credential reference."""

    kind: ClassVar[str] = ""

    def applies_to(self, ref: Any) -> bool:
        """Whether this resolver can handle *ref*. Default: match on ``kind``."""
        return getattr(ref, "kind", None) == self.kind

    @abstractmethod
    def resolve(self, ref: Any) -> IdentityT:
        """Produce a signing identity, or raise a WalletError."""


class ResolverChain(Generic[IdentityT]):
    """Ordered, extensible list of resolvers for one network family."""

    def __init__(self, network: str, resolvers: Iterable[KeyResolver[IdentityT]] = ()) -> None:
        self.network = network
        self._resolvers: list[KeyResolver[IdentityT]] = list(resolvers)

    @property
    def resolvers(self) -> tuple[KeyResolver[IdentityT], ...]:
        return tuple(self._resolvers)

    def register(self, resolver: KeyResolver[IdentityT], *, first: bool = False) -> None:
        """Add *resolver*; ``first=True`` lets it take precedence over built-ins."""
        if first:
            self._resolvers.insert(0, resolver)
        else:
            self._resolvers.append(resolver)

    def resolve(self, ref: Any) -> IdentityT:
        kind = getattr(ref, "kind", type(ref).__name__)
        for resolver in self._resolvers:
            if resolver.applies_to(ref):
                logger.debug("Resolving %s credential via %s", kind, type(resolver).__name__)
                return resolver.resolve(ref)
        raise ConfigurationError(f"No {self.network} resolver accepts {kind} credentials")


class ExternalSecretResolver(KeyResolver[IdentityT]):
    """Shared svpi flow: prompt for missing name/password, fetch, then convert.

    Subclasses implement :meth:`from_secret` to turn the fetched secret
    (a mnemonic, or a hex private key) into a chain identity.
    """

    kind = "external_secret"
    name_prompt: ClassVar[str] = "SVPI wallet name:"

    def __init__(
        self,
        prompter: Prompter | None = None,
        source_factory: Callable[[str, str], SecretSource] = build_secret_source,
    ) -> None:
        self._prompter = prompter
        self._source_factory = source_factory

    def resolve(self, ref: ExternalSecretCredential) -> IdentityT:
        name = ref.name or self._ask(self.name_prompt, hidden=False)
        password = (
            ref.password.get_secret_value()
            if ref.password is not None
            else self._ask("SVPI password:", hidden=True)
        )
        source = self._source_factory(ref.protocol, ref.command)
        secret = source.fetch_mnemonic(name, password, ref.file_scope)
        return self.from_secret(secret, ref)

    @abstractmethod
    def from_secret(self, secret: str, ref: ExternalSecretCredential) -> IdentityT: ...

    def _ask(self, text: str, *, hidden: bool) -> str:
        if self._prompter is None:
            what = "password" if hidden else "wallet name"
            raise ConfigurationError(f"SVPI {what} is required (interactive prompts disabled)")
        return self._prompter(text, hidden=hidden).strip()


def apply_key_defaults(options: KeyOptions, svpi: SvpiConfig) -> KeyOptions:
    """Fill svpi settings from configuration.

    With ``[svpi] enabled = true`` and no explicit source, svpi becomes the
    source.  Configured command/file/name only apply once svpi is in use,
    so they never turn a keyfile invocation into an ambiguous one.
    """
    updates: dict[str, Any] = {}
    if not options.provided_sources() and svpi.enabled:
        updates["svpi"] = True
    if options.uses_svpi or updates.get("svpi"):
        if options.svpi_command is None:
            updates["svpi_command"] = svpi.command
        if options.svpi_file is None and svpi.file:
            updates["svpi_file"] = Path(svpi.file)
        if options.svpi_name is None and svpi.name:
            updates["svpi_name"] = svpi.name
    if options.svpi_protocol is None:
        updates["svpi_protocol"] = svpi.protocol
    return options.model_copy(update=updates) if updates else options
