"""BaseService: shared foundation for wallet services.

Every service receives the frozen :class:`WmgrSettings` at construction
time, plus an optional prompter (for svpi name/password) and plugin
manager (to extend resolver chains).  Services never raise: domain and
network failures become a failed :class:`ServiceResult`.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from wmgr.domain.errors import WalletError
from wmgr.infrastructure import evm, solana
from wmgr.services.result import ServiceError, ServiceResult

if TYPE_CHECKING:
    from eth_account.signers.local import LocalAccount
    from solders.keypair import Keypair

    from wmgr.config.settings import WmgrSettings
    from wmgr.plugins.manager import PluginManager
    from wmgr.services.resolvers import Prompter, ResolverChain

logger = logging.getLogger(__name__)

NETWORK_ERRORS: tuple[type[Exception], ...] = solana.NETWORK_ERRORS + evm.NETWORK_ERRORS

# Exceptions a service turns into a failed result; anything else propagates.
HANDLED_ERRORS: tuple[type[Exception], ...] = (WalletError, *NETWORK_ERRORS)


class BaseService:
    """Abstract base for all service-layer classes.

    Usage::

        class TransferService(BaseService):
            def send_sol(self, options, to, amount) -> ServiceResult:
                try:
                    keypair = self.solana_chain(path).resolve(ref)
                    ...
                except HANDLED_ERRORS as exc:
                    return self._failure("send_sol", exc)
    """

    def __init__(
        self,
        settings: WmgrSettings,
        *,
        prompter: Prompter | None = None,
        plugins: PluginManager | None = None,
    ) -> None:
        self._settings = settings
        self._prompter = prompter
        self._plugins = plugins

    def solana_chain(self, default_path: str) -> ResolverChain[Keypair]:
        """Built-in Solana resolvers, extended by loaded plugins."""
        from wmgr.services.solana_keys import solana_chain

        chain = solana_chain(default_path, prompter=self._prompter)
        if self._plugins is not None:
            self._plugins.extend_chain(chain, "solana")
        return chain

    def evm_chain(self) -> ResolverChain[LocalAccount]:
        """Built-in EVM resolvers, extended by loaded plugins."""
        from wmgr.services.evm_keys import evm_chain

        chain = evm_chain(prompter=self._prompter)
        if self._plugins is not None:
            self._plugins.extend_chain(chain, "evm")
        return chain

    def _failure(
        self,
        op: str,
        exc: Exception,
        *,
        meta: dict[str, Any] | None = None,
    ) -> ServiceResult:
        """Convert a domain or network exception into a failed result.

        Anything else is a bug and propagates.
        """
        if isinstance(exc, WalletError):
            error = ServiceError.from_wallet_error(exc)
        elif isinstance(exc, NETWORK_ERRORS):
            error = ServiceError(
                code="network_error",
                message=str(exc) or type(exc).__name__,
                detail={"type": type(exc).__name__},
            )
        else:
            raise exc
        logger.debug("%s failed: %s", op, error.message, exc_info=exc)
        return ServiceResult.failed(op, error, meta)
