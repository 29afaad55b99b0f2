"""Pluggy hook specifications for wmgr extensions.

A plugin can add credential sources (hardware wallets, cloud KMS, ...)
by registering extra resolvers on a chain before it is used.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import pluggy

if TYPE_CHECKING:
    from wmgr.services.resolvers import ResolverChain

hookspec = pluggy.HookspecMarker("wmgr")
hookimpl = pluggy.HookimplMarker("wmgr")


class WmgrHookSpec:
    """Hook specifications for the wmgr plugin system."""

    @hookspec
    def register_key_resolvers(self, chain: ResolverChain[Any], network: str) -> None:
        """Register extra resolvers on *chain*.

        *network* is ``"solana"`` or ``"evm"``.  Use
        ``chain.register(resolver, first=True)`` to take precedence over
        the built-in resolvers.
        """
