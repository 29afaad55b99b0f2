"""Plugin discovery and resolver-chain extension.

Plugins are pip-installed packages exposing an object (or class) under
the ``wmgr.plugins`` entry-point group.  Their only hook today is
``register_key_resolvers``, which may add resolvers to a chain.
"""

from __future__ import annotations

import inspect
import logging
from typing import TYPE_CHECKING, Any

import pluggy

from wmgr.plugins.hookspecs import WmgrHookSpec

if TYPE_CHECKING:
    from wmgr.services.resolvers import ResolverChain

PROJECT_NAME = "wmgr"
ENTRY_POINT_GROUP = "wmgr.plugins"
# Attribute pluggy's HookimplMarker("wmgr") sets on decorated methods.
_IMPL_ATTR = f"{PROJECT_NAME}_impl"

logger = logging.getLogger(__name__)


def _declares_hooks(plugin_cls: type) -> bool:
    return any(
        getattr(getattr(plugin_cls, attr, None), _IMPL_ATTR, None)
        for attr in dir(plugin_cls)
        if not attr.startswith("_")
    )


class PluginManager:
    """Thin wrapper over :class:`pluggy.PluginManager` for wmgr hooks."""

    def __init__(self) -> None:
        self._pm = pluggy.PluginManager(PROJECT_NAME)
        self._pm.add_hookspecs(WmgrHookSpec)

    def discover_and_load(self) -> list[str]:
        """Load entry-point plugins; return the registered plugin names.

        A broken distribution is logged and skipped so the CLI keeps working.
        """
        try:
            self._pm.load_setuptools_entrypoints(ENTRY_POINT_GROUP)
        except Exception:
            logger.warning("Failed to load entry-point plugins", exc_info=True)
        self._instantiate_plugin_classes()
        return self.list_plugin_names()

    def register_plugin(self, plugin: object, name: str | None = None) -> None:
        plugin_name = name or type(plugin).__name__
        self._pm.register(plugin, name=plugin_name)
        logger.debug("Registered plugin: %s", plugin_name)

    def list_plugin_names(self) -> list[str]:
        return [self._pm.get_name(p) or type(p).__name__ for p in self._pm.get_plugins()]

    def extend_chain(self, chain: ResolverChain[Any], network: str) -> None:
        """Let every plugin register resolvers on *chain*.

        A failing plugin is logged and skipped; the built-in resolvers
        still work.
        """
        kwargs: dict[str, Any] = {"chain": chain, "network": network}
        for impl in self._pm.hook.register_key_resolvers.get_hookimpls():
            try:
                impl.function(*(kwargs[arg] for arg in impl.argnames))
            except Exception:
                logger.warning(
                    "Plugin %s failed to register %s resolvers",
                    impl.plugin_name,
                    network,
                    exc_info=True,
                )

    def _instantiate_plugin_classes(self) -> None:
        """Swap entry points that exported a class for an instance of it.

        pluggy registers whatever the entry point names; hook methods on a
        bare class would be called without ``self``.
        """
        for plugin_cls in list(self._pm.get_plugins()):
            if not (inspect.isclass(plugin_cls) and _declares_hooks(plugin_cls)):
                continue
            name = self._pm.get_name(plugin_cls) or plugin_cls.__name__
            self._pm.unregister(plugin_cls)
            try:
                self._pm.register(plugin_cls(), name=name)
            except Exception:
                logger.warning("Failed to instantiate plugin %s", name, exc_info=True)
