"""AppContext: shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``.  Provides lazy plugin loading, the interactive
prompter, and centralized result emission (stdout/stderr routing + exit
codes).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import click

from wmgr.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from wmgr.config.settings import WmgrSettings
    from wmgr.plugins.manager import PluginManager
    from wmgr.services.resolvers import Prompter
    from wmgr.services.result import ServiceResult


def click_prompter(text: str, *, hidden: bool = False) -> str:
    """Prompt on stderr so stdout stays clean for ``--json`` / ``--quiet``."""
    return click.prompt(text, hide_input=hidden, err=True, prompt_suffix=" ")


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    Subcommands access it via ``@click.pass_obj``.  Plugins are loaded
    on first use so ``--help`` and ``--version`` never scan entry points.
    """

    def __init__(self, settings: WmgrSettings) -> None:
        self.settings = settings
        self._plugins: PluginManager | None = None

        from wmgr.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

    @property
    def plugins(self) -> PluginManager:
        """The plugin manager (entry points discovered on first access)."""
        if self._plugins is None:
            from wmgr.plugins.manager import PluginManager

            self._plugins = PluginManager()
            self._plugins.discover_and_load()
        return self._plugins

    @property
    def prompter(self) -> Prompter | None:
        """Interactive prompter, or None under ``--no-interact``."""
        return None if self.settings.no_interact else click_prompter

    def service_kwargs(self) -> dict[str, Any]:
        """Constructor arguments shared by every service."""
        return {"prompter": self.prompter, "plugins": self.plugins}

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success (``result.ok``): writes to stdout, returns normally.
          Warnings are emitted to stderr so they don't pollute piped output.
        * Failure: writes to stderr, exits with code 1.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            # In JSON mode, warnings are already in the serialized payload.
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)
