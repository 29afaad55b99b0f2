"""Unified settings: CLI flags, env vars, and TOML config in one object.

Priority chain (highest to lowest):
  1. Init kwargs   ``--json``, ``--quiet``... passed by Click
  2. Env vars      ``WMGR_*`` prefix, ``__`` for nested keys
                   (``WMGR_SOLANA__CLUSTER=devnet``)
  3. TOML file     ``wmgr.toml``, see :mod:`wmgr.config.discovery`
  4. Code defaults baked into the section models
"""

from __future__ import annotations

from contextvars import ContextVar
from pathlib import Path
from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from wmgr.config.discovery import locate_config, read_config
from wmgr.config.models import EvmConfig, SolanaConfig, SvpiConfig

# Parsed TOML for the settings object currently being built.
_toml_data: ContextVar[dict[str, Any] | None] = ContextVar("wmgr_toml_data", default=None)


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Feed already-parsed ``wmgr.toml`` sections to pydantic-settings."""

    def __init__(self, settings_cls: type[BaseSettings], data: dict[str, Any]) -> None:
        super().__init__(settings_cls)
        self._data = data

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        return self._data.get(field_name), field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        return self._data


class WmgrSettings(BaseSettings):
    """Frozen settings for one wmgr invocation.

    Built once by the root command and handed to every service through
    :class:`~wmgr.commands._context.AppContext`.

    Attributes:
        config_path: The TOML file that was loaded, or None.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "WMGR_",
        "env_nested_delimiter": "__",
    }

    config_path: Path | None = None

    # --- Output / interaction flags ---
    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False
    no_interact: bool = False

    # --- TOML sections ---
    svpi: SvpiConfig = Field(default_factory=SvpiConfig)
    solana: SolanaConfig = Field(default_factory=SolanaConfig)
    evm: EvmConfig = Field(default_factory=EvmConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, _toml_data.get() or {}),
        )

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        start_dir: Path | None = None,
        **cli_flags: Any,
    ) -> WmgrSettings:
        """Build settings for a CLI invocation.

        Only flags actually passed in *cli_flags* override env and TOML.

        Raises:
            click.ClickException: the config file is missing or not valid TOML.
        """
        toml_path = locate_config(config_path, start_dir)
        token = _toml_data.set(read_config(toml_path))
        try:
            return cls(config_path=toml_path, **cli_flags)
        finally:
            _toml_data.reset(token)
