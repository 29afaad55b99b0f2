"""Locate and read ``wmgr.toml``.

Lookup order: the ``--config`` flag, then ``WMGR_CONFIG``, then a walk
up from the working directory (the way git finds ``.git/``).  A path
named explicitly by flag or environment must exist.
"""

from __future__ import annotations

import os
import tomllib
from collections.abc import Iterator
from pathlib import Path
from typing import Any

import click

CONFIG_FILENAME = "wmgr.toml"
CONFIG_ENV_VAR = "WMGR_CONFIG"


def _ancestors(start: Path) -> Iterator[Path]:
    current = start.resolve()
    yield current
    yield from current.parents


def find_config(start: Path | None = None) -> Path | None:
    """Return the config file from ``WMGR_CONFIG`` or the nearest ``wmgr.toml``.

    Raises:
        click.ClickException: ``WMGR_CONFIG`` names a file that does not exist.
    """
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return _require_file(Path(env_path), CONFIG_ENV_VAR)

    for directory in _ancestors(start or Path.cwd()):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


def locate_config(explicit: str | Path | None = None, start: Path | None = None) -> Path | None:
    """Resolve the config file for one invocation (``--config`` wins)."""
    if explicit:
        return _require_file(Path(explicit), "--config")
    return find_config(start)


def read_config(path: Path | None) -> dict[str, Any]:
    """Parse *path* as TOML; no path means an empty configuration."""
    if path is None:
        return {}
    try:
        return tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        raise click.ClickException(f"Invalid TOML in {path}: {exc}") from exc


def _require_file(path: Path, origin: str) -> Path:
    if not path.is_file():
        raise click.ClickException(f"Config file from {origin} not found: {path}")
    return path
