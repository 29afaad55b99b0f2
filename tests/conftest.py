"""Shared pytest fixtures and test helpers for wmgr tests."""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Generator
from pathlib import Path

import pytest
from click.testing import CliRunner
from solders.keypair import Keypair

from wmgr.config.settings import WmgrSettings


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def _isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Run every test from an empty directory with no WMGR_* overrides.

    Keeps a developer's own wmgr.toml or environment out of the tests.
    """
    for key in list(os.environ):
        if key.startswith("WMGR_"):
            monkeypatch.delenv(key, raising=False)
    work = tmp_path / "work"
    work.mkdir()
    monkeypatch.chdir(work)


@pytest.fixture
def settings(tmp_path: Path) -> WmgrSettings:
    """Default settings with no config file."""
    return WmgrSettings.from_cli(start_dir=tmp_path / "work")


@pytest.fixture
def keypair() -> Keypair:
    return Keypair()


@pytest.fixture
def keyfile(tmp_path: Path, keypair: Keypair) -> Path:
    """A Solana CLI keypair file holding :func:`keypair`."""
    path = tmp_path / "id.json"
    path.write_text(json.dumps(list(bytes(keypair))))
    return path


@pytest.fixture(autouse=True)
def _restore_logging() -> Generator[None]:
    """Restore root logger state; every CLI invocation reconfigures logging."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    wmgr = logging.getLogger("wmgr")
    wmgr_level = wmgr.level
    yield
    root.handlers = original_handlers
    root.setLevel(original_level)
    wmgr.setLevel(wmgr_level)
