"""Bridge to the external ``svpi`` secret store.

``svpi`` owns an encrypted store of mnemonics.  Two response protocols
exist depending on the installed svpi version, so the protocol is a
configuration choice rather than a guess:

- ``json``: ``--mode=json`` makes svpi print one ``svpi.response.v1``
  object on stdout (stderr as fallback).
- ``log``: svpi prints log lines; the secret is on the last
  ``Data: <value>`` line of combined stdout and stderr.

The password is passed only as a process argument.  It is never logged.
"""

from __future__ import annotations

import json
import logging
import re
import subprocess
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from wmgr.domain.errors import (
    ConfigurationError,
    SecretProviderDenied,
    SecretProviderProtocolError,
    SecretProviderUnavailable,
)

SVPI_SCHEMA = "svpi.response.v1"
DATA_LINE = re.compile(r"^\s*Data:\s*(?P<value>.*?)\s*$")

logger = logging.getLogger(__name__)


class SecretSource(ABC):
    """Capability interface: fetch a mnemonic by name and password."""

    protocol: str = ""

    def __init__(self, command: str = "svpi") -> None:
        self.command = command

    def fetch_mnemonic(self, name: str, password: str, file_scope: Path | None = None) -> str:
        """Return the secret stored under *name*, stripped of whitespace."""
        if not name or not name.strip():
            raise ConfigurationError("SVPI name is required")
        if not password or not password.strip():
            raise ConfigurationError("SVPI password is required")
        argv = self._build_args(name, password, file_scope)
        completed = self._run(argv)
        return self._parse(completed)

    @abstractmethod
    def _build_args(self, name: str, password: str, file_scope: Path | None) -> list[str]: ...

    @abstractmethod
    def _parse(self, completed: subprocess.CompletedProcess[str]) -> str: ...

    def _run(self, argv: list[str]) -> subprocess.CompletedProcess[str]:
        logger.debug(
            "Invoking secret provider %s (protocol=%s, %d args)",
            self.command,
            self.protocol,
            len(argv) - 1,
        )
        try:
            return subprocess.run(argv, capture_output=True, text=True, check=False)
        except FileNotFoundError as exc:
            raise SecretProviderUnavailable(f"SVPI CLI not found: {self.command}") from exc
        except OSError as exc:
            msg = f"Failed to execute SVPI command {self.command}: {exc.strerror or exc}"
            raise SecretProviderUnavailable(msg) from exc

    @staticmethod
    def _scope_args(file_scope: Path | None) -> list[str]:
        return [f"--file={file_scope}"] if file_scope else []


class JsonSecretSource(SecretSource):
    """Structured protocol: a single ``svpi.response.v1`` JSON object."""

    protocol = "json"

    def _build_args(self, name: str, password: str, file_scope: Path | None) -> list[str]:
        return [
            self.command,
            "--mode=json",
            *self._scope_args(file_scope),
            "get",
            name,
            f"--password={password}",
        ]

    def _parse(self, completed: subprocess.CompletedProcess[str]) -> str:
        stdout = completed.stdout or ""
        raw = stdout if stdout.strip() else (completed.stderr or "")
        if not raw.strip():
            msg = f"SVPI returned no JSON output (exit code {completed.returncode})"
            raise SecretProviderProtocolError(msg)

        try:
            resp = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise SecretProviderProtocolError(f"Failed to parse SVPI JSON output: {exc}") from exc
        if not isinstance(resp, dict):
            raise SecretProviderProtocolError("SVPI JSON output is not an object")

        schema = resp.get("schema")
        if schema != SVPI_SCHEMA:
            raise SecretProviderProtocolError(f"Unexpected SVPI schema: {schema or 'unknown'}")

        if not resp.get("ok"):
            raise _denied(resp.get("error"))

        result = resp.get("result")
        data = result.get("data") if isinstance(result, dict) else None
        if not isinstance(data, str) or not data.strip():
            raise SecretProviderProtocolError("SVPI response did not include data")
        return data.strip()


class LogScanSecretSource(SecretSource):
    """Log-scan protocol: the last ``Data: <value>`` line wins."""

    protocol = "log"

    def _build_args(self, name: str, password: str, file_scope: Path | None) -> list[str]:
        return [
            self.command,
            *self._scope_args(file_scope),
            "get",
            name,
            f"--password={password}",
        ]

    def _parse(self, completed: subprocess.CompletedProcess[str]) -> str:
        lines = [*(completed.stdout or "").splitlines(), *(completed.stderr or "").splitlines()]
        for line in reversed(lines):
            match = DATA_LINE.search(line)
            if match and match.group("value"):
                return match.group("value")
        msg = f"SVPI output contained no 'Data:' line (exit code {completed.returncode})"
        raise SecretProviderProtocolError(msg)


def _denied(error: Any) -> SecretProviderDenied:
    """Build the error raised for an ``ok: false`` structured response."""
    error = error if isinstance(error, dict) else {}
    code = error.get("code") or "svpi_error"
    message = error.get("message") or "SVPI returned an error"
    details = error.get("details")
    details_text = f" Details: {json.dumps(details)}" if details else ""
    message = f"SVPI error ({code}): {message}.{details_text}"
    return SecretProviderDenied(message, provider_code=code)


SECRET_SOURCES: dict[str, type[SecretSource]] = {
    JsonSecretSource.protocol: JsonSecretSource,
    LogScanSecretSource.protocol: LogScanSecretSource,
}


def build_secret_source(protocol: str = "json", command: str = "svpi") -> SecretSource:
    """Instantiate the secret source for a configured protocol name."""
    key = (protocol or "json").strip().lower()
    source_cls = SECRET_SOURCES.get(key)
    if source_cls is None:
        valid = ", ".join(SECRET_SOURCES)
        raise ConfigurationError(f"Unknown SVPI protocol: {protocol} (valid: {valid})")
    return source_cls(command or "svpi")
