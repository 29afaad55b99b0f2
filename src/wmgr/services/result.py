"""Result envelope returned by every wallet operation.

Services report handled failures as ``ok=False`` results instead of
raising; the CLI turns those into stderr output and exit code 1.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from wmgr.domain.errors import WalletError

# Data keys that identify a submitted transaction, per chain family.
REFERENCE_KEYS = ("signature", "tx_hash")


class ServiceError(BaseModel):
    """Machine-readable failure: a stable ``code`` plus a human message."""

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_wallet_error(cls, exc: WalletError) -> ServiceError:
        detail: dict[str, Any] = {}
        provider_code = getattr(exc, "provider_code", None)
        if provider_code:
            detail["provider_code"] = provider_code
        return cls(code=exc.code, message=exc.message, detail=detail)


class ServiceResult(BaseModel):
    """Outcome of one wallet operation.

    Attributes:
        ok: Whether the operation succeeded.
        op: Operation name (``send_sol``, ``balance``, ``config_show``...).
        data: Transfer or balance payload on success.
        warnings: Non-fatal issues, printed to stderr outside ``--json``.
        error: Structured error if ``ok`` is False.
        meta: Network context (cluster or chain, RPC URL, commitment).
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None
    meta: dict[str, Any] | None = None

    @classmethod
    def failed(
        cls, op: str, error: ServiceError, meta: dict[str, Any] | None = None
    ) -> ServiceResult:
        return cls(ok=False, op=op, error=error, meta=meta)

    @property
    def reference(self) -> str | None:
        """Signature (Solana) or transaction hash (EVM) of a submitted transfer."""
        for key in REFERENCE_KEYS:
            value = self.data.get(key)
            if value:
                return str(value)
        return None
