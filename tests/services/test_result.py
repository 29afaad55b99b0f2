"""Tests for ServiceResult and ServiceError."""

import json

import pytest
from pydantic import ValidationError

from wmgr.domain.errors import InvalidMnemonic, SecretProviderDenied
from wmgr.services.result import ServiceError, ServiceResult


class TestServiceError:
    def test_from_wallet_error(self) -> None:
        error = ServiceError.from_wallet_error(InvalidMnemonic("bad checksum"))
        assert error.code == "invalid_mnemonic"
        assert error.message == "bad checksum"
        assert error.detail == {}

    def test_provider_code_kept(self) -> None:
        exc = SecretProviderDenied("wrong password", provider_code="auth_failed")
        error = ServiceError.from_wallet_error(exc)
        assert error.code == "secret_provider_denied"
        assert error.detail == {"provider_code": "auth_failed"}


class TestServiceResult:
    def test_success_defaults(self) -> None:
        result = ServiceResult(ok=True, op="send_sol", data={"signature": "5xSig"})
        assert result.warnings == []
        assert result.error is None
        assert result.meta is None

    def test_failed(self) -> None:
        error = ServiceError(code="invalid_amount", message="Invalid amount format: x")
        result = ServiceResult.failed("send_eth", error, {"network": "sepolia"})
        assert result.ok is False
        assert result.error == error
        assert result.meta == {"network": "sepolia"}

    @pytest.mark.parametrize(
        ("data", "expected"),
        [
            ({"signature": "5xSig"}, "5xSig"),
            ({"tx_hash": "0xabc"}, "0xabc"),
            ({"sol": "1", "usdc": "0"}, None),
        ],
    )
    def test_reference(self, data: dict, expected: str | None) -> None:
        assert ServiceResult(ok=True, op="x", data=data).reference == expected

    def test_frozen(self) -> None:
        result = ServiceResult(ok=True, op="balance")
        with pytest.raises(ValidationError):
            result.ok = False  # type: ignore[misc]

    def test_json_round_trip(self) -> None:
        result = ServiceResult(
            ok=False,
            op="send_usdc",
            error=ServiceError(code="network_error", message="timeout", detail={"type": "X"}),
        )
        parsed = json.loads(result.model_dump_json())
        assert parsed["error"]["code"] == "network_error"
        assert ServiceResult.model_validate(parsed) == result
