"""Tests for the error taxonomy and normalize_error.

Validates:
- One target code per failure kind
- Idempotence on already-normalized inputs
- Adapter code mapping and retry flags
"""

from __future__ import annotations

import errno
import socket

import httpx
import pytest

from fulfillment_mcp.foundation.errors import (
    AdapterError,
    BackendConnectionError,
    ConfigurationError,
    DomainError,
    ErrorCode,
    NormalizedError,
    OperationResult,
    OperationTimeoutError,
    ToolNotFoundError,
    ValidationError,
    is_connectivity_error,
    normalize_error,
    to_domain_error,
)

# ═════════════════════════════════════════════════════════════════════════════
# Mapping
# ═════════════════════════════════════════════════════════════════════════════


@pytest.mark.parametrize(
    ("error", "code", "retryable"),
    [
        (ValidationError("bad", field="orderId"), ErrorCode.VALIDATION_ERROR, False),
        (AdapterError("gone", "ORDER_NOT_FOUND"), ErrorCode.ORDER_NOT_FOUND, False),
        (AdapterError("gone", "PRODUCT_NOT_FOUND"), ErrorCode.PRODUCT_NOT_FOUND, False),
        (AdapterError("gone", "CUSTOMER_NOT_FOUND"), ErrorCode.CUSTOMER_NOT_FOUND, False),
        (AdapterError("short", "INSUFFICIENT_INVENTORY"), ErrorCode.INSUFFICIENT_INVENTORY, False),
        (AdapterError("shipped", "INVALID_ORDER_STATE"), ErrorCode.INVALID_ORDER_STATE, False),
        (AdapterError("weird", "SOMETHING_ELSE"), ErrorCode.ADAPTER_ERROR, False),
        (AdapterError("busy", "RATE_LIMITED", {"retryable": True}), ErrorCode.ADAPTER_ERROR, True),
        (BackendConnectionError("down"), ErrorCode.CONNECTION_ERROR, True),
        (ConfigurationError("bad config"), ErrorCode.CONFIGURATION_ERROR, False),
        (OperationTimeoutError(100), ErrorCode.TIMEOUT, True),
        (ConnectionRefusedError("refused"), ErrorCode.CONNECTION_ERROR, True),
        (socket.gaierror("dns"), ErrorCode.CONNECTION_ERROR, True),
        (OSError(errno.EHOSTUNREACH, "unreachable"), ErrorCode.CONNECTION_ERROR, True),
        (httpx.ConnectError("refused"), ErrorCode.CONNECTION_ERROR, True),
        (KeyError("x"), ErrorCode.UNKNOWN_ERROR, False),
        (RuntimeError(), ErrorCode.UNKNOWN_ERROR, False),
    ],
)
def test_mapping(error: BaseException, code: ErrorCode, retryable: bool) -> None:
    normalized = normalize_error(error)
    assert normalized.code is code
    assert normalized.retryable is retryable
    assert normalized.message


def test_non_boolean_retry_flag_is_ignored() -> None:
    assert not normalize_error(AdapterError("x", details={"retryable": "yes"})).retryable


def test_validation_details_preserved() -> None:
    issues = [{"field": "orderId", "message": "Field required", "type": "missing"}]
    normalized = normalize_error(ValidationError("bad", field="orderId", issues=issues))
    assert normalized.details == {"field": "orderId", "issues": issues}


def test_adapter_details_keep_original_code() -> None:
    normalized = normalize_error(AdapterError("gone", "ORDER_NOT_FOUND", {"orderId": "o1"}))
    assert normalized.details == {"original_code": "ORDER_NOT_FOUND", "details": {"orderId": "o1"}}
    assert normalized.is_not_found


def test_unknown_error_keeps_type_name() -> None:
    class WeirdFailure(Exception):
        pass

    normalized = normalize_error(WeirdFailure())
    assert normalized.details == {"error_type": "WeirdFailure"}
    assert normalized.message == "WeirdFailure"


def test_timeout_details_carry_budget() -> None:
    normalized = normalize_error(OperationTimeoutError(250, "get_orders"))
    assert normalized.details == {"budget_ms": 250}
    assert "250ms" in normalized.message


# ═════════════════════════════════════════════════════════════════════════════
# Idempotence
# ═════════════════════════════════════════════════════════════════════════════


def test_normalized_input_returned_unchanged() -> None:
    err = NormalizedError(code=ErrorCode.TIMEOUT, message="slow", retryable=True)
    assert normalize_error(err) is err
    assert normalize_error(normalize_error(err)) is err


def test_domain_error_unwraps_to_same_instance() -> None:
    domain = DomainError.create(ErrorCode.ORDER_NOT_FOUND, "missing")
    assert normalize_error(domain) is domain.error
    assert to_domain_error(domain) is domain


def test_to_domain_error_wraps_once() -> None:
    domain = to_domain_error(BackendConnectionError("down"))
    assert isinstance(domain, DomainError)
    assert domain.error.code is ErrorCode.CONNECTION_ERROR
    assert domain.retryable
    assert to_domain_error(domain) is domain


# ═════════════════════════════════════════════════════════════════════════════
# Models
# ═════════════════════════════════════════════════════════════════════════════


def test_blank_message_defaults() -> None:
    assert NormalizedError(message="").message == "Unknown error"
    assert NormalizedError(message=ValueError("from exc")).message == "from exc"
    assert NormalizedError(message="   ").message == "Unknown error"
    assert NormalizedError(message=ValueError(" ")).message == "ValueError"


@pytest.mark.parametrize("error", [RuntimeError("   "), AdapterError(" ", "ORDER_NOT_FOUND"), BackendConnectionError("\t")])
def test_whitespace_messages_still_normalize(error: BaseException) -> None:
    normalized = normalize_error(error)
    assert normalized.message == "Unknown error"


def test_render() -> None:
    err = NormalizedError(code=ErrorCode.INVALID_ORDER_STATE, message="already shipped")
    assert err.render() == "[INVALID_ORDER_STATE] already shipped"


def test_connectivity_classifier() -> None:
    assert is_connectivity_error(ConnectionResetError())
    assert is_connectivity_error(OSError(errno.ETIMEDOUT, "timed out"))
    assert not is_connectivity_error(OSError(errno.ENOENT, "missing"))
    assert not is_connectivity_error(ValueError())


def test_protocol_errors_are_not_domain_errors() -> None:
    err = ToolNotFoundError("nope")
    assert err.code == -32601
    assert err.tool_name == "nope"
    assert not isinstance(err, DomainError)


def test_result_discriminant() -> None:
    ok = OperationResult.ok(order={"id": "o1"})
    assert ok.to_dict() == {"success": True, "order": {"id": "o1"}}
    assert ok.payload == {"order": {"id": "o1"}}

    failed = OperationResult.fail(NormalizedError(code=ErrorCode.TIMEOUT, message="slow", retryable=True))
    assert failed.to_dict()["error"]["code"] == "TIMEOUT"

    with pytest.raises(ValueError):
        OperationResult(success=False)
