"""Tests for HttpApiClient status and transport error mapping."""

from __future__ import annotations

import httpx
import pytest

from fulfillment_mcp.adapters import HttpApiClient, status_to_code
from fulfillment_mcp.foundation.errors import (
    AdapterError,
    BackendConnectionError,
    DomainError,
    ErrorCode,
    normalize_error,
)
from fulfillment_mcp.runtime.health import HealthMonitor
from fulfillment_mcp.runtime.retry import RetryPolicy, is_retryable_default
from fulfillment_mcp.services import ErrorHandler, is_domain_retryable


def _client(handler) -> HttpApiClient:
    return HttpApiClient("https://backend.test/api", api_key="secret", transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_sends_bearer_auth_and_decodes_json() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"orders": [{"id": "o1"}]})

    async with _client(handler) as client:
        body = await client.get("/orders", params={"status": "new"})

    assert body == {"orders": [{"id": "o1"}]}
    [request] = seen
    assert request.headers["Authorization"] == "Bearer secret"
    assert request.url.path == "/api/orders"
    assert request.url.params["status"] == "new"
    assert client.closed


@pytest.mark.asyncio
async def test_empty_body_is_none() -> None:
    async with _client(lambda request: httpx.Response(204)) as client:
        assert await client.delete("/orders/o1") is None


@pytest.mark.asyncio
async def test_entity_not_found() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(404, json={"message": "Order o9 does not exist"})

    async with _client(handler) as client:
        with pytest.raises(AdapterError) as exc_info:
            await client.get("/orders/o9", entity="order")

    err = exc_info.value
    assert err.adapter_code == "ORDER_NOT_FOUND"
    assert err.code is ErrorCode.ORDER_NOT_FOUND
    assert err.message == "Order o9 does not exist"
    assert not err.retryable


@pytest.mark.asyncio
async def test_conflict_maps_to_invalid_state() -> None:
    async with _client(lambda request: httpx.Response(409, text="conflict")) as client:
        with pytest.raises(AdapterError) as exc_info:
            await client.post("/orders/o1/cancel", json={})

    err = exc_info.value
    assert err.code is ErrorCode.INVALID_ORDER_STATE
    assert err.details["body"] == "conflict"
    assert err.message == "HTTP 409 from POST /api/orders/o1/cancel"


@pytest.mark.asyncio
async def test_server_errors_are_retryable() -> None:
    async with _client(lambda request: httpx.Response(503, json={})) as client:
        with pytest.raises(AdapterError) as exc_info:
            await client.get("/inventory")

    assert exc_info.value.retryable
    assert normalize_error(exc_info.value).retryable


@pytest.mark.asyncio
async def test_transport_failure_is_connection_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    async with _client(handler) as client:
        with pytest.raises(BackendConnectionError) as exc_info:
            await client.get("/orders")

    assert exc_info.value.retryable
    assert exc_info.value.details["error_type"] == "ConnectError"
    assert normalize_error(exc_info.value).code is ErrorCode.CONNECTION_ERROR


@pytest.mark.asyncio
@pytest.mark.parametrize("timeout", [httpx.ReadTimeout, httpx.WriteTimeout])
async def test_response_timeout_is_not_retried(timeout: type[httpx.TimeoutException]) -> None:
    """A write may have reached the backend, so it must not be re-sent."""
    def handler(request: httpx.Request) -> httpx.Response:
        raise timeout("timed out", request=request)

    async with _client(handler) as client:
        with pytest.raises(AdapterError) as exc_info:
            await client.post("/orders", json={"lineItems": []})

    err = exc_info.value
    assert err.adapter_code == "REQUEST_TIMEOUT"
    assert not err.retryable
    assert not is_retryable_default(err)
    assert not is_domain_retryable(err)


@pytest.mark.asyncio
async def test_read_timeout_on_create_is_attempted_once(sleeps) -> None:
    calls: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        raise httpx.ReadTimeout("timed out", request=request)

    handler_under_test = ErrorHandler(HealthMonitor(), RetryPolicy(sleep=sleeps))
    async with _client(handler) as client:
        with pytest.raises(DomainError) as exc_info:
            await handler_under_test.execute_operation("create_sales_order", lambda: client.post("/orders", json={}))

    assert len(calls) == 1
    assert sleeps.delays == []
    assert not exc_info.value.error.retryable


@pytest.mark.asyncio
@pytest.mark.parametrize("timeout", [httpx.ConnectTimeout, httpx.PoolTimeout])
async def test_connect_timeout_is_connection_error(timeout: type[httpx.TimeoutException]) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise timeout("timed out", request=request)

    async with _client(handler) as client:
        with pytest.raises(BackendConnectionError) as exc_info:
            await client.get("/orders")

    assert exc_info.value.retryable
    assert exc_info.value.details["error_type"] == timeout.__name__


@pytest.mark.parametrize(
    ("status", "entity", "code"),
    [
        (404, "product", "PRODUCT_NOT_FOUND"),
        (404, None, "NOT_FOUND"),
        (422, None, "INVALID_INPUT"),
        (403, None, "UNAUTHORIZED"),
        (429, None, "RATE_LIMITED"),
        (500, "order", "HTTP_ERROR"),
    ],
)
def test_status_to_code(status: int, entity: str | None, code: str) -> None:
    assert status_to_code(status, entity) == code
