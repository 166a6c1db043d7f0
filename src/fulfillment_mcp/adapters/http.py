"""Async HTTP client for adapters that talk to REST backends.

Failures to reach the backend become BackendConnectionError (retryable).
A read or write timeout is an unknown outcome and becomes a non-retryable
AdapterError (REQUEST_TIMEOUT). HTTP error statuses become AdapterError
with a code the error normalizer understands, so adapter
authors get consistent retry and error behavior for free.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import httpx

from fulfillment_mcp.foundation.errors import AdapterError, BackendConnectionError

if TYPE_CHECKING:
    from types import TracebackType

logger = logging.getLogger("fulfillment_mcp.adapters.http")

RETRYABLE_STATUSES: frozenset[int] = frozenset({408, 429, 500, 502, 503, 504})


def status_to_code(status: int, entity: str | None = None) -> str:
    """Adapter error code for an HTTP status."""
    if status == 404 and entity:
        return f"{entity.upper()}_NOT_FOUND"
    if status == 409:
        return "INVALID_ORDER_STATE"
    if status in (400, 422):
        return "INVALID_INPUT"
    if status in (401, 403):
        return "UNAUTHORIZED"
    if status == 429:
        return "RATE_LIMITED"
    return "NOT_FOUND" if status == 404 else "HTTP_ERROR"


class HttpApiClient:
    """Thin httpx.AsyncClient wrapper with bearer auth and error mapping.

    Args:
        base_url: Backend API root
        api_key: Sent as ``Authorization: Bearer <key>``
        timeout_ms: Per-request timeout
        headers: Extra default headers
        transport: Optional httpx transport (e.g. MockTransport in tests)

    Example:
        >>> async with HttpApiClient("https://api.example.com", api_key="k") as client:
        ...     orders = await client.get("/orders", params={"status": "open"}, entity="order")
    """

    __slots__ = ("_client",)

    def __init__(
        self,
        base_url: str,
        api_key: str | None = None,
        *,
        timeout_ms: float = 30_000,
        headers: dict[str, str] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        default_headers = {"Content-Type": "application/json", "Accept": "application/json"}
        if api_key:
            default_headers["Authorization"] = f"Bearer {api_key}"
        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout_ms / 1000,
            headers={**default_headers, **(headers or {})},
            transport=transport,
        )

    async def __aenter__(self) -> HttpApiClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    @property
    def closed(self) -> bool:
        return self._client.is_closed

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: Any = None,
        entity: str | None = None,
    ) -> Any:
        """Send a request and return the decoded JSON body (None for empty bodies).

        Args:
            entity: Resource name used to build NOT_FOUND codes (e.g. "order")

        Raises:
            BackendConnectionError: The backend could not be reached
            AdapterError: The backend answered with an error status, or the
                response timed out after the request was sent
        """
        try:
            response = await self._client.request(method, path, params=params, json=json)
        except (httpx.ConnectTimeout, httpx.PoolTimeout) as e:
            raise BackendConnectionError(
                f"{method} {path} timed out before connecting", details={"error_type": type(e).__name__}
            ) from e
        except httpx.TimeoutException as e:
            # Request may have reached the backend; outcome unknown, never re-sent
            raise AdapterError(
                f"{method} {path} timed out awaiting the response",
                "REQUEST_TIMEOUT",
                {"error_type": type(e).__name__, "retryable": False},
            ) from e
        except httpx.TransportError as e:
            raise BackendConnectionError(
                f"{method} {path} failed: {e}", details={"error_type": type(e).__name__}
            ) from e

        logger.debug(f"{method} {path} -> {response.status_code}")
        if response.is_error:
            raise self._to_adapter_error(response, entity)
        return response.json() if response.content else None

    @staticmethod
    def _to_adapter_error(response: httpx.Response, entity: str | None) -> AdapterError:
        try:
            body = response.json()
        except ValueError:
            body = response.text
        message = body.get("message") if isinstance(body, dict) else None
        return AdapterError(
            message or f"HTTP {response.status_code} from {response.request.method} {response.request.url.path}",
            status_to_code(response.status_code, entity),
            {
                "status": response.status_code,
                "body": body,
                "retryable": response.status_code in RETRYABLE_STATUSES,
            },
        )

    async def get(self, path: str, params: dict[str, Any] | None = None, *, entity: str | None = None) -> Any:
        return await self.request("GET", path, params=params, entity=entity)

    async def post(self, path: str, json: Any = None, *, entity: str | None = None) -> Any:
        return await self.request("POST", path, json=json, entity=entity)

    async def put(self, path: str, json: Any = None, *, entity: str | None = None) -> Any:
        return await self.request("PUT", path, json=json, entity=entity)

    async def patch(self, path: str, json: Any = None, *, entity: str | None = None) -> Any:
        return await self.request("PATCH", path, json=json, entity=entity)

    async def delete(self, path: str, *, entity: str | None = None) -> Any:
        return await self.request("DELETE", path, entity=entity)
