"""Async HTTP client used for catalog lookups."""

from typing import Any

import httpx

from breakcheck.utils.logging import get_logger

logger = get_logger(__name__)


class AsyncHttpClient:
    """Thin async wrapper around ``httpx.AsyncClient``.

    Requests are sent once. Non-success statuses raise
    ``httpx.HTTPStatusError``; callers decide how to recover.
    """

    DEFAULT_TIMEOUT = 30.0

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        headers: dict[str, str] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the HTTP client.

        Args:
            base_url: Base URL for requests.
            timeout: Request timeout in seconds.
            headers: Default headers for all requests.
            transport: Optional transport override (used by tests).
        """
        self.base_url = base_url
        self.timeout = timeout
        self.default_headers = headers or {}
        self.transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> "AsyncHttpClient":
        """Enter async context."""
        self._client = httpx.AsyncClient(
            base_url=self.base_url or "",
            timeout=self.timeout,
            headers=self.default_headers,
            follow_redirects=True,
            transport=self.transport,
        )
        return self

    async def __aexit__(
        self,
        exc_type: type | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> None:
        """Exit async context."""
        if self._client:
            await self._client.aclose()
            self._client = None

    @property
    def client(self) -> httpx.AsyncClient:
        """Get the underlying httpx client."""
        if self._client is None:
            raise RuntimeError("Client not initialized. Use async with statement.")
        return self._client

    async def get(
        self,
        url: str,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        """Make a GET request.

        Args:
            url: Request URL.
            params: Query parameters.
            headers: Additional headers.

        Returns:
            HTTP response.

        Raises:
            httpx.HTTPStatusError: If the response status is not 2xx.
            httpx.TransportError: If the request could not be sent.
        """
        logger.debug("GET %s %s", url, params or "")
        response = await self.client.get(url, params=params, headers=headers)
        response.raise_for_status()
        return response

    async def get_json(
        self,
        url: str,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        """Make a GET request and parse JSON response.

        Args:
            url: Request URL.
            params: Query parameters.
            headers: Additional headers.

        Returns:
            Parsed JSON data.
        """
        response = await self.get(url, params=params, headers=headers)
        return response.json()


def bearer_headers(token: str | None) -> dict[str, str]:
    """Build JSON request headers, adding a bearer credential when given.

    Args:
        token: Optional bearer token.

    Returns:
        Header mapping.
    """
    headers = {"Content-Type": "application/json"}
    if token:
        headers["Authorization"] = f"Bearer {token}"
    return headers
