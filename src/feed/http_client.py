"""
HTTP infrastructure layer for source adapters.

Provides:
- HTTPClientError: single exception type for transport, status and decoding failures
- HTTPClient: Async JSON client used as an async context manager

This layer separates HTTP concerns from record parsing in the adapters.
Requests are issued exactly once; adapters turn any HTTPClientError into
an empty fetch result.
"""

import logging
from typing import Any

import httpx

logger = logging.getLogger(__name__)


class HTTPClientError(Exception):
    """Raised when a request fails or its body cannot be decoded."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        response_body: str | None = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.response_body = response_body


def _error_message(response: httpx.Response) -> str:
    """
    Best-effort error message from a failed response.

    Google APIs report failures as ``{"error": {"message": ...}}``; anything
    else falls back to the raw body or the status line.
    """
    try:
        payload = response.json()
    except ValueError:
        payload = None

    if isinstance(payload, dict):
        error = payload.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        if isinstance(payload.get("message"), str):
            return payload["message"]

    return response.text or f"API request failed with {response.status_code}"


class HTTPClient:
    """
    Async HTTP client returning decoded JSON.

    Example:
        async with HTTPClient(timeout=10.0) as client:
            payload = await client.get_json(
                "https://api.example.com/v1/content",
                params={"status": "published"},
            )
    """

    def __init__(
        self,
        timeout: float = 30.0,
        headers: dict[str, str] | None = None,
    ):
        """
        Initialize HTTP client.

        Args:
            timeout: Request timeout in seconds.
            headers: Default headers sent with every request.
        """
        self.timeout = timeout
        self.headers = {"Accept": "application/json", **(headers or {})}
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> "HTTPClient":
        """Enter async context manager, create client."""
        self._client = httpx.AsyncClient(timeout=self.timeout, headers=self.headers)
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Exit async context manager, close client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def get_json(
        self,
        url: str,
        params: dict[str, Any] | None = None,
    ) -> Any:
        """
        Perform a GET request and decode the JSON body.

        Args:
            url: Request URL
            params: Query parameters

        Returns:
            Decoded JSON payload

        Raises:
            HTTPClientError: On transport errors, non-success status or invalid JSON
        """
        if not self._client:
            raise RuntimeError("HTTPClient must be used as async context manager")

        try:
            response = await self._client.get(url, params=params)
        except httpx.TransportError as e:
            raise HTTPClientError(
                f"Request to {url} failed: {type(e).__name__}: {e}"
            ) from e

        if response.status_code >= 400:
            message = _error_message(response)
            logger.debug(f"GET {url} returned {response.status_code}: {message}")
            raise HTTPClientError(
                f"Request failed with status {response.status_code}: {message}",
                status_code=response.status_code,
                response_body=response.text,
            )

        try:
            return response.json()
        except ValueError as e:
            raise HTTPClientError(
                f"Response from {url} is not valid JSON",
                status_code=response.status_code,
                response_body=response.text,
            ) from e
