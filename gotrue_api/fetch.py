"""
GoTrue API HTTP transport

Default ``Transport`` implementation on top of ``httpx.AsyncClient``.
Issues one request per call and turns the response into either a decoded
body or an exception; it never retries.
"""

from typing import Any, Dict, Mapping, Optional

import httpx

from .errors import AuthError, MalformedResponseError, NetworkError
from .types import HTTPMethod


class HTTPTransport:
    """httpx based transport (default)."""

    def __init__(
        self,
        timeout: float = 30.0,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        """
        Initialize the transport.

        Args:
            timeout: Request timeout in seconds, used when ``client`` is None
            client: Pre-configured httpx client. Closing it stays the
                caller's job.
        """
        self._timeout = timeout
        self._owns_client = client is None
        self._client = client if client is not None else httpx.AsyncClient(timeout=timeout)

    async def request(
        self,
        method: HTTPMethod,
        url: str,
        *,
        headers: Mapping[str, str],
        body: Optional[Dict[str, Any]] = None,
        no_resolve_json: bool = False,
    ) -> Any:
        """Execute a single HTTP request."""
        try:
            response = await self._client.request(
                method=method,
                url=url,
                headers=dict(headers),
                json=body,
            )
        except httpx.TimeoutException as e:
            raise NetworkError("Request timeout", {"timeout": self._timeout}) from e
        except httpx.RequestError as e:
            raise NetworkError(str(e)) from e

        return self._handle_response(response, no_resolve_json)

    def _handle_response(self, response: httpx.Response, no_resolve_json: bool) -> Any:
        """Decode a 2xx body or raise the matching error."""
        if response.is_success:
            if no_resolve_json or not response.content:
                return None
            try:
                return response.json()
            except ValueError as e:
                raise MalformedResponseError(
                    "Response body is not valid JSON", response.status_code
                ) from e

        try:
            error_data = response.json()
        except ValueError as e:
            raise MalformedResponseError(
                f"HTTP {response.status_code} with a non-JSON body",
                response.status_code,
                {"body": response.text},
            ) from e

        if not isinstance(error_data, dict):
            raise MalformedResponseError(
                f"HTTP {response.status_code} with an unexpected error body",
                response.status_code,
                {"body": error_data},
            )

        raise AuthError.from_api_response(error_data, response.status_code)

    async def close(self) -> None:
        """Close the HTTP client if this transport created it."""
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "HTTPTransport":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()
