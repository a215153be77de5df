"""
Tests for the default httpx transport.
"""

import httpx
import pytest
import respx

from gotrue_api.errors import AuthError, MalformedResponseError, NetworkError
from gotrue_api.fetch import HTTPTransport
from gotrue_api.types import Transport


URL = "https://auth.example.com/auth/v1/admin/users"


@pytest.fixture
def transport() -> HTTPTransport:
    return HTTPTransport(timeout=5.0)


class TestHTTPTransport:
    """Tests for response handling."""

    def test_satisfies_protocol(self, transport: HTTPTransport):
        assert isinstance(transport, Transport)

    @pytest.mark.asyncio
    @respx.mock
    async def test_json_body(self, transport: HTTPTransport):
        route = respx.post(URL).mock(return_value=httpx.Response(200, json={"id": "1"}))

        data = await transport.request("POST", URL, headers={"apikey": "k"}, body={"email": "a@b.c"})

        assert data == {"id": "1"}
        request = route.calls.last.request
        assert request.headers["apikey"] == "k"
        assert request.headers["content-type"] == "application/json"

    @pytest.mark.asyncio
    @respx.mock
    async def test_get_without_body(self, transport: HTTPTransport):
        route = respx.get(URL).mock(return_value=httpx.Response(200, json={"users": []}))

        await transport.request("GET", URL, headers={})

        assert route.calls.last.request.content == b""

    @pytest.mark.asyncio
    @respx.mock
    async def test_empty_body(self, transport: HTTPTransport):
        respx.post(URL).mock(return_value=httpx.Response(204))

        assert await transport.request("POST", URL, headers={}) is None

    @pytest.mark.asyncio
    @respx.mock
    async def test_no_resolve_json(self, transport: HTTPTransport):
        respx.post(URL).mock(return_value=httpx.Response(200, text="plain"))

        assert await transport.request("POST", URL, headers={}, no_resolve_json=True) is None

    @pytest.mark.asyncio
    @respx.mock
    async def test_success_with_non_json_body(self, transport: HTTPTransport):
        respx.post(URL).mock(return_value=httpx.Response(200, text="<html></html>"))

        with pytest.raises(MalformedResponseError):
            await transport.request("POST", URL, headers={})

    @pytest.mark.asyncio
    @respx.mock
    async def test_structured_error(self, transport: HTTPTransport):
        respx.post(URL).mock(
            return_value=httpx.Response(422, json={"code": 422, "msg": "Invalid email"})
        )

        with pytest.raises(AuthError) as exc_info:
            await transport.request("POST", URL, headers={})

        assert exc_info.value.status == 422
        assert exc_info.value.message == "Invalid email"

    @pytest.mark.asyncio
    @respx.mock
    async def test_error_with_json_array(self, transport: HTTPTransport):
        respx.post(URL).mock(return_value=httpx.Response(400, json=["nope"]))

        with pytest.raises(MalformedResponseError) as exc_info:
            await transport.request("POST", URL, headers={})

        assert exc_info.value.status == 400

    @pytest.mark.asyncio
    @respx.mock
    async def test_error_with_html(self, transport: HTTPTransport):
        respx.post(URL).mock(return_value=httpx.Response(500, text="<h1>oops</h1>"))

        with pytest.raises(MalformedResponseError) as exc_info:
            await transport.request("POST", URL, headers={})

        assert exc_info.value.details["body"] == "<h1>oops</h1>"

    @pytest.mark.asyncio
    @respx.mock
    async def test_timeout(self, transport: HTTPTransport):
        respx.post(URL).mock(side_effect=httpx.ReadTimeout("timed out"))

        with pytest.raises(NetworkError) as exc_info:
            await transport.request("POST", URL, headers={})

        assert exc_info.value.details == {"timeout": 5.0}
        assert isinstance(exc_info.value.__cause__, httpx.ReadTimeout)

    @pytest.mark.asyncio
    @respx.mock
    async def test_connection_error(self, transport: HTTPTransport):
        respx.post(URL).mock(side_effect=httpx.ConnectError("connection refused"))

        with pytest.raises(NetworkError) as exc_info:
            await transport.request("POST", URL, headers={})

        assert "connection refused" in exc_info.value.message


class TestTransportLifecycle:
    """Tests for client ownership."""

    @pytest.mark.asyncio
    async def test_closes_own_client(self):
        transport = HTTPTransport()
        await transport.close()
        assert transport._client.is_closed

    @pytest.mark.asyncio
    async def test_leaves_external_client_open(self):
        client = httpx.AsyncClient()
        async with HTTPTransport(client=client):
            pass
        assert not client.is_closed
        await client.aclose()
