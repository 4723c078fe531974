"""
Unit tests for the HTTP transport.
"""

import json

import httpx
import pytest

from rustour.transport import HttpTransport, ResponseDecodeError, TransportError, TransportResponse


class TestHttpTransport:
    """Tests for HttpTransport class."""

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_post_json(self, transport, server, test_config):
        """Body is JSON with a JSON content type; the response is raw."""
        server.respond("/Auth/login", body={"token": "abc"})

        response = await transport.post_json(
            f"{test_config['base_url']}/Auth/login",
            {"email": "ann@x.com", "password": "pw123"}
        )

        request = server.requests[0]
        assert request.method == "POST"
        assert request.headers["content-type"] == "application/json"
        assert json.loads(request.content) == {"email": "ann@x.com", "password": "pw123"}
        assert response.status_code == 200
        assert json.loads(response.body) == {"token": "abc"}

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_error_status_is_a_response(self, transport, server, test_config):
        """Non-2xx statuses are not interpreted."""
        server.respond("/Auth/login", status=401, body="Unauthorized")

        response = await transport.send("POST", f"{test_config['base_url']}/Auth/login")

        assert response.status_code == 401
        assert response.is_success is False
        assert response.body == b"Unauthorized"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_connection_refused(self, transport, server, test_config):
        server.refuse("/Auth/login")

        with pytest.raises(TransportError) as exc_info:
            await transport.post_json(f"{test_config['base_url']}/Auth/login", {})

        assert isinstance(exc_info.value.cause, httpx.ConnectError)
        assert "Connection refused" in str(exc_info.value)

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_undecodable_body(self, transport, server, test_config):
        """A response whose gzip body cannot be decompressed is not a network failure."""
        server.garble("/Auth/login")

        with pytest.raises(ResponseDecodeError) as exc_info:
            await transport.post_json(f"{test_config['base_url']}/Auth/login", {})

        assert isinstance(exc_info.value.cause, httpx.DecodingError)

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_timeout_is_transport_error(self, app_config):
        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        transport = HttpTransport(app_config.transport, transport=httpx.MockTransport(handler))

        with pytest.raises(TransportError):
            await transport.send("POST", "http://rustour.test/api/Auth/login")
        await transport.close()

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_custom_headers_merged(self, transport, server, test_config):
        server.respond("/ping", body={})

        await transport.send("GET", f"{test_config['base_url']}/ping", headers={"x-trace": "1"})

        request = server.requests[0]
        assert request.headers["x-trace"] == "1"
        assert request.headers["accept"] == "application/json"


class TestTransportResponse:

    @pytest.mark.unit
    @pytest.mark.parametrize("status,expected", [(200, True), (201, True), (299, True), (301, False), (500, False)])
    def test_is_success(self, status, expected):
        assert TransportResponse(status_code=status).is_success is expected
