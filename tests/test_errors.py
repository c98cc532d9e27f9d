"""Tests for transport versus response error classification."""

from __future__ import annotations

import httpx
import pytest
import respx
from httpx import Response

from now_sdk.exceptions import (
    AuthenticationError,
    ConnectionError,
    NotFoundError,
    TimeoutError,
    TransportError,
    UnsuccessfulResponseError,
)


class TestSyncErrors:
    """Tests for error mapping on the blocking client."""

    def test_not_found_is_response_error(self, sync_client, api_base_url):
        """Test a 404 is an unsuccessful response, never a transport error."""
        with respx.mock:
            respx.delete(f"{api_base_url}/now/deployments/dpl_gone").mock(
                return_value=Response(404, json={"error": {"message": "Not found"}})
            )

            with pytest.raises(UnsuccessfulResponseError) as exc_info:
                sync_client.delete_deployment("dpl_gone")

        assert isinstance(exc_info.value, NotFoundError)
        assert not isinstance(exc_info.value, TransportError)
        assert exc_info.value.status_code == 404

    def test_server_error(self, sync_client, api_base_url):
        """Test a 500 is an unsuccessful response with the reason phrase."""
        with respx.mock:
            respx.get(f"{api_base_url}/domains").mock(return_value=Response(500))

            with pytest.raises(UnsuccessfulResponseError) as exc_info:
                sync_client.list_domains()

        assert exc_info.value.status_code == 500
        assert exc_info.value.message == "Internal Server Error"

    def test_unauthorized(self, sync_client, api_base_url):
        """Test a 401 is an authentication error."""
        with respx.mock:
            respx.get(f"{api_base_url}/now/secrets").mock(
                return_value=Response(
                    401, json={"error": {"code": "forbidden", "message": "Invalid token"}}
                )
            )

            with pytest.raises(AuthenticationError, match="Invalid token"):
                sync_client.list_secrets()

    def test_error_body_not_json(self, sync_client, api_base_url):
        """Test a non-JSON error body still yields a status error."""
        with respx.mock:
            respx.get(f"{api_base_url}/domains").mock(
                return_value=Response(502, text="<html>Bad Gateway</html>")
            )

            with pytest.raises(UnsuccessfulResponseError) as exc_info:
                sync_client.list_domains()

        assert exc_info.value.status_code == 502

    def test_connection_error(self, sync_client, api_base_url):
        """Test a refused connection is a transport error."""
        with respx.mock:
            respx.get(f"{api_base_url}/domains").mock(
                side_effect=httpx.ConnectError("Connection refused")
            )

            with pytest.raises(ConnectionError) as exc_info:
                sync_client.list_domains()

        assert isinstance(exc_info.value, TransportError)
        assert isinstance(exc_info.value.cause, httpx.ConnectError)

    def test_timeout(self, sync_client, api_base_url):
        """Test a timeout is a transport error."""
        with respx.mock:
            respx.get(f"{api_base_url}/domains").mock(
                side_effect=httpx.ReadTimeout("Read timed out")
            )

            with pytest.raises(TimeoutError) as exc_info:
                sync_client.list_domains()

        assert exc_info.value.timeout_seconds == sync_client._timeout

    def test_protocol_error(self, sync_client, api_base_url):
        """Test other httpx failures are generic transport errors."""
        with respx.mock:
            respx.get(f"{api_base_url}/domains").mock(
                side_effect=httpx.RemoteProtocolError("Server disconnected")
            )

            with pytest.raises(TransportError):
                sync_client.list_domains()


class TestAsyncErrors:
    """Tests for error mapping on the async client."""

    @pytest.mark.asyncio
    async def test_not_found(self, async_client, api_base_url):
        """Test a 404 on delete is an unsuccessful response."""
        with respx.mock:
            respx.delete(f"{api_base_url}/now/certs/example.com").mock(
                return_value=Response(404)
            )

            with pytest.raises(NotFoundError):
                await async_client.delete_certificate("example.com")

    @pytest.mark.asyncio
    async def test_connection_error(self, async_client, api_base_url):
        """Test a refused connection is a transport error."""
        with respx.mock:
            respx.get(f"{api_base_url}/now/aliases").mock(
                side_effect=httpx.ConnectError("Connection refused")
            )

            with pytest.raises(ConnectionError):
                await async_client.list_aliases()

    @pytest.mark.asyncio
    async def test_timeout(self, async_client, api_base_url):
        """Test a timeout is a transport error."""
        with respx.mock:
            respx.get(f"{api_base_url}/now/aliases").mock(
                side_effect=httpx.ConnectTimeout("Connect timed out")
            )

            with pytest.raises(TimeoutError):
                await async_client.list_aliases()
