"""Tests for the request interceptor chain."""

from __future__ import annotations

import httpx
import pytest
import respx
from httpx import Response

from now_sdk import Now, NowSync
from now_sdk.auth import Credentials
from now_sdk.config import CLIENT_IDENTIFIER
from now_sdk.exceptions import ConfigurationError
from now_sdk.interceptors import (
    AuthenticationInterceptor,
    HeadersInterceptor,
    TeamInterceptor,
    build_interceptors,
)


def _request(url: str = "https://api.zeit.co/now/secrets") -> httpx.Request:
    return httpx.Request("GET", url)


class TestInterceptors:
    """Tests for individual interceptors."""

    def test_headers(self):
        """Test content type and client identifier headers."""
        request = _request()
        HeadersInterceptor()(request)

        assert request.headers["Content-Type"] == "application/json"
        assert request.headers["X-Requested-By"] == CLIENT_IDENTIFIER

    def test_authentication(self):
        """Test bearer authorization header."""
        request = _request()
        AuthenticationInterceptor("abc")(request)

        assert request.headers["Authorization"] == "Bearer abc"

    def test_team_added(self):
        """Test team query parameter is appended."""
        request = _request()
        TeamInterceptor("t1")(request)

        assert request.url.params["team"] == "t1"

    def test_team_preserves_existing_params(self):
        """Test team is appended alongside existing query parameters."""
        request = _request("https://api.zeit.co/now/secrets?limit=5")
        TeamInterceptor("t1")(request)

        assert request.url.params["limit"] == "5"
        assert request.url.params["team"] == "t1"

    @pytest.mark.parametrize("team", [None, "", "  "])
    def test_team_absent_or_blank(self, team):
        """Test URL is untouched without a usable team."""
        request = _request()
        TeamInterceptor(team)(request)

        assert "team" not in request.url.params

    def test_chain_order(self):
        """Test the chain is headers, authentication, team."""
        chain = build_interceptors(Credentials(token="abc", team="t1"))

        assert [type(hook) for hook in chain] == [
            HeadersInterceptor,
            AuthenticationInterceptor,
            TeamInterceptor,
        ]


    def test_chain_requires_token(self):
        """Test unresolved credentials are refused."""
        with pytest.raises(ConfigurationError, match="no token"):
            build_interceptors(Credentials(token=None, team="t1"))


class TestInterceptorsOnClients:
    """Tests that both clients send the intercepted headers and params."""

    def test_sync_client(self, api_base_url, missing_config):
        """Test headers and team on the blocking client."""
        with respx.mock:
            route = respx.get(f"{api_base_url}/now/secrets").mock(
                return_value=Response(200, json={"secrets": []})
            )

            with NowSync(
                token="abc", team="t1", base_url=api_base_url, config_path=missing_config
            ) as client:
                client.list_secrets()

        request = route.calls.last.request
        assert request.headers["Authorization"] == "Bearer abc"
        assert request.headers["X-Requested-By"] == CLIENT_IDENTIFIER
        assert request.headers["Content-Type"] == "application/json"
        assert request.url.params["team"] == "t1"

    def test_sync_client_without_team(self, api_base_url, missing_config):
        """Test no team parameter when no team is configured."""
        with respx.mock:
            route = respx.get(f"{api_base_url}/now/secrets").mock(
                return_value=Response(200, json={"secrets": []})
            )

            with NowSync(token="abc", base_url=api_base_url, config_path=missing_config) as client:
                client.list_secrets()

        assert "team" not in route.calls.last.request.url.params

    @pytest.mark.asyncio
    async def test_async_client(self, api_base_url, missing_config):
        """Test headers and team on the async client."""
        with respx.mock:
            route = respx.get(f"{api_base_url}/domains").mock(
                return_value=Response(200, json={"domains": []})
            )

            async with Now(
                token="abc", team="t1", base_url=api_base_url, config_path=missing_config
            ) as client:
                await client.list_domains()

        request = route.calls.last.request
        assert request.headers["Authorization"] == "Bearer abc"
        assert request.headers["X-Requested-By"] == CLIENT_IDENTIFIER
        assert request.url.params["team"] == "t1"
