"""Tests for client initialization and configuration."""

from __future__ import annotations

import httpx
import pytest

from now_sdk import Now, NowSync, __version__
from now_sdk.config import (
    CLIENT_IDENTIFIER,
    DEFAULT_MAX_WORKERS,
    DEFAULT_TIMEOUT,
    NOW_TOKEN_ENV,
    SDK_VERSION,
    USER_AGENT,
)
from now_sdk.exceptions import ConfigurationError


class TestNowInit:
    """Tests for async client initialization."""

    def test_explicit_token(self, missing_config):
        """Test client with an explicit token."""
        client = Now(token="abc", team="t1", config_path=missing_config)

        assert client._credentials.token == "abc"
        assert client.team == "t1"
        assert client._timeout == DEFAULT_TIMEOUT

    def test_base_url_normalised(self, missing_config):
        """Test the base URL always ends with a single slash."""
        client = Now(token="abc", base_url="https://custom.api.com//", config_path=missing_config)

        assert client._base_url == "https://custom.api.com/"

    def test_environment_token(self, missing_config):
        """Test the token is read from the environment mapping."""
        client = Now(config_path=missing_config, environ={NOW_TOKEN_ENV: "from_env"})

        assert client._credentials.token == "from_env"
        assert client.team is None

    def test_config_file(self, temp_config_file, mock_token):
        """Test the token and team are read from the config file."""
        client = Now(config_path=temp_config_file, environ={})

        assert client._credentials.token == mock_token
        assert client.team == "t1"

    def test_no_token(self, missing_config):
        """Test construction fails without a token."""
        with pytest.raises(ConfigurationError):
            Now(config_path=missing_config, environ={})

    def test_client_not_initialized_before_use(self, missing_config):
        """Test that HTTP client is not initialized until first use."""
        client = Now(token="abc", config_path=missing_config)

        assert client._client is None


class TestNowContextManager:
    """Tests for async client lifecycle."""

    @pytest.mark.asyncio
    async def test_async_context_manager(self, missing_config):
        """Test async context manager opens and closes the HTTP client."""
        async with Now(token="abc", config_path=missing_config) as client:
            assert isinstance(client._client, httpx.AsyncClient)

        assert client._client is None

    @pytest.mark.asyncio
    async def test_client_configuration(self, missing_config):
        """Test the HTTP client carries base URL, timeout and user agent."""
        client = Now(
            token="abc",
            base_url="https://custom.api.com",
            timeout=12.0,
            config_path=missing_config,
        )
        http_client = await client._ensure_client()

        assert str(http_client.base_url) == "https://custom.api.com/"
        assert http_client.timeout.read == 12.0
        assert http_client.headers["User-Agent"] == USER_AGENT
        assert len(http_client.event_hooks["request"]) == 3
        await client.close()

    @pytest.mark.asyncio
    async def test_close_without_init(self, missing_config):
        """Test close is safe before first use."""
        client = Now(token="abc", config_path=missing_config)
        await client.close()

        assert client._client is None


class TestNowSync:
    """Tests for blocking client initialization and lifecycle."""

    def test_configuration(self, missing_config):
        """Test the HTTP client is created eagerly with the settings."""
        client = NowSync(
            token="abc",
            team="t1",
            base_url="https://custom.api.com",
            timeout=5.0,
            config_path=missing_config,
        )

        assert str(client._client.base_url) == "https://custom.api.com/"
        assert client._client.timeout.read == 5.0
        assert client.team == "t1"
        assert client._dispatcher._max_workers == DEFAULT_MAX_WORKERS
        client.close()

    def test_context_manager(self, missing_config):
        """Test the context manager closes the HTTP client."""
        with NowSync(token="abc", config_path=missing_config) as client:
            assert not client._client.is_closed

        assert client._client.is_closed

    def test_blank_token(self, missing_config):
        """Test an explicit blank token is rejected."""
        with pytest.raises(ConfigurationError, match="blank"):
            NowSync(token=" ", config_path=missing_config)


class TestConstants:
    """Tests for SDK constants."""

    def test_version(self):
        """Test the package version."""
        assert __version__ == SDK_VERSION

    def test_client_identifier(self):
        """Test the client identifier names the SDK and version."""
        assert CLIENT_IDENTIFIER == f"now-sdk-python/{SDK_VERSION}"
