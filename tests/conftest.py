"""Shared fixtures and configuration for tests."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any

import pytest
import pytest_asyncio
import respx

from now_sdk import Now, NowSync

# ==================== MOCK DATA ====================


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def make_deployment_dict(
    uid: str = "dpl_test123",
    name: str = "my-app",
    url: str = "my-app-abc123.now.sh",
    state: str = "READY",
    type: str = "NPM",
) -> dict[str, Any]:
    """Create a mock deployment dictionary."""
    return {
        "uid": uid,
        "name": name,
        "url": url,
        "created": _now(),
        "state": state,
        "type": type,
        "creator": {"uid": "usr_123"},
    }


def make_file_dict(
    uid: str | None = "file_abc",
    name: str = "index.js",
    type: str = "file",
    children: list[dict[str, Any]] | None = None,
) -> dict[str, Any]:
    """Create a mock file tree entry."""
    data: dict[str, Any] = {"uid": uid, "name": name, "type": type}
    if children is not None:
        data["children"] = children
    return data


def make_domain_dict(
    uid: str = "dom_test123",
    name: str = "example.com",
    is_external: bool = False,
    verified: bool = True,
) -> dict[str, Any]:
    """Create a mock domain dictionary."""
    return {
        "uid": uid,
        "name": name,
        "created": _now(),
        "boughtAt": None,
        "expiresAt": None,
        "isExternal": is_external,
        "verified": verified,
        "aliases": [],
        "certs": [],
    }


def make_record_dict(
    record_id: str = "rec_test123",
    type: str = "A",
    name: str = "www",
    value: str = "10.0.0.1",
    mx_priority: int | None = None,
) -> dict[str, Any]:
    """Create a mock DNS record dictionary."""
    return {
        "id": record_id,
        "slug": f"example.com.-{type.lower()}-{name}",
        "type": type,
        "name": name,
        "value": value,
        "mxPriority": mx_priority,
        "created": _now(),
        "updated": _now(),
    }


def make_cert_dict(
    uid: str = "cert_test123",
    cns: list[str] | None = None,
    auto_renew: bool = True,
) -> dict[str, Any]:
    """Create a mock certificate dictionary."""
    return {
        "uid": uid,
        "cns": cns or ["example.com"],
        "created": _now(),
        "expiration": _now(),
        "autoRenew": auto_renew,
    }


def make_alias_dict(
    uid: str = "ali_test123",
    alias: str = "my-app.now.sh",
    deployment_id: str = "dpl_test123",
) -> dict[str, Any]:
    """Create a mock alias dictionary."""
    return {
        "uid": uid,
        "alias": alias,
        "created": _now(),
        "deploymentId": deployment_id,
        "deployment": {"id": deployment_id, "url": "my-app-abc123.now.sh"},
    }


def make_secret_dict(
    uid: str = "sec_test123",
    name: str = "db-password",
) -> dict[str, Any]:
    """Create a mock secret dictionary."""
    return {"uid": uid, "name": name, "created": _now()}


# ==================== FIXTURES ====================


@pytest.fixture
def api_base_url() -> str:
    """Base URL for API mocks."""
    return "https://api.zeit.co"


@pytest.fixture
def mock_token() -> str:
    """Mock API token for testing."""
    return "now_test_token_1234567890"


@pytest.fixture
def missing_config(tmp_path):
    """Path to a config file that doesn't exist."""
    return tmp_path / "absent" / ".now.json"


@pytest.fixture
def temp_config_file(tmp_path, mock_token):
    """Create a temporary ~/.now.json with a token and team."""
    config_file = tmp_path / ".now.json"
    config_file.write_text(json.dumps({"token": mock_token, "team": "t1"}))
    return config_file


@pytest.fixture
def respx_mock():
    """Fixture for respx mocking."""
    with respx.mock(assert_all_called=False) as mock:
        yield mock


@pytest.fixture(autouse=True)
def _isolate_global_respx_router():
    """Drop routes left on the global respx router so they don't leak between tests."""
    yield
    respx.mock.clear()
    respx.mock.reset()


@pytest.fixture
def sync_client(api_base_url, mock_token, missing_config):
    """Blocking client pointed at the mock API."""
    client = NowSync(token=mock_token, base_url=api_base_url, config_path=missing_config)
    yield client
    client.close()


@pytest_asyncio.fixture
async def async_client(api_base_url, mock_token, missing_config):
    """Async client pointed at the mock API."""
    client = Now(token=mock_token, base_url=api_base_url, config_path=missing_config)
    yield client
    await client.close()
