"""Credential resolution for the Now SDK."""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Mapping
from pathlib import Path

from pydantic import BaseModel, Field, field_validator

from .config import NOW_CONFIG_FILE, NOW_TEAM_ENV, NOW_TOKEN_ENV
from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)


def _blank_to_none(value: object) -> str | None:
    if value is None:
        return None
    text = str(value)
    return text if text.strip() else None


class Credentials(BaseModel):
    """Resolved authentication credentials.

    Blank values are normalised to ``None`` so that "present but blank"
    and "absent" are the same thing everywhere downstream.
    """

    token: str | None = Field(None, description="Bearer token")
    team: str | None = Field(None, description="Team scope for every request")

    @field_validator("token", "team", mode="before")
    @classmethod
    def _normalise_blank(cls, value: object) -> str | None:
        return _blank_to_none(value)


def load_credentials_from_file(path: Path) -> Credentials | None:
    """Load credentials from a ``.now.json`` file.

    Args:
        path: Path to the JSON config file.

    Returns:
        Credentials read from the file (token and team may be ``None``),
        or ``None`` if the file doesn't exist.

    Raises:
        ConfigurationError: If the file exists but is not a JSON object.
    """
    if not path.exists():
        return None

    try:
        data = json.loads(path.read_text())
    except (json.JSONDecodeError, OSError, UnicodeDecodeError) as e:
        raise ConfigurationError(f"Cannot read Now config file {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"Now config file {path} must contain a JSON object")

    return Credentials(token=data.get("token"), team=data.get("team"))


def load_credentials_from_env(environ: Mapping[str, str] | None = None) -> Credentials:
    """Read credentials from NOW_TOKEN / NOW_TEAM.

    Args:
        environ: Mapping to read from. Defaults to ``os.environ``.
    """
    env = os.environ if environ is None else environ
    return Credentials(token=env.get(NOW_TOKEN_ENV), team=env.get(NOW_TEAM_ENV))


def resolve_credentials(
    token: str | None = None,
    team: str | None = None,
    config_path: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> Credentials:
    """Resolve the token and team to use.

    Checks in order of priority:
    1. Explicitly provided token (and team) parameters
    2. ~/.now.json, if it exists (the environment is then ignored)
    3. NOW_TOKEN / NOW_TEAM environment variables

    Args:
        token: Explicit token. Must not be blank when given.
        team: Explicit team, only used together with an explicit token.
        config_path: Path to the config file. Defaults to ~/.now.json.
        environ: Environment mapping. Defaults to ``os.environ``.

    Returns:
        Credentials with a non-blank token.

    Raises:
        ConfigurationError: If the token is blank or cannot be found.
    """
    # 1. Explicit parameters
    if token is not None:
        if not token.strip():
            raise ConfigurationError("Token cannot be blank")
        logger.debug("Using explicitly provided Now credentials")
        return Credentials(token=token, team=team)

    # 2. Config file. When present it is authoritative, even without a token.
    path = config_path or NOW_CONFIG_FILE
    creds = load_credentials_from_file(path)
    if creds is not None:
        logger.debug("Using Now credentials from %s", path)
    else:
        # 3. Environment variables
        creds = load_credentials_from_env(environ)
        logger.debug("Using Now credentials from environment")

    if creds.token is None:
        raise ConfigurationError(
            f"Token not found. Pass token=..., set {NOW_TOKEN_ENV}, "
            f"or save it as 'token' in {path}"
        )
    return creds
