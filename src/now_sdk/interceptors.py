"""Request interceptors applied to every outbound Now API request.

Each interceptor mutates an :class:`httpx.Request` in place. They are
installed, in order, as httpx ``request`` event hooks:

1. :class:`HeadersInterceptor` -- content type and client identifier.
2. :class:`AuthenticationInterceptor` -- bearer token.
3. :class:`TeamInterceptor` -- ``team`` query parameter, when scoped.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable

import httpx

from .auth import Credentials
from .config import CLIENT_IDENTIFIER
from .exceptions import ConfigurationError

RequestHook = Callable[[httpx.Request], None]
AsyncRequestHook = Callable[[httpx.Request], Awaitable[None]]


class HeadersInterceptor:
    """Set the fixed content type and client identifier headers."""

    def __init__(self, client_identifier: str = CLIENT_IDENTIFIER) -> None:
        self.client_identifier = client_identifier

    def __call__(self, request: httpx.Request) -> None:
        request.headers["Content-Type"] = "application/json"
        request.headers["X-Requested-By"] = self.client_identifier


class AuthenticationInterceptor:
    """Attach ``Authorization: Bearer <token>``.

    The token is never checked here; an invalid one comes back as a 401.
    """

    def __init__(self, token: str) -> None:
        self._token = token

    def __call__(self, request: httpx.Request) -> None:
        request.headers["Authorization"] = f"Bearer {self._token}"


class TeamInterceptor:
    """Append ``team=<name>`` to the URL when a non-blank team is set."""

    def __init__(self, team: str | None) -> None:
        self.team = team

    def __call__(self, request: httpx.Request) -> None:
        if self.team and self.team.strip():
            request.url = request.url.copy_add_param("team", self.team)


def build_interceptors(credentials: Credentials) -> list[RequestHook]:
    """Build the interceptor chain for the given credentials.

    Raises:
        ConfigurationError: If the credentials carry no token.
    """
    if credentials.token is None:
        raise ConfigurationError("Credentials have no token; resolve them first")
    return [
        HeadersInterceptor(),
        AuthenticationInterceptor(credentials.token),
        TeamInterceptor(credentials.team),
    ]


def _as_async(hook: RequestHook) -> AsyncRequestHook:
    async def async_hook(request: httpx.Request) -> None:
        hook(request)

    return async_hook


def event_hooks(credentials: Credentials) -> dict[str, list[RequestHook]]:
    """Event hooks for :class:`httpx.Client`."""
    return {"request": build_interceptors(credentials)}


def async_event_hooks(credentials: Credentials) -> dict[str, list[AsyncRequestHook]]:
    """Event hooks for :class:`httpx.AsyncClient`, which must be coroutines."""
    return {"request": [_as_async(hook) for hook in build_interceptors(credentials)]}
