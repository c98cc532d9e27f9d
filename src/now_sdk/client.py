"""Async HTTP client for the Now API."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Mapping
from datetime import datetime
from pathlib import Path
from typing import Any, TypeVar

import httpx

from . import operations
from .auth import resolve_credentials
from .config import DEFAULT_BASE_URL, DEFAULT_TIMEOUT, USER_AGENT
from .exceptions import MalformedResponseError
from .interceptors import async_event_hooks
from .models import (
    Alias,
    Certificate,
    Deployment,
    DeploymentFileStructure,
    Domain,
    DomainRecord,
    Secret,
)
from .operations import ApiCall

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Now:
    """Async client for the Now API.

    Example:
        ```python
        import asyncio
        from now_sdk import Now

        async def main():
            async with Now() as client:
                deployments = await client.list_deployments()
                for deployment in deployments:
                    print(deployment.url)

                secret = await client.create_secret("db-password", "hunter2")
                print(secret.uid)

        asyncio.run(main())
        ```
    """

    def __init__(
        self,
        token: str | None = None,
        team: str | None = None,
        *,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        config_path: Path | None = None,
        environ: Mapping[str, str] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the Now client.

        Credentials are resolved immediately: explicit ``token`` first, then
        ~/.now.json, then the NOW_TOKEN / NOW_TEAM environment variables.

        Args:
            token: API token.
            team: Team to scope every request to.
            base_url: Base URL for the Now API.
            timeout: Default request timeout in seconds.
            config_path: Path to the config file. Defaults to ~/.now.json.
            environ: Environment mapping. Defaults to ``os.environ``.
            transport: Custom httpx transport.

        Raises:
            ConfigurationError: If no usable token can be resolved.
        """
        self._credentials = resolve_credentials(
            token=token, team=team, config_path=config_path, environ=environ
        )
        self._base_url = base_url.rstrip("/") + "/"
        self._timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def team(self) -> str | None:
        """The team requests are scoped to, if any."""
        return self._credentials.team

    async def __aenter__(self) -> Now:
        """Enter async context manager."""
        await self._ensure_client()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Exit async context manager."""
        await self.close()

    async def _ensure_client(self) -> httpx.AsyncClient:
        """Ensure the HTTP client is initialized."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self._base_url,
                timeout=httpx.Timeout(self._timeout),
                headers={"User-Agent": USER_AGENT},
                event_hooks=async_event_hooks(self._credentials),
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def _execute(self, call: ApiCall[T]) -> T:
        """Send an API call and unwrap its response.

        Raises:
            UnsuccessfulResponseError: On any non-2xx status.
            TransportError: On connection, timeout or protocol errors.
        """
        client = await self._ensure_client()

        logger.debug("%s %s", call.method, call.path)
        with operations.transport_errors(self._timeout):
            response = await client.request(call.method, call.path, json=call.json)
        logger.debug("%s %s -> %d", call.method, call.path, response.status_code)

        operations.raise_for_response(response)
        return call.parse(response)

    # ==================== DEPLOYMENTS ====================

    async def list_deployments(self) -> list[Deployment]:
        """List all deployments."""
        return await self._execute(operations.list_deployments())

    async def get_deployment(self, deployment_id: str) -> Deployment:
        """Get a deployment by ID.

        Raises:
            NotFoundError: If the deployment doesn't exist.
        """
        return await self._execute(operations.get_deployment(deployment_id))

    async def create_deployment(self, body: Mapping[str, Any]) -> Deployment:
        """Create a deployment from a raw API payload."""
        return await self._execute(operations.create_deployment(body))

    async def delete_deployment(self, deployment_id: str) -> None:
        """Delete a deployment."""
        await self._execute(operations.delete_deployment(deployment_id))

    async def list_deployment_files(self, deployment_id: str) -> list[DeploymentFileStructure]:
        """List the file tree of a deployment."""
        return await self._execute(operations.list_deployment_files(deployment_id))

    async def get_file_text(self, deployment_id: str, file_id: str) -> str:
        """Read a deployment file fully into a string."""
        return await self._execute(operations.get_file_text(deployment_id, file_id))

    async def get_file_stream(self, deployment_id: str, file_id: str) -> AsyncIterator[bytes]:
        """Stream a deployment file as raw byte chunks.

        Yields:
            Body chunks as they arrive.

        Raises:
            MalformedResponseError: If the file body is empty.

        Example:
            ```python
            async for chunk in client.get_file_stream(deployment_id, file_id):
                out.write(chunk)
            ```
        """
        call = operations.get_file_text(deployment_id, file_id)
        client = await self._ensure_client()

        logger.debug("%s %s (stream)", call.method, call.path)
        with operations.transport_errors(self._timeout):
            async with client.stream(call.method, call.path) as response:
                if not response.is_success:
                    await response.aread()
                    operations.raise_for_response(response)

                empty = True
                async for chunk in response.aiter_bytes():
                    if chunk:
                        empty = False
                        yield chunk

                if empty:
                    raise MalformedResponseError("Empty file body")

    # ==================== DOMAINS ====================

    async def list_domains(self) -> list[Domain]:
        """List all domains."""
        return await self._execute(operations.list_domains())

    async def add_domain(self, name: str, is_external_dns: bool = False) -> Domain:
        """Register a domain.

        Args:
            name: Domain name.
            is_external_dns: True when DNS is managed outside Now.
        """
        return await self._execute(operations.add_domain(name, is_external_dns))

    async def delete_domain(self, name: str) -> str:
        """Delete a domain and return its uid."""
        return await self._execute(operations.delete_domain(name))

    async def list_domain_records(self, domain_name: str) -> list[DomainRecord]:
        """List the DNS records of a domain."""
        return await self._execute(operations.list_domain_records(domain_name))

    async def add_domain_record(self, domain_name: str, record: DomainRecord) -> DomainRecord:
        """Add a DNS record to a domain."""
        return await self._execute(operations.add_domain_record(domain_name, record))

    async def delete_domain_record(self, domain_name: str, record_id: str) -> None:
        """Delete a DNS record."""
        await self._execute(operations.delete_domain_record(domain_name, record_id))

    # ==================== CERTIFICATES ====================

    async def list_certificates(self, common_name: str | None = None) -> list[Certificate]:
        """List certificates, optionally only those for one common name."""
        return await self._execute(operations.list_certificates(common_name))

    async def create_certificate(self, domains: list[str]) -> str:
        """Issue a certificate and return its uid."""
        return await self._execute(operations.create_certificate(domains))

    async def renew_certificate(self, domains: list[str]) -> str:
        """Renew a certificate and return its uid."""
        return await self._execute(operations.renew_certificate(domains))

    async def replace_certificate(
        self, domains: list[str], ca: str, cert: str, key: str
    ) -> datetime:
        """Replace a certificate with custom PEM material.

        Returns:
            Creation timestamp of the replacement.
        """
        return await self._execute(operations.replace_certificate(domains, ca, cert, key))

    async def delete_certificate(self, common_name: str) -> None:
        """Delete the certificate for a common name."""
        await self._execute(operations.delete_certificate(common_name))

    # ==================== ALIASES ====================

    async def list_aliases(self) -> list[Alias]:
        """List all aliases."""
        return await self._execute(operations.list_aliases())

    async def delete_alias(self, alias_id: str) -> str:
        """Delete an alias and return the deletion status."""
        return await self._execute(operations.delete_alias(alias_id))

    async def list_deployment_aliases(self, deployment_id: str) -> list[Alias]:
        """List the aliases pointing at a deployment."""
        return await self._execute(operations.list_deployment_aliases(deployment_id))

    async def create_deployment_alias(self, deployment_id: str, alias: str) -> Alias:
        """Point an alias hostname at a deployment."""
        return await self._execute(operations.create_deployment_alias(deployment_id, alias))

    # ==================== SECRETS ====================

    async def list_secrets(self) -> list[Secret]:
        """List all secrets."""
        return await self._execute(operations.list_secrets())

    async def create_secret(self, name: str, value: str) -> Secret:
        """Create a secret."""
        return await self._execute(operations.create_secret(name, value))

    async def rename_secret(self, uid_or_name: str, new_name: str) -> Secret:
        """Rename a secret, identified by uid or current name."""
        return await self._execute(operations.rename_secret(uid_or_name, new_name))

    async def delete_secret(self, uid_or_name: str) -> Secret:
        """Delete a secret and return it."""
        return await self._execute(operations.delete_secret(uid_or_name))
