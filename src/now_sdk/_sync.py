"""Blocking client for the Now API, with callback-based variants."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import datetime
from pathlib import Path
from typing import Any, TypeVar

import httpx

from . import operations
from .auth import resolve_credentials
from .callbacks import CallbackDispatcher, enqueueable
from .config import DEFAULT_BASE_URL, DEFAULT_MAX_WORKERS, DEFAULT_TIMEOUT, USER_AGENT
from .exceptions import ClientClosedError
from .interceptors import event_hooks
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
from .streams import FileStream

logger = logging.getLogger(__name__)

T = TypeVar("T")


class NowSync:
    """Blocking client for the Now API.

    Every operation blocks until the HTTP round trip completes and returns
    the typed result. Pass ``callback=`` (a
    :class:`~now_sdk.callbacks.ClientCallback`) to any operation to run it
    on the client's thread pool instead: the call returns a
    :class:`concurrent.futures.Future` immediately and exactly one of
    ``on_success`` / ``on_failure`` fires when it completes.

    Example:
        ```python
        from now_sdk import NowSync

        with NowSync() as client:
            for deployment in client.list_deployments():
                print(deployment.url)

            client.list_domains(callback=my_callback)
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
        transport: httpx.BaseTransport | None = None,
        max_workers: int = DEFAULT_MAX_WORKERS,
    ) -> None:
        """Initialize the client.

        Args:
            token: API token. If not provided, read from ~/.now.json or,
                when that file doesn't exist, from NOW_TOKEN.
            team: Team to scope every request to (only used with ``token``;
                otherwise read alongside the token).
            base_url: Base URL for the Now API.
            timeout: Request timeout in seconds.
            config_path: Path to the config file. Defaults to ~/.now.json.
            environ: Environment mapping. Defaults to ``os.environ``.
            transport: Custom httpx transport, e.g. for proxies or tests.
            max_workers: Size of the pool running callback calls.

        Raises:
            ConfigurationError: If no usable token can be resolved.
        """
        self._credentials = resolve_credentials(
            token=token, team=team, config_path=config_path, environ=environ
        )
        self._base_url = base_url.rstrip("/") + "/"
        self._timeout = timeout
        self._client = httpx.Client(
            base_url=self._base_url,
            timeout=httpx.Timeout(timeout),
            headers={"User-Agent": USER_AGENT},
            event_hooks=event_hooks(self._credentials),
            transport=transport,
        )
        self._dispatcher = CallbackDispatcher(max_workers=max_workers)
        self._closed = False

    @property
    def team(self) -> str | None:
        """The team requests are scoped to, if any."""
        return self._credentials.team

    def __enter__(self) -> NowSync:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()

    def close(self) -> None:
        """Wait for queued callback calls, then close the HTTP client.

        Any later operation raises :class:`ClientClosedError`.
        """
        self._dispatcher.shutdown(wait=True)
        self._closed = True
        self._client.close()

    def _send(self, method: str, path: str, json: Any = None, stream: bool = False) -> httpx.Response:
        """Send a request and raise for non-2xx statuses.

        Raises:
            UnsuccessfulResponseError: On any non-2xx status.
            TransportError: On connection, timeout or protocol errors.
            ClientClosedError: If the client has been closed.
        """
        if self._closed:
            raise ClientClosedError()
        logger.debug("%s %s", method, path)
        with operations.transport_errors(self._timeout):
            request = self._client.build_request(method, path, json=json)
            response = self._client.send(request, stream=stream)
            logger.debug("%s %s -> %d", method, path, response.status_code)
            if stream and not response.is_success:
                try:
                    response.read()
                finally:
                    response.close()
        operations.raise_for_response(response)
        return response

    def _execute(self, call: ApiCall[T]) -> T:
        response = self._send(call.method, call.path, json=call.json)
        return call.parse(response)

    # ==================== DEPLOYMENTS ====================

    @enqueueable
    def list_deployments(self) -> list[Deployment]:
        """List all deployments.

        Returns:
            Deployments, or an empty list if the API returns none.
        """
        return self._execute(operations.list_deployments())

    @enqueueable
    def get_deployment(self, deployment_id: str) -> Deployment:
        """Get a deployment by ID.

        Raises:
            NotFoundError: If the deployment doesn't exist.
        """
        return self._execute(operations.get_deployment(deployment_id))

    @enqueueable
    def create_deployment(self, body: Mapping[str, Any]) -> Deployment:
        """Create a deployment.

        Args:
            body: Deployment payload as documented by the API (``name``,
                ``files``, ``deploymentType``, ...), sent as-is.
        """
        return self._execute(operations.create_deployment(body))

    @enqueueable
    def delete_deployment(self, deployment_id: str) -> None:
        """Delete a deployment."""
        self._execute(operations.delete_deployment(deployment_id))

    @enqueueable
    def list_deployment_files(self, deployment_id: str) -> list[DeploymentFileStructure]:
        """List the file tree of a deployment."""
        return self._execute(operations.list_deployment_files(deployment_id))

    @enqueueable
    def get_file_text(self, deployment_id: str, file_id: str) -> str:
        """Read a deployment file fully into a string.

        Raises:
            MalformedResponseError: If the file body is empty.
        """
        return self._execute(operations.get_file_text(deployment_id, file_id))

    @enqueueable
    def get_file_stream(self, deployment_id: str, file_id: str) -> FileStream:
        """Open a deployment file as a raw byte stream.

        The caller owns the returned stream and must close it.

        Raises:
            MalformedResponseError: If the file body is empty.
        """
        call = operations.get_file_text(deployment_id, file_id)
        response = self._send(call.method, call.path, stream=True)
        return FileStream(response)

    # ==================== DOMAINS ====================

    @enqueueable
    def list_domains(self) -> list[Domain]:
        """List all domains."""
        return self._execute(operations.list_domains())

    @enqueueable
    def add_domain(self, name: str, is_external_dns: bool = False) -> Domain:
        """Register a domain.

        Args:
            name: Domain name.
            is_external_dns: True when DNS is managed outside Now.
        """
        return self._execute(operations.add_domain(name, is_external_dns))

    @enqueueable
    def delete_domain(self, name: str) -> str:
        """Delete a domain.

        Returns:
            The uid of the deleted domain.
        """
        return self._execute(operations.delete_domain(name))

    @enqueueable
    def list_domain_records(self, domain_name: str) -> list[DomainRecord]:
        """List the DNS records of a domain."""
        return self._execute(operations.list_domain_records(domain_name))

    @enqueueable
    def add_domain_record(self, domain_name: str, record: DomainRecord) -> DomainRecord:
        """Add a DNS record to a domain. Any id on ``record`` is ignored."""
        return self._execute(operations.add_domain_record(domain_name, record))

    @enqueueable
    def delete_domain_record(self, domain_name: str, record_id: str) -> None:
        """Delete a DNS record."""
        self._execute(operations.delete_domain_record(domain_name, record_id))

    # ==================== CERTIFICATES ====================

    @enqueueable
    def list_certificates(self, common_name: str | None = None) -> list[Certificate]:
        """List certificates, optionally only those for one common name."""
        return self._execute(operations.list_certificates(common_name))

    @enqueueable
    def create_certificate(self, domains: list[str]) -> str:
        """Issue a certificate for the given domains.

        Returns:
            The new certificate's uid.
        """
        return self._execute(operations.create_certificate(domains))

    @enqueueable
    def renew_certificate(self, domains: list[str]) -> str:
        """Renew the certificate covering the given domains.

        Returns:
            The renewed certificate's uid.
        """
        return self._execute(operations.renew_certificate(domains))

    @enqueueable
    def replace_certificate(self, domains: list[str], ca: str, cert: str, key: str) -> datetime:
        """Replace a certificate with custom PEM material.

        Args:
            domains: Domains the certificate covers.
            ca: PEM-encoded CA chain.
            cert: PEM-encoded certificate.
            key: PEM-encoded private key.

        Returns:
            Creation timestamp of the replacement.
        """
        return self._execute(operations.replace_certificate(domains, ca, cert, key))

    @enqueueable
    def delete_certificate(self, common_name: str) -> None:
        """Delete the certificate for a common name."""
        self._execute(operations.delete_certificate(common_name))

    # ==================== ALIASES ====================

    @enqueueable
    def list_aliases(self) -> list[Alias]:
        """List all aliases."""
        return self._execute(operations.list_aliases())

    @enqueueable
    def delete_alias(self, alias_id: str) -> str:
        """Delete an alias.

        Returns:
            The deletion status reported by the API (e.g. ``"SUCCESS"``).
        """
        return self._execute(operations.delete_alias(alias_id))

    @enqueueable
    def list_deployment_aliases(self, deployment_id: str) -> list[Alias]:
        """List the aliases pointing at a deployment."""
        return self._execute(operations.list_deployment_aliases(deployment_id))

    @enqueueable
    def create_deployment_alias(self, deployment_id: str, alias: str) -> Alias:
        """Point an alias hostname at a deployment."""
        return self._execute(operations.create_deployment_alias(deployment_id, alias))

    # ==================== SECRETS ====================

    @enqueueable
    def list_secrets(self) -> list[Secret]:
        """List all secrets. Values are never returned."""
        return self._execute(operations.list_secrets())

    @enqueueable
    def create_secret(self, name: str, value: str) -> Secret:
        """Create a secret."""
        return self._execute(operations.create_secret(name, value))

    @enqueueable
    def rename_secret(self, uid_or_name: str, new_name: str) -> Secret:
        """Rename a secret, identified by uid or current name."""
        return self._execute(operations.rename_secret(uid_or_name, new_name))

    @enqueueable
    def delete_secret(self, uid_or_name: str) -> Secret:
        """Delete a secret, identified by uid or name.

        Returns:
            The deleted secret.
        """
        return self._execute(operations.delete_secret(uid_or_name))

