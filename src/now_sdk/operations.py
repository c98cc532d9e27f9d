"""Operation builders shared by the blocking and async clients.

Each builder checks its identifiers, serialises the request body and
returns an :class:`ApiCall`: the endpoint to hit plus the function that
turns a successful :class:`httpx.Response` into the typed result. The
clients only differ in how they send the request.
"""

from __future__ import annotations

import json
from collections.abc import Callable, Iterator, Mapping
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Generic, TypeVar

import httpx
from pydantic import BaseModel, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from .exceptions import (
    ConnectionError,
    MalformedResponseError,
    TimeoutError,
    TransportError,
    raise_for_status,
)
from .models import (
    Alias,
    AliasCreateRequest,
    AliasList,
    Certificate,
    CertificateList,
    CertificateRequest,
    CertificateResponse,
    DeleteAliasResponse,
    Deployment,
    DeploymentFileStructure,
    DeploymentList,
    Domain,
    DomainCreateRequest,
    DomainList,
    DomainRecord,
    DomainRecordCreateRequest,
    DomainRecordList,
    Secret,
    SecretList,
    SecretRequest,
)
from .service import Endpoint, NowService

T = TypeVar("T")
M = TypeVar("M", bound=BaseModel)

_FILE_LIST = TypeAdapter(list[DeploymentFileStructure])


@dataclass(frozen=True)
class ApiCall(Generic[T]):
    """A fully built request and the unwrapper for its response."""

    endpoint: Endpoint
    path: str
    parse: Callable[[httpx.Response], T]
    json: Any = None

    @property
    def method(self) -> str:
        return self.endpoint.method


def require(value: str | None, name: str) -> str:
    """Reject a missing or blank identifier.

    Raises:
        ValueError: If ``value`` is ``None`` or blank.
    """
    if value is None or not str(value).strip():
        raise ValueError(f"{name} must not be blank")
    return value


def _dump(model: BaseModel) -> dict[str, Any]:
    return model.model_dump(mode="json", by_alias=True, exclude_none=True)


# ==================== RESPONSE UNWRAPPERS ====================


def _json(response: httpx.Response) -> Any:
    """Decode a JSON body; ``None`` for an empty one."""
    if not response.content:
        return None
    try:
        return response.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise MalformedResponseError(f"Invalid JSON in response: {e}", e) from e


def _validate(model_cls: type[M], data: Any) -> M:
    if data is None:
        raise MalformedResponseError(f"Empty response body, expected {model_cls.__name__}")
    try:
        return model_cls.model_validate(data)
    except PydanticValidationError as e:
        raise MalformedResponseError(
            f"Unexpected response format for {model_cls.__name__}: {e}", e
        ) from e


def _model(model_cls: type[M]) -> Callable[[httpx.Response], M]:
    def parse(response: httpx.Response) -> M:
        return _validate(model_cls, _json(response))

    return parse


def _collection(envelope_cls: type[BaseModel], field: str) -> Callable[[httpx.Response], list]:
    """Unwrap a list envelope, substituting ``[]`` for an absent collection."""

    def parse(response: httpx.Response) -> list:
        data = _json(response)
        if data is None:
            return []
        return getattr(_validate(envelope_cls, data), field) or []

    return parse


def _required_field(model_cls: type[BaseModel], field: str) -> Callable[[httpx.Response], Any]:
    def parse(response: httpx.Response) -> Any:
        value = getattr(_validate(model_cls, _json(response)), field)
        if value is None:
            raise MalformedResponseError(f"Response is missing '{field}'")
        return value

    return parse


def _nothing(response: httpx.Response) -> None:
    return None


def _file_list(response: httpx.Response) -> list[DeploymentFileStructure]:
    data = _json(response)
    if data is None:
        return []
    try:
        return _FILE_LIST.validate_python(data)
    except PydanticValidationError as e:
        raise MalformedResponseError(f"Unexpected file list format: {e}", e) from e


def _text(response: httpx.Response) -> str:
    if not response.content:
        raise MalformedResponseError("Empty file body")
    return response.text


# ==================== DEPLOYMENTS ====================


def list_deployments() -> ApiCall[list[Deployment]]:
    endpoint = NowService.LIST_DEPLOYMENTS
    return ApiCall(endpoint, endpoint.build_path(), _collection(DeploymentList, "deployments"))


def get_deployment(deployment_id: str) -> ApiCall[Deployment]:
    endpoint = NowService.GET_DEPLOYMENT
    path = endpoint.build_path(deployment_id=require(deployment_id, "deployment_id"))
    return ApiCall(endpoint, path, _model(Deployment))


def create_deployment(body: Mapping[str, Any]) -> ApiCall[Deployment]:
    endpoint = NowService.CREATE_DEPLOYMENT
    return ApiCall(endpoint, endpoint.build_path(), _model(Deployment), json=dict(body))


def delete_deployment(deployment_id: str) -> ApiCall[None]:
    endpoint = NowService.DELETE_DEPLOYMENT
    path = endpoint.build_path(deployment_id=require(deployment_id, "deployment_id"))
    return ApiCall(endpoint, path, _nothing)


def list_deployment_files(deployment_id: str) -> ApiCall[list[DeploymentFileStructure]]:
    endpoint = NowService.LIST_FILES
    path = endpoint.build_path(deployment_id=require(deployment_id, "deployment_id"))
    return ApiCall(endpoint, path, _file_list)


def get_file_text(deployment_id: str, file_id: str) -> ApiCall[str]:
    endpoint = NowService.GET_FILE
    path = endpoint.build_path(
        deployment_id=require(deployment_id, "deployment_id"),
        file_id=require(file_id, "file_id"),
    )
    return ApiCall(endpoint, path, _text)


# ==================== DOMAINS ====================


def list_domains() -> ApiCall[list[Domain]]:
    endpoint = NowService.LIST_DOMAINS
    return ApiCall(endpoint, endpoint.build_path(), _collection(DomainList, "domains"))


def add_domain(name: str, is_external_dns: bool = False) -> ApiCall[Domain]:
    endpoint = NowService.CREATE_DOMAIN
    request = DomainCreateRequest(name=require(name, "name"), is_external=is_external_dns)
    return ApiCall(endpoint, endpoint.build_path(), _model(Domain), json=_dump(request))


class _DeletedDomain(BaseModel):
    uid: str | None = None


def delete_domain(name: str) -> ApiCall[str]:
    endpoint = NowService.DELETE_DOMAIN
    path = endpoint.build_path(domain_name=require(name, "name"))
    return ApiCall(endpoint, path, _required_field(_DeletedDomain, "uid"))


def list_domain_records(domain_name: str) -> ApiCall[list[DomainRecord]]:
    endpoint = NowService.LIST_DOMAIN_RECORDS
    path = endpoint.build_path(domain_name=require(domain_name, "domain_name"))
    return ApiCall(endpoint, path, _collection(DomainRecordList, "records"))


def add_domain_record(domain_name: str, record: DomainRecord) -> ApiCall[DomainRecord]:
    endpoint = NowService.CREATE_DOMAIN_RECORD
    path = endpoint.build_path(domain_name=require(domain_name, "domain_name"))
    # Record ids are server-assigned
    data = record.model_copy(update={"id": None, "slug": None, "created": None, "updated": None})
    request = DomainRecordCreateRequest(data=data)
    return ApiCall(endpoint, path, _model(DomainRecord), json=_dump(request))


def delete_domain_record(domain_name: str, record_id: str) -> ApiCall[None]:
    endpoint = NowService.DELETE_DOMAIN_RECORD
    path = endpoint.build_path(
        domain_name=require(domain_name, "domain_name"),
        record_id=require(record_id, "record_id"),
    )
    return ApiCall(endpoint, path, _nothing)


# ==================== CERTIFICATES ====================


def list_certificates(common_name: str | None = None) -> ApiCall[list[Certificate]]:
    if common_name is None:
        endpoint = NowService.LIST_CERTIFICATES
        path = endpoint.build_path()
    else:
        endpoint = NowService.GET_CERTIFICATES
        path = endpoint.build_path(common_name=require(common_name, "common_name"))
    return ApiCall(endpoint, path, _collection(CertificateList, "certs"))


def _require_domains(domains: list[str]) -> list[str]:
    if not domains:
        raise ValueError("domains must not be empty")
    return [require(domain, "domain") for domain in domains]


def create_certificate(domains: list[str]) -> ApiCall[str]:
    endpoint = NowService.ISSUE_CERTIFICATE
    request = CertificateRequest(domains=_require_domains(domains))
    return ApiCall(
        endpoint,
        endpoint.build_path(),
        _required_field(CertificateResponse, "uid"),
        json=_dump(request),
    )


def renew_certificate(domains: list[str]) -> ApiCall[str]:
    endpoint = NowService.CREATE_OR_REPLACE_CERTIFICATE
    request = CertificateRequest(domains=_require_domains(domains), renew=True)
    return ApiCall(
        endpoint,
        endpoint.build_path(),
        _required_field(CertificateResponse, "uid"),
        json=_dump(request),
    )


def replace_certificate(
    domains: list[str], ca: str, cert: str, key: str
) -> ApiCall[datetime]:
    endpoint = NowService.CREATE_OR_REPLACE_CERTIFICATE
    request = CertificateRequest(
        domains=_require_domains(domains),
        ca=require(ca, "ca"),
        cert=require(cert, "cert"),
        key=require(key, "key"),
    )
    return ApiCall(
        endpoint,
        endpoint.build_path(),
        _required_field(CertificateResponse, "created_at"),
        json=_dump(request),
    )


def delete_certificate(common_name: str) -> ApiCall[None]:
    endpoint = NowService.DELETE_CERTIFICATE
    path = endpoint.build_path(common_name=require(common_name, "common_name"))
    return ApiCall(endpoint, path, _nothing)


# ==================== ALIASES ====================


def list_aliases() -> ApiCall[list[Alias]]:
    endpoint = NowService.LIST_ALIASES
    return ApiCall(endpoint, endpoint.build_path(), _collection(AliasList, "aliases"))


def delete_alias(alias_id: str) -> ApiCall[str]:
    endpoint = NowService.DELETE_ALIAS
    path = endpoint.build_path(alias_id=require(alias_id, "alias_id"))
    return ApiCall(endpoint, path, _required_field(DeleteAliasResponse, "status"))


def list_deployment_aliases(deployment_id: str) -> ApiCall[list[Alias]]:
    endpoint = NowService.LIST_DEPLOYMENT_ALIASES
    path = endpoint.build_path(deployment_id=require(deployment_id, "deployment_id"))
    return ApiCall(endpoint, path, _collection(AliasList, "aliases"))


def create_deployment_alias(deployment_id: str, alias: str) -> ApiCall[Alias]:
    endpoint = NowService.CREATE_DEPLOYMENT_ALIAS
    path = endpoint.build_path(deployment_id=require(deployment_id, "deployment_id"))
    request = AliasCreateRequest(alias=require(alias, "alias"))
    return ApiCall(endpoint, path, _model(Alias), json=_dump(request))


# ==================== SECRETS ====================


def list_secrets() -> ApiCall[list[Secret]]:
    endpoint = NowService.LIST_SECRETS
    return ApiCall(endpoint, endpoint.build_path(), _collection(SecretList, "secrets"))


def create_secret(name: str, value: str) -> ApiCall[Secret]:
    endpoint = NowService.CREATE_SECRET
    request = SecretRequest(name=require(name, "name"), value=value)
    return ApiCall(endpoint, endpoint.build_path(), _model(Secret), json=_dump(request))


def rename_secret(uid_or_name: str, new_name: str) -> ApiCall[Secret]:
    endpoint = NowService.EDIT_SECRET
    path = endpoint.build_path(secret_uid_or_name=require(uid_or_name, "uid_or_name"))
    request = SecretRequest(name=require(new_name, "new_name"))
    return ApiCall(endpoint, path, _model(Secret), json=_dump(request))


def delete_secret(uid_or_name: str) -> ApiCall[Secret]:
    endpoint = NowService.DELETE_SECRET
    path = endpoint.build_path(secret_uid_or_name=require(uid_or_name, "uid_or_name"))
    return ApiCall(endpoint, path, _model(Secret))


# ==================== TRANSPORT ====================


@contextmanager
def transport_errors(timeout: float) -> Iterator[None]:
    """Translate httpx transport exceptions into SDK transport errors."""
    try:
        yield
    except httpx.TimeoutException as e:
        raise TimeoutError(f"Request timed out after {timeout}s", timeout, e) from e
    except (httpx.ConnectError, httpx.NetworkError) as e:
        raise ConnectionError(f"Cannot connect to Now API: {e}", e) from e
    except httpx.HTTPError as e:
        raise TransportError(f"Request failed: {e}", e) from e


def raise_for_response(response: httpx.Response) -> None:
    """Raise an UnsuccessfulResponseError unless the response is 2xx.

    The body must already be read.
    """
    if response.is_success:
        return
    try:
        data = response.json() if response.content else None
    except ValueError:
        data = None
    raise_for_status(
        response.status_code,
        data,
        reason=response.reason_phrase,
        retry_after=response.headers.get("Retry-After"),
    )
