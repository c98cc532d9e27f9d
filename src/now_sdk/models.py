"""Pydantic models for Now API resources."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class NowModel(BaseModel):
    """Base for every resource: unknown fields ignored, snake_case or wire names accepted."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


# ==================== DEPLOYMENTS ====================


class Deployment(NowModel):
    """Deployment resource returned from the API."""

    uid: str = Field(..., validation_alias=AliasChoices("uid", "id"), description="Deployment ID")
    name: str | None = Field(None, description="Project name")
    url: str | None = Field(None, description="Unique deployment hostname")
    created: datetime | None = Field(None, description="Creation timestamp")
    state: str | None = Field(None, description="DEPLOYING, READY, ERROR, ...")
    type: str | None = Field(None, description="NPM, DOCKER or STATIC")
    creator: dict[str, Any] | None = Field(None, description="Creator metadata")
    scale: dict[str, Any] | None = Field(None, description="Instance scaling settings")


class DeploymentFileStructure(NowModel):
    """One entry of a deployment's file tree."""

    uid: str | None = Field(None, description="File ID, used to fetch content")
    name: str = Field(..., description="File or directory name")
    type: str = Field(..., description="file, directory or symlink")
    mode: int | None = Field(None, description="Unix file mode")
    children: list[DeploymentFileStructure] = Field(
        default_factory=list, description="Entries of a directory"
    )


class DeploymentList(NowModel):
    """Envelope for the list deployments endpoint."""

    deployments: list[Deployment] | None = None


# ==================== DOMAINS ====================


class Domain(NowModel):
    """Domain resource returned from the API."""

    uid: str | None = Field(None, description="Domain ID")
    name: str = Field(..., description="Domain name")
    created: datetime | None = Field(None, description="Creation timestamp")
    bought_at: datetime | None = Field(None, alias="boughtAt")
    expires_at: datetime | None = Field(None, alias="expiresAt")
    is_external: bool | None = Field(
        None, alias="isExternal", description="Whether DNS is managed outside Now"
    )
    verified: bool | None = None
    aliases: list[str] = Field(default_factory=list)
    certs: list[str] = Field(default_factory=list)


class DomainList(NowModel):
    """Envelope for the list domains endpoint."""

    domains: list[Domain] | None = None


class DomainCreateRequest(NowModel):
    """Request to register a domain."""

    name: str
    is_external: bool = Field(False, alias="isExternal")


class DomainRecord(NowModel):
    """A single DNS record under a domain."""

    id: str | None = Field(None, description="Record ID (server-assigned)")
    slug: str | None = None
    type: str = Field(..., description="A, AAAA, ALIAS, CNAME, TXT, MX, SRV")
    name: str = Field(..., description="Subdomain, empty string for the apex")
    value: str = Field(..., description="Record value")
    mx_priority: int | None = Field(None, alias="mxPriority")
    created: datetime | None = None
    updated: datetime | None = None


class DomainRecordList(NowModel):
    """Envelope for the list domain records endpoint."""

    records: list[DomainRecord] | None = None


class DomainRecordCreateRequest(NowModel):
    """Request to add a DNS record; the record travels under ``data``."""

    data: DomainRecord


# ==================== CERTIFICATES ====================


class Certificate(NowModel):
    """TLS certificate resource returned from the API."""

    uid: str = Field(..., description="Certificate ID")
    cns: list[str] = Field(default_factory=list, description="Covered common names")
    created: datetime | None = None
    expiration: datetime | None = None
    auto_renew: bool | None = Field(None, alias="autoRenew")


class CertificateList(NowModel):
    """Envelope for the list certificates endpoint."""

    certs: list[Certificate] | None = None


class CertificateRequest(NowModel):
    """Request to issue, renew or replace a certificate.

    ``ca``, ``cert`` and ``key`` are PEM strings, only sent on replace.
    """

    domains: list[str]
    renew: bool | None = None
    ca: str | None = None
    cert: str | None = None
    key: str | None = None


class CertificateResponse(NowModel):
    """Response to certificate creation or replacement."""

    uid: str | None = None
    created_at: datetime | None = None


# ==================== ALIASES ====================


class AliasDeployment(NowModel):
    """The deployment an alias points at."""

    id: str | None = None
    url: str | None = None


class Alias(NowModel):
    """Alias resource returned from the API."""

    uid: str | None = Field(None, description="Alias ID")
    alias: str = Field(..., description="Alias hostname")
    created: datetime | None = None
    deployment_id: str | None = Field(None, alias="deploymentId")
    deployment: AliasDeployment | None = None


class AliasList(NowModel):
    """Envelope for the alias listing endpoints."""

    aliases: list[Alias] | None = None


class AliasCreateRequest(NowModel):
    """Request to point an alias at a deployment."""

    alias: str


class DeleteAliasResponse(NowModel):
    """Response to alias deletion."""

    status: str | None = None


# ==================== SECRETS ====================


class Secret(NowModel):
    """Secret resource. The value is write-only and never returned."""

    uid: str = Field(..., description="Secret ID")
    name: str = Field(..., description="Secret name")
    created: datetime | None = None


class SecretList(NowModel):
    """Envelope for the list secrets endpoint."""

    secrets: list[Secret] | None = None


class SecretRequest(NowModel):
    """Request to create or rename a secret."""

    name: str
    value: str | None = None
