"""Declarative endpoint table for the Now REST API.

Every operation the clients expose maps to one :class:`Endpoint` here:
an HTTP verb plus a path template relative to the API base URL. Path
parameters are URL-encoded and substituted verbatim; ``.`` and ``..``
are refused since they would address a different resource.
"""

from __future__ import annotations

import string
from dataclasses import dataclass
from urllib.parse import quote


@dataclass(frozen=True)
class Endpoint:
    """One REST endpoint: verb + path template."""

    method: str
    path: str

    @property
    def path_params(self) -> tuple[str, ...]:
        """Names of the ``{placeholders}`` in the path template."""
        return tuple(
            field for _, field, _, _ in string.Formatter().parse(self.path) if field
        )

    def build_path(self, **params: str) -> str:
        """Substitute URL-encoded path parameters into the template.

        Raises:
            KeyError: If a placeholder has no matching parameter.
            ValueError: If a parameter is a ``.`` or ``..`` path segment.
        """
        missing = set(self.path_params) - params.keys()
        if missing:
            raise KeyError(f"Missing path parameters for {self.path}: {sorted(missing)}")
        encoded = {name: quote(str(value), safe="") for name, value in params.items()}
        for name, value in encoded.items():
            # Dot segments survive quoting and are collapsed when the URL is joined
            if value in (".", ".."):
                raise ValueError(f"{name} must not be a relative path segment: {value!r}")
        return self.path.format(**encoded)


class NowService:
    """The Now REST API, one attribute per endpoint."""

    # Deployments
    LIST_DEPLOYMENTS = Endpoint("GET", "now/deployments")
    GET_DEPLOYMENT = Endpoint("GET", "now/deployments/{deployment_id}")
    CREATE_DEPLOYMENT = Endpoint("POST", "now/deployments")
    DELETE_DEPLOYMENT = Endpoint("DELETE", "now/deployments/{deployment_id}")
    LIST_FILES = Endpoint("GET", "now/deployments/{deployment_id}/files")
    GET_FILE = Endpoint("GET", "now/deployments/{deployment_id}/files/{file_id}")

    # Domains
    LIST_DOMAINS = Endpoint("GET", "domains")
    CREATE_DOMAIN = Endpoint("POST", "domains")
    DELETE_DOMAIN = Endpoint("DELETE", "domains/{domain_name}")

    # DNS records
    LIST_DOMAIN_RECORDS = Endpoint("GET", "domains/{domain_name}/records")
    CREATE_DOMAIN_RECORD = Endpoint("POST", "domains/{domain_name}/records")
    DELETE_DOMAIN_RECORD = Endpoint("DELETE", "domains/{domain_name}/records/{record_id}")

    # Certificates
    LIST_CERTIFICATES = Endpoint("GET", "now/certs")
    GET_CERTIFICATES = Endpoint("GET", "now/certs/{common_name}")
    ISSUE_CERTIFICATE = Endpoint("POST", "now/certs")
    CREATE_OR_REPLACE_CERTIFICATE = Endpoint("PUT", "now/certs")
    DELETE_CERTIFICATE = Endpoint("DELETE", "now/certs/{common_name}")

    # Aliases
    LIST_ALIASES = Endpoint("GET", "now/aliases")
    DELETE_ALIAS = Endpoint("DELETE", "now/aliases/{alias_id}")
    LIST_DEPLOYMENT_ALIASES = Endpoint("GET", "deployments/{deployment_id}/aliases")
    CREATE_DEPLOYMENT_ALIAS = Endpoint("POST", "deployments/{deployment_id}/aliases")

    # Secrets
    LIST_SECRETS = Endpoint("GET", "now/secrets")
    CREATE_SECRET = Endpoint("POST", "now/secrets")
    EDIT_SECRET = Endpoint("PATCH", "now/secrets/{secret_uid_or_name}")
    DELETE_SECRET = Endpoint("DELETE", "now/secrets/{secret_uid_or_name}")

    @classmethod
    def endpoints(cls) -> dict[str, Endpoint]:
        """All endpoints keyed by attribute name."""
        return {
            name: value for name, value in vars(cls).items() if isinstance(value, Endpoint)
        }
