"""Python SDK for the Now cloud deployment platform.

This SDK wraps the Now REST API: deployments and their files, domains and
DNS records, certificates, aliases and secrets.

Basic Usage:
    ```python
    from now_sdk import NowSync

    # Token from ~/.now.json, or NOW_TOKEN / NOW_TEAM
    with NowSync() as client:
        for deployment in client.list_deployments():
            print(deployment.uid, deployment.url)

    # Async usage
    from now_sdk import Now

    async with Now(token="...", team="my-team") as client:
        domains = await client.list_domains()
    ```

Callbacks:
    ```python
    from now_sdk import FunctionCallback, NowSync

    with NowSync() as client:
        client.list_secrets(
            callback=FunctionCallback(
                on_success=lambda secrets: print([s.name for s in secrets]),
                on_failure=lambda error: print(f"failed: {error}"),
            )
        )
    ```
"""

from ._sync import NowSync
from .auth import (
    Credentials,
    load_credentials_from_env,
    load_credentials_from_file,
    resolve_credentials,
)
from .callbacks import ClientCallback, FunctionCallback
from .client import Now
from .config import SDK_VERSION
from .exceptions import (
    AuthenticationError,
    ClientClosedError,
    ConfigurationError,
    ConflictError,
    ConnectionError,
    ForbiddenError,
    MalformedResponseError,
    NotFoundError,
    NowError,
    RateLimitError,
    TimeoutError,
    TransportError,
    UnsuccessfulResponseError,
    ValidationError,
)
from .interceptors import AuthenticationInterceptor, HeadersInterceptor, TeamInterceptor
from .models import (
    Alias,
    AliasDeployment,
    Certificate,
    Deployment,
    DeploymentFileStructure,
    Domain,
    DomainRecord,
    Secret,
)
from .service import Endpoint, NowService
from .streams import FileStream

__version__ = SDK_VERSION

__all__ = [
    # Version
    "__version__",
    # Main clients
    "Now",
    "NowSync",
    # Callbacks
    "ClientCallback",
    "FunctionCallback",
    "FileStream",
    # Models
    "Alias",
    "AliasDeployment",
    "Certificate",
    "Deployment",
    "DeploymentFileStructure",
    "Domain",
    "DomainRecord",
    "Secret",
    # Auth
    "Credentials",
    "resolve_credentials",
    "load_credentials_from_file",
    "load_credentials_from_env",
    # Transport
    "HeadersInterceptor",
    "AuthenticationInterceptor",
    "TeamInterceptor",
    "Endpoint",
    "NowService",
    # Exceptions
    "NowError",
    "ConfigurationError",
    "ClientClosedError",
    "TransportError",
    "ConnectionError",
    "TimeoutError",
    "MalformedResponseError",
    "UnsuccessfulResponseError",
    "AuthenticationError",
    "ForbiddenError",
    "NotFoundError",
    "ConflictError",
    "ValidationError",
    "RateLimitError",
]
