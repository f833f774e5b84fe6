"""
Python client for Nhost projects.

``NhostClient`` exposes the authentication, storage and functions services of
a project behind one object that shares a session and an HTTP transport
across all of them.
"""

from shared.errors import ApiException, ConfigurationError, NhostException, ServiceConstructionError
from shared.logging import debug_log_errors_to_console

from .adapters import (
    APPLICATION_OCTET_STREAM,
    AuthClient,
    AuthenticationState,
    FileMetadata,
    FunctionsClient,
    PresignedUrl,
    StorageClient,
)
from .adapters.auth_client import AuthStateChangedCallback, UnsubscribeDelegate
from .addressing import (
    AddressingStrategy,
    ByServiceUrls,
    BySubdomain,
    ServiceUrls,
    Subdomain,
    from_service_urls,
    from_subdomain,
)
from .auth_store import AuthStore, InMemoryAuthStore
from .client import NhostClient
from .endpoints import create_service_endpoint, resolve_endpoint
from .session import Session, SessionView, UserSession

__all__ = [
    "NhostClient",
    "AddressingStrategy",
    "BySubdomain",
    "ByServiceUrls",
    "Subdomain",
    "ServiceUrls",
    "from_subdomain",
    "from_service_urls",
    "create_service_endpoint",
    "resolve_endpoint",
    "AuthClient",
    "AuthenticationState",
    "AuthStateChangedCallback",
    "UnsubscribeDelegate",
    "StorageClient",
    "FileMetadata",
    "PresignedUrl",
    "APPLICATION_OCTET_STREAM",
    "FunctionsClient",
    "Session",
    "SessionView",
    "UserSession",
    "AuthStore",
    "InMemoryAuthStore",
    "NhostException",
    "ConfigurationError",
    "ServiceConstructionError",
    "ApiException",
    "debug_log_errors_to_console",
]
