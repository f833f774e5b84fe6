"""
Service adapters for the Nhost client.

Contains the HTTP clients for the three backend services (Auth, Storage,
Functions). These adapters encapsulate:

- Service URL paths and request shapes
- Attaching the shared session's credentials to requests
- Mapping non-2xx responses to ApiException

Adapters borrow the client's transport and never close it.
"""

from .auth_client import AuthClient, AuthenticationState
from .base import BaseServiceClient
from .functions_client import FunctionsClient
from .storage_client import APPLICATION_OCTET_STREAM, FileMetadata, PresignedUrl, StorageClient

__all__ = [
    "AuthClient",
    "AuthenticationState",
    "BaseServiceClient",
    "FunctionsClient",
    "StorageClient",
    "FileMetadata",
    "PresignedUrl",
    "APPLICATION_OCTET_STREAM",
]
