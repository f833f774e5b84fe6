"""
Nhost client: one object giving access to the auth, storage and functions
services of a project.
"""

from __future__ import annotations

import threading
from datetime import timedelta
from typing import Any, Optional

import httpx

from shared.config import NhostSettings, get_config
from shared.errors import ClientClosedError, ConfigurationError
from shared.logging import get_logger

from . import endpoints
from .adapters import AuthClient, FunctionsClient, StorageClient
from .addressing import (
    AddressingStrategy,
    BySubdomain,
    ServiceUrls,
    Subdomain,
    from_options,
    from_service_urls,
    from_subdomain,
)
from .auth_store import AuthStore, InMemoryAuthStore
from .handle import ServiceHandle
from .session import SessionView, UserSession


class NhostClient:
    """API client for Nhost's authentication, storage and functions APIs.

    User authentication and management is provided by ``auth``, file storage
    by ``storage`` and serverless functions by ``functions``. Each service
    client is created on first access and reused afterwards; all of them share
    one session and one HTTP transport, so tokens refreshed by ``auth`` are
    used by the other services on their next request.

    Exactly one of ``addressing``, ``subdomain`` or ``service_urls`` must be
    given:

    - ``subdomain`` is the project's subdomain and region from the Nhost
      project page. For local development pass ``Subdomain("local")``.
    - ``service_urls`` are the four service URLs of a self-hosted project.
    - ``addressing`` is a strategy built with ``from_subdomain`` or
      ``from_service_urls``.

    ``auth_store`` persists the session between restarts; without one the
    session lives in memory only. ``token_refresh_interval`` overrides the
    server-provided token lifetime. ``http_client_override`` customizes the
    transport (proxies, debugging) and stays owned by the caller.

    Call ``await client.close()`` (or use ``async with``) to release the
    transport and the service clients.
    """

    def __init__(
        self,
        addressing: Optional[AddressingStrategy] = None,
        *,
        subdomain: Optional[Subdomain] = None,
        service_urls: Optional[ServiceUrls] = None,
        auth_store: Optional[AuthStore] = None,
        token_refresh_interval: Optional[timedelta] = None,
        http_client_override: Optional[httpx.AsyncClient] = None,
        http_timeout: float = 10.0,
        logger: Optional[Any] = None,
    ) -> None:
        self._addressing = from_options(addressing, subdomain, service_urls)
        self.logger = logger or get_logger("nhost.client")

        self._auth_store = auth_store or InMemoryAuthStore()
        self._session = UserSession(self._auth_store)
        self._refresh_interval = token_refresh_interval
        self._http_timeout = http_timeout

        self._http_client = http_client_override
        self._owns_http_client = http_client_override is None
        self._transport_lock = threading.Lock()
        self._transport_released = False

        self._auth: ServiceHandle[AuthClient] = ServiceHandle(
            endpoints.AUTH, self._create_auth, logger=self.logger
        )
        self._storage: ServiceHandle[StorageClient] = ServiceHandle(
            endpoints.STORAGE, self._create_storage, logger=self.logger
        )
        self._functions: ServiceHandle[FunctionsClient] = ServiceHandle(
            endpoints.FUNCTIONS, self._create_functions, logger=self.logger
        )

        self._close_lock = threading.Lock()
        self._closed = False

    @classmethod
    def from_settings(
        cls,
        settings: Optional[NhostSettings] = None,
        *,
        auth_store: Optional[AuthStore] = None,
        http_client_override: Optional[httpx.AsyncClient] = None,
        logger: Optional[Any] = None,
    ) -> "NhostClient":
        """Build a client from ``NHOST_*`` settings."""
        settings = settings or get_config()

        if settings.subdomain and settings.has_service_urls:
            raise ConfigurationError(
                "Configure either NHOST_SUBDOMAIN or the NHOST_*_URL settings, not both"
            )
        if settings.subdomain:
            addressing: AddressingStrategy = from_subdomain(settings.subdomain, settings.region)
        elif settings.has_service_urls:
            addressing = from_service_urls(
                settings.auth_url,
                settings.storage_url,
                settings.functions_url,
                settings.graphql_url,
            )
        else:
            raise ConfigurationError("Configure NHOST_SUBDOMAIN or the NHOST_*_URL settings")

        refresh_interval = None
        if settings.token_refresh_interval_seconds is not None:
            refresh_interval = timedelta(seconds=settings.token_refresh_interval_seconds)

        return cls(
            addressing,
            auth_store=auth_store,
            token_refresh_interval=refresh_interval,
            http_client_override=http_client_override,
            http_timeout=settings.http_timeout,
            logger=logger,
        )

    @property
    def addressing(self) -> AddressingStrategy:
        return self._addressing

    @property
    def subdomain(self) -> Optional[Subdomain]:
        """The project's subdomain and region, when addressed by subdomain."""
        if isinstance(self._addressing, BySubdomain):
            return self._addressing.subdomain
        return None

    @property
    def service_urls(self) -> Optional[ServiceUrls]:
        """The explicit service URLs, when addressed by URL."""
        if isinstance(self._addressing, BySubdomain):
            return None
        return self._addressing.service_urls

    @property
    def session(self) -> UserSession:
        return self._session

    @property
    def auth_store(self) -> AuthStore:
        return self._auth_store

    @property
    def is_closed(self) -> bool:
        return self._closed

    @property
    def transport(self) -> httpx.AsyncClient:
        """The HTTP client shared by all services, created on first use."""
        if self._http_client is not None and not self._transport_released:
            return self._http_client
        with self._transport_lock:
            if self._transport_released:
                raise ClientClosedError("Cannot access transport: client is closed")
            if self._http_client is None:
                self._http_client = httpx.AsyncClient(timeout=self._http_timeout)
                self.logger.debug("HTTP transport created", timeout=self._http_timeout)
            return self._http_client

    @property
    def graphql_endpoint_url(self) -> str:
        return endpoints.resolve_endpoint(self._addressing, endpoints.GRAPHQL)

    @property
    def auth(self) -> AuthClient:
        """The Nhost authentication service.

        https://docs.nhost.io/platform/authentication
        """
        self._ensure_open(endpoints.AUTH)
        return self._auth.get()

    @property
    def storage(self) -> StorageClient:
        """The Nhost file storage service.

        https://docs.nhost.io/platform/storage
        """
        self._ensure_open(endpoints.STORAGE)
        return self._storage.get()

    @property
    def functions(self) -> FunctionsClient:
        """The Nhost serverless functions service.

        https://docs.nhost.io/platform/serverless-functions
        """
        self._ensure_open(endpoints.FUNCTIONS)
        return self._functions.get()

    def _ensure_open(self, service: str) -> None:
        if self._closed:
            raise ClientClosedError(
                f"Cannot access {service}: client is closed",
                details={"service": service}
            )

    def _create_auth(self) -> AuthClient:
        endpoint = endpoints.resolve_endpoint(self._addressing, endpoints.AUTH)
        self.logger.debug("Creating service client", service=endpoints.AUTH, endpoint=endpoint)
        return AuthClient(
            endpoint,
            session=self._session,
            transport=self.transport,
            token_refresh_interval=self._refresh_interval,
        )

    def _create_storage(self) -> StorageClient:
        endpoint = endpoints.resolve_endpoint(self._addressing, endpoints.STORAGE)
        self.logger.debug("Creating service client", service=endpoints.STORAGE, endpoint=endpoint)
        return StorageClient(endpoint, session=SessionView(self._session), transport=self.transport)

    def _create_functions(self) -> FunctionsClient:
        endpoint = endpoints.resolve_endpoint(self._addressing, endpoints.FUNCTIONS)
        self.logger.debug("Creating service client", service=endpoints.FUNCTIONS, endpoint=endpoint)
        return FunctionsClient(endpoint, session=SessionView(self._session), transport=self.transport)

    async def close(self) -> None:
        """Release the resources used by this client.

        Only service clients that were actually created are closed, auth
        before storage, and the transport last. A transport passed in as
        ``http_client_override`` is left open. The session and the auth store
        are not touched, so a later client can resume the session. Calling
        ``close`` again does nothing, and services or the transport can no
        longer be obtained afterwards.
        """
        with self._close_lock:
            if self._closed:
                return
            self._closed = True

        # Sealing waits for constructions already under way on other threads.
        auth = self._auth.seal()
        storage = self._storage.seal()
        self._functions.seal()

        if auth is not None:
            await auth.close()
            self.logger.debug("Service client closed", service=endpoints.AUTH)

        if storage is not None:
            await storage.close()
            self.logger.debug("Service client closed", service=endpoints.STORAGE)

        with self._transport_lock:
            self._transport_released = True
            http_client = self._http_client
        if http_client is None:
            return
        if self._owns_http_client:
            await http_client.aclose()
            self.logger.debug("HTTP transport closed")
        else:
            self.logger.debug("HTTP transport left open, owned by caller")

    async def __aenter__(self) -> "NhostClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()
