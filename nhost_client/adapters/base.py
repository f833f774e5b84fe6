"""
Common plumbing for Nhost service clients.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Union

import httpx

from shared.errors import ApiException
from shared.logging import get_logger

from ..session import SessionView, UserSession


def validate_endpoint(endpoint: str) -> str:
    """Return ``endpoint`` without a trailing slash, or raise ValueError."""
    if not isinstance(endpoint, str) or not endpoint.strip():
        raise ValueError("Service endpoint must be a non-empty string")
    try:
        url = httpx.URL(endpoint.strip())
    except httpx.InvalidURL as exc:
        raise ValueError(f"Invalid service endpoint: {endpoint!r}") from exc
    if url.scheme not in ("http", "https") or not url.host:
        raise ValueError(f"Service endpoint must be an absolute http(s) URL: {endpoint!r}")
    return endpoint.strip().rstrip("/")


class BaseServiceClient:
    """Shared request handling for the auth, storage and functions clients.

    The transport belongs to whoever created it; service clients use it but
    never close it.
    """

    service_name = "service"

    def __init__(
        self,
        endpoint: str,
        session: Union[UserSession, SessionView],
        transport: httpx.AsyncClient,
    ) -> None:
        self.endpoint = validate_endpoint(endpoint)
        self.session = session
        self._transport = transport
        self.logger = get_logger(f"nhost.{self.service_name}")

    @property
    def transport(self) -> httpx.AsyncClient:
        return self._transport

    def url_for(self, path: str) -> str:
        return f"{self.endpoint}/{path.lstrip('/')}"

    async def _request(
        self,
        method: str,
        path: str,
        *,
        authenticated: bool = True,
        headers: Optional[Dict[str, str]] = None,
        **kwargs: Any,
    ) -> httpx.Response:
        """Send a request and raise ApiException on a non-2xx response."""
        url = self.url_for(path)
        request_headers: Dict[str, str] = {}
        if authenticated:
            request_headers.update(self.session.auth_headers())
        if headers:
            request_headers.update(headers)

        response = await self._transport.request(method, url, headers=request_headers, **kwargs)
        if response.is_success:
            self.logger.debug("Nhost request succeeded", method=method, url=url, status_code=response.status_code)
            return response

        try:
            body = response.json()
        except ValueError:
            body = response.text
        self.logger.error(
            "Nhost request failed",
            method=method,
            url=url,
            status_code=response.status_code
        )
        raise ApiException(url, response.status_code, body)
