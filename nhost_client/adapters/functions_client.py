"""
Serverless functions client.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

import httpx

from ..session import SessionView
from .base import BaseServiceClient


class FunctionsClient(BaseServiceClient):
    """Client for calling Nhost serverless functions.

    Holds no resources of its own, so there is nothing to close.
    """

    service_name = "functions"

    def __init__(self, endpoint: str, session: SessionView, transport: httpx.AsyncClient) -> None:
        super().__init__(endpoint, session, transport)

    async def call_function(
        self,
        url: str,
        json_body: Any = None,
        query: Optional[Dict[str, Any]] = None,
        http_method: str = "POST",
    ) -> httpx.Response:
        """Invoke the function at ``url``, relative to the functions endpoint."""
        kwargs: Dict[str, Any] = {}
        if json_body is not None:
            kwargs["json"] = json_body
        if query:
            kwargs["params"] = query
        return await self._request(http_method.upper(), url, **kwargs)
