"""
Storage service client.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

import httpx
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from ..session import SessionView
from .base import BaseServiceClient

APPLICATION_OCTET_STREAM = "application/octet-stream"


class FileMetadata(BaseModel):
    """Metadata of a stored file."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    name: Optional[str] = None
    size: Optional[int] = None
    mime_type: Optional[str] = None
    etag: Optional[str] = None
    bucket_id: Optional[str] = None
    is_uploaded: Optional[bool] = None
    created_at: Optional[str] = None


class PresignedUrl(BaseModel):
    """Time-limited download URL."""

    url: str
    expiration: int


class StorageClient(BaseServiceClient):
    """Client for the Nhost Storage API."""

    service_name = "storage"

    def __init__(self, endpoint: str, session: SessionView, transport: httpx.AsyncClient) -> None:
        super().__init__(endpoint, session, transport)
        self._closed = False

    @property
    def is_closed(self) -> bool:
        return self._closed

    async def upload_bytes(
        self,
        file_name: str,
        data: bytes,
        mime_type: str = APPLICATION_OCTET_STREAM,
        bucket_id: Optional[str] = None,
        file_id: Optional[str] = None,
    ) -> FileMetadata:
        """Upload ``data`` as a new file."""
        self._ensure_open()
        headers = {"x-nhost-file-name": file_name}
        if bucket_id:
            headers["x-nhost-bucket-id"] = bucket_id
        if file_id:
            headers["x-nhost-file-id"] = file_id

        response = await self._request(
            "POST",
            "/files",
            headers=headers,
            files={"file": (file_name, data, mime_type)},
        )
        payload: Dict[str, Any] = response.json()
        # Newer storage versions wrap results in processedFiles
        if "processedFiles" in payload:
            payload = payload["processedFiles"][0]
        return FileMetadata.model_validate(payload)

    async def download_file(self, file_id: str) -> bytes:
        """Return the contents of a file."""
        self._ensure_open()
        response = await self._request("GET", f"/files/{file_id}")
        return response.content

    async def get_presigned_url(self, file_id: str) -> PresignedUrl:
        self._ensure_open()
        response = await self._request("GET", f"/files/{file_id}/presignedurl")
        return PresignedUrl.model_validate(response.json())

    async def delete_file(self, file_id: str) -> None:
        self._ensure_open()
        await self._request("DELETE", f"/files/{file_id}")

    async def close(self) -> None:
        """Mark the client closed. The shared transport stays open."""
        if self._closed:
            return
        self._closed = True
        self.logger.debug("Storage client closed")

    def _ensure_open(self) -> None:
        if self._closed:
            raise RuntimeError("Storage client is closed")
