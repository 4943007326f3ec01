"""Uploaded code artifact operations."""

from typing import Any

from neurana.core.constants import Endpoints, SizeLimits, Timeouts
from neurana.core.exceptions import NeuranaError
from neurana.core.logging import StructuredLogger
from neurana.core.utils import (
    get_content_size,
    get_language,
    is_allowed_extension,
    validate_file_key,
    validate_file_name,
    validate_file_size,
)
from neurana.models import UploadedArtifact
from neurana.transport.executor import HttpClient


class CodeResource:
    """Client for stored code files and their history."""

    def __init__(self, http: HttpClient, logger: StructuredLogger | None = None):
        self._http = http
        self._logger = logger or StructuredLogger("code")

    async def list(
        self,
        limit: int | None = None,
        offset: int | None = None,
        language: str | None = None,
    ) -> dict[str, Any]:
        response = await self._http.get(
            Endpoints.Code.LIST,
            {"limit": limit, "offset": offset, "language": language},
        ) or {}
        return {
            "data": response.get("files") or [],
            "pagination": {
                "total": response.get("count") or 0,
                "hasMore": bool(response.get("hasMore")),
                "nextToken": response.get("continuationToken"),
            },
        }

    async def upload(
        self,
        file_name: str,
        content: str,
        language: str | None = None,
    ) -> dict[str, Any]:
        """Upload a source file.

        Args:
            file_name: Target file name; its extension must be allowed
            content: Source text
            language: Language tag, inferred from the extension when omitted

        Returns:
            Upload response containing at least ``key``
        """
        file_name = validate_file_name(file_name)

        if not is_allowed_extension(file_name):
            raise NeuranaError.validation("File extension not allowed for code uploads")
        if not content:
            raise NeuranaError.validation("content is required")

        size = get_content_size(content)
        validate_file_size(size, SizeLimits.MAX_CODE_SIZE)

        language = language or get_language(file_name)

        self._logger.debug("Uploading code file", file_name=file_name, language=language, size=size)

        return await self._http.post(
            Endpoints.Code.UPLOAD,
            {"fileName": file_name, "content": content, "language": language},
            timeout=Timeouts.UPLOAD,
        )

    async def upload_artifact(self, file_name: str, content: str, language: str) -> UploadedArtifact:
        """Upload adapter used by workflow step processing."""
        result = await self.upload(file_name, content, language)
        if not isinstance(result, dict) or not result.get("key"):
            raise NeuranaError.unknown("Upload response did not include an artifact key")
        return UploadedArtifact(key=result["key"])

    async def get(self, key: str) -> dict[str, Any]:
        valid_key = validate_file_key(key)
        return await self._http.get(Endpoints.Code.get(valid_key))

    async def delete(self, key: str) -> None:
        valid_key = validate_file_key(key)
        self._logger.debug("Deleting code file", file=valid_key)
        await self._http.delete(Endpoints.Code.delete(valid_key))

    async def list_history(self, limit: int | None = None, offset: int | None = None) -> dict[str, Any]:
        return await self._http.get(Endpoints.Code.HISTORY, {"limit": limit, "offset": offset})

    async def get_history_by_key(
        self,
        key: str,
        limit: int | None = None,
        offset: int | None = None,
    ) -> dict[str, Any]:
        valid_key = validate_file_key(key)
        return await self._http.get(
            Endpoints.Code.history_by_key(valid_key),
            {"limit": limit, "offset": offset},
        )
