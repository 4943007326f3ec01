"""API key management operations."""

from collections.abc import Sequence
from typing import Any

from neurana.core.constants import Endpoints, Validation
from neurana.core.exceptions import NeuranaError
from neurana.core.utils import validate_id
from neurana.transport.executor import HttpClient


def validate_key_id(key_id: Any) -> str:
    if isinstance(key_id, str) and len(key_id) > Validation.MAX_ID_LENGTH:
        raise NeuranaError.validation("id exceeds maximum length")
    return validate_id(key_id, "id", Validation.API_KEY_ID_PATTERN)


class ApiKeysResource:
    """Client for API key lifecycle operations."""

    def __init__(self, http: HttpClient):
        self._http = http

    async def list(self, limit: int | None = None, offset: int | None = None) -> dict[str, Any]:
        return await self._http.get(Endpoints.ApiKeys.LIST, {"limit": limit, "offset": offset})

    async def create(
        self,
        name: str,
        permissions: Sequence[str],
        expires_at: str | None = None,
        **fields: Any,
    ) -> dict[str, Any]:
        """Create an API key; the response holds the plaintext key once."""
        if not isinstance(name, str) or not name.strip():
            raise NeuranaError.validation("name is required")
        if not permissions:
            raise NeuranaError.validation("permissions array is required")

        payload: dict[str, Any] = {"name": name, "permissions": [*permissions], **fields}
        if expires_at is not None:
            payload["expiresAt"] = expires_at
        return await self._http.post(Endpoints.ApiKeys.CREATE, payload)

    async def get(self, key_id: str) -> dict[str, Any]:
        validate_key_id(key_id)
        return await self._http.get(Endpoints.ApiKeys.get(key_id))

    async def update(self, key_id: str, **data: Any) -> dict[str, Any]:
        validate_key_id(key_id)
        data = {k: v for k, v in data.items() if v is not None}
        if not data:
            raise NeuranaError.validation("At least one field must be provided for update")
        return await self._http.patch(Endpoints.ApiKeys.update(key_id), data)

    async def delete(self, key_id: str) -> None:
        validate_key_id(key_id)
        await self._http.delete(Endpoints.ApiKeys.delete(key_id))

    async def rotate(self, key_id: str, **options: Any) -> dict[str, Any]:
        validate_key_id(key_id)
        return await self._http.post(Endpoints.ApiKeys.rotate(key_id), options)

    async def revoke(self, key_id: str) -> None:
        validate_key_id(key_id)
        await self._http.post(Endpoints.ApiKeys.revoke(key_id))

    async def get_usage(self, key_id: str) -> dict[str, Any]:
        validate_key_id(key_id)
        return await self._http.get(Endpoints.ApiKeys.usage(key_id))

    async def validate(self, api_key: str) -> dict[str, Any]:
        """Ask the service whether ``api_key`` is valid."""
        if not api_key or not isinstance(api_key, str):
            raise NeuranaError.validation("API key is required")
        if not Validation.MIN_API_KEY_LENGTH <= len(api_key) <= Validation.MAX_API_KEY_LENGTH:
            raise NeuranaError.validation("Invalid API key length")
        return await self._http.post(Endpoints.ApiKeys.VALIDATE, {"key": api_key})
