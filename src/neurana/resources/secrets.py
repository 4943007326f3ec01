"""Secret management operations."""

from typing import Any

from neurana.core.constants import Endpoints, SizeLimits, Validation
from neurana.core.exceptions import NeuranaError
from neurana.core.logging import StructuredLogger
from neurana.transport.executor import HttpClient


def validate_secret_name(name: Any) -> str:
    """Validate a secret name and return it trimmed."""
    if not name or not isinstance(name, str):
        raise NeuranaError.validation("Secret name is required")
    trimmed = name.strip()
    if not trimmed or len(trimmed) > Validation.MAX_NAME_LENGTH:
        raise NeuranaError.validation("Invalid secret name length")
    if not Validation.SECRET_NAME_PATTERN.match(trimmed):
        raise NeuranaError.validation(
            "Secret name must be uppercase with underscores (e.g., API_KEY)"
        )
    return trimmed


def validate_secret_value(value: Any) -> None:
    if not value or not isinstance(value, str):
        raise NeuranaError.validation("Secret value is required")
    if len(value) > SizeLimits.MAX_SECRET_VALUE:
        raise NeuranaError.validation(
            f"Secret value exceeds maximum length of {SizeLimits.MAX_SECRET_VALUE}"
        )


class SecretsResource:
    """Client for tenant secrets."""

    def __init__(self, http: HttpClient, logger: StructuredLogger | None = None):
        self._http = http
        self._logger = logger or StructuredLogger("security")

    async def list(self, limit: int | None = None, offset: int | None = None) -> dict[str, Any]:
        response = await self._http.get(Endpoints.Secrets.LIST, {"limit": limit, "offset": offset}) or {}
        items = response.get("items") or []
        return {
            "data": items,
            "pagination": {"total": len(items), "hasMore": False},
        }

    async def create(self, name: str, value: str) -> dict[str, Any]:
        name = validate_secret_name(name)
        validate_secret_value(value)
        return await self._http.post(Endpoints.Secrets.CREATE, {"name": name, "value": value})

    async def get(self, name: str) -> dict[str, Any]:
        """Fetch a secret including its value."""
        name = validate_secret_name(name)
        self._logger.warning("Secret value retrieved", name=name)
        return await self._http.get(Endpoints.Secrets.get(name))

    async def update(self, name: str, value: str) -> dict[str, Any]:
        name = validate_secret_name(name)
        validate_secret_value(value)
        return await self._http.patch(Endpoints.Secrets.update(name), {"value": value})

    async def delete(self, name: str) -> None:
        name = validate_secret_name(name)
        await self._http.delete(Endpoints.Secrets.delete(name))
