"""File and input validation utilities."""

import base64
import re
from typing import Any

from neurana.core.constants import Validation
from neurana.core.exceptions import NeuranaError

MIME_TYPES = {
    ".ts": "text/typescript",
    ".tsx": "text/typescript",
    ".js": "application/javascript",
    ".jsx": "application/javascript",
    ".json": "application/json",
    ".yaml": "text/yaml",
    ".yml": "text/yaml",
    ".py": "text/x-python",
    ".md": "text/markdown",
    ".html": "text/html",
    ".css": "text/css",
    ".txt": "text/plain",
    ".xml": "application/xml",
    ".csv": "text/csv",
    ".sql": "application/sql",
    ".graphql": "application/graphql",
    ".prisma": "text/plain",
}

LANGUAGE_MAP = {
    ".ts": "typescript",
    ".tsx": "typescript",
    ".js": "javascript",
    ".jsx": "javascript",
    ".mjs": "javascript",
    ".cjs": "javascript",
    ".json": "json",
    ".yaml": "yaml",
    ".yml": "yaml",
    ".py": "python",
    ".md": "markdown",
    ".html": "html",
    ".css": "css",
    ".sql": "sql",
    ".graphql": "graphql",
}

DANGEROUS_EXTENSIONS = frozenset({
    ".exe", ".bat", ".cmd", ".sh", ".ps1",
    ".dll", ".so", ".dylib", ".bin",
    ".msi", ".com", ".vbs", ".scr",
})

SAFE_FILENAME_PATTERN = re.compile(r"^[a-zA-Z0-9][a-zA-Z0-9._-]*$")
SAFE_KEY_PATTERN = re.compile(r"^[a-zA-Z0-9][a-zA-Z0-9._/-]*$")

MAX_KEY_LENGTH = 256
MAX_FILENAME_LENGTH = 255


def get_file_extension(file_name: str) -> str:
    """Return the lowercased extension including the dot, or ``""``."""
    last_dot = file_name.rfind(".")
    if last_dot == -1 or last_dot == len(file_name) - 1:
        return ""
    return file_name[last_dot:].lower()


def get_mime_type(file_name: str) -> str:
    return MIME_TYPES.get(get_file_extension(file_name), "application/octet-stream")


def get_language(file_name: str) -> str:
    return LANGUAGE_MAP.get(get_file_extension(file_name), "plaintext")


def is_allowed_extension(file_name: str) -> bool:
    return get_file_extension(file_name) in Validation.ALLOWED_FILE_EXTENSIONS


def is_dangerous_extension(file_name: str) -> bool:
    return get_file_extension(file_name) in DANGEROUS_EXTENSIONS


def validate_file_name(file_name: Any) -> str:
    """Validate an upload file name.

    Args:
        file_name: Candidate file name

    Returns:
        The trimmed file name

    Raises:
        NeuranaError: VALIDATION kind when the name is unsafe
    """
    if not file_name or not isinstance(file_name, str):
        raise NeuranaError.validation("fileName is required")

    trimmed = file_name.strip()

    if not trimmed:
        raise NeuranaError.validation("fileName cannot be empty")
    if len(trimmed) > MAX_FILENAME_LENGTH:
        raise NeuranaError.validation(f"fileName exceeds max length of {MAX_FILENAME_LENGTH}")
    if ".." in trimmed or "/" in trimmed or "\\" in trimmed:
        raise NeuranaError.validation("fileName contains path separators")
    if not SAFE_FILENAME_PATTERN.match(trimmed):
        raise NeuranaError.validation("fileName contains invalid characters")
    if is_dangerous_extension(trimmed):
        raise NeuranaError.validation("File type not allowed for security reasons")

    return trimmed


def validate_file_key(key: Any) -> str:
    """Validate a stored artifact key and return it trimmed."""
    if not key or not isinstance(key, str):
        raise NeuranaError.validation("key is required")

    trimmed = key.strip()

    if not trimmed:
        raise NeuranaError.validation("key cannot be empty")
    if len(trimmed) > MAX_KEY_LENGTH:
        raise NeuranaError.validation(f"key exceeds max length of {MAX_KEY_LENGTH}")
    if ".." in trimmed:
        raise NeuranaError.validation("key contains path traversal")
    if not SAFE_KEY_PATTERN.match(trimmed):
        raise NeuranaError.validation("key contains invalid characters")

    return trimmed


def validate_file_size(size: int, max_size: int) -> None:
    if size <= 0:
        raise NeuranaError.validation("File content cannot be empty")
    if size > max_size:
        max_mb = max_size / (1024 * 1024)
        raise NeuranaError.validation(f"File size exceeds maximum of {max_mb:.1f}MB")


def get_content_size(content: str | bytes) -> int:
    """Size of the content in bytes (UTF-8 for text)."""
    if isinstance(content, str):
        return len(content.encode("utf-8"))
    return len(content)


def encode_to_base64(content: str | bytes) -> str:
    if isinstance(content, str):
        content = content.encode("utf-8")
    return base64.b64encode(content).decode("ascii")


def format_file_size(size: int) -> str:
    """Format a byte count for display.

    Args:
        size: Size in bytes

    Returns:
        Human readable size such as ``1.5 KB``
    """
    if size < 1024:
        return f"{size} B"
    if size < 1024 * 1024:
        return f"{size / 1024:.1f} KB"
    return f"{size / (1024 * 1024):.1f} MB"


def validate_id(value: Any, field: str = "id", pattern: re.Pattern[str] = Validation.ID_PATTERN) -> str:
    """Validate a resource identifier used in a URL path."""
    if not value or not isinstance(value, str):
        raise NeuranaError.validation(f"{field} is required")
    if len(value) > Validation.MAX_ID_LENGTH or not pattern.match(value):
        raise NeuranaError.validation(f"Invalid {field} format")
    return value


def drop_none(params: dict[str, Any] | None) -> dict[str, Any]:
    """Remove entries whose value is ``None``."""
    if not params:
        return {}
    return {k: v for k, v in params.items() if v is not None}
