"""Core utilities and shared components for the Neurana SDK."""

from neurana.core.exceptions import ErrorCode, ErrorKind, NeuranaError
from neurana.core.logging import StructuredLogger, get_logger

__all__ = [
    "ErrorCode",
    "ErrorKind",
    "NeuranaError",
    "StructuredLogger",
    "get_logger",
]
