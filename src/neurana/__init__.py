"""Neurana - async Python client for the Neurana workflow automation API."""

__version__ = "1.0.0"

from neurana.client import NeuranaClient  # noqa: E402
from neurana.config import ClientConfig, RetryConfig, load_config  # noqa: E402
from neurana.core.exceptions import ErrorCode, ErrorKind, NeuranaError  # noqa: E402
from neurana.core.logging import LogLevel, setup_logging  # noqa: E402
from neurana.core.utils import (  # noqa: E402
    format_file_size,
    get_file_extension,
    get_language,
    get_mime_type,
    is_allowed_extension,
)
from neurana.models import StepInput, UploadedArtifact, code_step  # noqa: E402
from neurana.transport.executor import HttpClient, Operation  # noqa: E402

__all__ = [
    "__version__",
    "NeuranaClient",
    "ClientConfig",
    "RetryConfig",
    "load_config",
    "ErrorCode",
    "ErrorKind",
    "NeuranaError",
    "LogLevel",
    "setup_logging",
    "format_file_size",
    "get_file_extension",
    "get_language",
    "get_mime_type",
    "is_allowed_extension",
    "StepInput",
    "UploadedArtifact",
    "code_step",
    "HttpClient",
    "Operation",
]
