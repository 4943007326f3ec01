"""Maps HTTP responses and transport failures to values or typed errors."""

import asyncio
from typing import Any

import httpx

from neurana.core.constants import ContentType, HttpHeader, HttpStatus
from neurana.core.exceptions import (
    DEFAULT_RETRY_AFTER,
    ERROR_MESSAGES,
    ErrorCode,
    NeuranaError,
)
from neurana.core.logging import StructuredLogger


def parse_retry_after(value: str | None) -> int:
    """Parse a ``Retry-After`` header given in whole seconds."""
    if value is None:
        return DEFAULT_RETRY_AFTER
    try:
        seconds = int(value.strip())
    except ValueError:
        return DEFAULT_RETRY_AFTER
    return seconds if seconds >= 0 else DEFAULT_RETRY_AFTER


# Transport failures treated as transient network conditions.
NETWORK_ERRORS: tuple[type[Exception], ...] = (
    httpx.NetworkError,
    httpx.RemoteProtocolError,
    httpx.ProxyError,
)


def is_json_response(response: httpx.Response) -> bool:
    return ContentType.JSON in response.headers.get("content-type", "")


class ResponseInterpreter:
    """Classifies a completed response or transport exception."""

    def __init__(self, logger: StructuredLogger | None = None):
        self._logger = logger or StructuredLogger("http")

    def interpret(self, response: httpx.Response) -> Any:
        """Return the decoded success value or raise the matching error.

        A no-content response yields ``None`` whatever bytes it carries.
        """
        if response.status_code == HttpStatus.NO_CONTENT:
            return None

        is_json = is_json_response(response)

        if not response.is_success:
            error_data = None
            if is_json:
                try:
                    error_data = response.json()
                except ValueError:
                    self._logger.debug(
                        "Failed to parse error response JSON",
                        status=response.status_code,
                    )
            raise self.create_http_error(response, error_data)

        if not is_json:
            return response.text

        try:
            return response.json()
        except ValueError:
            raise NeuranaError.unknown(
                ERROR_MESSAGES[ErrorCode.PARSE_ERROR],
                code=ErrorCode.PARSE_ERROR,
                status_code=response.status_code,
            ) from None

    def create_http_error(self, response: httpx.Response, error_data: Any) -> NeuranaError:
        """Build the error for a non-2xx response."""
        status = response.status_code
        error = error_data.get("error") if isinstance(error_data, dict) else None
        if not isinstance(error, dict):
            error = {}

        code = error.get("code") or ErrorCode.UNKNOWN_ERROR
        message = error.get("message") or ERROR_MESSAGES[ErrorCode.UNKNOWN_ERROR]
        details = error.get("details")

        if status == HttpStatus.UNAUTHORIZED:
            return NeuranaError.authentication(message)
        if status == HttpStatus.FORBIDDEN:
            return NeuranaError.authorization(message)
        if status == HttpStatus.NOT_FOUND:
            return NeuranaError.not_found(message)
        if status in (HttpStatus.BAD_REQUEST, HttpStatus.UNPROCESSABLE):
            return NeuranaError.validation(message, details=details, status_code=status)
        if status == HttpStatus.RATE_LIMITED:
            retry_after = parse_retry_after(response.headers.get(HttpHeader.RETRY_AFTER))
            return NeuranaError.rate_limit(retry_after, message)
        return NeuranaError.unknown(message, code=code, status_code=status, details=details)

    def classify_exception(self, error: BaseException) -> NeuranaError:
        """Map any exception raised while obtaining a response to a typed error."""
        if isinstance(error, NeuranaError):
            return error
        if isinstance(error, (httpx.TimeoutException, asyncio.TimeoutError)):
            return NeuranaError.timeout()
        if isinstance(error, NETWORK_ERRORS):
            self._logger.debug("Network error occurred", error=str(error))
            return NeuranaError.network()
        return NeuranaError.unknown()
