"""Error taxonomy for the Neurana SDK."""

from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    """Error kind enumeration."""

    AUTHENTICATION = "authentication"
    AUTHORIZATION = "authorization"
    NOT_FOUND = "not_found"
    VALIDATION = "validation"
    RATE_LIMIT = "rate_limit"
    NETWORK = "network"
    TIMEOUT = "timeout"
    CONFIGURATION = "configuration"
    UNKNOWN = "unknown"


class ErrorCode:
    """Stable machine-readable error codes."""

    AUTHENTICATION_FAILED = "AUTH_FAILED"
    AUTHORIZATION_FAILED = "FORBIDDEN"
    NOT_FOUND = "NOT_FOUND"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT"
    NETWORK_ERROR = "NETWORK_ERROR"
    TIMEOUT = "TIMEOUT"
    INVALID_CONFIG = "INVALID_CONFIG"
    PARSE_ERROR = "PARSE_ERROR"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"


ERROR_MESSAGES: dict[str, str] = {
    ErrorCode.AUTHENTICATION_FAILED: "Authentication failed. Check your API key.",
    ErrorCode.AUTHORIZATION_FAILED: "You do not have permission to perform this action.",
    ErrorCode.NOT_FOUND: "The requested resource was not found.",
    ErrorCode.VALIDATION_ERROR: "The request failed validation.",
    ErrorCode.RATE_LIMIT_EXCEEDED: "Rate limit exceeded. Please retry later.",
    ErrorCode.NETWORK_ERROR: "Failed to connect to server",
    ErrorCode.TIMEOUT: "Request timed out",
    ErrorCode.INVALID_CONFIG: "Invalid client configuration",
    ErrorCode.PARSE_ERROR: "Failed to parse response",
    ErrorCode.UNKNOWN_ERROR: "An unexpected error occurred",
}

# kind -> (code, default status)
_KIND_DEFAULTS: dict[ErrorKind, tuple[str, int | None]] = {
    ErrorKind.AUTHENTICATION: (ErrorCode.AUTHENTICATION_FAILED, 401),
    ErrorKind.AUTHORIZATION: (ErrorCode.AUTHORIZATION_FAILED, 403),
    ErrorKind.NOT_FOUND: (ErrorCode.NOT_FOUND, 404),
    ErrorKind.VALIDATION: (ErrorCode.VALIDATION_ERROR, 422),
    ErrorKind.RATE_LIMIT: (ErrorCode.RATE_LIMIT_EXCEEDED, 429),
    ErrorKind.NETWORK: (ErrorCode.NETWORK_ERROR, None),
    ErrorKind.TIMEOUT: (ErrorCode.TIMEOUT, 408),
    ErrorKind.CONFIGURATION: (ErrorCode.INVALID_CONFIG, None),
    ErrorKind.UNKNOWN: (ErrorCode.UNKNOWN_ERROR, None),
}

_CODE_KINDS: dict[str, ErrorKind] = {code: kind for kind, (code, _) in _KIND_DEFAULTS.items()}
_CODE_KINDS[ErrorCode.PARSE_ERROR] = ErrorKind.UNKNOWN

DEFAULT_RETRY_AFTER = 60


class NeuranaError(Exception):
    """Single error type raised by every SDK operation.

    The ``kind`` tag drives programmatic branching; ``code`` is the stable
    machine-readable identifier shown to users. ``retry_after`` is only set
    for rate-limit errors.
    """

    def __init__(
        self,
        message: str,
        kind: ErrorKind = ErrorKind.UNKNOWN,
        code: str | None = None,
        status_code: int | None = None,
        details: Any = None,
        retry_after: int | None = None,
    ):
        super().__init__(message)
        default_code, default_status = _KIND_DEFAULTS[kind]
        self.message = message
        self.kind = kind
        self.code = code or default_code
        self.status_code = status_code if status_code is not None else default_status
        self.details = details
        self.retry_after = retry_after

        if kind is ErrorKind.RATE_LIMIT:
            if self.retry_after is None or self.retry_after < 0:
                self.retry_after = DEFAULT_RETRY_AFTER
            if self.details is None:
                self.details = {"retryAfter": self.retry_after}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} - {self.details}"
        return self.message

    def __repr__(self) -> str:
        return (
            f"NeuranaError(kind={self.kind.value!r}, code={self.code!r}, "
            f"status_code={self.status_code!r}, message={self.message!r})"
        )

    @property
    def is_retryable(self) -> bool:
        """Whether the failure is of a kind the retry policy may reattempt."""
        return self.kind in (ErrorKind.RATE_LIMIT, ErrorKind.NETWORK)

    def to_dict(self) -> dict[str, Any]:
        """Serialize the error for logging or transport."""
        data: dict[str, Any] = {
            "kind": self.kind.value,
            "code": self.code,
            "message": self.message,
            "statusCode": self.status_code,
            "details": self.details,
        }
        if self.retry_after is not None:
            data["retryAfter"] = self.retry_after
        return data

    @classmethod
    def from_code(
        cls,
        code: str,
        status_code: int | None = None,
        details: Any = None,
    ) -> "NeuranaError":
        """Build an error from a known code using its stock message."""
        message = ERROR_MESSAGES.get(code, "An unknown error occurred")
        kind = _CODE_KINDS.get(code, ErrorKind.UNKNOWN)
        return cls(message, kind=kind, code=code, status_code=status_code, details=details)

    @classmethod
    def authentication(cls, message: str | None = None) -> "NeuranaError":
        return cls(
            message or ERROR_MESSAGES[ErrorCode.AUTHENTICATION_FAILED],
            kind=ErrorKind.AUTHENTICATION,
        )

    @classmethod
    def authorization(cls, message: str | None = None) -> "NeuranaError":
        return cls(
            message or ERROR_MESSAGES[ErrorCode.AUTHORIZATION_FAILED],
            kind=ErrorKind.AUTHORIZATION,
        )

    @classmethod
    def not_found(cls, message: str | None = None) -> "NeuranaError":
        return cls(message or ERROR_MESSAGES[ErrorCode.NOT_FOUND], kind=ErrorKind.NOT_FOUND)

    @classmethod
    def validation(
        cls,
        message: str | None = None,
        details: Any = None,
        status_code: int | None = None,
    ) -> "NeuranaError":
        return cls(
            message or ERROR_MESSAGES[ErrorCode.VALIDATION_ERROR],
            kind=ErrorKind.VALIDATION,
            status_code=status_code,
            details=details,
        )

    @classmethod
    def rate_limit(cls, retry_after: int | None = None, message: str | None = None) -> "NeuranaError":
        return cls(
            message or ERROR_MESSAGES[ErrorCode.RATE_LIMIT_EXCEEDED],
            kind=ErrorKind.RATE_LIMIT,
            retry_after=retry_after,
        )

    @classmethod
    def network(cls, message: str | None = None) -> "NeuranaError":
        return cls(message or ERROR_MESSAGES[ErrorCode.NETWORK_ERROR], kind=ErrorKind.NETWORK)

    @classmethod
    def timeout(cls, message: str | None = None, timeout_seconds: float | None = None) -> "NeuranaError":
        details = {"timeoutSeconds": timeout_seconds} if timeout_seconds is not None else None
        return cls(
            message or ERROR_MESSAGES[ErrorCode.TIMEOUT],
            kind=ErrorKind.TIMEOUT,
            details=details,
        )

    @classmethod
    def configuration(cls, message: str | None = None) -> "NeuranaError":
        return cls(
            message or ERROR_MESSAGES[ErrorCode.INVALID_CONFIG],
            kind=ErrorKind.CONFIGURATION,
        )

    @classmethod
    def unknown(
        cls,
        message: str | None = None,
        code: str | None = None,
        status_code: int | None = None,
        details: Any = None,
    ) -> "NeuranaError":
        return cls(
            message or ERROR_MESSAGES[ErrorCode.UNKNOWN_ERROR],
            kind=ErrorKind.UNKNOWN,
            code=code,
            status_code=status_code,
            details=details,
        )
