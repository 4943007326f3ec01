"""Endpoint paths, HTTP constants and validation limits."""

import re
from urllib.parse import quote

from neurana import __version__

API_VERSION = "v1"

BASE_URL = "https://workflows.neurana.io"
MAIN_API_URL = "https://api.neurana.io"

USER_AGENT = f"neurana-sdk/{__version__}"


class HttpMethod:
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"

    ALL = frozenset({GET, POST, PUT, PATCH, DELETE})


class HttpHeader:
    AUTHORIZATION = "Authorization"
    CONTENT_TYPE = "Content-Type"
    ACCEPT = "Accept"
    USER_AGENT = "User-Agent"
    CACHE_CONTROL = "Cache-Control"
    CONTENT_TYPE_OPTIONS = "X-Content-Type-Options"
    REQUEST_ID = "X-Request-ID"
    RETRY_AFTER = "Retry-After"


class ContentType:
    JSON = "application/json"
    FORM_DATA = "multipart/form-data"
    TEXT = "text/plain"


class HttpStatus:
    OK = 200
    CREATED = 201
    NO_CONTENT = 204
    BAD_REQUEST = 400
    UNAUTHORIZED = 401
    FORBIDDEN = 403
    NOT_FOUND = 404
    REQUEST_TIMEOUT = 408
    CONFLICT = 409
    UNPROCESSABLE = 422
    RATE_LIMITED = 429
    SERVER_ERROR = 500
    BAD_GATEWAY = 502
    SERVICE_UNAVAILABLE = 503
    GATEWAY_TIMEOUT = 504


# seconds
class Timeouts:
    DEFAULT = 30.0
    UPLOAD = 120.0


class RetryDefaults:
    MAX_ATTEMPTS = 3
    INITIAL_DELAY = 1.0
    MAX_DELAY = 30.0
    BACKOFF_FACTOR = 2.0
    RETRYABLE_STATUS = frozenset({408, 429, 500, 502, 503, 504})


class Validation:
    MIN_API_KEY_LENGTH = 8
    MAX_API_KEY_LENGTH = 256
    API_KEY_PATTERN = re.compile(r"^nrn_[A-Za-z0-9_-]+$")
    MAX_NAME_LENGTH = 128
    MAX_ID_LENGTH = 64
    ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]+$")
    API_KEY_ID_PATTERN = re.compile(r"^key_[A-Za-z0-9_-]+$")
    SECRET_NAME_PATTERN = re.compile(r"^[A-Z][A-Z0-9_]*$")
    ALLOWED_FILE_EXTENSIONS = (
        ".ts", ".tsx", ".js", ".jsx", ".mjs", ".cjs", ".py",
        ".json", ".yaml", ".yml", ".md", ".txt", ".sql",
    )


class SizeLimits:
    MAX_CODE_SIZE = 1024 * 1024
    MAX_SECRET_VALUE = 64 * 1024


SUPPORTED_RUNTIMES = ("python", "node")

# runtime -> (file extension, upload language)
RUNTIME_FILE_TYPES = {
    "python": ("py", "python"),
    "node": ("js", "javascript"),
}


def _q(value: str) -> str:
    return quote(value, safe="")


class Endpoints:
    """Path builders for every remote resource."""

    class Workflows:
        LIST = "/workflows"
        CREATE = "/workflows"
        TRIGGER = "/trigger"

        @staticmethod
        def get(workflow_id: str) -> str:
            return f"/workflows/{workflow_id}"

        update = get
        delete = get

        @staticmethod
        def visibility(workflow_id: str) -> str:
            return f"/workflows/{workflow_id}/visibility"

    class Code:
        LIST = "/upload-code"
        UPLOAD = "/upload-code"
        HISTORY = "/code-history"

        @staticmethod
        def get(file_key: str) -> str:
            return f"/upload-code/{_q(file_key)}"

        delete = get

        @staticmethod
        def history_by_key(file_key: str) -> str:
            return f"/code-history/{_q(file_key)}"

    class Secrets:
        LIST = "/secrets"
        CREATE = "/secrets"

        @staticmethod
        def get(name: str) -> str:
            return f"/secrets/{_q(name)}"

        update = get
        delete = get

    class ApiKeys:
        LIST = "/api-keys"
        CREATE = "/api-keys"
        VALIDATE = "/api-keys/validate"

        @staticmethod
        def get(key_id: str) -> str:
            return f"/api-keys/{key_id}"

        update = get
        delete = get

        @staticmethod
        def rotate(key_id: str) -> str:
            return f"/api-keys/{key_id}/rotate"

        @staticmethod
        def revoke(key_id: str) -> str:
            return f"/api-keys/{key_id}/revoke"

        @staticmethod
        def usage(key_id: str) -> str:
            return f"/api-keys/{key_id}/usage"

    class Execution:
        TEST_STEP = "/test-step-async"

        @staticmethod
        def status(execution_id: str) -> str:
            return f"/execution/{execution_id}"

    class Runs:
        LIST_ALL = "/runs"
        LIST_TEST = "/runs/tests"

        @staticmethod
        def list_workflow(workflow_key: str) -> str:
            return f"/runs/workflows/{workflow_key}"
