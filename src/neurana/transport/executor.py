"""HTTP request executor using httpx."""

import asyncio
import uuid
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

import httpx

from neurana.config import RetryConfig
from neurana.core.async_utils import Sleeper, run_with_deadline
from neurana.core.constants import (
    USER_AGENT,
    ContentType,
    HttpHeader,
    HttpMethod,
    Timeouts,
)
from neurana.core.exceptions import NeuranaError
from neurana.core.logging import StructuredLogger
from neurana.core.utils import drop_none
from neurana.transport.response import ResponseInterpreter
from neurana.transport.retry import RetryPolicy

ParamValue = str | int | float | bool | None


@dataclass(frozen=True)
class Operation:
    """One logical request."""

    method: str
    path: str
    params: Mapping[str, ParamValue] | None = None
    body: Any = None
    timeout: float | None = None
    cancel_event: asyncio.Event | None = field(default=None, compare=False)

    def __post_init__(self) -> None:
        method = self.method.upper()
        if method not in HttpMethod.ALL:
            raise NeuranaError.validation(f"Unsupported HTTP method: {self.method}")
        object.__setattr__(self, "method", method)
        object.__setattr__(self, "params", MappingProxyType(drop_none(dict(self.params or {}))))


def _serialize_param(value: str | int | float | bool) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class HttpClient:
    """Executes operations against one base URL with retry and a deadline."""

    def __init__(
        self,
        base_url: str,
        api_key: str,
        timeout: float = Timeouts.DEFAULT,
        user_agent: str = USER_AGENT,
        retry: RetryConfig | None = None,
        logger: StructuredLogger | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        sleep: Sleeper | None = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._api_key = api_key
        self._timeout = timeout
        self._user_agent = user_agent
        self._retry = RetryPolicy(retry)
        self._logger = logger or StructuredLogger("http")
        self._interpreter = ResponseInterpreter(self._logger)
        self._transport = transport
        self._sleep = sleep or asyncio.sleep
        self._client: httpx.AsyncClient | None = None

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def retry_policy(self) -> RetryPolicy:
        return self._retry

    @property
    def client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            # deadlines are enforced per operation, not by httpx
            self._client = httpx.AsyncClient(transport=self._transport, timeout=None)
            self._logger.debug("Created HTTP client", base_url=self._base_url)
        return self._client

    def build_url(self, path: str, params: Mapping[str, ParamValue] | None = None) -> httpx.URL:
        """Compose the target URL; ``None`` parameters are omitted."""
        query = {k: _serialize_param(v) for k, v in drop_none(dict(params or {})).items()}
        url = httpx.URL(f"{self._base_url}/{path.lstrip('/')}")
        if query:
            url = url.copy_merge_params(query)
        return url

    def build_headers(self) -> dict[str, str]:
        """Standard headers with a fresh trace identifier."""
        return {
            HttpHeader.AUTHORIZATION: f"Bearer {self._api_key}",
            HttpHeader.CONTENT_TYPE: ContentType.JSON,
            HttpHeader.ACCEPT: ContentType.JSON,
            HttpHeader.USER_AGENT: self._user_agent,
            HttpHeader.CACHE_CONTROL: "no-store, no-cache, must-revalidate",
            HttpHeader.CONTENT_TYPE_OPTIONS: "nosniff",
            HttpHeader.REQUEST_ID: str(uuid.uuid4()),
        }

    async def request(self, operation: Operation) -> Any:
        """Execute an operation and return its decoded result.

        Args:
            operation: The request to perform

        Returns:
            Parsed JSON, raw text for non-JSON bodies, or None for no content

        Raises:
            NeuranaError: for every failure, classified by kind
        """
        url = self.build_url(operation.path, operation.params)
        headers = self.build_headers()
        timeout = operation.timeout or self._timeout

        try:
            response = await run_with_deadline(
                self._execute_with_retry(operation.method, url, headers, operation.body),
                timeout,
                operation.cancel_event,
            )
            return self._interpreter.interpret(response)
        except NeuranaError:
            raise
        except Exception as e:
            raise self._interpreter.classify_exception(e) from e

    async def _execute_with_retry(
        self,
        method: str,
        url: httpx.URL,
        headers: dict[str, str],
        body: Any,
    ) -> httpx.Response:
        attempt = 1
        while True:
            try:
                response = await self.client.request(
                    method,
                    url,
                    headers=headers,
                    json=body,
                )
            except httpx.TransportError as e:
                decision = self._retry.for_error(e, attempt)
                if not decision.retry:
                    raise
                self._logger.debug(
                    "Retrying after transport error",
                    attempt=attempt,
                    delay=decision.delay,
                    error=type(e).__name__,
                    request_id=headers[HttpHeader.REQUEST_ID],
                )
            else:
                decision = self._retry.for_status(response.status_code, attempt)
                if not decision.retry:
                    return response
                await response.aclose()
                self._logger.debug(
                    "Retrying after retryable status",
                    attempt=attempt,
                    delay=decision.delay,
                    status=response.status_code,
                    request_id=headers[HttpHeader.REQUEST_ID],
                )

            await self._sleep(decision.delay)
            attempt += 1

    async def get(
        self,
        path: str,
        params: Mapping[str, ParamValue] | None = None,
        **options: Any,
    ) -> Any:
        """Make a GET request."""
        return await self.request(Operation(HttpMethod.GET, path, params=params, **options))

    async def post(self, path: str, data: Any = None, **options: Any) -> Any:
        """Make a POST request."""
        return await self.request(Operation(HttpMethod.POST, path, body=data, **options))

    async def put(self, path: str, data: Any = None, **options: Any) -> Any:
        """Make a PUT request."""
        return await self.request(Operation(HttpMethod.PUT, path, body=data, **options))

    async def patch(self, path: str, data: Any = None, **options: Any) -> Any:
        """Make a PATCH request."""
        return await self.request(Operation(HttpMethod.PATCH, path, body=data, **options))

    async def delete(self, path: str, **options: Any) -> Any:
        """Make a DELETE request."""
        return await self.request(Operation(HttpMethod.DELETE, path, **options))

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "HttpClient":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()
