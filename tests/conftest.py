"""Pytest fixtures for neurana tests."""

import json
import os
from collections.abc import Callable
from typing import Any, Generator

import httpx
import pytest

from neurana.client import NeuranaClient
from neurana.config import ClientConfig
from neurana.transport.executor import HttpClient

TEST_API_KEY = "test-key-12345"
TEST_BASE_URL = "https://workflows.test"
TEST_MAIN_URL = "https://api.test"

Handler = Callable[[httpx.Request], Any]


class MockApi:
    """Routes requests to per-path handlers and records what was sent."""

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], Handler] = {}
        self.requests: list[httpx.Request] = []

    def on(self, method: str, path: str, handler: Handler) -> None:
        self.routes[(method.upper(), path)] = handler

    def on_json(self, method: str, path: str, data: Any, status: int = 200, **kwargs: Any) -> None:
        self.on(method, path, lambda request: httpx.Response(status, json=data, **kwargs))

    def calls(self, method: str, path: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.method == method and r.url.path == path]

    def body(self, index: int = -1) -> Any:
        return json.loads(self.requests[index].content)

    async def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        handler = self.routes.get((request.method, request.url.path))
        if handler is None:
            return httpx.Response(
                404,
                json={"error": {"code": "NOT_FOUND", "message": f"No route for {request.url.path}"}},
            )
        result = handler(request)
        if not isinstance(result, httpx.Response):
            result = await result
        return result

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)


class RecordingLogger:
    """Stand-in for StructuredLogger that keeps every record."""

    def __init__(self, records: list[tuple[str, str, dict[str, Any]]] | None = None, **context: Any):
        self.records = records if records is not None else []
        self._context = context

    def bind(self, **kwargs: Any) -> "RecordingLogger":
        return RecordingLogger(self.records, **{**self._context, **kwargs})

    def _log(self, level: str, message: str, **kwargs: Any) -> None:
        self.records.append((level, message, {**self._context, **kwargs}))

    def debug(self, message: str, **kwargs: Any) -> None:
        self._log("debug", message, **kwargs)

    def info(self, message: str, **kwargs: Any) -> None:
        self._log("info", message, **kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        self._log("warning", message, **kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        self._log("error", message, **kwargs)

    def exception(self, message: str, **kwargs: Any) -> None:
        self._log("error", message, **kwargs)

    def messages(self, level: str | None = None) -> list[str]:
        return [m for lvl, m, _ in self.records if level is None or lvl == level]


@pytest.fixture
def mock_api() -> MockApi:
    """Create an in-process mock of the remote API."""
    return MockApi()


@pytest.fixture
def sleeps() -> list[float]:
    """Delays requested by the retry loop, in order."""
    return []


@pytest.fixture
def fake_sleep(sleeps: list[float]):
    """Sleep replacement that records delays instead of waiting."""

    async def _sleep(delay: float) -> None:
        sleeps.append(delay)

    return _sleep


@pytest.fixture
def recording_logger() -> RecordingLogger:
    return RecordingLogger()


@pytest.fixture
def http_client(mock_api: MockApi, fake_sleep, recording_logger: RecordingLogger) -> HttpClient:
    """HttpClient wired to the mock API."""
    return HttpClient(
        TEST_BASE_URL,
        TEST_API_KEY,
        logger=recording_logger,
        transport=mock_api.transport,
        sleep=fake_sleep,
    )


@pytest.fixture
def client_config() -> ClientConfig:
    return ClientConfig(
        api_key=TEST_API_KEY,
        base_url=TEST_BASE_URL,
        main_api_url=TEST_MAIN_URL,
    )


@pytest.fixture
def neurana_client(
    client_config: ClientConfig,
    mock_api: MockApi,
    fake_sleep,
    recording_logger: RecordingLogger,
) -> NeuranaClient:
    """NeuranaClient whose both transports hit the mock API."""
    return NeuranaClient(
        client_config,
        logger=recording_logger,
        transport=mock_api.transport,
        sleep=fake_sleep,
    )


@pytest.fixture(autouse=True)
def clean_env() -> Generator[None, None, None]:
    """Clean environment variables before each test."""
    env_vars = [k for k in os.environ if k.startswith("NEURANA_")]

    original = {k: os.environ.get(k) for k in env_vars}

    for k in env_vars:
        os.environ.pop(k, None)

    yield

    for k in [k for k in os.environ if k.startswith("NEURANA_")]:
        os.environ.pop(k, None)
    for k, v in original.items():
        if v is not None:
            os.environ[k] = v
