"""Neurana API client."""

from typing import Any

import httpx
from pydantic import ValidationError

from neurana.config import ClientConfig
from neurana.core.async_utils import Sleeper
from neurana.core.exceptions import NeuranaError
from neurana.core.logging import StructuredLogger
from neurana.models import UploadedArtifact
from neurana.resources import (
    ApiKeysResource,
    CodeResource,
    ExecutionsResource,
    SecretsResource,
    WorkflowsResource,
)
from neurana.transport.executor import HttpClient


class NeuranaClient:
    """Entry point bundling every resource client.

    Workflows, code and executions talk to the workflows API; secrets and
    API keys talk to the main API. Configuration problems raise a
    CONFIGURATION error here, before any request can be made.
    """

    def __init__(
        self,
        config: ClientConfig | None = None,
        *,
        logger: StructuredLogger | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        sleep: Sleeper | None = None,
        **settings: Any,
    ):
        try:
            self._config = config or ClientConfig(**settings)
        except ValidationError as e:
            raise NeuranaError.configuration(f"Invalid configuration: {e}") from None
        self._logger = logger or StructuredLogger("client")
        api_key = self._config.validate_for_client(self._logger.bind(scope="security"))

        http_options: dict[str, Any] = {
            "api_key": api_key,
            "timeout": self._config.timeout,
            "user_agent": self._config.user_agent,
            "retry": self._config.retry,
            "logger": self._logger.bind(scope="http"),
            "transport": transport,
            "sleep": sleep,
        }
        self._workflows_http = HttpClient(self._config.base_url, **http_options)
        self._main_http = HttpClient(self._config.main_api_url, **http_options)

        self.code = CodeResource(self._workflows_http, self._logger.bind(scope="code"))
        self.secrets = SecretsResource(self._main_http, self._logger.bind(scope="security"))
        self.api_keys = ApiKeysResource(self._main_http)
        self.executions = ExecutionsResource(self._workflows_http)
        self.workflows = WorkflowsResource(
            self._workflows_http,
            code_uploader=self._upload_code,
            sdk_base_url=self._config.sdk_base_url,
            logger=self._logger.bind(scope="workflows"),
        )

    @property
    def config(self) -> ClientConfig:
        return self._config

    async def _upload_code(self, file_name: str, content: str, language: str) -> UploadedArtifact:
        return await self.code.upload_artifact(file_name, content, language)

    async def close(self) -> None:
        """Close both HTTP transports."""
        await self._workflows_http.close()
        await self._main_http.close()

    async def __aenter__(self) -> "NeuranaClient":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()
