"""Configuration management for the Neurana SDK using Pydantic."""

import os
from pathlib import Path
from typing import Any

import httpx
import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from neurana.core.constants import (
    BASE_URL,
    MAIN_API_URL,
    USER_AGENT,
    RetryDefaults,
    Timeouts,
    Validation,
)
from neurana.core.exceptions import NeuranaError
from neurana.core.logging import StructuredLogger

LOCAL_HOSTS = ("localhost", "127.0.0.1", "::1")


class RetryConfig(BaseModel):
    """Retry policy constants."""

    model_config = {"frozen": True}

    max_attempts: int = RetryDefaults.MAX_ATTEMPTS
    initial_delay: float = RetryDefaults.INITIAL_DELAY
    max_delay: float = RetryDefaults.MAX_DELAY
    backoff_factor: float = RetryDefaults.BACKOFF_FACTOR
    retryable_statuses: frozenset[int] = RetryDefaults.RETRYABLE_STATUS

    @field_validator("max_attempts")
    @classmethod
    def validate_max_attempts(cls, v: int) -> int:
        if v < 1:
            raise ValueError("max_attempts must be at least 1")
        return v

    @field_validator("initial_delay", "max_delay")
    @classmethod
    def validate_delay(cls, v: float) -> float:
        if v < 0:
            raise ValueError("delays must not be negative")
        return v

    @field_validator("backoff_factor")
    @classmethod
    def validate_backoff_factor(cls, v: float) -> float:
        if v < 1:
            raise ValueError("backoff_factor must be at least 1")
        return v


class ClientConfig(BaseSettings):
    """Client configuration.

    Values passed explicitly win over ``NEURANA_*`` environment variables.
    """

    model_config = SettingsConfigDict(
        env_prefix="NEURANA_",
        env_nested_delimiter="__",
        extra="ignore",
        frozen=True,
    )

    api_key: Any = None
    base_url: str = BASE_URL
    main_api_url: str = MAIN_API_URL
    sdk_base_url: str | None = None
    timeout: float = Timeouts.DEFAULT
    allow_insecure_http: bool = False
    user_agent: str = USER_AGENT
    retry: RetryConfig = Field(default_factory=RetryConfig)

    @field_validator("timeout")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("timeout must be positive")
        return v

    def get_api_key(self) -> Any:
        """Get API key from config or environment."""
        key = self.api_key
        if key == "from_env" or key is None:
            key = os.environ.get("NEURANA_API_KEY")
        return key

    def validate_for_client(self, logger: StructuredLogger | None = None) -> str:
        """Run the construction-time checks a client needs.

        Returns:
            The trimmed API key

        Raises:
            NeuranaError: CONFIGURATION kind on any failure
        """
        key = self.get_api_key()
        if not key:
            raise NeuranaError.configuration("API key is required")
        if not isinstance(key, str):
            raise NeuranaError.configuration("API key must be a string")

        key = key.strip()
        if len(key) < Validation.MIN_API_KEY_LENGTH:
            raise NeuranaError.configuration("Invalid API key format")
        if len(key) > Validation.MAX_API_KEY_LENGTH:
            raise NeuranaError.configuration("API key exceeds maximum length")
        if key.startswith("nrn_") and not Validation.API_KEY_PATTERN.match(key):
            raise NeuranaError.configuration("Invalid API key format")

        for url in (self.base_url, self.main_api_url, self.sdk_base_url):
            check_endpoint_security(url, self.allow_insecure_http, logger)

        return key


def check_endpoint_security(
    url: str | None,
    allow_insecure: bool = False,
    logger: StructuredLogger | None = None,
) -> None:
    """Reject plain-HTTP endpoints unless they are loopback or explicitly allowed."""
    if not url:
        return

    try:
        parsed = httpx.URL(url)
    except httpx.InvalidURL as e:
        raise NeuranaError.configuration(f"Invalid endpoint URL: {e}") from None

    if parsed.scheme == "https" or parsed.host in LOCAL_HOSTS:
        return
    if not allow_insecure:
        raise NeuranaError.configuration("HTTPS is required for non-localhost endpoints")

    (logger or StructuredLogger("security")).warning(
        "Using insecure HTTP connection", url=url.split("?")[0]
    )


class ConfigLoader:
    """Loads and merges configuration from multiple sources."""

    CONFIG_FILENAMES = ["neurana.yaml", "neurana.yml", ".neurana.yaml", ".neurana.yml"]

    def __init__(self):
        self._config: ClientConfig | None = None

    def load(self, config_file: str | Path | None = None, **overrides: Any) -> ClientConfig:
        """Load configuration from files and environment.

        Priority (highest to lowest):
        1. Keyword overrides
        2. Explicitly specified config file
        3. Project config (./neurana.yaml)
        4. User config (~/.neurana/config.yaml)
        5. NEURANA_* environment variables

        Args:
            config_file: Optional explicit config file path
            **overrides: Field values that win over every file

        Returns:
            Merged configuration
        """
        configs: list[dict[str, Any]] = []

        user_config_path = Path.home() / ".neurana" / "config.yaml"
        if user_config_path.exists():
            configs.append(self._load_yaml_file(user_config_path))

        project_config = self._find_project_config()
        if project_config:
            configs.append(self._load_yaml_file(project_config))

        if config_file:
            config_path = Path(config_file)
            if not config_path.exists():
                raise NeuranaError.configuration(f"Config file not found: {config_file}")
            configs.append(self._load_yaml_file(config_path))

        configs.append({k: v for k, v in overrides.items() if v is not None})
        merged = self._merge_configs(configs)

        try:
            self._config = ClientConfig(**merged)
        except ValidationError as e:
            raise NeuranaError.configuration(f"Invalid configuration: {e}")
        return self._config

    def _find_project_config(self) -> Path | None:
        """Find project config file in current or parent directories."""
        current = Path.cwd()

        while current != current.parent:
            for filename in self.CONFIG_FILENAMES:
                config_path = current / filename
                if config_path.exists():
                    return config_path
            current = current.parent

        return None

    def _load_yaml_file(self, path: Path) -> dict[str, Any]:
        """Load a YAML config file."""
        try:
            with open(path) as f:
                content = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise NeuranaError.configuration(f"Invalid YAML in {path}: {e}")
        except OSError as e:
            raise NeuranaError.configuration(f"Cannot read {path}: {e}")

        if not isinstance(content, dict):
            raise NeuranaError.configuration(f"Config file {path} must contain a mapping")
        return content

    def _merge_configs(self, configs: list[dict[str, Any]]) -> dict[str, Any]:
        """Deep merge multiple configuration dictionaries."""
        result: dict[str, Any] = {}
        for config in configs:
            result = self._deep_merge(result, config)
        return result

    def _deep_merge(
        self,
        base: dict[str, Any],
        override: dict[str, Any],
    ) -> dict[str, Any]:
        """Deep merge two dictionaries."""
        result = base.copy()
        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value
        return result


def load_config(config_file: str | Path | None = None, **overrides: Any) -> ClientConfig:
    """Load client configuration from YAML files, environment and overrides."""
    return ConfigLoader().load(config_file, **overrides)
