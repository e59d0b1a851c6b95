"""Server configuration loading."""

import os
from dataclasses import dataclass
from typing import Mapping

from gemini_mcp.provider.gemini import DEFAULT_BASE_URL
from gemini_mcp.tools.models import DEFAULT_MODEL
from gemini_mcp.transport.types import FramingMode

# Environment variables
API_KEY_ENV = "GEMINI_API_KEY"
FRAMING_ENV = "GEMINI_MCP_FRAMING"
DEFAULT_MODEL_ENV = "GEMINI_MCP_DEFAULT_MODEL"
BASE_URL_ENV = "GEMINI_API_BASE_URL"
TIMEOUT_ENV = "GEMINI_MCP_TIMEOUT"
LOG_LEVEL_ENV = "GEMINI_MCP_LOG_LEVEL"

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ConfigError(Exception):
    """Configuration is invalid; the server cannot start."""

    pass


class MissingCredentialError(ConfigError):
    """The provider API key is not set."""

    pass


@dataclass
class ServerConfig:
    """Configuration for one server process."""

    api_key: str
    """Gemini API key."""

    framing: FramingMode = FramingMode.LINE
    """Stdio framing, fixed for the process lifetime."""

    default_model: str = DEFAULT_MODEL
    """Model used when a tool call names none."""

    base_url: str = DEFAULT_BASE_URL
    """Gemini REST API root."""

    timeout: float = 120.0
    """HTTP client timeout for provider calls, in seconds."""

    log_level: str = "INFO"
    """Root log level; logs always go to stderr."""

    def __post_init__(self) -> None:
        """Validate configuration."""
        if not self.api_key:
            raise MissingCredentialError(f"{API_KEY_ENV} environment variable is required")
        if isinstance(self.framing, str):
            try:
                self.framing = FramingMode.parse(self.framing)
            except ValueError as e:
                raise ConfigError(str(e))
        if not self.default_model:
            raise ConfigError("default_model must not be empty")
        if not self.base_url.startswith(("https://", "http://")):
            raise ConfigError("base_url must be an http(s) URL")
        if self.timeout <= 0:
            raise ConfigError("timeout must be positive")
        self.log_level = self.log_level.upper()
        if self.log_level not in LOG_LEVELS:
            raise ConfigError(f"log_level must be one of {', '.join(LOG_LEVELS)}")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None, **overrides) -> "ServerConfig":
        """
        Build configuration from environment variables.

        Args:
            environ: Mapping to read instead of ``os.environ``.
            overrides: Field values taking precedence over the environment
                (``None`` values are ignored).

        Raises:
            MissingCredentialError: If the API key is absent or empty.
            ConfigError: If any value is invalid.
        """
        env = os.environ if environ is None else environ

        values: dict = {"api_key": env.get(API_KEY_ENV, "").strip()}
        if env.get(FRAMING_ENV):
            values["framing"] = env[FRAMING_ENV]
        if env.get(DEFAULT_MODEL_ENV):
            values["default_model"] = env[DEFAULT_MODEL_ENV]
        if env.get(BASE_URL_ENV):
            values["base_url"] = env[BASE_URL_ENV]
        if env.get(TIMEOUT_ENV):
            try:
                values["timeout"] = float(env[TIMEOUT_ENV])
            except ValueError:
                raise ConfigError(f"{TIMEOUT_ENV} must be a number, got {env[TIMEOUT_ENV]!r}")
        if env.get(LOG_LEVEL_ENV):
            values["log_level"] = env[LOG_LEVEL_ENV]

        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)
