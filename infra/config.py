"""
Gateway configuration object.

Built once at process start from the environment, validated there, and
handed by reference to everything that needs it. Nothing downstream
reads the environment per request.
"""

import logging
import os
from dataclasses import dataclass
from typing import Literal, get_args
from urllib.parse import urlsplit

from inference import (
    ConfigError,
    ProviderBackend,
    ProviderConfig,
    RemoteProviderBackend,
    StubProviderBackend,
    build_provider_config,
)

logger = logging.getLogger(__name__)

LLMBackendType = Literal["gemini", "stub"]


@dataclass(frozen=True)
class GatewayConfig:
    """Infrastructure configuration from environment."""

    provider: ProviderConfig
    llm_backend: LLMBackendType = "gemini"
    strict_assessment: bool = False
    environment: str = "development"

    # Rate limiting
    rate_limit_max: int = 60
    rate_limit_window_s: int = 3600
    trust_proxy: bool = True

    @property
    def provider_host(self) -> str:
        return urlsplit(self.provider.endpoint_url).netloc

    @classmethod
    def from_env(cls) -> "GatewayConfig":
        """
        Load configuration from environment variables.

        Raises:
            ConfigError: GEMINI_API_URL or GEMINI_API_KEY is missing. The
                message names the variables, never their values.
            ConfigError: LLM_BACKEND names an unknown backend.
        """
        from config import Config  # loads .env into the environment

        url = os.getenv("GEMINI_API_URL", "").strip()
        key = os.getenv("GEMINI_API_KEY", "").strip()

        missing = [name for name, value in (("GEMINI_API_URL", url), ("GEMINI_API_KEY", key)) if not value]
        if missing:
            raise ConfigError(
                f"{' or '.join(missing)} not set. Copy .env.example to .env, "
                "set GEMINI_API_KEY and GEMINI_API_URL, and restart the server."
            )

        llm_backend = os.getenv("LLM_BACKEND", Config.LLM_BACKEND).strip().lower()
        if llm_backend not in get_args(LLMBackendType):
            raise ConfigError(
                f"LLM_BACKEND must be one of {', '.join(get_args(LLMBackendType))}; got {llm_backend!r}"
            )

        if "?" in url:
            logger.warning(
                "GEMINI_API_URL contains query parameters. "
                "Ensure you did not embed a secret API key in the URL."
            )

        return cls(
            provider=build_provider_config(url, key),
            llm_backend=llm_backend,  # type: ignore
            strict_assessment=Config.STRICT_ASSESSMENT,
            environment=Config.ENVIRONMENT,
            rate_limit_max=Config.RATE_LIMIT_MAX,
            rate_limit_window_s=Config.RATE_LIMIT_WINDOW_S,
            trust_proxy=Config.TRUST_PROXY,
        )

    def create_provider_backend(self) -> ProviderBackend:
        """Create provider backend instance based on configuration."""
        if self.llm_backend == "stub":
            return StubProviderBackend()
        return RemoteProviderBackend(self.provider)

    def describe(self) -> dict:
        """Non-sensitive summary, safe to log or expose."""
        return {
            "environment": self.environment,
            "llm_backend": self.llm_backend,
            "provider_host": self.provider_host,
            "auth_mode": self.provider.auth_mode.value,
            "strict_assessment": self.strict_assessment,
        }
