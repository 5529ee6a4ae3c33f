"""
Gateway bootstrap.

Wires the configuration object into a ready-to-serve TutorService and
rate limiter. Called once from the application lifespan; the result is
kept on app.state rather than in a module-level singleton.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from agent.tutor import TutorService
from inference import ProviderBackend
from transport.rate_limit import SlidingWindowRateLimiter

from .config import GatewayConfig

logger = logging.getLogger(__name__)


@dataclass
class GatewayBootstrap:
    """Everything a request handler needs, built from one GatewayConfig."""

    config: GatewayConfig
    backend: ProviderBackend
    tutor: TutorService
    rate_limiter: SlidingWindowRateLimiter

    def __repr__(self) -> str:
        return (
            f"GatewayBootstrap(llm={self.config.llm_backend}, "
            f"provider={self.config.provider_host}, "
            f"auth={self.config.provider.auth_mode.value}, "
            f"rate_limit={self.rate_limiter.max_requests}/{self.rate_limiter.window_s}s)"
        )


def bootstrap_gateway(
    config: Optional[GatewayConfig] = None,
    backend: Optional[ProviderBackend] = None,
) -> GatewayBootstrap:
    """
    Build the gateway pipeline.

    Args:
        config: Optional explicit configuration (defaults to the environment).
        backend: Optional backend override, used by tests.

    Raises:
        ConfigError: required provider settings are missing.
    """
    config = config or GatewayConfig.from_env()
    backend = backend or config.create_provider_backend()

    gateway = GatewayBootstrap(
        config=config,
        backend=backend,
        tutor=TutorService(backend, strict_assessment=config.strict_assessment),
        rate_limiter=SlidingWindowRateLimiter(
            max_requests=config.rate_limit_max,
            window_s=config.rate_limit_window_s,
        ),
    )
    logger.info(f"Gateway ready: {gateway!r}")
    return gateway
