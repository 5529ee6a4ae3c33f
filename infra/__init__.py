"""
Infrastructure module exports.

Configuration and bootstrap for the gateway pipeline.
"""

from .config import GatewayConfig, LLMBackendType
from .bootstrap import GatewayBootstrap, bootstrap_gateway

__all__ = [
    "GatewayConfig",
    "LLMBackendType",
    "GatewayBootstrap",
    "bootstrap_gateway",
]
