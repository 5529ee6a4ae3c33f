"""
Provider boundary layer.

Keeps the tutoring pipeline agnostic of the remote model provider:
authentication strategy, request envelope, transport, and the shape of
the response envelope all live here.

Supported backends:
- RemoteProviderBackend: generateContent-style HTTP provider
- StubProviderBackend: Deterministic fake provider (offline dev, CI)

Example usage:
    from inference import build_provider_config, RemoteProviderBackend, DispatchRequest

    config = build_provider_config(url, api_key)
    backend = RemoteProviderBackend(config)
    envelope = backend.dispatch(DispatchRequest(task="chat", prompt="Hello", timeout_s=20))
    text = extract_text(envelope)
"""

from .types import (
    AuthMode,
    DispatchRequest,
    PromptRequest,
    ProviderConfig,
    RequestTarget,
    TaskKind,
    TASK_TIMEOUTS,
)
from .errors import (
    BadUpstreamShapeError,
    ConfigError,
    GatewayError,
    ParseError,
    UpstreamError,
)
from .auth import build_provider_config, resolve_request_target
from .base import ProviderBackend
from .envelope import classify_envelope, extract_text
from .remote import RemoteProviderBackend
from .stub import StubProviderBackend

__all__ = [
    "AuthMode",
    "DispatchRequest",
    "PromptRequest",
    "ProviderConfig",
    "RequestTarget",
    "TaskKind",
    "TASK_TIMEOUTS",
    "BadUpstreamShapeError",
    "ConfigError",
    "GatewayError",
    "ParseError",
    "UpstreamError",
    "build_provider_config",
    "resolve_request_target",
    "ProviderBackend",
    "classify_envelope",
    "extract_text",
    "RemoteProviderBackend",
    "StubProviderBackend",
]
