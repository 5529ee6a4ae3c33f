"""
Provider authentication resolution.

Google's Generative Language API authenticates with a `key` query
parameter; every other provider is assumed to take a bearer token.
"""

from urllib.parse import quote

from .errors import ConfigError
from .types import AuthMode, ProviderConfig, RequestTarget

QUERY_KEY_PROVIDER_MARKER = "generativelanguage.googleapis.com"


def detect_auth_mode(endpoint_url: str) -> AuthMode:
    if QUERY_KEY_PROVIDER_MARKER in endpoint_url:
        return AuthMode.QUERY_KEY
    return AuthMode.BEARER_HEADER


def build_provider_config(endpoint_url: str, credential: str) -> ProviderConfig:
    """Create a ProviderConfig, deriving the auth mode from the endpoint."""
    if not endpoint_url or not credential:
        raise ConfigError("Provider endpoint URL and credential are both required")
    return ProviderConfig(
        endpoint_url=endpoint_url,
        credential=credential,
        auth_mode=detect_auth_mode(endpoint_url),
    )


def resolve_request_target(config: ProviderConfig) -> RequestTarget:
    """
    Produce the final request URL and headers for one provider call.

    Query-key providers get `key=<credential>` appended to the URL (with
    `&` when a query string is already present) and no Authorization
    header. Everything else gets `Authorization: Bearer <credential>`
    and an untouched URL.
    """
    headers = {"Content-Type": "application/json"}

    if config.auth_mode is AuthMode.QUERY_KEY:
        separator = "&" if "?" in config.endpoint_url else "?"
        url = f"{config.endpoint_url}{separator}key={quote(config.credential, safe='')}"
        return RequestTarget(url=url, headers=headers)

    headers["Authorization"] = f"Bearer {config.credential}"
    return RequestTarget(url=config.endpoint_url, headers=headers)
