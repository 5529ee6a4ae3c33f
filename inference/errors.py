"""
Error taxonomy for the provider pipeline.

Callers branch on the exception type, never on message content.
No error produced here ever carries the provider credential or the
credential-bearing query string.
"""

from typing import Any, Optional
from urllib.parse import quote


class GatewayError(Exception):
    """Base error for the gateway pipeline."""
    pass


class ConfigError(GatewayError):
    """Required provider configuration is missing. Fatal at start-up."""
    pass


class UpstreamError(GatewayError):
    """Transport failure, timeout, or non-2xx status from the provider."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        response_body: Optional[str] = None,
    ):
        self.status_code = status_code
        self.response_body = response_body
        if response_body:
            message = f"{message} - response: {response_body}"
        super().__init__(message)


class ParseError(GatewayError):
    """Extracted text holds no recoverable JSON object."""

    def __init__(self, message: str, raw_text: str):
        self.raw_text = raw_text
        super().__init__(f"{message}. Raw output: {raw_text}")


class BadUpstreamShapeError(GatewayError):
    """JSON parsed but the result is missing or violates mandatory fields."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        self.details = details or {}
        super().__init__(message)


def redact(text: Optional[str], secret: Optional[str]) -> Optional[str]:
    """Scrub a credential (raw and URL-encoded) out of a diagnostic string."""
    if not text or not secret:
        return text
    for form in {secret, quote(secret, safe="")}:
        text = text.replace(form, "***")
    return text
