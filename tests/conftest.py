"""Pytest configuration and fixtures."""

import sys
from pathlib import Path

import pytest

# Add project root to sys.path for imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from inference import StubProviderBackend, build_provider_config  # noqa: E402
from infra import GatewayConfig  # noqa: E402

GOOGLE_URL = "https://generativelanguage.googleapis.com/v1beta/models/gemini-1.5-flash:generateContent"
API_KEY = "test-secret-key"


@pytest.fixture
def gateway_config():
    """Config pointing at the query-key provider, stub backend."""
    return GatewayConfig(
        provider=build_provider_config(GOOGLE_URL, API_KEY),
        llm_backend="stub",
    )


@pytest.fixture
def stub_backend():
    return StubProviderBackend()


@pytest.fixture
def make_envelope():
    """Build a standard candidates envelope around some model text."""
    def _make(text: str) -> dict:
        return {"candidates": [{"content": {"parts": [{"text": text}]}}]}
    return _make
