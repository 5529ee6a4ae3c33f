"""
Error taxonomy tests.

Callers branch on type, so every failure kind must be a distinct class
under GatewayError, and diagnostics must be attached as attributes.
"""

import pytest

from inference.errors import (
    BadUpstreamShapeError,
    ConfigError,
    GatewayError,
    ParseError,
    UpstreamError,
    redact,
)


class TestErrorTypes:

    @pytest.mark.parametrize("cls", [ConfigError, UpstreamError, ParseError, BadUpstreamShapeError])
    def test_all_are_gateway_errors(self, cls):
        assert issubclass(cls, GatewayError)

    def test_kinds_are_distinct(self):
        kinds = [ConfigError, UpstreamError, ParseError, BadUpstreamShapeError]
        for a in kinds:
            for b in kinds:
                if a is not b:
                    assert not issubclass(a, b)

    def test_upstream_error_attributes(self):
        err = UpstreamError("Provider request failed", status_code=502, response_body="bad gateway")
        assert err.status_code == 502
        assert err.response_body == "bad gateway"
        assert "bad gateway" in str(err)

    def test_parse_error_keeps_raw_text(self):
        err = ParseError("Model did not return JSON", raw_text="no braces here")
        assert err.raw_text == "no braces here"
        assert "no braces here" in str(err)

    def test_bad_shape_details_default(self):
        assert BadUpstreamShapeError("missing bandScore").details == {}


class TestRedact:

    def test_replaces_raw_and_encoded_forms(self):
        secret = "a/b+c"
        text = "raw a/b+c and encoded a%2Fb%2Bc"
        assert redact(text, secret) == "raw *** and encoded ***"

    def test_passthrough_without_secret_or_text(self):
        assert redact("hello", "") == "hello"
        assert redact(None, "secret") is None
