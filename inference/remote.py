import json
import logging
import time
from typing import Any, Optional

import requests

from .auth import resolve_request_target
from .base import ProviderBackend
from .errors import UpstreamError, redact
from .types import DispatchRequest, ProviderConfig

logger = logging.getLogger(__name__)

# A read blocks until a whole chunk arrives, so single bytes keep the
# deadline check exact even when the provider trickles its body.
_READ_CHUNK_BYTES = 1


def build_payload(prompt: str) -> dict:
    """Wrap prompt text in the provider's contents/parts request envelope."""
    return {"contents": [{"parts": [{"text": prompt}]}]}


class RemoteProviderBackend(ProviderBackend):
    """
    HTTP backend for generateContent-style providers.

    One POST per dispatch, bounded end to end by the request's timeout:
    the socket timeout covers connect and stalled reads, and a monotonic
    deadline covers a body that keeps arriving too slowly. No retries:
    any failure surfaces as UpstreamError with the credential scrubbed
    from both the message and the provider's error body.
    """

    def __init__(self, config: ProviderConfig, session: Optional[requests.Session] = None):
        self.config = config
        self._http = session or requests

    def dispatch(self, request: DispatchRequest) -> Any:
        target = resolve_request_target(self.config)
        timed_out = f"Provider request timed out after {request.timeout_s}s"
        logger.debug(f"Dispatching {request.task} prompt (timeout={request.timeout_s}s)")

        deadline = time.monotonic() + request.timeout_s
        try:
            resp = self._http.post(
                target.url,
                json=build_payload(request.prompt),
                headers=target.headers,
                timeout=request.timeout_s,
                stream=True,
            )
        except requests.Timeout as e:
            raise self._upstream_error(timed_out, e) from None
        except requests.RequestException as e:
            raise self._upstream_error("Provider request failed", e) from None

        try:
            body = self._read_body(resp, deadline, timed_out)
        finally:
            resp.close()

        text = body.decode(resp.encoding or "utf-8", errors="replace")
        if not resp.ok:
            raise self._status_error(resp.status_code, resp.reason, text)

        try:
            return json.loads(text)
        except ValueError:
            # Not JSON: the body itself is the envelope
            return text

    def _read_body(self, resp: requests.Response, deadline: float, timed_out: str) -> bytes:
        body = bytearray()
        try:
            for chunk in resp.iter_content(chunk_size=_READ_CHUNK_BYTES):
                body.extend(chunk)
                if time.monotonic() > deadline:
                    raise self._upstream_error(timed_out)
        except requests.RequestException as e:
            raise self._upstream_error("Provider response read failed", e) from None
        return bytes(body)

    def _upstream_error(
        self, summary: str, error: Optional[requests.RequestException] = None
    ) -> UpstreamError:
        message = summary
        if error is not None:
            message = redact(f"{summary}: {_strip_query(str(error))}", self.config.credential)
        logger.error(message)
        return UpstreamError(message)

    def _status_error(self, status_code: int, reason: Optional[str], text: str) -> UpstreamError:
        body = redact(text, self.config.credential) or None
        message = f"Provider request failed: HTTP {status_code} {reason or ''}".rstrip()
        logger.error(message)
        if body:
            logger.error(f"Provider error detail: {body}")
        return UpstreamError(message, status_code=status_code, response_body=body)


def _strip_query(text: str) -> str:
    """Drop query strings from any URL embedded in a transport message."""
    out = []
    for token in text.split(" "):
        if "://" in token or token.startswith("/"):
            token = token.split("?", 1)[0]
        out.append(token)
    return " ".join(out)
