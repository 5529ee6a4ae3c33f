"""
tests/inference/test_remote_dispatch.py

Tests for RemoteProviderBackend transport and error paths.

Verifies:
✔ Request envelope is {"contents": [{"parts": [{"text": prompt}]}]}
✔ Auth target (URL/headers) and per-task timeout reach requests.post
✔ 2xx JSON body is returned as-is; non-JSON body is returned as text
✔ Timeout, connection error and non-2xx surface as UpstreamError
✔ Provider error bodies are attached; the credential never is
✔ A hanging provider fails within a bounded margin of the timeout
✔ A provider trickling its body fails near the timeout as well
"""

import threading
import time
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from unittest.mock import MagicMock, patch

import pytest
import requests

from inference import DispatchRequest, RemoteProviderBackend, UpstreamError, build_provider_config
from inference.remote import build_payload

GOOGLE_URL = "https://generativelanguage.googleapis.com/v1beta/models/gemini-1.5-flash:generateContent"
BEARER_URL = "https://llm.example.com/v1/generate"
SECRET = "s3cr3t-key"


def make_response(status_code: int, body: bytes, url: str) -> requests.Response:
    resp = requests.Response()
    resp.status_code = status_code
    resp._content = body
    resp._content_consumed = True
    resp.url = url
    resp.reason = "Bad Request" if status_code == 400 else "OK"
    return resp


def make_request(task="assessment", prompt="hello", timeout_s=30.0):
    return DispatchRequest(task=task, prompt=prompt, timeout_s=timeout_s)


class TestPayload:

    def test_payload_shape(self):
        assert build_payload("hi") == {"contents": [{"parts": [{"text": "hi"}]}]}


class TestDispatchSuccess:

    @patch("inference.remote.requests.post")
    def test_posts_to_resolved_target(self, mock_post):
        mock_post.return_value = make_response(200, b'{"output_text": "ok"}', GOOGLE_URL)
        backend = RemoteProviderBackend(build_provider_config(GOOGLE_URL, SECRET))

        envelope = backend.dispatch(make_request(prompt="score this", timeout_s=30.0))

        assert envelope == {"output_text": "ok"}
        args, kwargs = mock_post.call_args
        assert args[0] == f"{GOOGLE_URL}?key={SECRET}"
        assert kwargs["json"] == build_payload("score this")
        assert kwargs["timeout"] == 30.0
        assert "Authorization" not in kwargs["headers"]

    @patch("inference.remote.requests.post")
    def test_bearer_provider_headers(self, mock_post):
        mock_post.return_value = make_response(200, b'{"result": "ok"}', BEARER_URL)
        backend = RemoteProviderBackend(build_provider_config(BEARER_URL, SECRET))

        backend.dispatch(make_request(task="chat", timeout_s=20.0))

        args, kwargs = mock_post.call_args
        assert args[0] == BEARER_URL
        assert kwargs["headers"]["Authorization"] == f"Bearer {SECRET}"
        assert kwargs["timeout"] == 20.0

    @patch("inference.remote.requests.post")
    def test_non_json_body_returned_as_text(self, mock_post):
        mock_post.return_value = make_response(200, b"plain words", BEARER_URL)
        backend = RemoteProviderBackend(build_provider_config(BEARER_URL, SECRET))

        assert backend.dispatch(make_request()) == "plain words"

    def test_uses_injected_session(self):
        session = MagicMock()
        session.post.return_value = make_response(200, b'{"output_text": "ok"}', BEARER_URL)
        backend = RemoteProviderBackend(build_provider_config(BEARER_URL, SECRET), session=session)

        assert backend.dispatch(make_request()) == {"output_text": "ok"}
        session.post.assert_called_once()


class TestDispatchFailures:

    @patch("inference.remote.requests.post")
    def test_timeout_raises_upstream_error(self, mock_post):
        mock_post.side_effect = requests.Timeout("read timed out")
        backend = RemoteProviderBackend(build_provider_config(BEARER_URL, SECRET))

        with pytest.raises(UpstreamError) as exc_info:
            backend.dispatch(make_request(timeout_s=30.0))

        assert "timed out" in str(exc_info.value)
        assert exc_info.value.status_code is None

    @patch("inference.remote.requests.post")
    def test_connection_error_message_is_redacted(self, mock_post):
        mock_post.side_effect = requests.ConnectionError(
            "HTTPSConnectionPool(host='generativelanguage.googleapis.com', port=443): "
            f"Max retries exceeded with url: /v1beta/models/x:generateContent?key={SECRET} "
            "(Caused by NewConnectionError)"
        )
        backend = RemoteProviderBackend(build_provider_config(GOOGLE_URL, SECRET))

        with pytest.raises(UpstreamError) as exc_info:
            backend.dispatch(make_request())

        message = str(exc_info.value)
        assert SECRET not in message
        assert "key=" not in message
        assert "Max retries exceeded" in message

    @patch("inference.remote.requests.post")
    def test_http_error_carries_body_without_secret(self, mock_post):
        body = f'{{"error": {{"code": 400, "message": "API key {SECRET} not valid"}}}}'.encode()
        mock_post.return_value = make_response(400, body, f"{GOOGLE_URL}?key={SECRET}")
        backend = RemoteProviderBackend(build_provider_config(GOOGLE_URL, SECRET))

        with pytest.raises(UpstreamError) as exc_info:
            backend.dispatch(make_request())

        err = exc_info.value
        assert err.status_code == 400
        assert "not valid" in err.response_body
        assert SECRET not in err.response_body
        assert SECRET not in str(err)
        assert "?key" not in str(err)

    @patch("inference.remote.requests.post")
    def test_server_error_is_not_retried(self, mock_post):
        mock_post.return_value = make_response(503, b"unavailable", BEARER_URL)
        backend = RemoteProviderBackend(build_provider_config(BEARER_URL, SECRET))

        with pytest.raises(UpstreamError):
            backend.dispatch(make_request())

        assert mock_post.call_count == 1


class _HangingHandler(BaseHTTPRequestHandler):
    def do_POST(self):
        time.sleep(3)

    def log_message(self, *args):
        pass


class TestTimeoutBound:

    def test_hanging_provider_fails_near_timeout(self):
        server = ThreadingHTTPServer(("127.0.0.1", 0), _HangingHandler)
        server.daemon_threads = True
        thread = threading.Thread(target=server.serve_forever, daemon=True)
        thread.start()
        try:
            url = f"http://127.0.0.1:{server.server_address[1]}/v1/generate"
            backend = RemoteProviderBackend(build_provider_config(url, SECRET))

            started = time.monotonic()
            with pytest.raises(UpstreamError):
                backend.dispatch(make_request(timeout_s=0.5))
            elapsed = time.monotonic() - started

            assert elapsed < 2.0
        finally:
            server.shutdown()
            server.server_close()

    def test_trickling_provider_fails_near_timeout(self):
        server = ThreadingHTTPServer(("127.0.0.1", 0), _TricklingHandler)
        server.daemon_threads = True
        thread = threading.Thread(target=server.serve_forever, daemon=True)
        thread.start()
        try:
            url = f"http://127.0.0.1:{server.server_address[1]}/v1/generate"
            backend = RemoteProviderBackend(build_provider_config(url, SECRET))

            started = time.monotonic()
            with pytest.raises(UpstreamError) as exc_info:
                backend.dispatch(make_request(timeout_s=0.5))
            elapsed = time.monotonic() - started

            assert "timed out after 0.5s" in str(exc_info.value)
            assert elapsed < 2.0
        finally:
            server.shutdown()
            server.server_close()


class _TricklingHandler(BaseHTTPRequestHandler):
    """Sends headers at once, then one body byte every 0.1s."""

    def do_POST(self):
        self.send_response(200)
        self.send_header("Content-Type", "application/json")
        self.send_header("Content-Length", "40")
        self.end_headers()
        try:
            for _ in range(40):
                self.wfile.write(b" ")
                self.wfile.flush()
                time.sleep(0.1)
        except OSError:
            pass

    def log_message(self, *args):
        pass
