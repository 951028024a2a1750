"""Tests for :mod:`slackrelay.relay.caller`.

``httpx.post`` is mocked so these tests run offline.
"""

from unittest.mock import MagicMock, patch

import httpx

from slackrelay.config import Config
from slackrelay.errors import CallError
from slackrelay.relay.caller import CallResult, SlackCaller

CONFIG = Config(bot_token="xoxb-1", channel_id="C123")


def _response(text='{"ok": true}', status_code=200):
    resp = MagicMock(spec=httpx.Response)
    resp.text = text
    resp.status_code = status_code
    return resp


class TestSlackCallerPost:
    """Verify the outbound request contract."""

    @patch("slackrelay.relay.caller.httpx.post")
    def test_single_post_to_endpoint(self, mock_post):
        """Exactly one POST is sent to the Slack API URL."""
        mock_post.return_value = _response()
        SlackCaller(CONFIG).post("chat.postMessage", {"text": "hi"})

        mock_post.assert_called_once()
        assert mock_post.call_args.args[0] == "https://slack.com/api/chat.postMessage"
        assert mock_post.call_args.kwargs["json"] == {"text": "hi"}

    @patch("slackrelay.relay.caller.httpx.post")
    def test_reserved_headers(self, mock_post):
        """Bearer token and JSON content type are always sent."""
        mock_post.return_value = _response()
        SlackCaller(CONFIG).post("chat.postMessage", {"text": "hi"})

        headers = mock_post.call_args.kwargs["headers"]
        assert headers["Authorization"] == "Bearer xoxb-1"
        assert headers["Content-Type"] == "application/json"

    @patch("slackrelay.relay.caller.httpx.post")
    def test_extra_headers_cannot_override_reserved(self, mock_post):
        """Caller-supplied auth headers lose to the configured token."""
        mock_post.return_value = _response()
        SlackCaller(CONFIG).post(
            "chat.postMessage",
            {},
            extra_headers={"authorization": "Bearer evil", "X-Trace": "abc"},
        )

        headers = mock_post.call_args.kwargs["headers"]
        assert headers.get_list("authorization") == ["Bearer xoxb-1"]
        assert headers["X-Trace"] == "abc"

    @patch("slackrelay.relay.caller.httpx.post")
    def test_result_carries_body_and_token(self, mock_post):
        """The raw body and the token used are returned."""
        mock_post.return_value = _response('{"ok": true, "ts": "1.2"}')
        result = SlackCaller(CONFIG).post("chat.postMessage", {})

        assert result.response_body == '{"ok": true, "ts": "1.2"}'
        assert result.token_used == "xoxb-1"
        assert result.error is None
        assert result.ok is True

    @patch("slackrelay.relay.caller.httpx.post")
    def test_http_error_status_not_interpreted(self, mock_post):
        """Non-2xx responses are returned as-is."""
        mock_post.return_value = _response("rate limited", status_code=429)
        result = SlackCaller(CONFIG).post("chat.postMessage", {})

        assert result.response_body == "rate limited"
        assert result.status_code == 429
        assert result.error is None

    @patch("slackrelay.relay.caller.httpx.post")
    def test_transport_failure(self, mock_post):
        """A transport error is reported, not raised."""
        mock_post.side_effect = httpx.ConnectError("connection refused")
        result = SlackCaller(CONFIG).post("chat.postMessage", {"text": "hi"})

        assert isinstance(result.error, CallError)
        assert result.error.endpoint == "chat.postMessage"
        assert "connection refused" in str(result.error)
        assert result.response_body is None
        assert result.token_used == "xoxb-1"
        assert result.ok is False

    @patch("slackrelay.relay.caller.httpx.post")
    def test_base_url_and_timeout(self, mock_post):
        """Custom base URL is concatenated and timeout passed through."""
        mock_post.return_value = _response()
        SlackCaller(CONFIG, base_url="http://localhost:9000/api/", timeout=5.0).post(
            "auth.test", {}
        )

        assert mock_post.call_args.args[0] == "http://localhost:9000/api/auth.test"
        assert mock_post.call_args.kwargs["timeout"] == 5.0

    @patch("slackrelay.relay.caller.httpx.post")
    def test_no_timeout_by_default(self, mock_post):
        """Without a configured timeout the call may block indefinitely."""
        mock_post.return_value = _response()
        SlackCaller(CONFIG).post("chat.postMessage", {})
        assert mock_post.call_args.kwargs["timeout"] is None


class TestCallResult:
    """Verify response decoding helpers."""

    def test_json(self):
        """JSON bodies are decoded."""
        assert CallResult('{"ok": false}', "t").json() == {"ok": False}

    def test_json_not_json(self):
        """Non-JSON bodies decode to None."""
        assert CallResult("<html>", "t").json() is None

    def test_json_no_body(self):
        """A missing body decodes to None."""
        assert CallResult(None, "t").json() is None
