"""Outbound Slack Web API caller.

Each call is a single blocking ``POST https://slack.com/api/<endpoint>``
with a JSON body and the bot token as a bearer credential.  HTTP status
codes are not interpreted here; a transport failure is reported in the
returned :class:`CallResult` instead of being raised.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any, Optional

import httpx

from slackrelay.config import SLACK_API_URL, Config
from slackrelay.errors import CallError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CallResult:
    """Outcome of one outbound call.

    Attributes:
        response_body: Raw response text, or ``None`` on transport failure.
        token_used: Bearer token the request was sent with.
        error: The transport failure, if any.
        status_code: HTTP status of the response, when one was received.
    """

    response_body: Optional[str]
    token_used: str
    error: Optional[CallError] = None
    status_code: Optional[int] = None

    @property
    def ok(self) -> bool:
        """``True`` when a response was received, whatever its status."""
        return self.error is None

    def json(self) -> Any:
        """Decode the response body, or return ``None`` if it is not JSON."""
        if not self.response_body:
            return None
        try:
            return json.loads(self.response_body)
        except ValueError:
            return None


class SlackCaller:
    """Send payloads to the Slack Web API on behalf of one :class:`Config`.

    Args:
        config: Credentials resolved for the current request.
        base_url: Prefix the endpoint name is appended to.
        timeout: Seconds to wait for a response; ``None`` waits forever.
    """

    def __init__(
        self,
        config: Config,
        base_url: str = SLACK_API_URL,
        timeout: Optional[float] = None,
    ):
        self.config = config
        self.base_url = base_url
        self.timeout = timeout

    def post(
        self,
        endpoint: str,
        payload: dict[str, Any],
        extra_headers: Optional[dict[str, str]] = None,
    ) -> CallResult:
        """POST *payload* as JSON to ``<base_url><endpoint>``.

        ``Authorization`` and ``Content-Type`` are applied after
        *extra_headers*, so callers cannot override them.

        Args:
            endpoint: Slack API method, e.g. ``chat.postMessage``.
            payload: JSON-serialisable request body.
            extra_headers: Additional request headers.

        Returns:
            A :class:`CallResult`.  On transport failure ``error`` is set
            and ``response_body`` is ``None``.
        """
        token = self.config.bot_token
        url = f"{self.base_url}{endpoint}"

        headers = httpx.Headers(extra_headers or {})
        headers["Authorization"] = f"Bearer {token}"
        headers["Content-Type"] = "application/json"

        try:
            resp = httpx.post(url, json=payload, headers=headers, timeout=self.timeout)
        except httpx.RequestError as exc:
            logger.exception("Slack call to %s failed", url)
            return CallResult(
                response_body=None,
                token_used=token,
                error=CallError(endpoint, url, str(exc) or type(exc).__name__),
            )

        logger.info("Slack %s responded with status %d", endpoint, resp.status_code)
        return CallResult(
            response_body=resp.text,
            token_used=token,
            status_code=resp.status_code,
        )
