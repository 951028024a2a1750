"""Exception types raised by the relay."""


class RelayError(Exception):
    """Base class for all SlackRelay errors."""


class ConfigError(RelayError):
    """The credentials file is missing, unreadable, malformed, or incomplete."""


class CallError(RelayError):
    """An outbound Slack API call failed at the transport level.

    Attributes:
        endpoint: Slack API method that was being invoked.
        url: Fully-qualified URL of the failed request.
        reason: Short description of the underlying transport error.
    """

    def __init__(self, endpoint: str, url: str, reason: str):
        self.endpoint = endpoint
        self.url = url
        self.reason = reason
        super().__init__(f"POST {url} failed: {reason}")
