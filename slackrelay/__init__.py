"""SlackRelay: forward inbound webhooks to the Slack Web API."""

__version__ = "1.0.0"
