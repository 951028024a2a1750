"""Request normalisation, message building, and the outbound Slack caller."""
