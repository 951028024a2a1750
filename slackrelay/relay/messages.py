"""Build the Slack ``chat.postMessage`` body for a relayed payload.

Selection order for the message text:

1. A ``text`` field in the payload is relayed verbatim.
2. A GitHub event (``X-GitHub-Event`` header or ``event`` field) is
   summarised into one short message.
3. Anything else is shown as a JSON code block, truncated to
   :data:`MAX_TEXT_CHARS`.
"""

import json
from typing import Any, Optional

#: Upper bound for a rendered JSON dump; Slack rejects longer messages.
MAX_TEXT_CHARS = 39000

FENCE = "```"

#: Commits listed individually in a push summary.
MAX_COMMITS = 10

#: Optional ``chat.postMessage`` arguments copied from the payload.
PASSTHROUGH_KEYS = ("thread_ts", "blocks", "attachments", "mrkdwn", "unfurl_links")


def build_message(
    payload: dict[str, Any],
    channel_id: str,
    event: Optional[str] = None,
) -> dict[str, Any]:
    """Return the ``chat.postMessage`` arguments for *payload*.

    Args:
        payload: Normalised request payload.
        channel_id: Channel used when the payload does not name one.
        event: GitHub event name from the request headers, if any.

    Returns:
        A dict with at least ``channel`` and ``text``.
    """
    channel = payload.get("channel")
    message: dict[str, Any] = {
        "channel": channel if isinstance(channel, str) and channel else channel_id,
    }

    text = payload.get("text")
    if not isinstance(text, str) or not text:
        event = event or payload.get("event")
        if isinstance(event, str) and event:
            text = describe_github_event(event, payload)
        else:
            text = _render_raw(payload)

    message["text"] = text
    for key in PASSTHROUGH_KEYS:
        if key in payload:
            message[key] = payload[key]
    return message


def describe_github_event(event: str, payload: dict[str, Any]) -> str:
    """Summarise a GitHub webhook delivery as a one-paragraph message.

    The payload has no guaranteed shape, so every field is type-checked
    before use and missing or mistyped fields fall back to placeholders.

    Args:
        event: Value of the ``X-GitHub-Event`` header.
        payload: The delivery body.
    """
    repo = _get(payload, "repository", "full_name") or "github"

    if event == "push":
        return _describe_push(repo, payload)

    if event in ("pull_request", "issues"):
        key = "pull_request" if event == "pull_request" else "issue"
        noun = "pull request" if event == "pull_request" else "issue"
        item = _dict(payload.get(key))
        user = _get(item, "user", "login") or _get(payload, "sender", "login") or "someone"
        action = payload.get("action") or "updated"
        line = f"[{repo}] {user} {action} {noun} #{item.get('number', '?')}"
        if item.get("title"):
            line += f": {item['title']}"
        url = item.get("html_url")
        return f"{line}\n{url}" if url else line

    if event == "ping":
        zen = payload.get("zen")
        return f"[{repo}] webhook ping: {zen}" if zen else f"[{repo}] webhook ping"

    return f"[{repo}] {event} event"


def _describe_push(repo: str, payload: dict[str, Any]) -> str:
    pusher = _get(payload, "pusher", "name") or _get(payload, "sender", "login") or "someone"
    ref = payload.get("ref")
    branch = str(ref).rsplit("/", 1)[-1] if ref else "unknown branch"
    commits = payload.get("commits")
    if not isinstance(commits, list):
        commits = []

    noun = "commit" if len(commits) == 1 else "commits"
    lines = [f"[{repo}] {pusher} pushed {len(commits)} {noun} to {branch}"]
    for commit in commits[:MAX_COMMITS]:
        commit = _dict(commit)
        sha = str(commit.get("id") or "")[:7]
        summary = str(commit.get("message") or "").splitlines()
        lines.append(f"• `{sha}` {summary[0] if summary else ''}".rstrip())
    if len(commits) > MAX_COMMITS:
        lines.append(f"… and {len(commits) - MAX_COMMITS} more")

    compare = payload.get("compare")
    if compare:
        lines.append(str(compare))
    return "\n".join(lines)


def _get(mapping: Any, *keys: str) -> Any:
    """Walk nested dicts, returning ``None`` at the first missing key."""
    for key in keys:
        if not isinstance(mapping, dict):
            return None
        mapping = mapping.get(key)
    return mapping


def _dict(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _render_raw(payload: dict[str, Any]) -> str:
    """Show *payload* as a JSON code block, cut to fit inside the fences."""
    dump = json.dumps(payload, indent=2, sort_keys=True, default=str)
    limit = MAX_TEXT_CHARS - 2 * len(FENCE)
    if len(dump) > limit:
        dump = dump[: limit - 1] + "…"
    return f"{FENCE}{dump}{FENCE}"
