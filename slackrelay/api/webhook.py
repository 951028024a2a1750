"""API router for the inbound webhook.

Endpoints
---------
* ``ANY /webhook`` — relay the request payload to Slack.

Each request loads the credentials file, merges body and parameters,
builds a ``chat.postMessage`` body and sends it.  A bad config file
rejects the request with 500 before anything is sent; a transport failure
is reported as 502.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse

from slackrelay.config import Config, get_settings, load_config
from slackrelay.errors import ConfigError
from slackrelay.relay.caller import SlackCaller
from slackrelay.relay.messages import build_message
from slackrelay.relay.normalizer import is_form, normalize, request_params

logger = logging.getLogger(__name__)

router = APIRouter(tags=["webhook"])


# ---------------------------------------------------------------------------
# Dependencies
# ---------------------------------------------------------------------------


def get_relay_config() -> Config:
    """Load the credentials for the current request.

    Raises:
        HTTPException: 500 if the config file is unusable.
    """
    try:
        return load_config()
    except ConfigError as exc:
        logger.error("Rejecting webhook: %s", exc)
        raise HTTPException(status_code=500, detail="Internal Server Error") from exc


def get_caller(config: Config = Depends(get_relay_config)) -> SlackCaller:
    """Build a :class:`SlackCaller` bound to this request's credentials."""
    cfg = get_settings()
    return SlackCaller(config, base_url=cfg.api_base_url, timeout=cfg.call_timeout)


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


@router.api_route("/webhook", methods=["GET", "POST", "PUT", "PATCH", "DELETE"])
async def api_relay_webhook(
    request: Request,
    config: Config = Depends(get_relay_config),
    caller: SlackCaller = Depends(get_caller),
):
    """Forward the inbound payload to Slack and return Slack's raw reply."""
    raw_body = await request.body()
    form_fields = []
    if is_form(request.headers.get("content-type")):
        form = await request.form()
        form_fields = form.multi_items()
    params = request_params(request.query_params, form_fields)
    payload = normalize(raw_body, params)
    message = build_message(
        payload,
        config.channel_id,
        event=request.headers.get("x-github-event"),
    )

    endpoint = get_settings().message_endpoint
    result = await run_in_threadpool(caller.post, endpoint, message)

    if result.error is not None:
        return JSONResponse(
            status_code=502,
            content={"ok": False, "error": str(result.error), "response": None},
        )

    reply = result.json()
    ok = bool(reply.get("ok", True)) if isinstance(reply, dict) else True
    if not ok:
        logger.warning("Slack rejected %s: %s", endpoint, reply.get("error"))
    return {"ok": ok, "response": result.response_body}
