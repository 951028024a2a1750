"""Turn an inbound HTTP request into a single flat payload mapping.

The payload is the JSON body with the request parameters laid over it.
Parameters always win on key collision.  Parsing is tolerant: an empty or
malformed body contributes nothing rather than failing the request.
"""

import json
import logging
from collections.abc import Iterable, Mapping
from typing import Any, Optional, Union

logger = logging.getLogger(__name__)

#: Media types whose body carries form fields.
FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")

RawBody = Optional[Union[bytes, str]]


def normalize(raw_body: RawBody, query_params: Mapping[str, Any]) -> dict[str, Any]:
    """Merge the decoded body and the request parameters.

    Args:
        raw_body: Raw request body.  May be empty, ``None``, or not JSON.
        query_params: Query-string (and form) parameters.

    Returns:
        A new dict containing the body's keys overlaid with
        *query_params*.
    """
    payload = _as_mapping(_decode_body(raw_body))
    payload.update(query_params)
    return payload


def request_params(
    query_params: Mapping[str, str],
    form_fields: Iterable[tuple[str, Any]] = (),
) -> dict[str, str]:
    """Combine query-string parameters and form fields.

    Form fields override query fields.  For repeated keys the last value
    wins.  Non-string form values (file uploads) are skipped.

    Args:
        query_params: Parsed query string.
        form_fields: ``(name, value)`` pairs from the request form.

    Returns:
        A flat ``{name: value}`` dict.
    """
    params = dict(query_params)
    for name, value in form_fields:
        if isinstance(value, str):
            params[name] = value
    return params


def is_form(content_type: Optional[str]) -> bool:
    """Return ``True`` if *content_type* denotes a form-encoded body."""
    if not content_type:
        return False
    return content_type.split(";", 1)[0].strip().lower() in FORM_CONTENT_TYPES


def _decode_body(raw_body: RawBody) -> Any:
    if not raw_body:
        return None
    try:
        return json.loads(raw_body)
    except (ValueError, RecursionError):
        logger.debug("Request body is not valid JSON; ignoring it")
        return None


def _as_mapping(value: Any) -> dict[str, Any]:
    """Coerce a decoded JSON value into a string-keyed dict.

    Objects are returned as-is, arrays are keyed by their index, and any
    other non-null scalar becomes ``{"0": value}``.
    """
    if value is None:
        return {}
    if isinstance(value, dict):
        return dict(value)
    if isinstance(value, list):
        return {str(i): item for i, item in enumerate(value)}
    return {"0": value}
