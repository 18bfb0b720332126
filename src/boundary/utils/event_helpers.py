"""Event helper utilities for API Gateway Proxy Integration events.

Requests reach the trust boundary as API Gateway proxy event dicts (FastAPI
requests are converted to the same shape first). These helpers give
case-insensitive header lookup and single-field extraction from a
form-encoded or JSON body.

Only one field is ever pulled out of a body; multipart and other content
types are not parsed.
"""

import base64
import binascii
import logging
from urllib.parse import parse_qs

import orjson

logger = logging.getLogger(__name__)

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"
JSON_CONTENT_TYPE = "application/json"


def get_header(event: dict, name: str, default: str | None = None) -> str | None:
    """Get a header value with case-insensitive lookup.

    API Gateway normalizes headers to lowercase, so the lowercase key is
    tried first. Hand-built events (tests, local runners) may keep the
    original casing, which the fallback scan covers.

    Args:
        event: API Gateway Proxy Integration event dict.
        name: Header name (any case).
        default: Value to return if header is not present.

    Returns:
        Header value or default.
    """
    headers = event.get("headers") or {}
    lowered = name.lower()
    value = headers.get(lowered)
    if value is None:
        for key, candidate in headers.items():
            if key.lower() == lowered:
                value = candidate
                break
    return default if value is None else value


def get_method(event: dict) -> str:
    """Get the upper-cased HTTP method for REST (v1) or HTTP API (v2) events."""
    method = event.get("httpMethod")
    if not method:
        http = (event.get("requestContext") or {}).get("http") or {}
        method = http.get("method") or ""
    return method.upper()


def get_content_type(event: dict) -> str:
    """Media type of the request body without parameters, lower-cased."""
    content_type = get_header(event, "content-type") or ""
    return content_type.split(";", 1)[0].strip().lower()


def get_body(event: dict) -> str:
    """Return the request body as text, decoding base64 bodies.

    A body flagged as base64 that doesn't decode is treated as empty.
    """
    body = event.get("body") or ""
    if isinstance(body, bytes):
        body = body.decode("utf-8", errors="replace")

    if event.get("isBase64Encoded"):
        try:
            body = base64.b64decode(body, validate=True).decode(
                "utf-8", errors="replace"
            )
        except (binascii.Error, ValueError):
            logger.debug("Discarding body that is not valid base64")
            return ""

    return body


def get_body_field(event: dict, name: str) -> str | None:
    """Extract a single string field from a form-encoded or JSON body.

    JSON bodies must be an object and the field must be a string. For form
    bodies with a repeated field, the first value wins. A body sent without
    a Content-Type is parsed as JSON when it looks like an object and as a
    form otherwise.

    Args:
        event: API Gateway Proxy Integration event dict.
        name: Field name.

    Returns:
        The field value, or None if absent or not a string.
    """
    body = get_body(event)
    if not body:
        return None

    content_type = get_content_type(event)
    if not content_type:
        content_type = (
            JSON_CONTENT_TYPE if body.lstrip().startswith("{") else FORM_CONTENT_TYPE
        )

    if content_type == JSON_CONTENT_TYPE or content_type.endswith("+json"):
        return _json_field(body, name)

    if content_type == FORM_CONTENT_TYPE:
        values = parse_qs(body, keep_blank_values=True).get(name)
        return values[0] if values else None

    return None


def _json_field(body: str, name: str) -> str | None:
    try:
        payload = orjson.loads(body)
    except orjson.JSONDecodeError:
        logger.debug("Request body is not valid JSON")
        return None

    if not isinstance(payload, dict):
        return None

    value = payload.get(name)
    return value if isinstance(value, str) else None
