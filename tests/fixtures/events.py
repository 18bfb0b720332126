"""Builders for API Gateway proxy events used across unit tests."""

import base64
from urllib.parse import urlencode

import orjson


def make_event(
    method: str = "POST",
    path: str = "/api/v2/forms/submit",
    headers: dict[str, str] | None = None,
    body: str | None = None,
    is_base64: bool = False,
) -> dict:
    """Build a REST (v1) proxy event with lowercase header names."""
    return {
        "httpMethod": method,
        "path": path,
        "headers": {k.lower(): v for k, v in (headers or {}).items()},
        "body": body,
        "isBase64Encoded": is_base64,
    }


def form_event(fields: dict[str, str], headers: dict[str, str] | None = None, **kw) -> dict:
    """POST event with an application/x-www-form-urlencoded body."""
    all_headers = {"Content-Type": "application/x-www-form-urlencoded"}
    all_headers.update(headers or {})
    return make_event(headers=all_headers, body=urlencode(fields), **kw)


def json_event(payload, headers: dict[str, str] | None = None, **kw) -> dict:
    """POST event with an application/json body."""
    all_headers = {"Content-Type": "application/json"}
    all_headers.update(headers or {})
    return make_event(headers=all_headers, body=orjson.dumps(payload).decode(), **kw)


def b64(text: str) -> str:
    return base64.b64encode(text.encode()).decode()
