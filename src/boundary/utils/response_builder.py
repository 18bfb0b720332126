"""Response builder utilities for API Gateway Proxy Integration responses.

Produces responses in the exact API Gateway Proxy Integration format:
    {"statusCode": int, "headers": dict, "body": str, "isBase64Encoded": bool}

Bodies are serialized with orjson.
"""

import orjson

from src.boundary.errors.csrf_errors import InvalidAuthenticityTokenError


def json_response(
    status_code: int,
    body: dict | list,
    headers: dict[str, str] | None = None,
) -> dict:
    """Build a JSON API Gateway Proxy Integration response.

    Args:
        status_code: HTTP status code.
        body: Response body (will be serialized with orjson).
        headers: Additional response headers.

    Returns:
        API Gateway Proxy Integration response dict.
    """
    response_headers = {"Content-Type": "application/json"}
    if headers:
        response_headers.update(headers)
    return {
        "statusCode": status_code,
        "headers": response_headers,
        "body": orjson.dumps(body).decode(),
        "isBase64Encoded": False,
    }


def empty_response(status_code: int = 204, headers: dict[str, str] | None = None) -> dict:
    """Build a response with no body, e.g. for a CORS preflight."""
    response_headers = {"Content-Length": "0"}
    if headers:
        response_headers.update(headers)
    return {
        "statusCode": status_code,
        "headers": response_headers,
        "body": "",
        "isBase64Encoded": False,
    }


def error_response(status_code: int, message: str) -> dict:
    """Build an error response carrying a human-readable message.

    Produces: {"message": "..."}
    """
    return json_response(status_code, {"message": message})


def authenticity_error_response(exc: InvalidAuthenticityTokenError) -> dict:
    """Translate a failed CSRF check into a 422 proxy response."""
    return error_response(exc.status_code, exc.message)
