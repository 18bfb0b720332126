"""CORS response header writer.

Applies an OriginDecision plus the static options of a CorsPolicy onto an
outgoing response. A rejected decision leaves the response untouched.

Writing is idempotent: every header is set, never appended, so calling the
writer twice with the same inputs yields the same single-valued headers.
Two response shapes are accepted:

- an API Gateway proxy response dict (headers under "headers", created
  if missing)
- any object with a mutable ``headers`` mapping, such as a Starlette or
  FastAPI Response
"""

from collections.abc import MutableMapping
from typing import Any, TypeVar

from src.boundary.cors.evaluator import OriginDecision
from src.boundary.cors.policy import WILDCARD_ORIGIN, CorsPolicy

ALLOW_ORIGIN = "Access-Control-Allow-Origin"
ALLOW_METHODS = "Access-Control-Allow-Methods"
ALLOW_HEADERS = "Access-Control-Allow-Headers"
EXPOSE_HEADERS = "Access-Control-Expose-Headers"
ALLOW_CREDENTIALS = "Access-Control-Allow-Credentials"
MAX_AGE = "Access-Control-Max-Age"
VARY = "Vary"

CORS_HEADERS = (
    ALLOW_ORIGIN,
    ALLOW_METHODS,
    ALLOW_HEADERS,
    EXPOSE_HEADERS,
    ALLOW_CREDENTIALS,
    MAX_AGE,
)

R = TypeVar("R")


def get_response_headers(response: Any) -> MutableMapping[str, str]:
    """Return the mutable header map of a proxy dict or Response object."""
    if isinstance(response, dict):
        headers = response.get("headers")
        if headers is None:
            headers = response["headers"] = {}
        return headers
    return response.headers


def _find(headers: MutableMapping[str, str], name: str) -> str | None:
    if not isinstance(headers, dict):
        # Starlette MutableHeaders is already case-insensitive
        return headers.get(name)
    lowered = name.lower()
    for key, value in headers.items():
        if key.lower() == lowered:
            return value
    return None


def _set(headers: MutableMapping[str, str], name: str, value: str) -> None:
    if isinstance(headers, dict):
        lowered = name.lower()
        for key in [k for k in headers if k.lower() == lowered and k != name]:
            del headers[key]
    headers[name] = value


def _add_vary_origin(headers: MutableMapping[str, str]) -> None:
    existing = _find(headers, VARY) or ""
    tokens = [token.strip() for token in existing.split(",") if token.strip()]
    if any(token == "*" or token.lower() == "origin" for token in tokens):
        return
    tokens.append("Origin")
    _set(headers, VARY, ", ".join(tokens))


def apply_cors_headers(response: R, decision: OriginDecision, policy: CorsPolicy) -> R:
    """Write CORS headers for an allowed origin onto a response.

    Args:
        response: Proxy response dict or object with a ``headers`` mapping.
            Mutated in place.
        decision: Result of evaluate_origin()/evaluate_request().
        policy: Source of methods, headers, credentials and max-age.

    Returns:
        The same response object, for callers that chain.
    """
    if not decision.allow or decision.header_value is None:
        return response

    headers = get_response_headers(response)

    _set(headers, ALLOW_ORIGIN, decision.header_value)
    _set(headers, ALLOW_METHODS, ", ".join(policy.methods))

    if policy.allowed_headers:
        _set(headers, ALLOW_HEADERS, ", ".join(policy.allowed_headers))

    if policy.exposed_headers:
        _set(headers, EXPOSE_HEADERS, ", ".join(policy.exposed_headers))

    if policy.credentials:
        _set(headers, ALLOW_CREDENTIALS, "true")

    if policy.max_age is not None:
        _set(headers, MAX_AGE, str(policy.max_age))

    # A reflected origin makes the response origin-specific for caches
    if decision.header_value != WILDCARD_ORIGIN:
        _add_vary_origin(headers)

    return response
