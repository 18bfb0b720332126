"""Request-level CORS entry points for proxy-event handlers.

apply_cors() is what a handler calls on its way out: evaluate the request's
Origin, then decorate the response. Preflight (OPTIONS) requests are
answered directly with preflight_response().

Usage:
    from src.boundary.cors.responder import apply_cors, handle_preflight

    async def handler(event, context):
        if preflight := await handle_preflight(event, CORS_POLICY):
            return preflight
        response = json_response(200, {"ok": True})
        return await apply_cors(event, response, CORS_POLICY)
"""

from typing import TypeVar

from src.boundary.cors.evaluator import OriginDecision, evaluate_request
from src.boundary.cors.headers import (
    ALLOW_HEADERS,
    apply_cors_headers,
    get_response_headers,
)
from src.boundary.cors.policy import CorsPolicy
from src.boundary.utils.event_helpers import get_header, get_method
from src.boundary.utils.response_builder import empty_response

REQUEST_METHOD_HEADER = "Access-Control-Request-Method"
REQUEST_HEADERS_HEADER = "Access-Control-Request-Headers"

R = TypeVar("R")


def is_preflight_request(event: dict) -> bool:
    """True for an OPTIONS request carrying Origin and a requested method."""
    return (
        get_method(event) == "OPTIONS"
        and bool(get_header(event, "Origin"))
        and bool(get_header(event, REQUEST_METHOD_HEADER))
    )


def preflight_response(
    decision: OriginDecision,
    policy: CorsPolicy,
    requested_headers: str | None = None,
) -> dict:
    """Build a 204 preflight response.

    When the policy lists no allowed headers, the headers the browser asked
    for are echoed back so the actual request isn't blocked on them.
    """
    response = apply_cors_headers(empty_response(204), decision, policy)
    if decision.allow and not policy.allowed_headers and requested_headers:
        get_response_headers(response)[ALLOW_HEADERS] = requested_headers
    return response


async def handle_preflight(event: dict, policy: CorsPolicy) -> dict | None:
    """Answer a preflight request, or return None for any other request.

    A rejected preflight still gets a 204, just without CORS headers; the
    browser then refuses the actual request on its own.
    """
    if not is_preflight_request(event):
        return None
    decision = await evaluate_request(event, policy)
    return preflight_response(
        decision, policy, get_header(event, REQUEST_HEADERS_HEADER)
    )


async def apply_cors(event: dict, response: R, policy: CorsPolicy) -> R:
    """Evaluate the request's Origin and write CORS headers onto response."""
    decision = await evaluate_request(event, policy)
    return apply_cors_headers(response, decision, policy)
