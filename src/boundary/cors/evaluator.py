"""Origin policy evaluation.

Decides whether a request's Origin is allowed and which value the
Access-Control-Allow-Origin header should carry. The decision is derived
only from the Origin header of the current request: a request without one
is never allowed, whatever the policy. That is not the same as a wildcard
allow, which still requires an Origin to be present.

Evaluation is async because an OriginPredicate may suspend on I/O. Callers
must await the decision before writing headers.
"""

import logging

from pydantic import BaseModel

from src.boundary.cors.policy import WILDCARD_ORIGIN, CorsPolicy, OriginMatcher
from src.boundary.logging_utils import get_safe_error_info, sanitize_for_log
from src.boundary.utils.event_helpers import get_header

logger = logging.getLogger(__name__)

ORIGIN_HEADER = "Origin"


class OriginDecision(BaseModel):
    """Result of evaluating an origin against a policy."""

    allow: bool
    header_value: str | None = None


REJECTED = OriginDecision(allow=False, header_value=None)


async def evaluate_origin(
    origin: str | None,
    policy: OriginMatcher,
    credentials: bool = False,
) -> OriginDecision:
    """Evaluate a request origin against an origin policy.

    Args:
        origin: Value of the request's Origin header, or None if absent.
        policy: Origin policy variant.
        credentials: Whether the policy allows credentials. With credentials
            a wildcard is never emitted; the literal origin is reflected.

    Returns:
        OriginDecision. header_value is None whenever allow is False.
    """
    if not origin:
        return REJECTED

    try:
        matched = await policy.matches(origin)
    except Exception as exc:
        logger.error(
            "Origin policy check failed",
            extra={
                "origin": sanitize_for_log(origin),
                "policy": type(policy).__name__,
                **get_safe_error_info(exc),
            },
        )
        raise

    if not matched:
        logger.debug(
            "Origin rejected by CORS policy",
            extra={
                "origin": sanitize_for_log(origin),
                "policy": type(policy).__name__,
            },
        )
        return REJECTED

    if policy.allows_any_origin and not credentials:
        return OriginDecision(allow=True, header_value=WILDCARD_ORIGIN)

    return OriginDecision(allow=True, header_value=origin)


async def evaluate_request(event: dict, policy: CorsPolicy) -> OriginDecision:
    """Evaluate the Origin header of a proxy event against a full policy."""
    origin = get_header(event, ORIGIN_HEADER)
    return await evaluate_origin(origin, policy.origin, credentials=policy.credentials)
