"""Origin/CORS policy evaluation and response headers."""

from src.boundary.cors.evaluator import (
    OriginDecision,
    evaluate_origin,
    evaluate_request,
)
from src.boundary.cors.headers import apply_cors_headers
from src.boundary.cors.policy import (
    AllowAllOrigins,
    CorsPolicy,
    DenyAllOrigins,
    ExactOrigin,
    OriginList,
    OriginMatcher,
    OriginPattern,
    OriginPredicate,
    parse_origin_policy,
)
from src.boundary.cors.responder import (
    apply_cors,
    handle_preflight,
    is_preflight_request,
    preflight_response,
)

__all__ = [
    "AllowAllOrigins",
    "CorsPolicy",
    "DenyAllOrigins",
    "ExactOrigin",
    "OriginDecision",
    "OriginList",
    "OriginMatcher",
    "OriginPattern",
    "OriginPredicate",
    "apply_cors",
    "apply_cors_headers",
    "evaluate_origin",
    "evaluate_request",
    "handle_preflight",
    "is_preflight_request",
    "parse_origin_policy",
    "preflight_response",
]
