"""CORS middleware for FastAPI/Starlette apps.

Evaluates the configured CorsPolicy once per request. Allowed preflights
are answered here with a 204; every other request goes downstream and the
response is decorated on the way out. A rejected origin is not an error:
the request proceeds and the response simply carries no CORS headers.

Usage:
    from src.boundary.config import load_cors_policy
    from src.boundary.middleware import CorsPolicyMiddleware

    app.add_middleware(CorsPolicyMiddleware, policy=load_cors_policy())
"""

import logging

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from src.boundary.cors.evaluator import ORIGIN_HEADER, evaluate_origin
from src.boundary.cors.headers import apply_cors_headers
from src.boundary.cors.policy import CorsPolicy
from src.boundary.cors.responder import (
    REQUEST_HEADERS_HEADER,
    is_preflight_request,
    preflight_response,
)

logger = logging.getLogger(__name__)


class CorsPolicyMiddleware(BaseHTTPMiddleware):
    def __init__(self, app: ASGIApp, policy: CorsPolicy) -> None:
        super().__init__(app)
        self.policy = policy

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        origin = request.headers.get(ORIGIN_HEADER)
        decision = await evaluate_origin(
            origin, self.policy.origin, credentials=self.policy.credentials
        )

        event = {"httpMethod": request.method, "headers": dict(request.headers)}
        if decision.allow and is_preflight_request(event):
            preflight = preflight_response(
                decision, self.policy, request.headers.get(REQUEST_HEADERS_HEADER)
            )
            # Starlette omits Content-Length on 204 itself
            headers = {
                name: value
                for name, value in preflight["headers"].items()
                if name.lower() != "content-length"
            }
            return Response(status_code=preflight["statusCode"], headers=headers)

        response = await call_next(request)
        return apply_cors_headers(response, decision, self.policy)
