"""Host integrations for FastAPI apps and API Gateway proxy handlers."""

from src.boundary.middleware.cors_middleware import CorsPolicyMiddleware
from src.boundary.middleware.csrf_middleware import (
    install_csrf_error_handler,
    issue_authenticity_token,
    require_authenticity_token,
    require_csrf,
)

__all__ = [
    "CorsPolicyMiddleware",
    "install_csrf_error_handler",
    "issue_authenticity_token",
    "require_authenticity_token",
    "require_csrf",
]
