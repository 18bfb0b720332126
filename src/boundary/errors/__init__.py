"""Error types raised at the HTTP trust boundary."""

from src.boundary.errors.config_errors import ConfigurationError
from src.boundary.errors.csrf_errors import (
    CSRF_ERROR_STATUS,
    CSRF_FAILURE_MESSAGES,
    CsrfFailure,
    InvalidAuthenticityTokenError,
)

__all__ = [
    "CSRF_ERROR_STATUS",
    "CSRF_FAILURE_MESSAGES",
    "ConfigurationError",
    "CsrfFailure",
    "InvalidAuthenticityTokenError",
]
