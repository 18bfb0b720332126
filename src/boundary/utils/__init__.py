"""Request/response helpers for API Gateway proxy events."""

from src.boundary.utils.event_helpers import (
    get_body_field,
    get_header,
    get_method,
)
from src.boundary.utils.response_builder import (
    authenticity_error_response,
    empty_response,
    error_response,
    json_response,
)

__all__ = [
    "authenticity_error_response",
    "empty_response",
    "error_response",
    "get_body_field",
    "get_header",
    "get_method",
    "json_response",
]
