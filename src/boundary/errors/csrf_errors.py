"""CSRF verification failure types.

Three failure kinds exist, but callers only ever see one exception class,
InvalidAuthenticityTokenError, which maps to HTTP 422. The kind is kept on
the exception for logging and tests; the client only gets the message.
"""

from __future__ import annotations

from enum import Enum


class CsrfFailure(str, Enum):
    """Why an authenticity token check failed."""

    MISSING_SESSION_TOKEN = "MISSING_SESSION_TOKEN"  # noqa: S105 - not a password
    MISSING_BODY_TOKEN = "MISSING_BODY_TOKEN"  # noqa: S105 - not a password
    TOKEN_MISMATCH = "TOKEN_MISMATCH"  # noqa: S105 - not a password


CSRF_FAILURE_MESSAGES: dict[CsrfFailure, str] = {
    CsrfFailure.MISSING_SESSION_TOKEN: "Can't find CSRF token in session.",
    CsrfFailure.MISSING_BODY_TOKEN: "Can't find CSRF token in body.",
    CsrfFailure.TOKEN_MISMATCH: "Can't verify CSRF token authenticity.",
}

# Unprocessable Entity
CSRF_ERROR_STATUS = 422


class InvalidAuthenticityTokenError(Exception):
    """Raised when a submitted authenticity token can't be trusted.

    Attributes:
        kind: Which check failed.
        message: Human-readable message, safe to return to the client.
        status_code: Always 422.
    """

    status_code = CSRF_ERROR_STATUS

    def __init__(self, kind: CsrfFailure, message: str | None = None) -> None:
        self.kind = kind
        self.message = message or CSRF_FAILURE_MESSAGES[kind]
        super().__init__(self.message)
