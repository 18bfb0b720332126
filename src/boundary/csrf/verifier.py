"""Authenticity token verification (double-submit pattern).

A state-changing request is trusted only if the token it submits in its
body equals the token stored in the session. The check runs in order and
stops at the first failure:

    1. session has no token under the key        -> MISSING_SESSION_TOKEN
    2. body has no (or an empty) field for the key -> MISSING_BODY_TOKEN
    3. the two differ in any byte                -> TOKEN_MISMATCH

A successful check does not rotate or delete the token. The same token
keeps verifying until the session is reset or a new one is issued.

check_authenticity_token() returns a typed result; verify_authenticity_token()
raises InvalidAuthenticityTokenError (HTTP 422) so a host error boundary can
turn it into a response.
"""

import hmac
import logging

from pydantic import BaseModel

from src.boundary.csrf.tokens import DEFAULT_SESSION_KEY
from src.boundary.errors.csrf_errors import CsrfFailure, InvalidAuthenticityTokenError
from src.boundary.session import SessionStore
from src.boundary.utils.event_helpers import get_body_field, get_header

logger = logging.getLogger(__name__)


class VerificationResult(BaseModel):
    """Outcome of an authenticity token check."""

    ok: bool
    failure: CsrfFailure | None = None

    def raise_for_failure(self) -> None:
        """Raise InvalidAuthenticityTokenError if the check failed."""
        if self.failure is not None:
            raise InvalidAuthenticityTokenError(self.failure)


VERIFIED = VerificationResult(ok=True)


def _fail(kind: CsrfFailure, key: str) -> VerificationResult:
    logger.warning(
        "Authenticity token rejected",
        extra={"session_key": key, "reason": kind.value},
    )
    return VerificationResult(ok=False, failure=kind)


def tokens_match(stored: str, submitted: str) -> bool:
    """Constant-time equality over the UTF-8 bytes of both tokens.

    hmac.compare_digest rejects non-ASCII str arguments, and a submitted
    value is attacker-controlled, so both sides are compared as bytes.
    Lone surrogates (legal in JSON-decoded strings) are encoded with
    surrogatepass so they compare unequal instead of raising.
    """
    return hmac.compare_digest(
        stored.encode("utf-8", "surrogatepass"),
        submitted.encode("utf-8", "surrogatepass"),
    )


def check_submitted_token(
    submitted: str | None,
    session: SessionStore,
    key: str = DEFAULT_SESSION_KEY,
) -> VerificationResult:
    """Check an already extracted submission against the session token.

    For hosts that parse the request body themselves (e.g. multipart forms
    through Starlette's request.form()).
    """
    stored = session.get(key)
    if not stored:
        return _fail(CsrfFailure.MISSING_SESSION_TOKEN, key)

    if not submitted:
        return _fail(CsrfFailure.MISSING_BODY_TOKEN, key)

    if not tokens_match(stored, submitted):
        return _fail(CsrfFailure.TOKEN_MISMATCH, key)

    return VERIFIED


def check_authenticity_token(
    event: dict,
    session: SessionStore,
    key: str = DEFAULT_SESSION_KEY,
    header_name: str | None = None,
) -> VerificationResult:
    """Check the submitted token against the session-stored token.

    Args:
        event: API Gateway proxy event carrying the submission.
        session: Host session (get/set).
        key: Session key and body field name.
        header_name: Optional header (e.g. "X-CSRF-Token") consulted when the
            body has no token. Body-only when None.

    Returns:
        VerificationResult with ok=True, or ok=False and the failure kind.
    """
    submitted = get_body_field(event, key)
    if not submitted and header_name:
        submitted = get_header(event, header_name)
    return check_submitted_token(submitted, session, key)


def verify_authenticity_token(
    event: dict,
    session: SessionStore,
    key: str = DEFAULT_SESSION_KEY,
    header_name: str | None = None,
) -> None:
    """Verify the submitted token, raising on any failure.

    Raises:
        InvalidAuthenticityTokenError: For all three failure kinds.
    """
    check_authenticity_token(event, session, key, header_name).raise_for_failure()
