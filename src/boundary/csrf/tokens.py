"""Authenticity token issuance.

Tokens are drawn from the OS CSPRNG (secrets module) and stored in the
host-owned session under a configurable key. A session holds one live
token per key: issuing again overwrites, and any token handed out before
the overwrite stops verifying.

Security considerations:
- Never derive tokens from counters, timestamps or user data
- The token value is never logged
"""

import logging
import secrets

from src.boundary.session import SessionStore

logger = logging.getLogger(__name__)

DEFAULT_SESSION_KEY = "csrf"

# 256 bits of entropy, 43 URL-safe characters
CSRF_TOKEN_BYTES = 32


def generate_authenticity_token() -> str:
    """Generate a cryptographically secure authenticity token.

    Returns:
        43-character URL-safe string (32 bytes = 256 bits of entropy)
    """
    return secrets.token_urlsafe(CSRF_TOKEN_BYTES)


def create_authenticity_token(
    session: SessionStore, key: str = DEFAULT_SESSION_KEY
) -> str:
    """Issue a fresh token and store it in the session.

    The caller is responsible for committing the session afterwards.

    Args:
        session: Host session (get/set).
        key: Session key, also the form field name the client submits under.

    Returns:
        The new token, for embedding in the rendered page.
    """
    token = generate_authenticity_token()
    replaced = session.get(key) is not None
    session.set(key, token)
    logger.debug(
        "Issued authenticity token",
        extra={"session_key": key, "replaced_existing": replaced},
    )
    return token
