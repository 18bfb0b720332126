"""CSRF authenticity token lifecycle: issue, embed, verify."""

from src.boundary.csrf.embedding import (
    authenticity_token_field,
    authenticity_token_input,
)
from src.boundary.csrf.tokens import (
    DEFAULT_SESSION_KEY,
    create_authenticity_token,
    generate_authenticity_token,
)
from src.boundary.csrf.verifier import (
    VerificationResult,
    check_authenticity_token,
    check_submitted_token,
    verify_authenticity_token,
)

__all__ = [
    "DEFAULT_SESSION_KEY",
    "VerificationResult",
    "authenticity_token_field",
    "authenticity_token_input",
    "check_authenticity_token",
    "check_submitted_token",
    "create_authenticity_token",
    "generate_authenticity_token",
    "verify_authenticity_token",
]
