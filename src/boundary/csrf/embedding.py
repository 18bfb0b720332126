"""Client embedding of authenticity tokens.

The token travels back under a field named after the session key, either as
a hidden form input rendered into the page or as a property of a JSON body.
"""

from html import escape

from src.boundary.csrf.tokens import DEFAULT_SESSION_KEY


def authenticity_token_input(token: str, key: str = DEFAULT_SESSION_KEY) -> str:
    """Render a hidden form input carrying the token.

    Example:
        >>> authenticity_token_input("abc")
        '<input type="hidden" name="csrf" value="abc">'
    """
    return f'<input type="hidden" name="{escape(key)}" value="{escape(token)}">'


def authenticity_token_field(
    token: str, key: str = DEFAULT_SESSION_KEY
) -> dict[str, str]:
    """Body property for JSON clients: merge into the request payload."""
    return {key: token}
