"""
Secure logging helpers for request-controlled values.

Everything that reaches the trust boundary (Origin headers, form fields,
tokens) is attacker-controlled. These helpers keep it from injecting fake
log lines or leaking secrets:

- Origins and other header values go through sanitize_for_log()
- Exceptions are logged by type only via get_safe_error_info()
- Authenticity tokens are NEVER logged; use the session key instead

Security References:
- OWASP Logging Cheat Sheet: https://cheatsheetseries.owasp.org/cheatsheets/Logging_Cheat_Sheet.html
- CodeQL Log Injection: https://codeql.github.com/codeql-query-help/python/py-log-injection/
"""

import re
from typing import Any

# Maximum length for logged user input to prevent log flooding
MAX_LOG_INPUT_LENGTH = 200


def sanitize_for_log(value: Any, max_length: int = MAX_LOG_INPUT_LENGTH) -> str:
    """
    Sanitize a value for safe logging by removing CRLF and limiting length.

    Args:
        value: Value to sanitize (will be converted to string)
        max_length: Maximum length of output (default: 200)

    Returns:
        Sanitized string safe for logging

    Example:
        >>> sanitize_for_log("https://a.com\\r\\n[FAKE] allowed")
        'https://a.com  [FAKE] allowed'
    """
    text = str(value)

    # CRLF injection
    text = text.replace("\r", " ").replace("\n", " ").replace("\t", " ")

    text = re.sub(r"[\x00-\x1f\x7f-\x9f]", " ", text)

    if len(text) > max_length:
        text = text[:max_length] + "..."

    return text


def get_safe_error_info(exception: Exception) -> dict[str, str]:
    """
    Extract safe information from an exception for logging.

    Returns only the exception type, NOT the message: messages raised from
    inside an origin predicate may echo the origin back.

    Example:
        >>> get_safe_error_info(ValueError("user input here"))
        {'error_type': 'ValueError'}
    """
    return {"error_type": type(exception).__name__}
