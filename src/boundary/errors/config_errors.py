"""Setup-time configuration errors.

Raised while building a CORS policy or loading settings from the
environment, before any request is processed. An application that hits one
of these should fail to start rather than serve with a half-built policy.
"""

from __future__ import annotations


class ConfigurationError(Exception):
    """Raised for a malformed policy shape or invalid setting.

    Deliberately not a ValueError subclass: pydantic only converts
    ValueError/AssertionError raised inside validators into a
    ValidationError, so this one propagates out of model construction
    unchanged.
    """

    def __init__(self, message: str, setting: str | None = None) -> None:
        self.message = message
        self.setting = setting
        if setting:
            message = f"{setting}: {message}"
        super().__init__(message)
