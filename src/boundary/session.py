"""Session collaborator for the authenticity token lifecycle.

The session is owned by the host: it is created per request chain and
committed (usually as a signed cookie) by the caller. This module only
describes what the token manager and verifier need from it and ships an
adapter for the common case of a plain mutable mapping, such as the dict
Starlette's SessionMiddleware puts in ``request.session``.
"""

from collections.abc import MutableMapping
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class SessionStore(Protocol):
    """Minimal key/value interface borrowed from the host session."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...


class MappingSession:
    """Adapt a MutableMapping to the SessionStore interface.

    Writes go straight through to the wrapped mapping, so whatever the host
    serializes at the end of the request sees the new token.
    """

    def __init__(self, data: MutableMapping[str, Any]):
        self._data = data

    def get(self, key: str) -> str | None:
        value = self._data.get(key)
        # Anything that isn't a non-empty string can't be a token we issued
        if not isinstance(value, str) or not value:
            return None
        return value

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    @property
    def data(self) -> MutableMapping[str, Any]:
        """The wrapped mapping."""
        return self._data
