"""CSRF authenticity token integration for request handlers.

Two host styles are supported:

FastAPI - dependencies plus an exception handler that maps failures to 422:

    from fastapi import Depends
    from src.boundary.middleware.csrf_middleware import (
        install_csrf_error_handler,
        issue_authenticity_token,
        require_authenticity_token,
    )

    install_csrf_error_handler(app)

    @app.get("/form")
    async def form(token: str = Depends(issue_authenticity_token())):
        return {"csrf": token}

    @app.post("/submit", dependencies=[Depends(require_authenticity_token())])
    async def submit():
        ...

API Gateway proxy handlers - a decorator returning a 422 proxy response:

    @require_csrf(session_getter=load_session)
    def handler(event, context):
        ...

Safe methods (GET, HEAD, OPTIONS, TRACE) are never checked. On the FastAPI
path form bodies, urlencoded or multipart, are read with request.form().
"""

from __future__ import annotations

import functools
from collections.abc import Callable
from typing import Any, TypeVar

import orjson
from fastapi import FastAPI, Request
from fastapi.responses import Response

from src.boundary.config import get_csrf_session_key
from src.boundary.csrf.tokens import create_authenticity_token
from src.boundary.csrf.verifier import (
    check_authenticity_token,
    check_submitted_token,
)
from src.boundary.errors.csrf_errors import InvalidAuthenticityTokenError
from src.boundary.session import MappingSession, SessionStore
from src.boundary.utils.event_helpers import (
    FORM_CONTENT_TYPE,
    get_body_field,
    get_method,
)
from src.boundary.utils.response_builder import authenticity_error_response

CSRF_SAFE_METHODS = frozenset({"GET", "HEAD", "OPTIONS", "TRACE"})

MULTIPART_CONTENT_TYPE = "multipart/form-data"
FORM_CONTENT_TYPES = frozenset({FORM_CONTENT_TYPE, MULTIPART_CONTENT_TYPE})

F = TypeVar("F", bound=Callable[..., Any])


def scope_session(request: Request) -> SessionStore:
    """Default session getter: the dict Starlette keeps in scope["session"].

    SessionMiddleware populates it; without one an empty per-request dict
    is created, which means no token will ever verify.
    """
    return MappingSession(request.scope.setdefault("session", {}))


async def event_from_request(request: Request) -> dict:
    """Convert a Starlette request into an API Gateway proxy event dict.

    Starlette caches the body, so the endpoint can still read it afterwards.
    """
    body = await request.body()
    return {
        "httpMethod": request.method,
        "path": request.url.path,
        "headers": dict(request.headers),
        "body": body.decode("utf-8", errors="replace"),
        "isBase64Encoded": False,
    }


async def read_submitted_token(
    request: Request, key: str, header_name: str | None = None
) -> str | None:
    """Pull the submitted token out of a Starlette request.

    Form bodies, urlencoded or multipart, go through request.form(); a file
    upload under the key does not count as a token. JSON bodies use the
    same field rules as proxy events.
    """
    # Cache the raw body first so the endpoint can still read it
    await request.body()

    content_type = request.headers.get("content-type", "")
    if content_type.split(";", 1)[0].strip().lower() in FORM_CONTENT_TYPES:
        form = await request.form()
        value = form.get(key)
        submitted = value if isinstance(value, str) else None
    else:
        submitted = get_body_field(await event_from_request(request), key)

    if not submitted and header_name:
        submitted = request.headers.get(header_name)
    return submitted


def issue_authenticity_token(
    key: str | None = None,
    session_getter: Callable[[Request], SessionStore] | None = None,
) -> Callable[[Request], Any]:
    """Dependency factory: issue a token into the session, return it."""
    get_session = session_getter or scope_session

    async def dependency(request: Request) -> str:
        return create_authenticity_token(
            get_session(request), key or get_csrf_session_key()
        )

    return dependency


def require_authenticity_token(
    key: str | None = None,
    header_name: str | None = None,
    session_getter: Callable[[Request], SessionStore] | None = None,
) -> Callable[[Request], Any]:
    """Dependency factory: verify the submitted token on unsafe methods.

    Raises:
        InvalidAuthenticityTokenError: Handled by install_csrf_error_handler().
    """
    get_session = session_getter or scope_session

    async def dependency(request: Request) -> None:
        if request.method.upper() in CSRF_SAFE_METHODS:
            return
        session_key = key or get_csrf_session_key()
        submitted = await read_submitted_token(request, session_key, header_name)
        check_submitted_token(
            submitted, get_session(request), session_key
        ).raise_for_failure()

    return dependency


async def authenticity_error_handler(
    request: Request, exc: InvalidAuthenticityTokenError
) -> Response:
    """Render a failed check as 422 {"message": ...}."""
    return Response(
        content=orjson.dumps({"message": exc.message}),
        status_code=exc.status_code,
        media_type="application/json",
    )


def install_csrf_error_handler(app: FastAPI) -> None:
    app.add_exception_handler(InvalidAuthenticityTokenError, authenticity_error_handler)


def require_csrf(
    session_getter: Callable[[dict], SessionStore],
    key: str | None = None,
    header_name: str | None = None,
) -> Callable[[F], F]:
    """Decorator for proxy handlers ``handler(event, context)``.

    Args:
        session_getter: Loads the host session for an event.
        key: Session key and body field name (default: CSRF_SESSION_KEY).
        header_name: Optional header fallback for the submitted token.

    Returns:
        Decorator returning a 422 proxy response when the check fails.
    """

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(event: dict, context: Any = None) -> Any:
            if get_method(event) in CSRF_SAFE_METHODS:
                return func(event, context)

            result = check_authenticity_token(
                event,
                session_getter(event),
                key or get_csrf_session_key(),
                header_name,
            )
            if result.failure is not None:
                return authenticity_error_response(
                    InvalidAuthenticityTokenError(result.failure)
                )
            return func(event, context)

        return wrapper  # type: ignore[return-value]

    return decorator
