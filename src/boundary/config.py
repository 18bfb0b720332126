"""
Environment configuration for the trust boundary.

For On-Call Engineers:
    CORS and CSRF behaviour is driven by these environment variables:

    ENVIRONMENT              dev | test | preprod | prod (default: dev)
    CORS_ORIGINS             comma-separated origins; "*" allows any origin;
                             entries prefixed "re:" are full-match regexes,
                             e.g. "https://app.example.com,re:https://.*\\.example\\.com"
    CORS_ALLOW_CREDENTIALS   true/false (default: false)
    CORS_ALLOW_METHODS       comma-separated (default: GET,HEAD,PUT,PATCH,POST,DELETE)
    CORS_ALLOW_HEADERS       comma-separated (default: none)
    CORS_EXPOSE_HEADERS      comma-separated (default: none)
    CORS_MAX_AGE             seconds (default: unset)
    CSRF_SESSION_KEY         session key and form field name (default: csrf)

    If browsers report CORS failures in prod, check CORS_ORIGINS first:
    production has no default and denies every cross-origin request when it
    is unset (an ERROR is logged at startup).

For Developers:
    Invalid values raise ConfigurationError when the policy is loaded, so
    a bad deploy fails at cold start instead of on the first request.
    Regex entries can't contain commas.
"""

import logging
import os
import re
from collections.abc import Mapping

from src.boundary.cors.policy import WILDCARD_ORIGIN, CorsPolicy
from src.boundary.csrf.tokens import DEFAULT_SESSION_KEY
from src.boundary.errors.config_errors import ConfigurationError

logger = logging.getLogger(__name__)

PATTERN_PREFIX = "re:"

# Allowed when CORS_ORIGINS is unset outside production
DEV_ORIGINS = ["http://localhost:3000", "http://127.0.0.1:3000"]
NON_PROD_ENVIRONMENTS = ("dev", "test", "preprod")

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off", ""}


def _split(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


def _parse_bool(name: str, value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUE:
        return True
    if lowered in _FALSE:
        return False
    raise ConfigurationError(f"expected true/false, got {value!r}", setting=name)


def _parse_origin_entry(entry: str) -> str | re.Pattern[str]:
    if not entry.startswith(PATTERN_PREFIX):
        return entry
    try:
        return re.compile(entry[len(PATTERN_PREFIX) :])
    except re.error as exc:
        raise ConfigurationError(
            f"invalid origin pattern: {exc}", setting="CORS_ORIGINS"
        ) from exc


def get_cors_origins(
    environ: Mapping[str, str] | None = None,
) -> bool | list[str | re.Pattern[str]]:
    """
    Get the raw CORS origin setting from the environment.

    Returns True for allow-any, False for deny-all, otherwise an ordered
    list of exact origins and compiled patterns.
    """
    env = os.environ if environ is None else environ
    environment = env.get("ENVIRONMENT", "dev")
    entries = _split(env.get("CORS_ORIGINS", ""))

    if entries == [WILDCARD_ORIGIN]:
        return True

    if entries:
        return [_parse_origin_entry(entry) for entry in entries]

    if environment in NON_PROD_ENVIRONMENTS:
        return list(DEV_ORIGINS)

    logger.error(
        "CORS_ORIGINS not configured for production - cross-origin requests will be rejected",
        extra={"environment": environment},
    )
    return False


def load_cors_policy(environ: Mapping[str, str] | None = None) -> CorsPolicy:
    """Build a CorsPolicy from environment variables.

    Raises:
        ConfigurationError: If any variable holds an invalid value.
    """
    env = os.environ if environ is None else environ

    options: dict = {
        "origin": get_cors_origins(env),
        "credentials": _parse_bool(
            "CORS_ALLOW_CREDENTIALS", env.get("CORS_ALLOW_CREDENTIALS", "")
        ),
        "allowed_headers": _split(env.get("CORS_ALLOW_HEADERS", "")),
        "exposed_headers": _split(env.get("CORS_EXPOSE_HEADERS", "")),
    }

    methods = _split(env.get("CORS_ALLOW_METHODS", ""))
    if methods:
        options["methods"] = methods

    max_age = env.get("CORS_MAX_AGE", "").strip()
    if max_age:
        try:
            options["max_age"] = int(max_age)
        except ValueError as exc:
            raise ConfigurationError(
                f"expected an integer, got {max_age!r}", setting="CORS_MAX_AGE"
            ) from exc

    policy = CorsPolicy(**options)
    logger.info(
        "CORS policy loaded",
        extra={
            "policy": type(policy.origin).__name__,
            "credentials": policy.credentials,
            "environment": env.get("ENVIRONMENT", "dev"),
        },
    )
    return policy


def get_csrf_session_key(environ: Mapping[str, str] | None = None) -> str:
    """Session key (and form field name) for authenticity tokens."""
    env = os.environ if environ is None else environ
    key = env.get("CSRF_SESSION_KEY", "").strip()
    return key or DEFAULT_SESSION_KEY
