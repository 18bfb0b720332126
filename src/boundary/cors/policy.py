"""CORS policy configuration.

An origin policy is one of six variants, all subclasses of OriginMatcher:

    AllowAllOrigins   any origin ("*", or the origin itself with credentials)
    DenyAllOrigins    no origin
    ExactOrigin       one literal origin
    OriginPattern     a regex that must match the whole origin
    OriginList        ordered ExactOrigin/OriginPattern entries, first hit wins
    OriginPredicate   an injected callable, sync or async

CorsPolicy bundles the origin policy with the static options written onto
allowed responses. Raw values are accepted wherever a matcher is expected
and converted by parse_origin_policy():

    True / "*"            -> AllowAllOrigins
    False / None          -> DenyAllOrigins
    "https://a.com"       -> ExactOrigin
    re.compile(...)       -> OriginPattern
    [str | re.Pattern]    -> OriginList
    callable              -> OriginPredicate

Anything else is a ConfigurationError, raised while the policy is built.
"""

from __future__ import annotations

import inspect
import re
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)

from src.boundary.errors.config_errors import ConfigurationError

WILDCARD_ORIGIN = "*"

DEFAULT_METHODS: tuple[str, ...] = ("GET", "HEAD", "PUT", "PATCH", "POST", "DELETE")

OriginCheck = Callable[[str], bool | Awaitable[bool]]


class OriginMatcher:
    """Base class for origin policy variants."""

    # Only AllowAllOrigins sets this; the evaluator uses it to choose
    # between "*" and the reflected origin.
    allows_any_origin = False

    async def matches(self, origin: str) -> bool:
        raise NotImplementedError


@dataclass(frozen=True)
class AllowAllOrigins(OriginMatcher):
    allows_any_origin = True

    async def matches(self, origin: str) -> bool:
        return True


@dataclass(frozen=True)
class DenyAllOrigins(OriginMatcher):
    async def matches(self, origin: str) -> bool:
        return False


@dataclass(frozen=True)
class ExactOrigin(OriginMatcher):
    value: str

    async def matches(self, origin: str) -> bool:
        return origin == self.value


@dataclass(frozen=True)
class OriginPattern(OriginMatcher):
    """Regex matcher. Always applied with fullmatch, so an unanchored
    pattern can't be satisfied by a substring of a hostile origin."""

    pattern: re.Pattern[str]

    async def matches(self, origin: str) -> bool:
        return self.pattern.fullmatch(origin) is not None


@dataclass(frozen=True)
class OriginList(OriginMatcher):
    matchers: tuple[OriginMatcher, ...]

    def __post_init__(self) -> None:
        for matcher in self.matchers:
            if not isinstance(matcher, (ExactOrigin, OriginPattern, AllowAllOrigins)):
                raise ConfigurationError(
                    f"origin list entries must be strings or patterns, "
                    f"got {type(matcher).__name__}",
                    setting="origin",
                )

    async def matches(self, origin: str) -> bool:
        for matcher in self.matchers:
            if await matcher.matches(origin):
                return True
        return False


@dataclass(frozen=True)
class OriginPredicate(OriginMatcher):
    """Delegates the decision to an injected callable.

    The callable may return a bool or an awaitable resolving to one (for
    example an allow-list lookup over the network). Exceptions it raises
    propagate to the caller.
    """

    predicate: OriginCheck

    async def matches(self, origin: str) -> bool:
        result = self.predicate(origin)
        if inspect.isawaitable(result):
            result = await result
        return bool(result)


def _parse_list_entry(value: Any) -> OriginMatcher:
    if isinstance(value, (ExactOrigin, OriginPattern)):
        return value
    if isinstance(value, str):
        if value == WILDCARD_ORIGIN:
            return AllowAllOrigins()
        if not value:
            raise ConfigurationError("empty origin in list", setting="origin")
        return ExactOrigin(value)
    if isinstance(value, re.Pattern):
        return OriginPattern(value)
    raise ConfigurationError(
        f"origin list entries must be strings or patterns, got {type(value).__name__}",
        setting="origin",
    )


def parse_origin_policy(value: Any) -> OriginMatcher:
    """Convert a raw origin setting into an OriginMatcher.

    Raises:
        ConfigurationError: If the value has an unsupported shape.
    """
    if isinstance(value, OriginMatcher):
        return value
    if value is True:
        return AllowAllOrigins()
    if value is False or value is None:
        return DenyAllOrigins()
    if isinstance(value, str):
        if value == WILDCARD_ORIGIN:
            return AllowAllOrigins()
        if not value:
            raise ConfigurationError("origin must not be empty", setting="origin")
        return ExactOrigin(value)
    if isinstance(value, re.Pattern):
        return OriginPattern(value)
    if isinstance(value, (list, tuple)):
        return OriginList(tuple(_parse_list_entry(entry) for entry in value))
    if callable(value):
        return OriginPredicate(value)
    raise ConfigurationError(
        f"unsupported origin matcher type {type(value).__name__}", setting="origin"
    )


def _normalize_names(value: Any, upper: bool = False) -> tuple[str, ...]:
    if isinstance(value, str):
        value = value.split(",")
    if isinstance(value, (set, frozenset)):
        value = sorted(value)
    if not isinstance(value, Iterable):
        raise ValueError("expected a string or a sequence of strings")
    names = []
    for item in value:
        if not isinstance(item, str):
            raise ValueError(f"expected a string, got {type(item).__name__}")
        name = item.strip()
        if name:
            names.append(name.upper() if upper else name)
    # Drop duplicates, keep first-seen order
    return tuple(dict.fromkeys(names))


class CorsPolicy(BaseModel):
    """Origin policy plus the static options for allowed responses.

    Construction failures of any kind surface as ConfigurationError.

    Example:
        >>> policy = CorsPolicy(
        ...     origin=["https://a.com", re.compile(r"https://.*\\.b\\.com")],
        ...     credentials=True,
        ...     max_age=600,
        ... )
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    origin: OriginMatcher = Field(default_factory=AllowAllOrigins)
    methods: tuple[str, ...] = DEFAULT_METHODS
    allowed_headers: tuple[str, ...] = ()
    exposed_headers: tuple[str, ...] = ()
    credentials: bool = False
    max_age: int | None = Field(None, ge=0)

    @model_validator(mode="wrap")
    @classmethod
    def _raise_configuration_error(
        cls, data: Any, handler: Callable[[Any], CorsPolicy]
    ) -> CorsPolicy:
        # Covers both CorsPolicy(...) and CorsPolicy.model_validate(...)
        try:
            return handler(data)
        except ValidationError as exc:
            first = exc.errors()[0]
            setting = ".".join(str(part) for part in first["loc"]) or None
            raise ConfigurationError(first["msg"], setting=setting) from exc

    @field_validator("origin", mode="before")
    @classmethod
    def _parse_origin(cls, value: Any) -> OriginMatcher:
        return parse_origin_policy(value)

    @field_validator("methods", mode="before")
    @classmethod
    def _normalize_methods(cls, value: Any) -> tuple[str, ...]:
        methods = _normalize_names(value, upper=True)
        if not methods:
            raise ValueError("at least one method is required")
        return methods

    @field_validator("allowed_headers", "exposed_headers", mode="before")
    @classmethod
    def _normalize_headers(cls, value: Any) -> tuple[str, ...]:
        return _normalize_names(value)
