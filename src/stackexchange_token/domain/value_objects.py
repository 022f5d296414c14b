# src/stackexchange_token/domain/value_objects.py

from __future__ import annotations

import inspect
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Mapping, Optional, Union

from .constants import ACCESS_TOKEN_FIELD, ERROR_FIELD, REFRESH_TOKEN_FIELD
from .entities import Credentials


# --- Request view ----------------------------------------------------------


@dataclass(frozen=True, slots=True)
class OAuthErrorInfo:
    """
    Error reported by the provider through the query string
    (`error`, `error_description`, `error_uri`).
    """
    error: str
    description: Optional[str] = None
    uri: Optional[str] = None

    def __str__(self) -> str:
        if self.description:
            return f"{self.error}: {self.description}"
        return self.error


@dataclass(frozen=True, slots=True)
class TokenRequest:
    """
    Framework-neutral view of an inbound request.

    `body` is None when the host could not parse a body at all, which is
    different from an empty body (`{}`).
    """
    query: Mapping[str, Any] = field(default_factory=dict)
    body: Optional[Mapping[str, Any]] = None
    headers: Mapping[str, Any] = field(default_factory=dict)

    def lookup(self, name: str) -> Optional[str]:
        """
        First truthy value for `name` in body, then query, then headers.
        """
        for source in (self.body or {}, self.query, self.headers):
            value = source.get(name)
            if value:
                return value
        return None

    @property
    def credentials(self) -> Credentials:
        return Credentials(
            access_token=self.lookup(ACCESS_TOKEN_FIELD),
            refresh_token=self.lookup(REFRESH_TOKEN_FIELD),
        )

    @property
    def oauth_error(self) -> Optional[OAuthErrorInfo]:
        error = self.query.get(ERROR_FIELD)
        if not error:
            return None
        return OAuthErrorInfo(
            error=str(error),
            description=self.query.get("error_description"),
            uri=self.query.get("error_uri"),
        )


# --- Profile skip decision -------------------------------------------------


@dataclass(frozen=True, slots=True)
class SkipProfile:
    """Fixed decision: always skip (True) or always load (False)."""
    skip: bool = True


@dataclass(frozen=True, slots=True)
class SkipProfileWhen:
    """
    Per-token decision. The predicate receives the access token and returns
    a bool; async strategies also accept an awaitable bool.
    """
    predicate: Callable[[Optional[str]], Union[bool, Awaitable[bool]]]


SkipDecision = Union[SkipProfile, SkipProfileWhen]


def _takes_no_arguments(func: Callable[..., Any]) -> bool:
    try:
        params = inspect.signature(func).parameters.values()
    except (TypeError, ValueError):
        # builtins without a signature get the token
        return False
    return not any(
        p.kind in (p.POSITIONAL_ONLY, p.POSITIONAL_OR_KEYWORD, p.VAR_POSITIONAL)
        for p in params
    )


LOAD_PROFILE = SkipProfile(skip=False)


def as_skip_decision(value: Any) -> SkipDecision:
    """
    Normalize a `skip_user_profile` option.

    None / bool / plain values become `SkipProfile`, callables become
    `SkipProfileWhen` (zero-argument callables are called without the
    token), decisions pass through.
    """
    if isinstance(value, (SkipProfile, SkipProfileWhen)):
        return value
    if callable(value):
        if _takes_no_arguments(value):
            return SkipProfileWhen(predicate=lambda _token: value())
        return SkipProfileWhen(predicate=value)
    return SkipProfile(skip=bool(value))
