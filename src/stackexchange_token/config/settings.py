from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from ..domain.constants import (
    DEFAULT_AUTHORIZATION_URL,
    DEFAULT_PROFILE_URL,
    DEFAULT_SITE,
    DEFAULT_TOKEN_URL,
)
from ..domain.exceptions import ConfigurationError
from ..domain.value_objects import LOAD_PROFILE, SkipDecision, as_skip_decision

# conventional option name -> StrategySettings field
OPTION_ALIASES = {
    "clientID": "client_id",
    "clientSecret": "client_secret",
    "authorizationURL": "authorization_url",
    "tokenURL": "token_url",
    "profileURL": "profile_url",
    "callbackURL": "callback_url",
    "site": "site",
    "scope": "scope",
    "stackAppsKey": "stack_apps_key",
    "passReqToCallback": "pass_req_to_callback",
    "skipUserProfile": "skip_user_profile",
    "timeout": "timeout",
}


@dataclass(slots=True)
class StrategySettings:
    """
    Stack Exchange strategy settings.

    Host code decides how to construct this (env, config file, etc.).
    `stack_apps_key` is mandatory: Stack Exchange rejects profile queries
    without it, so a missing key fails here rather than on the first request.
    """
    stack_apps_key: str

    # OAuth2 client, only used by the delegated OAuth2 flows
    client_id: Optional[str] = None
    client_secret: Optional[str] = None
    callback_url: Optional[str] = None
    scope: Optional[str] = None

    authorization_url: str = DEFAULT_AUTHORIZATION_URL
    token_url: str = DEFAULT_TOKEN_URL
    profile_url: str = DEFAULT_PROFILE_URL
    site: str = DEFAULT_SITE

    pass_req_to_callback: bool = False
    skip_user_profile: SkipDecision = LOAD_PROFILE
    timeout: Optional[float] = None

    def __post_init__(self) -> None:
        if not self.stack_apps_key:
            raise ConfigurationError("stack_apps_key must be specified!")

        self.authorization_url = self.authorization_url or DEFAULT_AUTHORIZATION_URL
        self.token_url = self.token_url or DEFAULT_TOKEN_URL
        self.profile_url = self.profile_url or DEFAULT_PROFILE_URL
        self.site = self.site or DEFAULT_SITE
        self.pass_req_to_callback = bool(self.pass_req_to_callback)
        self.skip_user_profile = as_skip_decision(self.skip_user_profile)

    @classmethod
    def from_options(cls, options: Mapping[str, Any]) -> "StrategySettings":
        """
        Build settings from a conventional strategy options mapping
        (`clientID`, `stackAppsKey`, ...). Snake-case keys are accepted too.
        """
        kwargs: dict[str, Any] = {}
        for key, value in options.items():
            name = OPTION_ALIASES.get(key, key)
            if name not in cls.__dataclass_fields__:
                raise ConfigurationError(f"Unknown strategy option: {key!r}")
            kwargs[name] = value

        if not kwargs.get("stack_apps_key"):
            raise ConfigurationError("stack_apps_key must be specified!")
        return cls(**kwargs)
