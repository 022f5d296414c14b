from __future__ import annotations

import os
from typing import Any, Optional

from ..domain.exceptions import ConfigurationError
from .settings import StrategySettings

ENV_PREFIX = "STACKEXCHANGE_"


def settings_from_env(**overrides: Any) -> StrategySettings:
    """
    Build StrategySettings from `STACKEXCHANGE_*` environment variables.

    Keyword overrides (e.g. `skip_user_profile=...`) win over the environment.
    """
    def _get(key: str) -> Optional[str]:
        raw = os.getenv(ENV_PREFIX + key)
        if raw is None:
            return None
        raw = raw.strip()
        return raw or None

    def _float(key: str) -> Optional[float]:
        raw = _get(key)
        if raw is None:
            return None
        try:
            return float(raw)
        except ValueError:
            raise ConfigurationError(f"{ENV_PREFIX}{key} must be a number, got {raw!r}") from None

    apps_key = _get("APPS_KEY")
    if not apps_key and not overrides.get("stack_apps_key"):
        raise ConfigurationError(f"Missing Stack Exchange settings: {ENV_PREFIX}APPS_KEY")

    kwargs: dict[str, Any] = {
        "stack_apps_key": apps_key,
        "client_id": _get("CLIENT_ID"),
        "client_secret": _get("CLIENT_SECRET"),
        "callback_url": _get("CALLBACK_URL"),
        "scope": _get("SCOPE"),
        "authorization_url": _get("AUTHORIZATION_URL") or "",
        "token_url": _get("TOKEN_URL") or "",
        "profile_url": _get("PROFILE_URL") or "",
        "site": _get("SITE") or "",
        "timeout": _float("TIMEOUT"),
    }
    kwargs.update(overrides)
    return StrategySettings(**kwargs)
