from __future__ import annotations

from typing import Any, Mapping, Optional

from ...application.use_cases.authenticate import (
    AsyncStackExchangeTokenStrategy,
    StackExchangeTokenStrategy,
    VerifyCallback,
)
from ...config.env import settings_from_env
from ...config.settings import StrategySettings
from .registry import StrategyRegistry


def _resolve_settings(
        settings: StrategySettings | None,
        options: Mapping[str, Any] | None,
) -> StrategySettings:
    if settings is not None:
        return settings
    if options is not None:
        return StrategySettings.from_options(options)
    return settings_from_env()


def create_stackexchange_strategy(
        verify: VerifyCallback,
        *,
        settings: StrategySettings | None = None,
        options: Mapping[str, Any] | None = None,
        use_async: bool = False,
) -> StackExchangeTokenStrategy | AsyncStackExchangeTokenStrategy:
    """
    High-level factory: settings (or options, or the environment) -> strategy.

    Precedence: explicit `settings`, then an `options` mapping using the
    conventional names (`stackAppsKey`, `clientID`, ...), then
    `STACKEXCHANGE_*` environment variables.
    """
    resolved = _resolve_settings(settings, options)
    if use_async:
        return AsyncStackExchangeTokenStrategy(resolved, verify)
    return StackExchangeTokenStrategy(resolved, verify)


def create_registry(
        *strategies: Any,
        registry: Optional[StrategyRegistry] = None,
) -> StrategyRegistry:
    """Register `strategies` under their own names."""
    registry = registry or StrategyRegistry()
    for strategy in strategies:
        registry.use(strategy)
    return registry
