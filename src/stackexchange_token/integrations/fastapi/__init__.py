from __future__ import annotations

from typing import Any, Mapping

from .decorators import FastAPIDecorators
from .deps import FastAPIAuthentication
from .security import build_token_request
from ..common.auth_factory import create_registry, create_stackexchange_strategy
from ...application.use_cases.authenticate import VerifyCallback
from ...config.settings import StrategySettings


def create_fastapi_auth(
    *,
    verify: VerifyCallback,
    settings: StrategySettings | None = None,
    options: Mapping[str, Any] | None = None,
) -> FastAPIAuthentication:
    """
    High-level helper for FastAPI apps:

    - Creates the async Stack Exchange strategy (settings, options or env)
    - Registers it and wraps the registry in FastAPIAuthentication, exposing:

        fastapi_auth.get_current_user
        fastapi_auth.get_optional_user
        fastapi_auth.decorators()
    """
    strategy = create_stackexchange_strategy(
        verify,
        settings=settings,
        options=options,
        use_async=True,
    )
    registry = create_registry(strategy)
    return FastAPIAuthentication(registry=registry, strategy_name=strategy.name)


__all__ = [
    "FastAPIAuthentication",
    "FastAPIDecorators",
    "build_token_request",
    "create_fastapi_auth",
]
