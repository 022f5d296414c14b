from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from fastapi import HTTPException, Request, status
from loguru import logger

from ..common.registry import StrategyRegistry
from ...domain.constants import STRATEGY_NAME
from ...domain.entities import AuthOutcome
from .security import build_token_request


def _failure_detail(info: Any) -> str:
    if info is None:
        return "Not authenticated"
    return str(info) or "Not authenticated"


@dataclass(slots=True)
class FastAPIAuthentication:
    """
    FastAPI integration acting as the host middleware.

    Runs the registered strategy for each request and maps its outcome:
      - success -> the user (and `request.state.auth_info`)
      - failure -> 401
      - error   -> 500
    """

    registry: StrategyRegistry
    strategy_name: str = STRATEGY_NAME

    async def authenticate(self, request: Request) -> AuthOutcome:
        token_request = await build_token_request(request)
        outcome = await self.registry.authenticate_async(self.strategy_name, token_request)
        request.state.auth_info = outcome.info
        return outcome

    @staticmethod
    def _raise_for_error(outcome: AuthOutcome) -> None:
        if outcome.is_error:
            logger.error(f"Authentication error: {outcome.error}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Authentication error",
            ) from outcome.error

    # ------------------------------------------------------------------ #
    # Dependencies
    # ------------------------------------------------------------------ #

    async def get_current_user(self, request: Request) -> Any:
        """Dependency: Require authentication."""
        outcome = await self.authenticate(request)
        self._raise_for_error(outcome)
        if not outcome.succeeded:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail=_failure_detail(outcome.info),
            )
        return outcome.user

    async def get_optional_user(self, request: Request) -> Any | None:
        """Dependency: Optional authentication."""
        outcome = await self.authenticate(request)
        self._raise_for_error(outcome)
        # rejected or missing token -> anonymous
        return outcome.user if outcome.succeeded else None

    def decorators(self) -> "FastAPIDecorators":
        from .decorators import FastAPIDecorators

        return FastAPIDecorators(auth=self)


"""

from stackexchange_token.integrations.fastapi import create_fastapi_auth

def verify(access_token, refresh_token, profile):
    return users.get_by_stackexchange_id(profile.id)

fastapi_auth = create_fastapi_auth(verify=verify)

get_current_user = fastapi_auth.get_current_user
get_optional_user = fastapi_auth.get_optional_user


"""
