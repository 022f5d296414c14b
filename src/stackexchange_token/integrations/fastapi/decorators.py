from __future__ import annotations

import inspect
from dataclasses import dataclass
from functools import wraps
from typing import Any, Callable, ParamSpec, TypeVar

from starlette.requests import Request

from .deps import FastAPIAuthentication

P = ParamSpec("P")
R = TypeVar("R")

CURRENT_USER_PARAM = "current_user"


@dataclass(slots=True)
class FastAPIDecorators:
    """
    Decorator-based auth helpers for FastAPI route handlers.

    Built on top of `FastAPIAuthentication`.

    Usage example in your FastAPI app:

        # app/auth.py
        from stackexchange_token.integrations.fastapi import create_fastapi_auth

        fastapi_auth = create_fastapi_auth(verify=verify)
        auth_decorators = fastapi_auth.decorators()

        # app/routes.py
        @router.get("/me")
        @auth_decorators.authenticated
        async def me(request: Request, current_user: User):
            return {"name": current_user.name}

    The route needs a `request: Request` parameter. `current_user` is
    injected by the decorator and hidden from FastAPI's signature analysis,
    so it is not mistaken for a query or body parameter.
    """

    auth: FastAPIAuthentication

    # ------------------------------------------------------------------ #
    # helpers
    # ------------------------------------------------------------------ #

    @staticmethod
    def _extract_request(args: tuple[Any, ...], kwargs: dict[str, Any]) -> Request:
        """Extract Request object from function arguments."""
        if "request" in kwargs and isinstance(kwargs["request"], Request):
            return kwargs["request"]

        for arg in args:
            if isinstance(arg, Request):
                return arg

        raise ValueError(
            "Request object not found. "
            "Ensure your route has a 'request: Request' parameter."
        )

    @staticmethod
    def _hide_current_user(wrapper: Callable[..., Any], func: Callable[..., Any]) -> None:
        sig = inspect.signature(func)
        params = [p for p in sig.parameters.values() if p.name != CURRENT_USER_PARAM]
        wrapper.__signature__ = sig.replace(parameters=params)  # type: ignore[attr-defined]

    @staticmethod
    async def _call(func: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
        result = func(*args, **kwargs)
        if inspect.isawaitable(result):
            result = await result
        return result

    # ------------------------------------------------------------------ #
    # decorators
    # ------------------------------------------------------------------ #

    def authenticated(self, func: Callable[P, R]) -> Callable[P, Any]:
        """
        Decorator: require authentication (401 / 500 otherwise).

        Injects `current_user` into kwargs.
        """

        @wraps(func)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> Any:
            request = self._extract_request(args, kwargs)
            user = await self.auth.get_current_user(request)
            kwargs[CURRENT_USER_PARAM] = user
            return await self._call(func, *args, **kwargs)

        self._hide_current_user(wrapper, func)
        return wrapper

    def optional_auth(self, func: Callable[P, R]) -> Callable[P, Any]:
        """
        Decorator: optional authentication.

        Injects `current_user` (None when not authenticated) into kwargs.
        """

        @wraps(func)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> Any:
            request = self._extract_request(args, kwargs)
            user = await self.auth.get_optional_user(request)
            kwargs[CURRENT_USER_PARAM] = user
            return await self._call(func, *args, **kwargs)

        self._hide_current_user(wrapper, func)
        return wrapper
