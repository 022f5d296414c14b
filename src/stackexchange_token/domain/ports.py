from __future__ import annotations

from typing import Any, Protocol

from .entities import Profile


class StrategyHost(Protocol):
    """
    Port for the host middleware that drives a strategy.

    A strategy signals exactly one of these per `authenticate` call.
    """

    def success(self, user: Any, info: Any = None) -> None:
        ...

    def fail(self, info: Any = None) -> None:
        ...

    def error(self, err: BaseException) -> None:
        ...


class ProfileFetcher(Protocol):
    """
    Port for resolving an access token into a normalized profile.

    Implementations live in the adapters layer (e.g. Stack Exchange client).
    """

    def fetch(self, access_token: str | None) -> Profile:
        """
        Raises:
          - ProfileFetchError
          - MalformedResponseError
          - EmptyResponseError
        """
        ...


class AsyncProfileFetcher(Protocol):
    """Async counterpart of `ProfileFetcher`."""

    async def fetch(self, access_token: str | None) -> Profile:
        ...
