from __future__ import annotations

import inspect
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

from loguru import logger

from ...domain.entities import AuthOutcome
from ...domain.exceptions import AuthenticationError
from ...domain.value_objects import TokenRequest


@dataclass(slots=True)
class OutcomeRecorder:
    """
    StrategyHost that keeps the outcome instead of acting on it.

    Integrations (FastAPI, tests, ...) read `outcome` afterwards and turn it
    into their own response.
    """

    _outcome: Optional[AuthOutcome] = None

    def _record(self, outcome: AuthOutcome) -> None:
        if self._outcome is not None:
            raise RuntimeError(
                f"Strategy signalled {outcome.kind.value} after {self._outcome.kind.value}"
            )
        self._outcome = outcome

    def success(self, user: Any, info: Any = None) -> None:
        self._record(AuthOutcome.success(user, info))

    def fail(self, info: Any = None) -> None:
        self._record(AuthOutcome.failure(info))

    def error(self, err: BaseException) -> None:
        self._record(AuthOutcome.errored(err))

    @property
    def signalled(self) -> bool:
        return self._outcome is not None

    @property
    def outcome(self) -> AuthOutcome:
        if self._outcome is None:
            raise RuntimeError("Strategy finished without signalling an outcome")
        return self._outcome


@dataclass(slots=True)
class StrategyRegistry:
    """
    Minimal host middleware: strategies are registered under their name
    and driven by name.
    """

    _strategies: dict[str, Any] = field(default_factory=dict)

    def use(self, strategy: Any, name: Optional[str] = None) -> "StrategyRegistry":
        key = name or getattr(strategy, "name", None)
        if not key:
            raise ValueError("Authentication strategies must have a name")
        self._strategies[key] = strategy
        logger.debug(f"Registered authentication strategy {key!r}")
        return self

    def unuse(self, name: str) -> "StrategyRegistry":
        self._strategies.pop(name, None)
        return self

    def get(self, name: str) -> Any:
        try:
            return self._strategies[name]
        except KeyError:
            raise AuthenticationError(f"Unknown authentication strategy {name!r}") from None

    def __contains__(self, name: object) -> bool:
        return name in self._strategies

    # ------------------------------------------------------------------ #
    # dispatch
    # ------------------------------------------------------------------ #

    def authenticate(
        self,
        name: str,
        request: TokenRequest,
        options: Optional[Mapping[str, Any]] = None,
    ) -> AuthOutcome:
        """Run a sync strategy and return its outcome."""
        strategy = self.get(name)
        recorder = OutcomeRecorder()
        result = strategy.authenticate(request, recorder, options)
        if inspect.isawaitable(result):
            if inspect.iscoroutine(result):
                result.close()
            raise TypeError(f"Strategy {name!r} is async; use authenticate_async()")
        return recorder.outcome

    async def authenticate_async(
        self,
        name: str,
        request: TokenRequest,
        options: Optional[Mapping[str, Any]] = None,
    ) -> AuthOutcome:
        """Run a sync or async strategy and return its outcome."""
        strategy = self.get(name)
        recorder = OutcomeRecorder()
        result = strategy.authenticate(request, recorder, options)
        if inspect.isawaitable(result):
            await result
        return recorder.outcome
