from __future__ import annotations

import inspect
from dataclasses import dataclass
from typing import Awaitable, Optional, Union

from ...domain.entities import Profile
from ...domain.ports import AsyncProfileFetcher, ProfileFetcher
from ...domain.value_objects import LOAD_PROFILE, SkipDecision, SkipProfileWhen


def decide_skip(decision: SkipDecision, access_token: Optional[str]) -> Union[bool, Awaitable[bool]]:
    """
    Single dispatch point for skip decisions.

    Returns a bool, or whatever awaitable an async predicate produced.
    Predicate errors propagate.
    """
    if isinstance(decision, SkipProfileWhen):
        return decision.predicate(access_token)
    return decision.skip


@dataclass(slots=True)
class LoadUserProfileUseCase:
    """
    Application use case:
    - Decide whether the profile is needed for this token
    - Fetch it via the ProfileFetcher port when it is

    Returns None when the profile was skipped.
    """

    profile_fetcher: ProfileFetcher
    skip: SkipDecision = LOAD_PROFILE

    def execute(self, access_token: Optional[str]) -> Optional[Profile]:
        skip = decide_skip(self.skip, access_token)
        if inspect.isawaitable(skip):
            # sync strategies cannot wait on the predicate
            if inspect.iscoroutine(skip):
                skip.close()
            raise TypeError("skip_user_profile returned an awaitable; use the async strategy")

        if skip:
            return None
        return self.profile_fetcher.fetch(access_token)


@dataclass(slots=True)
class AsyncLoadUserProfileUseCase:
    """Async counterpart of `LoadUserProfileUseCase`."""

    profile_fetcher: AsyncProfileFetcher
    skip: SkipDecision = LOAD_PROFILE

    async def execute(self, access_token: Optional[str]) -> Optional[Profile]:
        skip = decide_skip(self.skip, access_token)
        if inspect.isawaitable(skip):
            skip = await skip

        if skip:
            return None
        return await self.profile_fetcher.fetch(access_token)
