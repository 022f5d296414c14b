from __future__ import annotations

import inspect
from typing import Any, Callable, Mapping, Optional

from authlib.integrations.httpx_client import AsyncOAuth2Client
from authlib.integrations.requests_client import OAuth2Session
from loguru import logger

from ...adapters.stackexchange.profile_client import (
    AsyncStackExchangeProfileClient,
    StackExchangeProfileClient,
)
from ...config.settings import StrategySettings
from ...domain.constants import STRATEGY_NAME
from ...domain.entities import Credentials, Profile, VerifyResult
from ...domain.ports import AsyncProfileFetcher, ProfileFetcher, StrategyHost
from ...domain.value_objects import TokenRequest
from .load_profile import AsyncLoadUserProfileUseCase, LoadUserProfileUseCase

VerifyCallback = Callable[..., Any]


def _unpack(result: Any) -> VerifyResult:
    if isinstance(result, VerifyResult):
        return result
    return VerifyResult(user=result)


class _TokenStrategyBase:
    """
    Behaviour shared by the sync and async strategies: request guards,
    credential extraction, verify arguments and outcome mapping.
    """

    name = STRATEGY_NAME
    _oauth2_client_class: Any = OAuth2Session

    def __init__(self, settings: StrategySettings, verify: VerifyCallback) -> None:
        if not callable(verify):
            raise TypeError("verify callback is required")
        self.settings = settings
        self._verify = verify

    # ------------------------------------------------------------------ #
    # request handling
    # ------------------------------------------------------------------ #

    def _reject_early(self, request: TokenRequest, host: StrategyHost) -> bool:
        """Signal failure for requests that cannot carry a token at all."""
        oauth_error = request.oauth_error
        if oauth_error is not None:
            logger.info(f"Provider reported an OAuth error: {oauth_error}")
            host.fail(oauth_error)
            return True

        if request.body is None:
            logger.debug("Request has no parsed body; not a token request")
            host.fail()
            return True

        return False

    def _verify_args(
        self,
        request: TokenRequest,
        credentials: Credentials,
        profile: Optional[Profile],
    ) -> tuple[Any, ...]:
        args: tuple[Any, ...] = (credentials.access_token, credentials.refresh_token, profile)
        if self.settings.pass_req_to_callback:
            return (request, *args)
        return args

    @staticmethod
    def _signal_verified(host: StrategyHost, result: Any) -> None:
        verified = _unpack(result)
        if not verified.user:
            logger.info("Verify callback rejected the credentials")
            host.fail(verified.info)
            return
        host.success(verified.user, verified.info)

    # ------------------------------------------------------------------ #
    # delegated OAuth2 flows
    # ------------------------------------------------------------------ #

    def oauth2_client(self, **kwargs: Any) -> Any:
        """
        Authlib client configured for Stack Exchange, for the authorization
        code flow that this strategy does not perform itself.
        """
        s = self.settings
        kwargs.setdefault("redirect_uri", s.callback_url)
        kwargs.setdefault("token_endpoint", s.token_url)
        kwargs.setdefault("scope", s.scope)
        return self._oauth2_client_class(
            client_id=s.client_id,
            client_secret=s.client_secret,
            **kwargs,
        )

    def authorization_url(self, state: Optional[str] = None, **kwargs: Any) -> tuple[str, str]:
        """Returns (url, state) for redirecting a user to Stack Exchange."""
        client = self.oauth2_client()
        return client.create_authorization_url(self.settings.authorization_url, state=state, **kwargs)


class StackExchangeTokenStrategy(_TokenStrategyBase):
    """
    Authenticates requests carrying a Stack Exchange access token.

    The token is looked up in the body, then the query string, then the
    headers (`access_token` / `refresh_token`). The profile behind it is
    fetched from the `/me` endpoint and handed to `verify`:

        def verify(access_token, refresh_token, profile):
            user = users.find_by_stackexchange_id(profile.id)
            return user                       # or VerifyResult(None, "unknown")

    With `pass_req_to_callback`, `verify` receives the TokenRequest first.
    Returning a falsy user rejects the credentials; raising reports an error.
    """

    def __init__(
        self,
        settings: StrategySettings,
        verify: VerifyCallback,
        *,
        profile_fetcher: Optional[ProfileFetcher] = None,
    ) -> None:
        if inspect.iscoroutinefunction(verify):
            raise TypeError("verify is a coroutine function; use AsyncStackExchangeTokenStrategy")
        super().__init__(settings, verify)
        self._owns_fetcher = profile_fetcher is None
        self._profile_fetcher = profile_fetcher or StackExchangeProfileClient(
            stack_apps_key=settings.stack_apps_key,
            site=settings.site,
            profile_url=settings.profile_url,
            timeout=settings.timeout,
        )
        self._load_profile = LoadUserProfileUseCase(
            profile_fetcher=self._profile_fetcher,
            skip=settings.skip_user_profile,
        )

    def authenticate(
        self,
        request: TokenRequest,
        host: StrategyHost,
        options: Optional[Mapping[str, Any]] = None,
    ) -> None:
        if self._reject_early(request, host):
            return

        credentials = request.credentials

        try:
            profile = self._load_user_profile(credentials.access_token)
        except Exception as exc:
            logger.warning(f"Could not load Stack Exchange profile: {exc}")
            host.fail(exc)
            return

        try:
            result = self._verify(*self._verify_args(request, credentials, profile))
        except Exception as exc:
            logger.exception("Verify callback raised")
            host.error(exc)
            return

        if inspect.isawaitable(result):
            # an unawaited coroutine is truthy and must never count as a user
            if inspect.iscoroutine(result):
                result.close()
            logger.error("Verify callback returned an awaitable to the sync strategy")
            host.error(TypeError("verify returned an awaitable; use AsyncStackExchangeTokenStrategy"))
            return

        self._signal_verified(host, result)

    def user_profile(self, access_token: Optional[str]) -> Profile:
        """Fetch the normalized profile for `access_token`."""
        return self._profile_fetcher.fetch(access_token)

    def close(self) -> None:
        """Release the HTTP session, if this strategy created it."""
        if self._owns_fetcher:
            self._profile_fetcher.close()

    def _load_user_profile(self, access_token: Optional[str]) -> Optional[Profile]:
        return self._load_profile.execute(access_token)


class AsyncStackExchangeTokenStrategy(_TokenStrategyBase):
    """
    Async variant of `StackExchangeTokenStrategy` for event-loop hosts.

    `verify` and a `skip_user_profile` predicate may be plain functions or
    coroutines.
    """

    _oauth2_client_class = AsyncOAuth2Client

    def __init__(
        self,
        settings: StrategySettings,
        verify: VerifyCallback,
        *,
        profile_fetcher: Optional[AsyncProfileFetcher] = None,
    ) -> None:
        super().__init__(settings, verify)
        self._owns_fetcher = profile_fetcher is None
        self._profile_fetcher = profile_fetcher or AsyncStackExchangeProfileClient(
            stack_apps_key=settings.stack_apps_key,
            site=settings.site,
            profile_url=settings.profile_url,
            timeout=settings.timeout,
        )
        self._load_profile = AsyncLoadUserProfileUseCase(
            profile_fetcher=self._profile_fetcher,
            skip=settings.skip_user_profile,
        )

    async def authenticate(
        self,
        request: TokenRequest,
        host: StrategyHost,
        options: Optional[Mapping[str, Any]] = None,
    ) -> None:
        if self._reject_early(request, host):
            return

        credentials = request.credentials

        try:
            profile = await self._load_user_profile(credentials.access_token)
        except Exception as exc:
            logger.warning(f"Could not load Stack Exchange profile: {exc}")
            host.fail(exc)
            return

        try:
            result = self._verify(*self._verify_args(request, credentials, profile))
            if inspect.isawaitable(result):
                result = await result
        except Exception as exc:
            logger.exception("Verify callback raised")
            host.error(exc)
            return

        self._signal_verified(host, result)

    async def user_profile(self, access_token: Optional[str]) -> Profile:
        return await self._profile_fetcher.fetch(access_token)

    async def aclose(self) -> None:
        """Release the HTTP client, if this strategy created it."""
        if self._owns_fetcher:
            await self._profile_fetcher.close()

    async def _load_user_profile(self, access_token: Optional[str]) -> Optional[Profile]:
        return await self._load_profile.execute(access_token)
