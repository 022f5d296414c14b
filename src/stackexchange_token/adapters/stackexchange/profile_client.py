import json
from typing import Any, Dict, Mapping, Optional

import httpx
from loguru import logger
from requests import RequestException, Session

from ...domain.constants import DEFAULT_PROFILE_URL, DEFAULT_SITE
from ...domain.entities import Profile
from ...domain.exceptions import EmptyResponseError, MalformedResponseError, ProfileFetchError
from ...domain.ports import AsyncProfileFetcher, ProfileFetcher

# Every protected Stack Exchange resource is served compressed.
COMPRESSION_HEADERS = {"Accept-Encoding": "gzip"}


def parse_profile(body: str) -> Profile:
    """
    Build a Profile from the body of a `/me` response.

    Raises:
        MalformedResponseError  body is not JSON, or the account item lacks
                                `account_id` / `display_name`
        EmptyResponseError      no account items
    """
    try:
        data = json.loads(body)
    except ValueError as exc:
        raise MalformedResponseError("Malformed response.", exc) from exc

    items = data.get("items") if isinstance(data, dict) else None
    if not items:
        raise EmptyResponseError("Empty response.")
    if not isinstance(items, list):
        raise MalformedResponseError("Malformed response.")

    account = items[0]
    if not isinstance(account, Mapping):
        raise MalformedResponseError("Malformed response.")

    account_id = account.get("account_id")
    display_name = account.get("display_name")
    if account_id is None or display_name is None:
        raise MalformedResponseError("Malformed response.")

    return Profile(
        id=account_id,
        display_name=display_name,
        raw=body,
        json=data,
    )


class _ProfileQuery:
    """Shared request shape of the sync and async clients."""

    def __init__(
        self,
        stack_apps_key: str,
        site: str = DEFAULT_SITE,
        profile_url: str = DEFAULT_PROFILE_URL,
        timeout: Optional[float] = None,
    ) -> None:
        self._key = stack_apps_key
        self._site = site
        self._profile_url = profile_url
        self._timeout = timeout

    @property
    def profile_url(self) -> str:
        return self._profile_url

    @property
    def site(self) -> str:
        return self._site

    def _params(self, access_token: Optional[str]) -> Dict[str, Any]:
        # key must be passed on every request
        params: Dict[str, Any] = {"key": self._key, "site": self._site}
        if access_token is not None:
            params["access_token"] = access_token
        return params


class StackExchangeProfileClient(_ProfileQuery, ProfileFetcher):
    """
    Adapter implementing the ProfileFetcher port with `requests`.

    Infrastructure layer:
    - Knows the Stack Exchange `/me` query parameters.
    - Knows how to turn its response into a Profile.
    """

    def __init__(
        self,
        stack_apps_key: str,
        site: str = DEFAULT_SITE,
        profile_url: str = DEFAULT_PROFILE_URL,
        timeout: Optional[float] = None,
        session: Optional[Session] = None,
    ) -> None:
        super().__init__(stack_apps_key, site, profile_url, timeout)
        self._session = session or Session()

    def close(self) -> None:
        self._session.close()

    # ------------------------------------------------------------------ #
    # Port implementation
    # ------------------------------------------------------------------ #

    def fetch(self, access_token: Optional[str]) -> Profile:
        try:
            response = self._session.get(
                self._profile_url,
                params=self._params(access_token),
                headers=COMPRESSION_HEADERS,
                timeout=self._timeout,
            )
        except RequestException as exc:
            logger.warning(f"Stack Exchange profile request failed: {exc}")
            raise ProfileFetchError("failed to fetch user profile", exc) from exc

        logger.debug(f"Stack Exchange profile response: {response.status_code} (site={self._site})")
        return parse_profile(response.text)


class AsyncStackExchangeProfileClient(_ProfileQuery, AsyncProfileFetcher):
    """
    Adapter implementing the AsyncProfileFetcher port with `httpx`.
    """

    def __init__(
        self,
        stack_apps_key: str,
        site: str = DEFAULT_SITE,
        profile_url: str = DEFAULT_PROFILE_URL,
        timeout: Optional[float] = None,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        super().__init__(stack_apps_key, site, profile_url, timeout)
        self._client = client or httpx.AsyncClient()

    async def close(self) -> None:
        await self._client.aclose()

    async def fetch(self, access_token: Optional[str]) -> Profile:
        kwargs: Dict[str, Any] = {}
        if self._timeout is not None:
            kwargs["timeout"] = self._timeout

        try:
            response = await self._client.get(
                self._profile_url,
                params=self._params(access_token),
                headers=COMPRESSION_HEADERS,
                **kwargs,
            )
        except httpx.HTTPError as exc:
            logger.warning(f"Stack Exchange profile request failed: {exc}")
            raise ProfileFetchError("failed to fetch user profile", exc) from exc

        logger.debug(f"Stack Exchange profile response: {response.status_code} (site={self._site})")
        return parse_profile(response.text)
