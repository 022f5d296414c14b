"""
Tests for AsyncStackExchangeTokenStrategy.
"""

from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
from authlib.integrations.httpx_client import AsyncOAuth2Client

from stackexchange_token.adapters.stackexchange.profile_client import AsyncStackExchangeProfileClient
from stackexchange_token.application.use_cases.authenticate import AsyncStackExchangeTokenStrategy
from stackexchange_token.config.settings import StrategySettings
from stackexchange_token.domain.entities import VerifyResult
from stackexchange_token.domain.exceptions import EmptyResponseError, MalformedResponseError
from stackexchange_token.domain.value_objects import TokenRequest


def _strategy(settings, fetcher, verify):
    return AsyncStackExchangeTokenStrategy(settings, verify, profile_fetcher=fetcher)


@pytest.mark.asyncio
async def test_async_verify(settings, async_fetcher, host):
    async def verify(access_token, refresh_token, profile):
        return VerifyResult({"account": profile.id}, "ok")

    await _strategy(settings, async_fetcher, verify).authenticate(
        TokenRequest(body={"access_token": "tok"}), host
    )

    assert host.outcome.succeeded
    assert host.outcome.user == {"account": 42}
    assert host.outcome.info == "ok"
    assert async_fetcher.calls == ["tok"]


@pytest.mark.asyncio
async def test_sync_verify_is_accepted(settings, async_fetcher, host):
    def verify(access_token, refresh_token, profile):
        return None

    await _strategy(settings, async_fetcher, verify).authenticate(
        TokenRequest(body={"access_token": "tok"}), host
    )
    assert host.outcome.failed
    assert host.outcome.info is None


@pytest.mark.asyncio
async def test_async_verify_error(settings, async_fetcher, host):
    err = ConnectionError("user store unreachable")

    async def verify(*args):
        raise err

    await _strategy(settings, async_fetcher, verify).authenticate(
        TokenRequest(body={"access_token": "tok"}), host
    )
    assert host.outcome.is_error
    assert host.outcome.error is err


@pytest.mark.asyncio
async def test_short_circuits(settings, async_fetcher, host):
    async def verify(*args):
        return "user"

    strategy = _strategy(settings, async_fetcher, verify)
    await strategy.authenticate(TokenRequest(body=None), host)
    assert host.outcome.failed

    other = type(host)()
    await strategy.authenticate(TokenRequest(body={}, query={"error": "access_denied"}), other)
    assert other.outcome.failed
    assert other.outcome.info.error == "access_denied"

    assert async_fetcher.calls == []


@pytest.mark.asyncio
async def test_async_skip_predicate(async_fetcher, host):
    async def skip(token):
        return token.startswith("cached")

    async def verify(access_token, refresh_token, profile):
        return {"token": access_token, "profile": profile}

    settings = StrategySettings(stack_apps_key="app-key", skip_user_profile=skip)
    await _strategy(settings, async_fetcher, verify).authenticate(
        TokenRequest(body={"access_token": "cached-1"}), host
    )

    assert async_fetcher.calls == []
    assert host.outcome.user == {"token": "cached-1", "profile": None}


@pytest.mark.asyncio
async def test_async_zero_argument_skip_predicate(async_fetcher, host):
    async def skip():
        return True

    settings = StrategySettings(stack_apps_key="app-key", skip_user_profile=skip)
    await _strategy(settings, async_fetcher, lambda *a: "user").authenticate(
        TokenRequest(body={"access_token": "tok"}), host
    )

    assert async_fetcher.calls == []
    assert host.outcome.succeeded


@pytest.mark.asyncio
async def test_async_skip_predicate_error(async_fetcher, host):
    async def skip(token):
        raise RuntimeError("cache down")

    settings = StrategySettings(stack_apps_key="app-key", skip_user_profile=skip)
    await _strategy(settings, async_fetcher, lambda *a: "user").authenticate(
        TokenRequest(body={"access_token": "tok"}), host
    )
    assert host.outcome.failed
    assert isinstance(host.outcome.info, RuntimeError)


@pytest.mark.asyncio
async def test_end_to_end_with_http_client(settings, host):
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.params["access_token"] == "tok"
        return httpx.Response(200, json={"items": [{"display_name": "Alice", "account_id": 42}]})

    fetcher = AsyncStackExchangeProfileClient(
        stack_apps_key=settings.stack_apps_key,
        client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )

    async def verify(access_token, refresh_token, profile):
        return profile.to_dict(include_raw=False)

    await _strategy(settings, fetcher, verify).authenticate(
        TokenRequest(body={}, headers={"access_token": "tok"}), host
    )

    assert host.outcome.user == {"provider": "stack-exchange", "id": 42, "displayName": "Alice"}


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "body, error_type",
    [('{"items":[]}', EmptyResponseError), ("not json", MalformedResponseError)],
)
async def test_profile_errors_fail(settings, host, body, error_type):
    fetcher = AsyncStackExchangeProfileClient(
        stack_apps_key=settings.stack_apps_key,
        client=httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(200, text=body))),
    )

    await _strategy(settings, fetcher, lambda *a: "user").authenticate(
        TokenRequest(body={"access_token": "tok"}), host
    )
    assert host.outcome.failed
    assert isinstance(host.outcome.info, error_type)


@pytest.mark.asyncio
async def test_user_profile(settings, async_fetcher):
    profile = await _strategy(settings, async_fetcher, lambda *a: None).user_profile("tok")
    assert profile.display_name == "Alice"


def test_async_oauth2_client(settings, async_fetcher):
    client = _strategy(settings, async_fetcher, lambda *a: None).oauth2_client()
    assert isinstance(client, AsyncOAuth2Client)
    assert client.client_id == "123"


@pytest.mark.asyncio
async def test_aclose_releases_owned_client(settings):
    strategy = AsyncStackExchangeTokenStrategy(settings, lambda *a: None)
    client = MagicMock(spec=httpx.AsyncClient)
    client.aclose = AsyncMock()
    strategy._profile_fetcher._client = client

    await strategy.aclose()

    client.aclose.assert_awaited_once()


@pytest.mark.asyncio
async def test_aclose_leaves_injected_fetcher_open(settings):
    fetcher = MagicMock()
    fetcher.close = AsyncMock()

    await _strategy(settings, fetcher, lambda *a: None).aclose()

    fetcher.close.assert_not_called()
