import pytest

from stackexchange_token.config.settings import StrategySettings
from stackexchange_token.domain.entities import Profile
from stackexchange_token.domain.exceptions import EmptyResponseError
from stackexchange_token.integrations.common.registry import OutcomeRecorder


class FakeProfileFetcher:
    """Records the tokens it was asked for and returns a fixed profile."""

    def __init__(self, profile=None, error=None):
        self.profile = profile or Profile(id=42, display_name="Alice")
        self.error = error
        self.calls = []

    def fetch(self, access_token):
        self.calls.append(access_token)
        if self.error is not None:
            raise self.error
        return self.profile


class FakeAsyncProfileFetcher(FakeProfileFetcher):
    async def fetch(self, access_token):
        return FakeProfileFetcher.fetch(self, access_token)


@pytest.fixture
def settings():
    return StrategySettings(stack_apps_key="app-key", client_id="123", client_secret="shhh")


@pytest.fixture
def fetcher():
    return FakeProfileFetcher()


@pytest.fixture
def async_fetcher():
    return FakeAsyncProfileFetcher()


@pytest.fixture
def empty_fetcher():
    return FakeProfileFetcher(error=EmptyResponseError("Empty response."))


@pytest.fixture
def host():
    return OutcomeRecorder()
