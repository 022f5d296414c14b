# tests/test_domain.py
import pytest

from stackexchange_token.domain.constants import OutcomeKind, PROVIDER_NAME
from stackexchange_token.domain.entities import AuthOutcome, Profile, VerifyResult
from stackexchange_token.domain.exceptions import (
    AuthenticationError,
    EmptyResponseError,
    InternalOAuthError,
    ProfileFetchError,
)
from stackexchange_token.domain.value_objects import (
    OAuthErrorInfo,
    SkipProfile,
    SkipProfileWhen,
    TokenRequest,
    as_skip_decision,
)


def test_profile_to_dict():
    profile = Profile(id=42, display_name="Alice", raw='{"items": []}', json={"items": []})
    assert profile.provider == PROVIDER_NAME

    assert profile.to_dict() == {
        "provider": "stack-exchange",
        "id": 42,
        "displayName": "Alice",
        "_raw": '{"items": []}',
        "_json": {"items": []},
    }
    assert profile.to_dict(include_raw=False) == {
        "provider": "stack-exchange",
        "id": 42,
        "displayName": "Alice",
    }


def test_token_lookup_precedence():
    request = TokenRequest(
        body={"access_token": "from-body"},
        query={"access_token": "from-query", "refresh_token": "r-query"},
        headers={"access_token": "from-header", "refresh_token": "r-header"},
    )
    creds = request.credentials
    assert creds.access_token == "from-body"
    assert creds.refresh_token == "r-query"

    request = TokenRequest(
        body={},
        query={},
        headers={"access_token": "from-header"},
    )
    assert request.credentials.access_token == "from-header"
    assert request.credentials.refresh_token is None


def test_token_lookup_skips_empty_values():
    request = TokenRequest(
        body={"access_token": ""},
        query={"access_token": "from-query"},
    )
    assert request.lookup("access_token") == "from-query"


def test_token_lookup_without_body():
    request = TokenRequest(body=None, query={"access_token": "q"})
    assert request.lookup("access_token") == "q"


def test_oauth_error_info():
    assert TokenRequest(query={}).oauth_error is None

    request = TokenRequest(
        query={
            "error": "access_denied",
            "error_description": "User said no",
            "error_uri": "https://example.com/err",
        }
    )
    info = request.oauth_error
    assert info == OAuthErrorInfo("access_denied", "User said no", "https://example.com/err")
    assert str(info) == "access_denied: User said no"
    assert str(OAuthErrorInfo("invalid_request")) == "invalid_request"


def test_as_skip_decision():
    assert as_skip_decision(None) == SkipProfile(False)
    assert as_skip_decision(False) == SkipProfile(False)
    assert as_skip_decision(True) == SkipProfile(True)
    assert as_skip_decision("yes") == SkipProfile(True)

    decision = SkipProfile(True)
    assert as_skip_decision(decision) is decision

    def predicate(token):
        return token == "cached"

    normalized = as_skip_decision(predicate)
    assert isinstance(normalized, SkipProfileWhen)
    assert normalized.predicate is predicate

    zero_arg = as_skip_decision(lambda: True)
    assert isinstance(zero_arg, SkipProfileWhen)
    assert zero_arg.predicate("any-token") is True

    # builtins taking a value still get the token
    assert as_skip_decision(bool).predicate("tok") is True


def test_auth_outcome():
    ok = AuthOutcome.success({"id": 1}, info="welcome")
    assert ok.kind is OutcomeKind.SUCCESS
    assert ok.succeeded and not ok.failed and not ok.is_error
    assert ok.user == {"id": 1}
    assert ok.info == "welcome"

    rejected = AuthOutcome.failure("nope")
    assert rejected.failed
    assert rejected.user is None

    err = RuntimeError("boom")
    broken = AuthOutcome.errored(err)
    assert broken.is_error
    assert broken.error is err


def test_verify_result_defaults():
    result = VerifyResult()
    assert result.user is None
    assert result.info is None


def test_internal_oauth_error():
    cause = ValueError("bad")
    exc = ProfileFetchError("failed to fetch user profile", cause)
    assert isinstance(exc, InternalOAuthError)
    assert isinstance(exc, AuthenticationError)
    assert exc.cause is cause
    assert str(exc) == "failed to fetch user profile (bad)"

    empty = EmptyResponseError("Empty response.")
    assert empty.cause is None
    assert str(empty) == "Empty response."

    with pytest.raises(AuthenticationError):
        raise empty
