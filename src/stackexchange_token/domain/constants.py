from enum import Enum


PROVIDER_NAME = "stack-exchange"
STRATEGY_NAME = "stack-exchange-token"

DEFAULT_AUTHORIZATION_URL = "https://stackexchange.com/oauth"
DEFAULT_TOKEN_URL = "https://stackexchange.com/oauth/access_token"
DEFAULT_PROFILE_URL = "https://api.stackexchange.com/2.2/me"
DEFAULT_SITE = "stackoverflow"

ACCESS_TOKEN_FIELD = "access_token"
REFRESH_TOKEN_FIELD = "refresh_token"
ERROR_FIELD = "error"


class OutcomeKind(Enum):
    SUCCESS = "success"
    FAILURE = "failure"
    ERROR = "error"
