"""
stackexchange_token

Stack Exchange bearer-token authentication strategy: resolves an access
token presented by a client into a normalized profile and hands it to an
application verify callback. Framework integrations live under
`stackexchange_token.integrations`.
"""

__version__ = "0.1.0"

from .domain.constants import OutcomeKind, PROVIDER_NAME, STRATEGY_NAME
from .domain.entities import AuthOutcome, Credentials, Profile, VerifyResult
from .domain.exceptions import (
    AuthenticationError,
    ConfigurationError,
    InternalOAuthError,
    ProfileFetchError,
    MalformedResponseError,
    EmptyResponseError,
)
from .domain.value_objects import (
    TokenRequest,
    OAuthErrorInfo,
    SkipProfile,
    SkipProfileWhen,
    as_skip_decision,
)
from .domain.ports import StrategyHost, ProfileFetcher, AsyncProfileFetcher

from .config.settings import StrategySettings
from .config.env import settings_from_env

from .application.use_cases.load_profile import LoadUserProfileUseCase, AsyncLoadUserProfileUseCase
from .application.use_cases.authenticate import (
    StackExchangeTokenStrategy,
    AsyncStackExchangeTokenStrategy,
)

# Stack Exchange adapters
from .adapters.stackexchange.profile_client import (
    StackExchangeProfileClient,
    AsyncStackExchangeProfileClient,
    parse_profile,
)

from .integrations.common.registry import OutcomeRecorder, StrategyRegistry
from .integrations.common.auth_factory import create_stackexchange_strategy, create_registry

Strategy = StackExchangeTokenStrategy

__all__ = [
    "__version__",
    # domain core
    "OutcomeKind",
    "PROVIDER_NAME",
    "STRATEGY_NAME",
    "AuthOutcome",
    "Credentials",
    "Profile",
    "VerifyResult",
    "TokenRequest",
    "OAuthErrorInfo",
    "SkipProfile",
    "SkipProfileWhen",
    "as_skip_decision",
    "StrategyHost",
    "ProfileFetcher",
    "AsyncProfileFetcher",
    # exceptions
    "AuthenticationError",
    "ConfigurationError",
    "InternalOAuthError",
    "ProfileFetchError",
    "MalformedResponseError",
    "EmptyResponseError",
    # configuration
    "StrategySettings",
    "settings_from_env",
    # use cases
    "LoadUserProfileUseCase",
    "AsyncLoadUserProfileUseCase",
    "StackExchangeTokenStrategy",
    "AsyncStackExchangeTokenStrategy",
    "Strategy",
    # adapters
    "StackExchangeProfileClient",
    "AsyncStackExchangeProfileClient",
    "parse_profile",
    # host side
    "OutcomeRecorder",
    "StrategyRegistry",
    "create_stackexchange_strategy",
    "create_registry",
]
