from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

from .constants import OutcomeKind, PROVIDER_NAME


@dataclass(slots=True)
class Credentials:
    """
    Tokens presented by the client for a single request.
    Never persisted.
    """
    access_token: Optional[str] = None
    refresh_token: Optional[str] = None


@dataclass(slots=True)
class Profile:
    """
    Normalized Stack Exchange identity.

    `raw` and `json` keep the provider response around for callers that
    need fields beyond the normalized ones.
    """
    id: Any
    display_name: str
    provider: str = PROVIDER_NAME

    raw: str = ""
    json: Mapping[str, Any] = field(default_factory=dict)

    def to_dict(self, *, include_raw: bool = True) -> dict[str, Any]:
        data: dict[str, Any] = {
            "provider": self.provider,
            "id": self.id,
            "displayName": self.display_name,
        }
        if include_raw:
            data["_raw"] = self.raw
            data["_json"] = dict(self.json)
        return data


@dataclass(slots=True)
class VerifyResult:
    """
    What a verify callback hands back.

    A falsy `user` rejects the credentials; `info` travels with either
    outcome (e.g. a message or scope list).
    """
    user: Any = None
    info: Any = None


@dataclass(slots=True)
class AuthOutcome:
    """
    The single terminal outcome of one `authenticate` call.
    """
    kind: OutcomeKind
    user: Any = None
    info: Any = None
    error: Optional[BaseException] = None

    @classmethod
    def success(cls, user: Any, info: Any = None) -> "AuthOutcome":
        return cls(kind=OutcomeKind.SUCCESS, user=user, info=info)

    @classmethod
    def failure(cls, info: Any = None) -> "AuthOutcome":
        return cls(kind=OutcomeKind.FAILURE, info=info)

    @classmethod
    def errored(cls, error: BaseException) -> "AuthOutcome":
        return cls(kind=OutcomeKind.ERROR, error=error)

    # --- Read-only shortcuts ---------------------------------------------

    @property
    def succeeded(self) -> bool:
        return self.kind is OutcomeKind.SUCCESS

    @property
    def failed(self) -> bool:
        return self.kind is OutcomeKind.FAILURE

    @property
    def is_error(self) -> bool:
        return self.kind is OutcomeKind.ERROR
