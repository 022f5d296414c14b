class AuthenticationError(Exception):
    """Raised when authentication fails."""
    pass


class ConfigurationError(Exception):
    """Raised when a strategy is constructed with invalid settings."""
    pass


class InternalOAuthError(AuthenticationError):
    """
    Raised when talking to the identity provider goes wrong.

    `cause` keeps the underlying exception (transport or parse error), if any.
    """

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.cause = cause

    def __str__(self) -> str:
        if self.cause is None:
            return self.message
        return f"{self.message} ({self.cause})"


class ProfileFetchError(InternalOAuthError):
    """Raised when the profile request did not complete."""
    pass


class MalformedResponseError(InternalOAuthError):
    """Raised when the profile response is not the expected JSON."""
    pass


class EmptyResponseError(InternalOAuthError):
    """Raised when the profile response holds no account items."""
    pass
