"""
Authentication module exceptions.

User-facing authentication failures are NOT exceptions: they are returned
as AuthResult.fail(...). The classes here cover the session layer, the
identity store being unreachable, and programming defects.
"""

from shared.exceptions import AuthenticationError, ExternalServiceError


class InvalidSessionTokenError(AuthenticationError):
    """Raised when a session token is invalid or malformed."""

    def __init__(self, message: str = "Invalid session token"):
        super().__init__(message, code="INVALID_TOKEN")


class ExpiredSessionTokenError(AuthenticationError):
    """Raised when a session token has expired."""

    def __init__(self, message: str = "Session has expired"):
        super().__init__(message, code="TOKEN_EXPIRED")


class MissingSessionError(AuthenticationError):
    """Raised when a request needs a session and none could be resolved."""

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message, code="MISSING_SESSION")


class IdentityStoreUnavailableError(ExternalServiceError):
    """Raised by identity-store collaborators when the backend cannot be reached."""

    def __init__(self, message: str = "Identity store unavailable", service: str = "identity_store"):
        super().__init__(message, service=service, code="IDENTITY_STORE_UNAVAILABLE")


class ContextNotInitializedError(RuntimeError):
    """
    Raised when CurrentUserContext is read before it reached the Ready state.

    Signals a bug in the caller. It is not a HearthError, so the API
    renders it as a 500.
    """

    def __init__(self, state: str):
        super().__init__(
            f"CurrentUserContext is {state}; call initialize() and check the result first."
        )
        self.state = state


class UnsupportedCredentialError(TypeError):
    """Raised when the authenticator is handed something outside the Credential union."""

    def __init__(self, credential: object):
        super().__init__(f"Unsupported credential type: {type(credential).__name__}")
