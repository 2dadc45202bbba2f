"""
Authentication module.

Handles credential sign-in, session tokens and the per-request user
context that every data-access call is scoped by.

Public API:
- IAuthenticationService: Interface for sign-in operations
- Credential, PasswordCredential, PinCredential: Sign-in payloads
- AuthResult, UserSummary, AuthErrorCode: Sign-in outcomes
- CurrentUserContext: Per-request household scope
- Auth exceptions: InvalidSessionTokenError, ContextNotInitializedError, etc.
"""

from .interfaces import (
    IAuthenticationService,
    IDeviceBindingStore,
    IIdentityStore,
    ILockoutPolicy,
    IUserResolver,
)
from .models import (
    ApplicationUser,
    AuthErrorCode,
    AuthResult,
    Credential,
    DeviceBinding,
    PasswordCredential,
    PinCredential,
    UserSummary,
)
from .context import ContextState, CurrentUserContext
from .exceptions import (
    ContextNotInitializedError,
    ExpiredSessionTokenError,
    IdentityStoreUnavailableError,
    InvalidSessionTokenError,
    MissingSessionError,
    UnsupportedCredentialError,
)

__all__ = [
    # Interfaces
    "IAuthenticationService",
    "IDeviceBindingStore",
    "IIdentityStore",
    "ILockoutPolicy",
    "IUserResolver",
    # Models
    "ApplicationUser",
    "AuthErrorCode",
    "AuthResult",
    "Credential",
    "DeviceBinding",
    "PasswordCredential",
    "PinCredential",
    "UserSummary",
    # Context
    "ContextState",
    "CurrentUserContext",
    # Exceptions
    "ContextNotInitializedError",
    "ExpiredSessionTokenError",
    "IdentityStoreUnavailableError",
    "InvalidSessionTokenError",
    "MissingSessionError",
    "UnsupportedCredentialError",
]
