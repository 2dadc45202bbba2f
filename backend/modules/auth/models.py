"""
Authentication module data models.

These models define the data structures used by the auth module
and exposed to other modules through the interface.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Annotated, Literal, Optional, Union
from uuid import UUID, uuid4
from pydantic import BaseModel, Field, field_validator, model_validator

from modules.households.models import require_non_nil

ROLE_PARENT = "Parent"
ROLE_CHILD = "Child"


class AuthErrorCode(str, Enum):
    """Machine-readable failure codes carried by AuthResult."""

    INVALID_FORMAT = "InvalidFormat"
    INVALID_CREDENTIALS = "InvalidCredentials"
    ACCOUNT_LOCKED = "AccountLocked"
    # Only used as an audit reason; callers see INVALID_CREDENTIALS.
    HOUSEHOLD_INACTIVE = "HouseholdInactive"
    UNAVAILABLE = "Unavailable"


# -----------------------------------------------------------------------------
# Credentials
# -----------------------------------------------------------------------------


class _CredentialFields(BaseModel):
    remember_device: bool = Field(default=False, description="Remember this device")
    device_id: Optional[str] = Field(
        None,
        max_length=128,
        description="Opaque device identifier supplied by the client",
    )

    model_config = {"frozen": True}


class PasswordCredential(_CredentialFields):
    """Username and password sign-in (parents and administrators)."""

    kind: Literal["password"] = "password"
    user_name: str = Field(..., description="Account username")
    password: str = Field(..., repr=False, description="Plain-text password")


class PinCredential(_CredentialFields):
    """
    Four-digit PIN sign-in (children on a remembered family device).

    The PIN is not validated here; the authenticator rejects malformed
    PINs with an InvalidFormat result instead of a validation error.
    """

    kind: Literal["pin"] = "pin"
    pin: str = Field(..., repr=False, description="Four decimal digits")


Credential = Annotated[
    Union[PasswordCredential, PinCredential],
    Field(discriminator="kind"),
]


# -----------------------------------------------------------------------------
# Results
# -----------------------------------------------------------------------------


class UserSummary(BaseModel):
    """
    Minimal identity projection returned on successful sign-in.

    household_id is None only for administrators.
    """

    user_id: str = Field(..., min_length=1, description="Stable user identifier")
    user_name: str = Field(..., description="Username")
    roles: frozenset[str] = Field(default_factory=frozenset, description="Role names")
    household_id: Optional[UUID] = Field(None, description="Tenant ID, None for admins")

    model_config = {"frozen": True}

    @field_validator("household_id")
    @classmethod
    def _household_not_nil(cls, value: Optional[UUID]) -> Optional[UUID]:
        return require_non_nil(value)


class AuthResult(BaseModel):
    """
    Outcome of an authentication attempt.

    Exactly one of user / error_code is set. Build instances through
    AuthResult.ok() and AuthResult.fail().
    """

    success: bool
    error_code: Optional[str] = None
    user_facing_message: Optional[str] = None
    user: Optional[UserSummary] = None

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def _exactly_one_branch(self) -> "AuthResult":
        if self.success:
            if self.user is None or self.error_code is not None:
                raise ValueError("successful result needs a user and no error code")
        elif self.user is not None or self.error_code is None:
            raise ValueError("failed result needs an error code and no user")
        return self

    @classmethod
    def ok(cls, user: UserSummary) -> "AuthResult":
        return cls(success=True, user=user)

    @classmethod
    def fail(cls, error_code: str, user_facing_message: str) -> "AuthResult":
        return cls(
            success=False,
            error_code=error_code,
            user_facing_message=user_facing_message,
        )


# -----------------------------------------------------------------------------
# Identity records (owned by the identity store)
# -----------------------------------------------------------------------------


class ApplicationUser(BaseModel):
    """
    Identity record as held by the identity store.

    A null household_id marks a platform administrator. The record is
    frozen: moving a user to another household is a separate, audited
    operation outside this module.
    """

    id: str = Field(default_factory=lambda: str(uuid4()), description="User ID")
    user_name: str = Field(..., min_length=1, description="Username")
    password_hash: Optional[str] = Field(None, repr=False, description="bcrypt hash")
    pin_hash: Optional[str] = Field(None, repr=False, description="bcrypt hash of PIN")
    roles: frozenset[str] = Field(default_factory=frozenset, description="Role names")
    household_id: Optional[UUID] = Field(None, description="Household, None for admins")

    model_config = {"frozen": True}

    @field_validator("household_id")
    @classmethod
    def _household_not_nil(cls, value: Optional[UUID]) -> Optional[UUID]:
        return require_non_nil(value)

    def to_summary(self) -> UserSummary:
        return UserSummary(
            user_id=self.id,
            user_name=self.user_name,
            roles=self.roles,
            household_id=self.household_id,
        )


class DeviceBinding(BaseModel):
    """A remembered device, bound to the household of the user who signed in on it."""

    device_id: str = Field(..., min_length=1)
    household_id: UUID
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    model_config = {"frozen": True}


# -----------------------------------------------------------------------------
# API payloads
# -----------------------------------------------------------------------------


class LoginResponse(BaseModel):
    """Response body for a sign-in attempt."""

    result: AuthResult
    access_token: Optional[str] = Field(None, description="Session token on success")
    token_type: str = "bearer"
    expires_at: Optional[datetime] = None


class SessionToken(BaseModel):
    """An issued session token and its expiry."""

    token: str
    expires_at: datetime
