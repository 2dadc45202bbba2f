"""
Authentication module interfaces.

Other modules should depend on these protocols, not the concrete
implementations. The identity store, lockout policy and device bindings
are external collaborators: the authenticator only consumes them.

Any collaborator method may raise IdentityStoreUnavailableError when its
backend cannot be reached.
"""

from typing import Protocol, Optional, runtime_checkable
from uuid import UUID

from shared.models import AuthenticatedPrincipal
from modules.households.models import Household

from .models import ApplicationUser, AuthResult, Credential, DeviceBinding, UserSummary


@runtime_checkable
class IIdentityStore(Protocol):
    """Read access to identity records and their households."""

    async def find_by_user_name(self, user_name: str) -> Optional[ApplicationUser]:
        """
        Look up a user by username (case-insensitive).

        Returns:
            The identity record, or None if no such user exists
        """
        ...

    async def find_by_id(self, user_id: str) -> Optional[ApplicationUser]:
        """Look up a user by ID."""
        ...

    async def find_pin_candidates(self, household_id: UUID) -> list[ApplicationUser]:
        """
        List the users of one household that have a PIN set.

        PINs are only unique enough within a household, so PIN sign-in
        always starts from a household resolved through a device binding.
        """
        ...

    async def get_household(self, household_id: UUID) -> Optional[Household]:
        """Get a household by ID."""
        ...


@runtime_checkable
class ILockoutPolicy(Protocol):
    """Failed-attempt counting. The authenticator only asks yes/no."""

    async def is_locked_out(self, key: str) -> bool:
        """Whether sign-in attempts for this key are currently refused."""
        ...

    async def record_failure(self, key: str) -> None:
        """Count one failed attempt."""
        ...

    async def reset(self, key: str) -> None:
        """Clear the failure count after a successful sign-in."""
        ...


@runtime_checkable
class IDeviceBindingStore(Protocol):
    """Remembered devices and the household each one belongs to."""

    async def get(self, device_id: str) -> Optional[DeviceBinding]:
        """Get the binding for a device, or None if it was never remembered."""
        ...

    async def remember(self, device_id: str, household_id: UUID) -> DeviceBinding:
        """Bind a device to a household, replacing any previous binding."""
        ...


@runtime_checkable
class IUserResolver(Protocol):
    """Turns a transport-level principal into a UserSummary."""

    async def resolve_user(self, principal: AuthenticatedPrincipal) -> Optional[UserSummary]:
        """
        Resolve the principal's current identity.

        Returns:
            UserSummary, or None if the user no longer exists or the
            household was deactivated
        """
        ...


@runtime_checkable
class IAuthenticationService(IUserResolver, Protocol):
    """
    Interface for authentication operations.

    All sign-in flows must go through sign_in().
    """

    async def sign_in(self, credential: Credential) -> AuthResult:
        """
        Authenticate a credential.

        User-facing failures are returned, not raised. Unexpected errors
        propagate to the caller.
        """
        ...

    async def sign_out(self, principal: AuthenticatedPrincipal) -> None:
        """Record the end of a session."""
        ...
