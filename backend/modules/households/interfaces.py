"""
Households module interfaces.

Other modules should depend on these protocols, not the concrete
implementations.
"""

from typing import Protocol, Optional, runtime_checkable
from uuid import UUID

from modules.auth.context import CurrentUserContext

from .models import Household, HouseholdListResponse


@runtime_checkable
class IHouseholdRepository(Protocol):
    """Unscoped persistence for households. Only services may hold one."""

    def get(self, household_id: UUID) -> Optional[Household]:
        ...

    def list_all(self) -> list[Household]:
        ...

    def save(self, household: Household) -> Household:
        """Insert or replace a household."""
        ...


@runtime_checkable
class IHouseholdService(Protocol):
    """
    Interface for household operations.

    Every method takes the caller's CurrentUserContext; results are
    confined to the caller's household unless the caller is an
    administrator.
    """

    async def create_household(self, name: str, context: CurrentUserContext) -> Household:
        """
        Create a household (administrators only).

        Raises:
            AdminRequiredError: If context is not an administrator
        """
        ...

    async def get_household(self, household_id: UUID, context: CurrentUserContext) -> Household:
        """
        Get a household visible to context.

        Raises:
            HouseholdNotFoundError: If missing or outside the caller's scope
        """
        ...

    async def list_households(self, context: CurrentUserContext) -> HouseholdListResponse:
        """List households visible to context."""
        ...

    async def deactivate_household(
        self, household_id: UUID, context: CurrentUserContext
    ) -> Household:
        """Stop a household's members from starting new sessions (administrators only)."""
        ...
