"""
Households module.

Owns the tenant boundary entity and the helpers every data-access
collaborator uses to confine reads and writes to the caller's household.

Public API:
- Household: the tenant entity
- HouseholdNotFoundError, HouseholdScopeViolationError, AdminRequiredError
- HouseholdRequiredError, HouseholdReassignmentError: rejected scoped writes

Scoping helpers live in modules.households.scoping and the service in
modules.households.service; they are imported from there directly because
they depend on the auth module's CurrentUserContext.
"""

from .models import Household, CreateHouseholdRequest, HouseholdListResponse
from .exceptions import (
    HouseholdNotFoundError,
    HouseholdScopeViolationError,
    AdminRequiredError,
    HouseholdRequiredError,
    HouseholdReassignmentError,
)

__all__ = [
    # Models
    "Household",
    "CreateHouseholdRequest",
    "HouseholdListResponse",
    # Exceptions
    "HouseholdNotFoundError",
    "HouseholdScopeViolationError",
    "AdminRequiredError",
    "HouseholdRequiredError",
    "HouseholdReassignmentError",
]
