"""
Households module exceptions.
"""

from typing import Optional
from uuid import UUID

from shared.exceptions import NotFoundError, AuthorizationError, ValidationError


class HouseholdNotFoundError(NotFoundError):
    """Raised when a household does not exist or is outside the caller's scope."""

    def __init__(self, household_id: UUID):
        super().__init__(
            f"Household not found: {household_id}",
            code="HOUSEHOLD_NOT_FOUND",
            details={"household_id": str(household_id)},
        )


class HouseholdScopeViolationError(AuthorizationError):
    """Raised when a non-admin context touches another household's data."""

    def __init__(self, context_household_id: Optional[UUID], record_household_id: Optional[UUID]):
        super().__init__(
            "Record belongs to a different household",
            code="HOUSEHOLD_SCOPE_VIOLATION",
            details={
                "context_household_id": str(context_household_id),
                "record_household_id": str(record_household_id),
            },
        )


class AdminRequiredError(AuthorizationError):
    """Raised when a household-management operation is attempted by a non-admin."""

    def __init__(self, operation: str):
        super().__init__(
            f"Administrator access required for {operation}",
            code="ADMIN_REQUIRED",
            details={"operation": operation},
        )


class HouseholdRequiredError(ValidationError):
    """Raised when an administrator write does not name its household."""

    def __init__(self, column: str):
        super().__init__(
            f"Administrator writes must name a {column}",
            code="HOUSEHOLD_REQUIRED",
            details={"column": column},
        )


class HouseholdReassignmentError(ValidationError):
    """Raised when an update tries to move rows to another household."""

    def __init__(self, column: str):
        super().__init__(
            f"{column} cannot be changed through an update",
            code="HOUSEHOLD_REASSIGNMENT",
            details={"column": column},
        )
