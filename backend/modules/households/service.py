"""
Household service implementation.

A data-access collaborator like any other: every operation takes the
caller's CurrentUserContext and applies household scoping to it.
"""

import logging
from datetime import datetime, timezone
from typing import Optional
from uuid import UUID

from modules.auth.audit import AuditLogService
from modules.auth.context import CurrentUserContext

from .exceptions import AdminRequiredError, HouseholdNotFoundError
from .interfaces import IHouseholdRepository
from .models import Household, HouseholdListResponse
from .repository import InMemoryHouseholdRepository
from .scoping import in_scope, scope_records

logger = logging.getLogger(__name__)


def _household_key(household: Household) -> UUID:
    return household.id


class HouseholdService:
    """
    Household management with per-caller scoping.

    Members see only their own household. Creating and deactivating
    households is reserved to administrators.
    """

    def __init__(
        self,
        repository: Optional[IHouseholdRepository] = None,
        audit: Optional[AuditLogService] = None,
    ):
        self._repository = repository or InMemoryHouseholdRepository()
        self._audit = audit or AuditLogService()

    @property
    def repository(self) -> IHouseholdRepository:
        return self._repository

    async def create_household(self, name: str, context: CurrentUserContext) -> Household:
        self._require_admin(context, "create_household")
        household = self._repository.save(Household(name=name))
        self._audit.household_created(household.id, context.user_id)
        logger.info("Created household %s (%s)", household.id, household.name)
        return household

    async def get_household(self, household_id: UUID, context: CurrentUserContext) -> Household:
        # Out-of-scope households are reported exactly like missing ones.
        if not in_scope(household_id, context):
            raise HouseholdNotFoundError(household_id)
        household = self._repository.get(household_id)
        if household is None:
            raise HouseholdNotFoundError(household_id)
        return household

    async def list_households(self, context: CurrentUserContext) -> HouseholdListResponse:
        visible = scope_records(self._repository.list_all(), context, key=_household_key)
        return HouseholdListResponse(households=visible, total=len(visible))

    async def deactivate_household(
        self, household_id: UUID, context: CurrentUserContext
    ) -> Household:
        self._require_admin(context, "deactivate_household")
        household = self._repository.get(household_id)
        if household is None:
            raise HouseholdNotFoundError(household_id)
        if not household.is_active:
            return household

        updated = self._repository.save(
            household.model_copy(
                update={"is_active": False, "modified_at": datetime.now(timezone.utc)}
            )
        )
        self._audit.household_deactivated(household_id, context.user_id)
        return updated

    @staticmethod
    def _require_admin(context: CurrentUserContext, operation: str) -> None:
        # Reading user_id first fails loudly on an uninitialized context.
        user_id = context.user_id
        if not context.is_admin:
            logger.warning("Non-admin %s attempted %s", user_id, operation)
            raise AdminRequiredError(operation)
