"""
Household repositories.

The in-memory repository serves tests and local development; the Supabase
repository maps the `households` table. Neither applies household scoping:
the service layer does that with the caller's context.
"""

from datetime import datetime
from typing import Any, Optional
from uuid import UUID

from shared.repository import BaseRepository

from .models import Household


class InMemoryHouseholdRepository:
    """Dictionary-backed household storage."""

    def __init__(self) -> None:
        self._households: dict[UUID, Household] = {}

    def get(self, household_id: UUID) -> Optional[Household]:
        return self._households.get(household_id)

    def list_all(self) -> list[Household]:
        return sorted(self._households.values(), key=lambda h: h.created_at)

    def save(self, household: Household) -> Household:
        self._households[household.id] = household
        return household


class HouseholdRepository(BaseRepository[Household]):
    """
    Repository for the `households` table.

    Note: This repository does NOT perform authorization checks.
    The service layer is responsible for household scoping.
    """

    table_name = "households"

    def get(self, household_id: UUID) -> Optional[Household]:
        result = (
            self._db.table(self.table_name)
            .select("*")
            .eq("id", str(household_id))
            .execute()
        )
        if not result.data:
            return None
        return self._map_to_household(result.data[0])

    def list_all(self) -> list[Household]:
        result = self._db.table(self.table_name).select("*").order("created_at").execute()
        return [self._map_to_household(row) for row in result.data]

    def save(self, household: Household) -> Household:
        row = {
            "id": str(household.id),
            "name": household.name,
            "is_active": household.is_active,
            "created_at": household.created_at.isoformat(),
            "modified_at": household.modified_at.isoformat() if household.modified_at else None,
        }
        result = self._db.table(self.table_name).upsert(row).execute()
        return self._map_to_household(result.data[0]) if result.data else household

    @staticmethod
    def _map_to_household(row: dict[str, Any]) -> Household:
        return Household(
            id=UUID(str(row["id"])),
            name=row["name"],
            is_active=row.get("is_active", True),
            created_at=_parse_timestamp(row["created_at"]),
            modified_at=_parse_timestamp(row["modified_at"]) if row.get("modified_at") else None,
        )


def _parse_timestamp(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    # Postgres emits "+00:00"; older clients may send a trailing "Z".
    return datetime.fromisoformat(str(value).replace("Z", "+00:00"))
