"""
Households module data models.

A household is the tenant boundary: every non-administrator belongs to
exactly one, and all per-household data carries its id.
"""

from datetime import datetime, timezone
from typing import Optional
from uuid import UUID, uuid4
from pydantic import BaseModel, Field, field_validator

NIL_UUID = UUID(int=0)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def require_non_nil(value: Optional[UUID]) -> Optional[UUID]:
    """Reject the all-zero UUID, which never identifies a real household."""
    if value is not None and value == NIL_UUID:
        raise ValueError("household id must not be the nil UUID")
    return value


class Household(BaseModel):
    """
    A household/family unit.

    Inactive households keep their data but cannot start new sessions.
    The model is frozen; use model_copy(update=...) to derive a changed copy.
    """

    id: UUID = Field(default_factory=uuid4, description="Household ID")
    name: str = Field(..., min_length=1, description="Display name, e.g. 'Smith Family'")
    is_active: bool = Field(default=True, description="Whether members may sign in")
    created_at: datetime = Field(default_factory=_utcnow, description="Creation time")
    modified_at: Optional[datetime] = Field(None, description="Last modification time")

    model_config = {"frozen": True}

    @field_validator("id")
    @classmethod
    def _id_not_nil(cls, value: UUID) -> UUID:
        return require_non_nil(value)

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("household name must not be blank")
        return value


class CreateHouseholdRequest(BaseModel):
    """Request body for creating a household."""

    name: str = Field(..., min_length=1, max_length=100, description="Display name")


class HouseholdListResponse(BaseModel):
    """Households visible to the caller."""

    households: list[Household]
    total: int
