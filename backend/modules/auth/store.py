"""
Identity store, lockout and device-binding implementations.

In-memory implementations back tests and local development; the Supabase
implementations read the `users` and `device_bindings` tables. Supabase
transport errors surface as IdentityStoreUnavailableError so the
authenticator can report them as a transient failure.
"""

import asyncio
import logging
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Optional
from uuid import UUID

import httpx
from postgrest.exceptions import APIError

from shared.config import get_settings
from shared.repository import BaseRepository
from modules.households.interfaces import IHouseholdRepository
from modules.households.models import Household
from modules.households.repository import HouseholdRepository, InMemoryHouseholdRepository

from .exceptions import IdentityStoreUnavailableError
from .models import ApplicationUser, DeviceBinding

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _normalize(user_name: str) -> str:
    return user_name.strip().casefold()


# -----------------------------------------------------------------------------
# In-memory implementations
# -----------------------------------------------------------------------------


class InMemoryIdentityStore:
    """
    Identity store with in-memory storage.

    For testing and development. Use SupabaseIdentityStore for production.
    """

    def __init__(self, households: Optional[IHouseholdRepository] = None):
        self._users: dict[str, ApplicationUser] = {}
        self._households = households or InMemoryHouseholdRepository()

    @property
    def households(self) -> IHouseholdRepository:
        return self._households

    def add_user(self, user: ApplicationUser) -> ApplicationUser:
        """Provision an identity record."""
        existing = self._find_by_name(user.user_name)
        if existing is not None and existing.id != user.id:
            raise ValueError(f"Username already taken: {user.user_name}")
        if user.household_id is not None and self._households.get(user.household_id) is None:
            raise ValueError(f"Unknown household: {user.household_id}")
        self._users[user.id] = user
        return user

    def add_household(self, household: Household) -> Household:
        return self._households.save(household)

    def _find_by_name(self, user_name: str) -> Optional[ApplicationUser]:
        wanted = _normalize(user_name)
        for user in self._users.values():
            if _normalize(user.user_name) == wanted:
                return user
        return None

    async def find_by_user_name(self, user_name: str) -> Optional[ApplicationUser]:
        return self._find_by_name(user_name)

    async def find_by_id(self, user_id: str) -> Optional[ApplicationUser]:
        return self._users.get(user_id)

    async def find_pin_candidates(self, household_id: UUID) -> list[ApplicationUser]:
        return [
            user
            for user in self._users.values()
            if user.household_id == household_id and user.pin_hash
        ]

    async def get_household(self, household_id: UUID) -> Optional[Household]:
        return self._households.get(household_id)


@dataclass
class _FailureWindow:
    failures: int = 0
    locked_until: Optional[datetime] = None


class InMemoryLockoutPolicy:
    """
    Counts failed attempts per key and locks the key for a fixed period.

    After max_failures consecutive failures the key is locked for
    lockout_minutes; the counter starts over when the lock expires.
    """

    def __init__(
        self,
        max_failures: Optional[int] = None,
        lockout_minutes: Optional[int] = None,
        clock: Callable[[], datetime] = _utcnow,
    ):
        settings = get_settings()
        self._max_failures = max_failures or settings.lockout_max_failures
        self._duration = timedelta(minutes=lockout_minutes or settings.lockout_minutes)
        self._clock = clock
        self._windows: dict[str, _FailureWindow] = {}

    async def is_locked_out(self, key: str) -> bool:
        window = self._windows.get(key)
        if window is None or window.locked_until is None:
            return False
        if self._clock() >= window.locked_until:
            del self._windows[key]
            return False
        return True

    async def record_failure(self, key: str) -> None:
        window = self._windows.setdefault(key, _FailureWindow())
        window.failures += 1
        if window.failures >= self._max_failures and window.locked_until is None:
            window.locked_until = self._clock() + self._duration
            logger.warning("Locked out %s after %d failed attempts", key, window.failures)

    async def reset(self, key: str) -> None:
        self._windows.pop(key, None)


class InMemoryDeviceBindingStore:
    """Remembered devices held in memory."""

    def __init__(self) -> None:
        self._bindings: dict[str, DeviceBinding] = {}

    async def get(self, device_id: str) -> Optional[DeviceBinding]:
        return self._bindings.get(device_id)

    async def remember(self, device_id: str, household_id: UUID) -> DeviceBinding:
        binding = DeviceBinding(device_id=device_id, household_id=household_id)
        self._bindings[device_id] = binding
        return binding


# -----------------------------------------------------------------------------
# Supabase implementations
# -----------------------------------------------------------------------------


@contextmanager
def _store_errors(operation: str) -> Iterator[None]:
    """Translate Supabase transport failures into IdentityStoreUnavailableError."""
    try:
        yield
    except (APIError, httpx.HTTPError) as e:
        logger.error("Identity store %s failed: %s", operation, e)
        raise IdentityStoreUnavailableError(f"Identity store {operation} failed") from e


class SupabaseIdentityStore(BaseRepository[ApplicationUser]):
    """
    Identity store backed by the Supabase `users` and `households` tables.

    Usernames are matched on the normalized_user_name column.
    """

    table_name = "users"

    def __init__(self, db: Any) -> None:
        super().__init__(db)
        self._households = HouseholdRepository(db)

    async def find_by_user_name(self, user_name: str) -> Optional[ApplicationUser]:
        query = (
            self._db.table(self.table_name)
            .select("*")
            .eq("normalized_user_name", _normalize(user_name))
        )
        with _store_errors("lookup by username"):
            result = await asyncio.to_thread(query.execute)
        return self._map_to_user(result.data[0]) if result.data else None

    async def find_by_id(self, user_id: str) -> Optional[ApplicationUser]:
        query = self._db.table(self.table_name).select("*").eq("id", user_id)
        with _store_errors("lookup by id"):
            result = await asyncio.to_thread(query.execute)
        return self._map_to_user(result.data[0]) if result.data else None

    async def find_pin_candidates(self, household_id: UUID) -> list[ApplicationUser]:
        query = (
            self._db.table(self.table_name)
            .select("*")
            .eq("household_id", str(household_id))
            .not_.is_("pin_hash", "null")
        )
        with _store_errors("PIN candidate lookup"):
            result = await asyncio.to_thread(query.execute)
        return [self._map_to_user(row) for row in result.data]

    async def get_household(self, household_id: UUID) -> Optional[Household]:
        with _store_errors("household lookup"):
            return await asyncio.to_thread(self._households.get, household_id)

    @staticmethod
    def _map_to_user(row: dict[str, Any]) -> ApplicationUser:
        household_id = row.get("household_id")
        return ApplicationUser(
            id=str(row["id"]),
            user_name=row["user_name"],
            password_hash=row.get("password_hash"),
            pin_hash=row.get("pin_hash"),
            roles=frozenset(row.get("roles") or []),
            household_id=UUID(str(household_id)) if household_id else None,
        )


class SupabaseDeviceBindingStore(BaseRepository[DeviceBinding]):
    """Remembered devices in the Supabase `device_bindings` table."""

    table_name = "device_bindings"

    async def get(self, device_id: str) -> Optional[DeviceBinding]:
        query = self._db.table(self.table_name).select("*").eq("device_id", device_id)
        with _store_errors("device lookup"):
            result = await asyncio.to_thread(query.execute)
        if not result.data:
            return None
        row = result.data[0]
        return DeviceBinding(
            device_id=row["device_id"],
            household_id=UUID(str(row["household_id"])),
            created_at=datetime.fromisoformat(str(row["created_at"]).replace("Z", "+00:00")),
        )

    async def remember(self, device_id: str, household_id: UUID) -> DeviceBinding:
        binding = DeviceBinding(device_id=device_id, household_id=household_id)
        query = self._db.table(self.table_name).upsert(
            {
                "device_id": binding.device_id,
                "household_id": str(binding.household_id),
                "created_at": binding.created_at.isoformat(),
            }
        )
        with _store_errors("device remember"):
            await asyncio.to_thread(query.execute)
        return binding
