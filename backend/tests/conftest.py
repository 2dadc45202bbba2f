"""
Shared test fixtures and utilities.

This module provides common test infrastructure used across all test modules.
"""

import os
from typing import Optional
from uuid import UUID

import pytest

# Test-only settings; applied before any module reads get_settings().
TEST_SESSION_SECRET = "test-session-secret-for-testing-only"
os.environ.setdefault("HEARTH_SESSION_SECRET", TEST_SESSION_SECRET)
os.environ.setdefault("HEARTH_BCRYPT_ROUNDS", "4")

from shared.config import get_settings  # noqa: E402
from shared.models import AuthenticatedPrincipal  # noqa: E402
from api.dependencies import reset_container  # noqa: E402
from modules.auth.context import CurrentUserContext  # noqa: E402
from modules.auth.models import ApplicationUser, UserSummary, ROLE_CHILD, ROLE_PARENT  # noqa: E402
from modules.auth.passwords import hash_secret  # noqa: E402
from modules.auth.store import InMemoryIdentityStore  # noqa: E402
from modules.households.models import Household  # noqa: E402

PARENT_PASSWORD = "Parent123!"
CHILD_PIN = "1234"
ADMIN_PASSWORD = "Admin123!"


class StubResolver:
    """IUserResolver that returns fixed summaries and counts calls."""

    def __init__(self, summaries: Optional[dict[str, UserSummary]] = None):
        self.summaries = summaries or {}
        self.calls = 0

    async def resolve_user(self, principal: AuthenticatedPrincipal) -> Optional[UserSummary]:
        self.calls += 1
        return self.summaries.get(principal.user_id)


async def make_context(summary: UserSummary) -> CurrentUserContext:
    """Build a READY context for the given summary."""
    resolver = StubResolver({summary.user_id: summary})
    context = CurrentUserContext(resolver, AuthenticatedPrincipal(user_id=summary.user_id))
    await context.initialize()
    return context


def member_summary(household_id: UUID, user_id: str = "member-1") -> UserSummary:
    return UserSummary(
        user_id=user_id,
        user_name=user_id,
        roles=frozenset({ROLE_PARENT}),
        household_id=household_id,
    )


def admin_summary(user_id: str = "admin-1") -> UserSummary:
    return UserSummary(user_id=user_id, user_name=user_id, household_id=None)


@pytest.fixture(autouse=True)
def reset_singletons():
    """Reset cached settings and the service container around each test."""
    get_settings.cache_clear()
    reset_container()
    yield
    get_settings.cache_clear()
    reset_container()


@pytest.fixture
def smith_family() -> Household:
    return Household(name="Smith Family")


@pytest.fixture
def jones_family() -> Household:
    return Household(name="Jones Family")


@pytest.fixture
def identity_store(smith_family: Household, jones_family: Household) -> InMemoryIdentityStore:
    """An identity store with two households, their members and an administrator."""
    store = InMemoryIdentityStore()
    store.add_household(smith_family)
    store.add_household(jones_family)
    store.add_user(
        ApplicationUser(
            id="smith-parent",
            user_name="jane.smith",
            password_hash=hash_secret(PARENT_PASSWORD),
            roles=frozenset({ROLE_PARENT}),
            household_id=smith_family.id,
        )
    )
    store.add_user(
        ApplicationUser(
            id="smith-child",
            user_name="tim.smith",
            pin_hash=hash_secret(CHILD_PIN),
            roles=frozenset({ROLE_CHILD}),
            household_id=smith_family.id,
        )
    )
    store.add_user(
        ApplicationUser(
            id="jones-parent",
            user_name="bob.jones",
            password_hash=hash_secret(PARENT_PASSWORD),
            roles=frozenset({ROLE_PARENT}),
            household_id=jones_family.id,
        )
    )
    store.add_user(
        ApplicationUser(
            id="platform-admin",
            user_name="admin",
            password_hash=hash_secret(ADMIN_PASSWORD),
            household_id=None,
        )
    )
    return store
