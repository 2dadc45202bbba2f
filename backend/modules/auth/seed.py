"""
Development data seeding.

Creates an administrator and one test household with a parent and a
child so a local, in-memory server can be signed into. Only runs when
HEARTH_SEED_DEV_DATA is enabled and Supabase is not configured.
"""

import logging
from dataclasses import dataclass

from modules.households.models import Household

from .models import ApplicationUser, ROLE_CHILD, ROLE_PARENT
from .passwords import hash_secret
from .store import InMemoryIdentityStore

logger = logging.getLogger(__name__)

TEST_HOUSEHOLD_NAME = "Smith Family (Test Data)"
ADMIN_USER_NAME = "admin_test"
PARENT_USER_NAME = "parent_test"
CHILD_USER_NAME = "child_test"

# Development only!
ADMIN_PASSWORD = "Admin123!"
PARENT_PASSWORD = "Parent123!"
CHILD_PASSWORD = "Child123!"
CHILD_PIN = "1234"


@dataclass(frozen=True)
class SeededData:
    household: Household
    admin: ApplicationUser
    parent: ApplicationUser
    child: ApplicationUser


async def seed_dev_data(store: InMemoryIdentityStore) -> SeededData | None:
    """
    Seed the test household. Idempotent: returns None if already seeded.
    """
    if await store.find_by_user_name(PARENT_USER_NAME) is not None:
        logger.info("Test household already exists. Skipping dev data seeding.")
        return None

    household = store.add_household(Household(name=TEST_HOUSEHOLD_NAME))
    admin = store.add_user(
        ApplicationUser(
            user_name=ADMIN_USER_NAME,
            password_hash=hash_secret(ADMIN_PASSWORD),
            household_id=None,
        )
    )
    parent = store.add_user(
        ApplicationUser(
            user_name=PARENT_USER_NAME,
            password_hash=hash_secret(PARENT_PASSWORD),
            roles=frozenset({ROLE_PARENT}),
            household_id=household.id,
        )
    )
    child = store.add_user(
        ApplicationUser(
            user_name=CHILD_USER_NAME,
            password_hash=hash_secret(CHILD_PASSWORD),
            pin_hash=hash_secret(CHILD_PIN),
            roles=frozenset({ROLE_CHILD}),
            household_id=household.id,
        )
    )
    logger.info(
        "Seeded dev household %s with users %s, %s",
        household.id,
        PARENT_USER_NAME,
        CHILD_USER_NAME,
    )
    return SeededData(household=household, admin=admin, parent=parent, child=child)
