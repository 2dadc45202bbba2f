import pytest
from unittest.mock import MagicMock
from uuid import uuid4

from shared.models import AuthenticatedPrincipal
from modules.auth.context import CurrentUserContext
from modules.auth.exceptions import ContextNotInitializedError
from modules.households.exceptions import AdminRequiredError, HouseholdNotFoundError
from modules.households.models import Household
from modules.households.repository import InMemoryHouseholdRepository
from modules.households.service import HouseholdService

from tests.conftest import StubResolver, admin_summary, make_context, member_summary


@pytest.fixture
def audit():
    return MagicMock()


@pytest.fixture
def repository(smith_family, jones_family):
    repo = InMemoryHouseholdRepository()
    repo.save(smith_family)
    repo.save(jones_family)
    return repo


@pytest.fixture
def service(repository, audit):
    return HouseholdService(repository=repository, audit=audit)


class TestGetHousehold:
    @pytest.mark.asyncio
    async def test_member_gets_own_household(self, service, smith_family):
        context = await make_context(member_summary(smith_family.id))
        household = await service.get_household(smith_family.id, context)
        assert household.name == "Smith Family"

    @pytest.mark.asyncio
    async def test_other_household_looks_missing(self, service, smith_family, jones_family):
        """Another household is reported exactly like a missing one."""
        context = await make_context(member_summary(smith_family.id))

        with pytest.raises(HouseholdNotFoundError) as other:
            await service.get_household(jones_family.id, context)
        missing_id = uuid4()
        with pytest.raises(HouseholdNotFoundError) as missing:
            await service.get_household(missing_id, context)

        assert other.value.code == missing.value.code

    @pytest.mark.asyncio
    async def test_admin_gets_any_household(self, service, jones_family):
        context = await make_context(admin_summary())
        household = await service.get_household(jones_family.id, context)
        assert household.id == jones_family.id


class TestListHouseholds:
    @pytest.mark.asyncio
    async def test_member_sees_only_own_household(self, service, smith_family):
        context = await make_context(member_summary(smith_family.id))
        result = await service.list_households(context)
        assert result.total == 1
        assert result.households[0].id == smith_family.id

    @pytest.mark.asyncio
    async def test_admin_sees_all(self, service):
        context = await make_context(admin_summary())
        result = await service.list_households(context)
        assert result.total == 2

    @pytest.mark.asyncio
    async def test_uninitialized_context_raises(self, service):
        context = CurrentUserContext(StubResolver(), AuthenticatedPrincipal(user_id="u"))
        with pytest.raises(ContextNotInitializedError):
            await service.list_households(context)


class TestCreateHousehold:
    @pytest.mark.asyncio
    async def test_admin_creates_household(self, service, repository, audit):
        context = await make_context(admin_summary("admin-1"))
        household = await service.create_household("Garcia Family", context)

        assert repository.get(household.id) == household
        audit.household_created.assert_called_once_with(household.id, "admin-1")

    @pytest.mark.asyncio
    async def test_member_cannot_create(self, service, smith_family, audit):
        context = await make_context(member_summary(smith_family.id))
        with pytest.raises(AdminRequiredError):
            await service.create_household("Sneaky Family", context)
        audit.household_created.assert_not_called()

    @pytest.mark.asyncio
    async def test_uninitialized_context_cannot_create(self, service):
        context = CurrentUserContext(StubResolver(), AuthenticatedPrincipal(user_id="u"))
        with pytest.raises(ContextNotInitializedError):
            await service.create_household("Garcia Family", context)


class TestDeactivateHousehold:
    @pytest.mark.asyncio
    async def test_admin_deactivates(self, service, repository, smith_family, audit):
        context = await make_context(admin_summary("admin-1"))
        updated = await service.deactivate_household(smith_family.id, context)

        assert updated.is_active is False
        assert updated.modified_at is not None
        assert repository.get(smith_family.id).is_active is False
        audit.household_deactivated.assert_called_once_with(smith_family.id, "admin-1")

    @pytest.mark.asyncio
    async def test_already_inactive_is_a_no_op(self, service, repository, audit):
        inactive = repository.save(Household(name="Old Family", is_active=False))
        context = await make_context(admin_summary())

        result = await service.deactivate_household(inactive.id, context)

        assert result == inactive
        audit.household_deactivated.assert_not_called()

    @pytest.mark.asyncio
    async def test_missing_household(self, service):
        context = await make_context(admin_summary())
        with pytest.raises(HouseholdNotFoundError):
            await service.deactivate_household(uuid4(), context)

    @pytest.mark.asyncio
    async def test_member_cannot_deactivate_own_household(self, service, smith_family):
        context = await make_context(member_summary(smith_family.id))
        with pytest.raises(AdminRequiredError):
            await service.deactivate_household(smith_family.id, context)


class TestDefaults:
    def test_default_repository(self):
        assert isinstance(HouseholdService().repository, InMemoryHouseholdRepository)
