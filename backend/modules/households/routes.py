"""
Household API endpoints.

Every handler passes the request's CurrentUserContext to the service,
which confines results to the caller's household.
"""

from uuid import UUID

from fastapi import APIRouter, Depends, status

from api.dependencies import get_household_service
from api.middleware.auth import get_user_context
from modules.auth.context import CurrentUserContext

from .interfaces import IHouseholdService
from .models import CreateHouseholdRequest, Household, HouseholdListResponse

router = APIRouter()


@router.get("", response_model=HouseholdListResponse)
async def list_households(
    context: CurrentUserContext = Depends(get_user_context),
    service: IHouseholdService = Depends(get_household_service),
) -> HouseholdListResponse:
    """
    List visible households.

    Members get their own household only; administrators get all.
    """
    return await service.list_households(context)


@router.post("", response_model=Household, status_code=status.HTTP_201_CREATED)
async def create_household(
    request: CreateHouseholdRequest,
    context: CurrentUserContext = Depends(get_user_context),
    service: IHouseholdService = Depends(get_household_service),
) -> Household:
    """Create a household. Administrators only."""
    return await service.create_household(request.name, context)


@router.get("/{household_id}", response_model=Household)
async def get_household(
    household_id: UUID,
    context: CurrentUserContext = Depends(get_user_context),
    service: IHouseholdService = Depends(get_household_service),
) -> Household:
    """Get a household. Other households' IDs return 404."""
    return await service.get_household(household_id, context)


@router.post("/{household_id}/deactivate", response_model=Household)
async def deactivate_household(
    household_id: UUID,
    context: CurrentUserContext = Depends(get_user_context),
    service: IHouseholdService = Depends(get_household_service),
) -> Household:
    """Deactivate a household so its members can no longer sign in. Administrators only."""
    return await service.deactivate_household(household_id, context)
