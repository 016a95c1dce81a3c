"""Provider router - FastAPI endpoints for the provider directory and profile"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import get_auth_context
from ...database import get_db
from ...models import Provider
from ...schemas import AuthContext, UserSummary
from .schemas import (
    BookingStats,
    ProviderListItem,
    ProviderListResponse,
    ProviderProfileEnvelope,
    ProviderProfileResponse,
    ProviderProfileUpdateResponse,
    ProviderUpdate,
)
from .service import ProviderService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Providers"])


def get_provider_service(db: Session = Depends(get_db)) -> ProviderService:
    """Dependency injection for ProviderService"""
    return ProviderService(db)


def _profile_response(provider: Provider, stats: Optional[dict] = None) -> ProviderProfileResponse:
    return ProviderProfileResponse(
        id=provider.id,
        businessName=provider.business_name,
        address=provider.address,
        phone=provider.phone,
        email=provider.email,
        availabilitySchedule=provider.availability_schedule,
        createdAt=provider.created_at,
        updatedAt=provider.updated_at,
        user=UserSummary.model_validate(provider.user) if provider.user else None,
        bookingStats=BookingStats(**stats) if stats else None,
    )


@router.get("/providers", response_model=ProviderListResponse)
async def list_providers(
    _: AuthContext = Depends(get_auth_context),
    service: ProviderService = Depends(get_provider_service),
):
    """All providers with booking statistics, by business name"""
    return ProviderListResponse(
        providers=[
            ProviderListItem(
                id=p.id,
                businessName=p.business_name,
                address=p.address,
                phone=p.phone,
                email=p.email,
                user=UserSummary.model_validate(p.user),
                bookingCount=total,
                activeBookings=active,
            )
            for p, total, active in service.list_providers()
        ]
    )


@router.get("/provider/profile", response_model=ProviderProfileEnvelope)
async def get_provider_profile(
    ctx: AuthContext = Depends(get_auth_context),
    service: ProviderService = Depends(get_provider_service),
):
    provider, stats = service.get_profile(ctx)
    return ProviderProfileEnvelope(provider=_profile_response(provider, stats))


@router.put("/provider/profile", response_model=ProviderProfileUpdateResponse)
async def update_provider_profile(
    data: ProviderUpdate,
    ctx: AuthContext = Depends(get_auth_context),
    service: ProviderService = Depends(get_provider_service),
):
    provider = service.update_profile(ctx, data)
    return ProviderProfileUpdateResponse(
        message="Provider profile updated successfully", provider=_profile_response(provider)
    )


@router.get("/provider/seed")
async def seed_providers(service: ProviderService = Depends(get_provider_service)):
    """Seed the fixed Saskatoon providers (no-op when any provider exists)"""
    return service.seed_providers()
