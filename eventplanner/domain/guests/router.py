"""Guest router - FastAPI endpoints for private event guest lists"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import get_auth_context
from ...database import get_db
from ...schemas import AuthContext, MessageResponse
from .schemas import GuestCreate, GuestEnvelope, GuestListResponse, GuestResponse
from .service import GuestService

router = APIRouter(tags=["Guests"])


def get_guest_service(db: Session = Depends(get_db)) -> GuestService:
    """Dependency injection for GuestService"""
    return GuestService(db)


@router.get("/events/{event_id}/guests", response_model=GuestListResponse)
async def list_guests(
    event_id: int,
    ctx: AuthContext = Depends(get_auth_context),
    service: GuestService = Depends(get_guest_service),
):
    event, guests = service.list_guests(ctx, event_id)
    return GuestListResponse(guests=[GuestResponse.from_model(g) for g in guests], eventName=event.name)


@router.post("/events/{event_id}/guests", response_model=GuestEnvelope, status_code=201)
async def add_guest(
    event_id: int,
    data: GuestCreate,
    ctx: AuthContext = Depends(get_auth_context),
    service: GuestService = Depends(get_guest_service),
):
    """Invite a guest to a private event"""
    guest = service.add_guest(ctx, event_id, data.name, data.email)
    return GuestEnvelope(guest=GuestResponse.from_model(guest))


@router.delete("/guests/{guest_id}", response_model=MessageResponse)
async def remove_guest(
    guest_id: int,
    ctx: AuthContext = Depends(get_auth_context),
    service: GuestService = Depends(get_guest_service),
):
    service.remove_guest(ctx, guest_id)
    return MessageResponse(message="Guest removed successfully")
