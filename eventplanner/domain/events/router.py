"""Event router - FastAPI endpoints for the event directory"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_auth_context
from ...database import get_db
from ...schemas import AuthContext
from .schemas import (
    EventCreate,
    EventEnvelope,
    EventListResponse,
    EventResponse,
    EventUpdate,
    PublicEventListResponse,
)
from .service import EventService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/events", tags=["Events"])


def get_event_service(db: Session = Depends(get_db)) -> EventService:
    """Dependency injection for EventService"""
    return EventService(db)


# ============================================================================
# PUBLIC ROUTES
# ============================================================================


@router.get("/public", response_model=PublicEventListResponse)
async def list_public_events(
    category: Optional[str] = Query(None, description="Filter by category tag"),
    service: EventService = Depends(get_event_service),
):
    """Upcoming public events, soonest first"""
    events = service.list_public_events(category)
    return PublicEventListResponse(
        events=[EventResponse.from_model(e) for e in events],
        count=len(events),
        category=category or "all",
    )


# ============================================================================
# CORE CRUD OPERATIONS
# ============================================================================


@router.get("", response_model=EventListResponse)
async def list_my_events(
    ctx: AuthContext = Depends(get_auth_context),
    service: EventService = Depends(get_event_service),
):
    """Events created by the current user"""
    return EventListResponse(events=[EventResponse.from_model(e) for e in service.list_my_events(ctx)])


@router.post("", response_model=EventEnvelope, status_code=201)
async def create_event(
    data: EventCreate,
    ctx: AuthContext = Depends(get_auth_context),
    service: EventService = Depends(get_event_service),
):
    """Create a new event (hosts only)"""
    event = service.create_event(ctx, data)
    return EventEnvelope(event=EventResponse.from_model(event))


@router.get("/{event_id}", response_model=EventEnvelope)
async def get_event(
    event_id: int,
    _: AuthContext = Depends(get_auth_context),
    service: EventService = Depends(get_event_service),
):
    return EventEnvelope(event=EventResponse.from_model(service.get_event(event_id)))


@router.put("/{event_id}", response_model=EventEnvelope)
async def update_event(
    event_id: int,
    data: EventUpdate,
    ctx: AuthContext = Depends(get_auth_context),
    service: EventService = Depends(get_event_service),
):
    """Edit an event you created"""
    event = service.update_event(ctx, event_id, data)
    return EventEnvelope(event=EventResponse.from_model(event))


@router.delete("/{event_id}")
async def delete_event(
    event_id: int,
    ctx: AuthContext = Depends(get_auth_context),
    service: EventService = Depends(get_event_service),
):
    """Delete an event you created"""
    return service.delete_event(ctx, event_id)


# ============================================================================
# ATTENDANCE
# ============================================================================


@router.post("/{event_id}/join")
async def join_event(
    event_id: int,
    ctx: AuthContext = Depends(get_auth_context),
    service: EventService = Depends(get_event_service),
):
    return service.join_event(ctx, event_id)


@router.delete("/{event_id}/join")
async def leave_event(
    event_id: int,
    ctx: AuthContext = Depends(get_auth_context),
    service: EventService = Depends(get_event_service),
):
    return service.leave_event(ctx, event_id)
