"""Booking router - FastAPI endpoints for customer and provider booking flows"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_auth_context
from ...database import get_db
from ...schemas import AuthContext
from .schemas import (
    BookingCreate,
    BookingEnvelope,
    BookingListResponse,
    BookingResponse,
    BookingStatusUpdate,
)
from .service import BookingService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Bookings"])


def get_booking_service(db: Session = Depends(get_db)) -> BookingService:
    """Dependency injection for BookingService"""
    return BookingService(db)


# ============================================================================
# CUSTOMER ROUTES
# ============================================================================


@router.post("/bookings", response_model=BookingEnvelope, status_code=201)
async def create_booking(
    data: BookingCreate,
    ctx: AuthContext = Depends(get_auth_context),
    service: BookingService = Depends(get_booking_service),
):
    """Book a provider for an event"""
    booking = service.create_booking(ctx, data.eventId, data.providerId)
    return BookingEnvelope(message="Booking created successfully", booking=BookingResponse.from_model(booking))


@router.get("/bookings", response_model=BookingListResponse)
async def list_my_bookings(
    ctx: AuthContext = Depends(get_auth_context),
    service: BookingService = Depends(get_booking_service),
):
    """Bookings the current user requested"""
    return BookingListResponse(bookings=[BookingResponse.from_model(b) for b in service.list_my_bookings(ctx)])


# ============================================================================
# PROVIDER ROUTES
# ============================================================================


@router.get("/provider/bookings", response_model=BookingListResponse)
async def list_provider_bookings(
    status: Optional[str] = Query(None, description="PENDING, CONFIRMED, CANCELLED or COMPLETED"),
    ctx: AuthContext = Depends(get_auth_context),
    service: BookingService = Depends(get_booking_service),
):
    bookings = service.list_provider_bookings(ctx, status)
    return BookingListResponse(bookings=[BookingResponse.from_model(b) for b in bookings])


@router.put("/provider/bookings/{booking_id}", response_model=BookingEnvelope)
async def update_booking_status(
    booking_id: int,
    data: BookingStatusUpdate,
    ctx: AuthContext = Depends(get_auth_context),
    service: BookingService = Depends(get_booking_service),
):
    """Accept, reject, cancel or complete a booking"""
    booking = service.update_booking_status(ctx, booking_id, data.bookingStatus)
    return BookingEnvelope(
        message=f"Booking {booking.status.lower()} successfully",
        booking=BookingResponse.from_model(booking),
    )
