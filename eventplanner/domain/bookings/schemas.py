"""Booking domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from ...models import Booking
from ...schemas import UserSummary


class BookingCreate(BaseModel):
    eventId: int
    providerId: int


class BookingStatusUpdate(BaseModel):
    bookingStatus: str


class BookingEventSummary(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    location: Optional[str] = None
    startAt: datetime
    isPrivate: bool
    createdBy: Optional[UserSummary] = None


class BookingProviderSummary(BaseModel):
    id: int
    businessName: str
    address: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None


class BookingResponse(BaseModel):
    id: int
    eventId: int
    providerId: int
    userId: int
    bookingStatus: str
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None
    event: Optional[BookingEventSummary] = None
    provider: Optional[BookingProviderSummary] = None
    user: Optional[UserSummary] = None

    @classmethod
    def from_model(cls, booking: Booking) -> "BookingResponse":
        event = booking.event
        provider = booking.provider
        return cls(
            id=booking.id,
            eventId=booking.event_id,
            providerId=booking.provider_id,
            userId=booking.user_id,
            bookingStatus=booking.status,
            createdAt=booking.created_at,
            updatedAt=booking.updated_at,
            event=(
                BookingEventSummary(
                    id=event.id,
                    name=event.name,
                    description=event.description,
                    location=event.location,
                    startAt=event.start_at,
                    isPrivate=event.is_private,
                    createdBy=UserSummary.model_validate(event.created_by) if event.created_by else None,
                )
                if event
                else None
            ),
            provider=(
                BookingProviderSummary(
                    id=provider.id,
                    businessName=provider.business_name,
                    address=provider.address,
                    phone=provider.phone,
                    email=provider.email,
                )
                if provider
                else None
            ),
            user=UserSummary.model_validate(booking.user) if booking.user else None,
        )


class BookingEnvelope(BaseModel):
    message: str
    booking: BookingResponse


class BookingListResponse(BaseModel):
    bookings: list[BookingResponse]
