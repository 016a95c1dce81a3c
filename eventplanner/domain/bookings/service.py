"""Booking service - Booking lifecycle and its authorization rules"""

import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...errors import Conflict, Forbidden, NotFound
from ...models import Booking, BookingStatus
from ...schemas import AuthContext
from ..events.repository import EventRepository
from ..providers.repository import ProviderRepository
from ..providers.service import ProviderService
from .repository import BookingRepository
from .state_machine import ensure_transition, parse_status

logger = logging.getLogger(__name__)

DUPLICATE_BOOKING_MESSAGE = "A booking already exists for this event and provider"


class BookingService:
    """Service layer for booking business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = BookingRepository()
        self.providers = ProviderService(db)

    def create_booking(self, ctx: AuthContext, event_id: int, provider_id: int) -> Booking:
        """Request a provider for an event; starts PENDING"""
        if not EventRepository.get_event(self.db, event_id):
            raise NotFound("Event not found")
        if not ProviderRepository.get_provider(self.db, provider_id):
            raise NotFound("Provider not found")

        if self.repo.get_active_booking(self.db, event_id, provider_id):
            raise Conflict(DUPLICATE_BOOKING_MESSAGE)

        try:
            booking = self.repo.create_booking(self.db, event_id, provider_id, ctx.user_id)
        except IntegrityError as e:
            # Lost the race to a concurrent request for the same pair
            self.db.rollback()
            logger.warning(f"⚠️ Concurrent booking for event {event_id} / provider {provider_id}: {e}")
            raise Conflict(DUPLICATE_BOOKING_MESSAGE) from e

        logger.info(
            f"📅 Booking {booking.id} created: event {event_id}, provider {provider_id}, user {ctx.user_id}"
        )
        return self.repo.get_booking(self.db, booking.id)

    def list_my_bookings(self, ctx: AuthContext) -> list[Booking]:
        return self.repo.get_bookings_for_user(self.db, ctx.user_id)

    def list_provider_bookings(self, ctx: AuthContext, status_filter: Optional[str] = None) -> list[Booking]:
        """Bookings owned by the caller's provider profile; unknown filters are ignored"""
        provider = self.providers.get_caller_provider(ctx)

        status = None
        if status_filter:
            try:
                status = BookingStatus(status_filter)
            except ValueError:
                logger.debug(f"Ignoring unknown booking status filter '{status_filter}'")

        return self.repo.get_bookings_for_provider(self.db, provider.id, status)

    def update_booking_status(self, ctx: AuthContext, booking_id: int, target_status: str) -> Booking:
        """Move a booking through the state machine; only its provider may do so"""
        provider = self.providers.get_caller_provider(ctx)

        booking = self.repo.get_booking(self.db, booking_id)
        if not booking:
            raise NotFound("Booking not found")

        if booking.provider_id != provider.id:
            logger.warning(
                f"⚠️ Provider {provider.id} attempted to update booking {booking_id} owned by provider {booking.provider_id}"
            )
            raise Forbidden("Forbidden. This booking does not belong to you.")

        target = ensure_transition(BookingStatus(booking.status), parse_status(target_status))
        previous = booking.status

        booking = self.repo.update_status(self.db, booking, target)
        logger.info(f"✅ Booking {booking.id} transitioned: {previous} → {booking.status}")
        return booking
