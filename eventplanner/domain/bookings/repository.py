"""Booking repository - Database operations for bookings"""

from typing import Optional

from sqlalchemy.orm import Session, joinedload

from ...models import ACTIVE_BOOKING_STATUSES, Booking, BookingStatus, Event


class BookingRepository:
    """Repository for booking database operations"""

    @staticmethod
    def _with_relations(query):
        return query.options(
            joinedload(Booking.event).joinedload(Event.created_by),
            joinedload(Booking.provider),
            joinedload(Booking.user),
        )

    @staticmethod
    def get_booking(db: Session, booking_id: int) -> Optional[Booking]:
        return (
            BookingRepository._with_relations(db.query(Booking))
            .filter(Booking.id == booking_id)
            .first()
        )

    @staticmethod
    def get_active_booking(db: Session, event_id: int, provider_id: int) -> Optional[Booking]:
        """The PENDING or CONFIRMED booking for an (event, provider) pair, if any"""
        return (
            db.query(Booking)
            .filter(
                Booking.event_id == event_id,
                Booking.provider_id == provider_id,
                Booking.status.in_(ACTIVE_BOOKING_STATUSES),
            )
            .first()
        )

    @staticmethod
    def create_booking(db: Session, event_id: int, provider_id: int, user_id: int) -> Booking:
        """Create a PENDING booking; the partial unique index rejects a second active one"""
        booking = Booking(
            event_id=event_id,
            provider_id=provider_id,
            user_id=user_id,
            status=BookingStatus.PENDING.value,
        )
        db.add(booking)
        db.commit()
        db.refresh(booking)
        return booking

    @staticmethod
    def get_bookings_for_user(db: Session, user_id: int) -> list[Booking]:
        return (
            BookingRepository._with_relations(db.query(Booking))
            .filter(Booking.user_id == user_id)
            .order_by(Booking.created_at.desc(), Booking.id.desc())
            .all()
        )

    @staticmethod
    def get_bookings_for_provider(
        db: Session, provider_id: int, status: Optional[BookingStatus] = None
    ) -> list[Booking]:
        """Bookings owned by a provider, optionally filtered by status"""
        query = BookingRepository._with_relations(db.query(Booking)).filter(
            Booking.provider_id == provider_id
        )

        if status:
            query = query.filter(Booking.status == status.value)

        return query.order_by(Booking.created_at.desc(), Booking.id.desc()).all()

    @staticmethod
    def update_status(db: Session, booking: Booking, status: BookingStatus) -> Booking:
        """Persist a new status; no other booking field changes"""
        booking.status = status.value
        db.commit()
        db.refresh(booking)
        return booking
