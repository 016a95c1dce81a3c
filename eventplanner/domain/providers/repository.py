"""Provider repository - Database operations for provider profiles"""

from typing import Optional

from sqlalchemy import case, func
from sqlalchemy.orm import Session, joinedload, selectinload

from ...models import ACTIVE_BOOKING_STATUSES, Booking, BookingStatus, Provider, User


class ProviderRepository:
    """Repository for provider database operations"""

    @staticmethod
    def get_provider(db: Session, provider_id: int) -> Optional[Provider]:
        return db.query(Provider).filter(Provider.id == provider_id).first()

    @staticmethod
    def get_provider_by_user(db: Session, user_id: int) -> Optional[Provider]:
        return (
            db.query(Provider)
            .options(joinedload(Provider.user))
            .filter(Provider.user_id == user_id)
            .first()
        )

    @staticmethod
    def count_providers(db: Session) -> int:
        return db.query(func.count(Provider.id)).scalar()

    @staticmethod
    def list_providers_with_stats(db: Session) -> list[tuple[Provider, int, int]]:
        """All providers by business name with (total bookings, active bookings)"""
        booking_count = func.count(Booking.id)
        active_count = func.coalesce(
            func.sum(case((Booking.status.in_(ACTIVE_BOOKING_STATUSES), 1), else_=0)), 0
        )
        rows = (
            db.query(Provider, booking_count, active_count)
            .outerjoin(Booking, Booking.provider_id == Provider.id)
            .options(selectinload(Provider.user))
            .group_by(Provider.id)
            .order_by(Provider.business_name.asc())
            .all()
        )
        return [(provider, int(total), int(active)) for provider, total, active in rows]

    @staticmethod
    def get_booking_stats(db: Session, provider_id: int) -> dict:
        """Booking counts by status for one provider"""
        status_counts = (
            db.query(Booking.status, func.count(Booking.id))
            .filter(Booking.provider_id == provider_id)
            .group_by(Booking.status)
            .all()
        )

        stats = {status.value.lower(): 0 for status in BookingStatus}
        for status, count in status_counts:
            if status.lower() in stats:
                stats[status.lower()] = count
        stats["total"] = sum(stats.values())
        return stats

    @staticmethod
    def update_provider(db: Session, provider: Provider, **updates) -> Provider:
        """Update a provider with provided fields (None clears optional fields)"""
        for key, value in updates.items():
            if hasattr(provider, key):
                setattr(provider, key, value)

        db.commit()
        db.refresh(provider)
        return provider

    @staticmethod
    def create_provider_account(db: Session, user: User, **provider_data) -> Provider:
        """Create a PROVIDER user together with its profile"""
        provider = Provider(user=user, **provider_data)
        db.add(user)
        db.add(provider)
        db.commit()
        db.refresh(provider)
        return provider
