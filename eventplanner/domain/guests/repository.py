"""Guest repository - Database operations for guest lists"""

from typing import Optional

from sqlalchemy.orm import Session, joinedload

from ...models import Guest


class GuestRepository:
    """Repository for guest database operations"""

    @staticmethod
    def get_guest(db: Session, guest_id: int) -> Optional[Guest]:
        return db.query(Guest).options(joinedload(Guest.event)).filter(Guest.id == guest_id).first()

    @staticmethod
    def get_guest_for_event(db: Session, guest_id: int, event_id: int) -> Optional[Guest]:
        return db.query(Guest).filter(Guest.id == guest_id, Guest.event_id == event_id).first()

    @staticmethod
    def get_guests(db: Session, event_id: int) -> list[Guest]:
        """Guests of an event, newest first"""
        return (
            db.query(Guest)
            .filter(Guest.event_id == event_id)
            .order_by(Guest.created_at.desc(), Guest.id.desc())
            .all()
        )

    @staticmethod
    def create_guest(db: Session, event_id: int, name: str, email: str) -> Guest:
        """Insert a guest; uq_guests_event_email raises IntegrityError on a repeat address"""
        guest = Guest(event_id=event_id, name=name, email=email)
        db.add(guest)
        db.commit()
        db.refresh(guest)
        return guest

    @staticmethod
    def delete_guest(db: Session, guest: Guest) -> None:
        db.delete(guest)
        db.commit()
