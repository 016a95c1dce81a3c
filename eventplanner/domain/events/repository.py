"""Event repository - Database operations for events, tags and attendance"""

import logging
from datetime import datetime
from typing import Optional

from sqlalchemy import delete, func, insert, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload, selectinload

from ...models import Booking, BookingStatus, CategoryTag, Event, event_attendees

logger = logging.getLogger(__name__)

# Older rows were tagged with the long display names
CATEGORY_ALIASES = {
    "arts": ["arts", "Arts & Culture"],
    "food": ["food", "Food & Dining"],
}


class EventRepository:
    """Repository for event database operations"""

    @staticmethod
    def _with_relations(query):
        return query.options(
            joinedload(Event.created_by),
            joinedload(Event.provider),
            selectinload(Event.category_tags),
        )

    @staticmethod
    def get_event(db: Session, event_id: int) -> Optional[Event]:
        """Get an event by ID with creator, provider and tags loaded"""
        return EventRepository._with_relations(db.query(Event)).filter(Event.id == event_id).first()

    @staticmethod
    def get_events_by_creator(db: Session, user_id: int) -> list[Event]:
        """Get all events created by a user, latest start first"""
        return (
            EventRepository._with_relations(db.query(Event))
            .filter(Event.created_by_id == user_id)
            .order_by(Event.start_at.desc())
            .all()
        )

    @staticmethod
    def get_public_events(db: Session, now: datetime, category: Optional[str] = None) -> list[Event]:
        """Upcoming public events, soonest first, optionally by category label (case-insensitive)"""
        query = EventRepository._with_relations(db.query(Event)).filter(
            Event.is_private.is_(False), Event.start_at >= now
        )

        if category:
            labels = CATEGORY_ALIASES.get(category.lower(), [category])
            query = query.filter(
                Event.category_tags.any(
                    func.lower(CategoryTag.label).in_([label.lower() for label in labels])
                )
            )

        return query.order_by(Event.start_at.asc(), Event.id.asc()).all()

    # Category tags
    @staticmethod
    def find_tag(db: Session, label: str) -> Optional[CategoryTag]:
        return db.query(CategoryTag).filter(func.lower(CategoryTag.label) == label.lower()).first()

    @staticmethod
    def get_or_create_tags(db: Session, labels: list[str]) -> list[CategoryTag]:
        """
        Resolve labels to CategoryTag rows, creating missing ones.
        New tags are only flushed; they commit with the caller's event write.
        """
        tags = []
        for label in labels:
            tag = EventRepository.find_tag(db, label)
            if not tag:
                tag = CategoryTag(label=label)
                try:
                    with db.begin_nested():
                        db.add(tag)
                    logger.info(f"🏷️ Created category tag '{label}'")
                except IntegrityError:
                    # Another request created the same label first
                    tag = EventRepository.find_tag(db, label)
            tags.append(tag)
        return tags

    @staticmethod
    def create_event(
        db: Session, tags: list[CategoryTag], booking_user_id: Optional[int] = None, **event_data
    ) -> Event:
        """Create an event; with a provider, also open a PENDING booking in the same transaction"""
        event = Event(**event_data)
        event.category_tags = tags
        db.add(event)
        db.flush()

        if event.provider_id and booking_user_id:
            db.add(
                Booking(
                    event_id=event.id,
                    provider_id=event.provider_id,
                    user_id=booking_user_id,
                    status=BookingStatus.PENDING.value,
                )
            )

        db.commit()
        db.refresh(event)
        return event

    @staticmethod
    def update_event(db: Session, event: Event, tags: Optional[list[CategoryTag]] = None, **updates) -> Event:
        """Update an event; `tags`, when given, replaces the current set"""
        for key, value in updates.items():
            if hasattr(event, key):
                setattr(event, key, value)
        if tags is not None:
            event.category_tags = tags

        db.commit()
        db.refresh(event)
        return event

    @staticmethod
    def delete_event(db: Session, event: Event) -> None:
        """Delete an event; guests, bookings and associations go with it"""
        db.delete(event)
        db.commit()

    # Attendance
    @staticmethod
    def add_attendee(db: Session, event_id: int, user_id: int) -> bool:
        """
        Insert membership and bump the counter in one transaction.
        Returns False when the user was already attending.
        """
        try:
            db.execute(insert(event_attendees).values(event_id=event_id, user_id=user_id))
        except IntegrityError:
            db.rollback()
            return False

        db.execute(
            update(Event)
            .where(Event.id == event_id)
            .values(attendee_count=Event.attendee_count + 1)
            .execution_options(synchronize_session=False)
        )
        db.commit()
        return True

    @staticmethod
    def remove_attendee(db: Session, event_id: int, user_id: int) -> bool:
        """
        Delete membership and decrement the counter in one transaction.
        Returns False when the user was not attending.
        """
        result = db.execute(
            delete(event_attendees).where(
                event_attendees.c.event_id == event_id, event_attendees.c.user_id == user_id
            )
        )
        if result.rowcount == 0:
            db.rollback()
            return False

        db.execute(
            update(Event)
            .where(Event.id == event_id, Event.attendee_count > 0)
            .values(attendee_count=Event.attendee_count - 1)
            .execution_options(synchronize_session=False)
        )
        db.commit()
        return True
