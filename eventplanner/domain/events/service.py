"""Event service - Business logic for the event directory"""

import logging
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from ...errors import Forbidden, NotFound, ValidationError
from ...models import Event, Role
from ...schemas import AuthContext
from ...shared.validators import clean_tag_labels, parse_start_at
from ..providers.repository import ProviderRepository
from .repository import EventRepository
from .schemas import EventCreate, EventUpdate

logger = logging.getLogger(__name__)

MAX_NAME_LENGTH = 120
MAX_DESCRIPTION_LENGTH = 1000
MIN_LOCATION_LENGTH = 5
MAX_LOCATION_LENGTH = 200
SERVICE_CITY = "Saskatoon"


class EventService:
    """Service layer for event business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = EventRepository()

    def get_event(self, event_id: int) -> Event:
        """Get a specific event"""
        event = self.repo.get_event(self.db, event_id)
        if not event:
            raise NotFound("Event not found")
        return event

    def get_owned_event(self, ctx: AuthContext, event_id: int) -> Event:
        """Get an event the caller created; providers never own events"""
        if ctx.role == Role.PROVIDER:
            raise Forbidden()
        event = self.get_event(event_id)
        if event.created_by_id != ctx.user_id:
            logger.warning(f"⚠️ User {ctx.user_id} tried to modify event {event_id} they do not own")
            raise Forbidden()
        return event

    def _validated_fields(self, data: EventCreate) -> dict:
        name = (data.name or "").strip()
        if not name:
            raise ValidationError("Name is required")
        if len(name) > MAX_NAME_LENGTH:
            raise ValidationError(f"Name must be at most {MAX_NAME_LENGTH} characters")

        description = (data.description or "").strip() or None
        if description and len(description) > MAX_DESCRIPTION_LENGTH:
            raise ValidationError(f"Description must be at most {MAX_DESCRIPTION_LENGTH} characters")

        location = (data.location or "").strip()
        if len(location) < MIN_LOCATION_LENGTH:
            raise ValidationError(f"Location must be at least {MIN_LOCATION_LENGTH} characters")
        if len(location) > MAX_LOCATION_LENGTH:
            raise ValidationError(f"Location must be at most {MAX_LOCATION_LENGTH} characters")

        try:
            start_at = parse_start_at(data.startAt, data.date, data.time)
        except ValueError as e:
            raise ValidationError("Invalid date/time") from e

        return {
            "name": name,
            "description": description,
            "location": location,
            "start_at": start_at,
            "is_private": data.isPrivate,
            "latitude": data.latitude,
            "longitude": data.longitude,
        }

    def _validated_tags(self, labels: Optional[list[str]]) -> list[str]:
        try:
            return clean_tag_labels(labels)
        except ValueError as e:
            raise ValidationError(str(e)) from e

    def create_event(self, ctx: AuthContext, data: EventCreate) -> Event:
        """Create an event on behalf of a host"""
        if ctx.role != Role.HOST:
            logger.warning(f"⚠️ {ctx.role.value} user {ctx.user_id} attempted to create an event")
            raise Forbidden("Forbidden. Only hosts can create events.")

        fields = self._validated_fields(data)
        labels = self._validated_tags(data.tags)

        if data.providerId is not None and not ProviderRepository.get_provider(self.db, data.providerId):
            raise ValidationError("Provider not found")

        tags = self.repo.get_or_create_tags(self.db, labels)
        event = self.repo.create_event(
            self.db,
            tags,
            booking_user_id=ctx.user_id,
            created_by_id=ctx.user_id,
            provider_id=data.providerId,
            image=data.image,
            **fields,
        )
        logger.info(f"✅ Event {event.id} '{event.name}' created by user {ctx.user_id}")
        return self.get_event(event.id)

    def list_my_events(self, ctx: AuthContext) -> list[Event]:
        return self.repo.get_events_by_creator(self.db, ctx.user_id)

    def update_event(self, ctx: AuthContext, event_id: int, data: EventUpdate) -> Event:
        """Edit an event the caller created"""
        event = self.get_owned_event(ctx, event_id)
        fields = self._validated_fields(data)
        if SERVICE_CITY.lower() not in fields["location"].lower():
            raise ValidationError(f"Location must be in {SERVICE_CITY}")
        labels = self._validated_tags(data.tags)

        updates = dict(fields)
        if data.isPrivate is None:
            updates.pop("is_private")
        # image: a string replaces, explicit null clears, omitted leaves as-is
        if "image" in data.model_fields_set:
            updates["image"] = data.image

        tags = self.repo.get_or_create_tags(self.db, labels) if labels else None
        event = self.repo.update_event(self.db, event, tags=tags, **updates)
        logger.info(f"✅ Event {event.id} updated by user {ctx.user_id}")
        return self.get_event(event.id)

    def delete_event(self, ctx: AuthContext, event_id: int) -> dict:
        """Delete an event the caller created"""
        event = self.get_owned_event(ctx, event_id)
        self.repo.delete_event(self.db, event)
        logger.info(f"🗑️ Event {event_id} deleted by user {ctx.user_id}")
        return {"ok": True}

    def join_event(self, ctx: AuthContext, event_id: int) -> dict:
        """Join a public event"""
        event = self.get_event(event_id)
        if event.is_private:
            raise Forbidden("Private event")

        joined = self.repo.add_attendee(self.db, event_id, ctx.user_id)
        if joined:
            logger.info(f"🙋 User {ctx.user_id} joined event {event_id}")
        return {"ok": True, "joined": joined}

    def leave_event(self, ctx: AuthContext, event_id: int) -> dict:
        """Leave an event the caller is attending"""
        self.get_event(event_id)
        left = self.repo.remove_attendee(self.db, event_id, ctx.user_id)
        if left:
            logger.info(f"👋 User {ctx.user_id} left event {event_id}")
        return {"ok": True, "left": left}

    def list_public_events(self, category: Optional[str] = None, now: Optional[datetime] = None) -> list[Event]:
        """Upcoming public events, optionally filtered by category"""
        category = (category or "").strip() or None
        return self.repo.get_public_events(self.db, now or datetime.now(), category)
