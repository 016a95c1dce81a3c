"""Guest service - Invitation lists for private events"""

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...errors import DuplicateGuest, InvalidState, NotFound, ValidationError
from ...models import Event, Guest
from ...schemas import AuthContext
from ...shared.validators import validate_email
from ..events.service import EventService
from .repository import GuestRepository

logger = logging.getLogger(__name__)

MAX_GUEST_NAME_LENGTH = 100
PRIVATE_ONLY_MESSAGE = "Guest management is only available for private events"


class GuestService:
    """Service layer for guest list business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = GuestRepository()
        self.events = EventService(db)

    def _private_owned_event(self, ctx: AuthContext, event_id: int) -> Event:
        event = self.events.get_owned_event(ctx, event_id)
        if not event.is_private:
            raise InvalidState(PRIVATE_ONLY_MESSAGE)
        return event

    def list_guests(self, ctx: AuthContext, event_id: int) -> tuple[Event, list[Guest]]:
        event = self._private_owned_event(ctx, event_id)
        return event, self.repo.get_guests(self.db, event.id)

    def add_guest(self, ctx: AuthContext, event_id: int, name: str, email: str) -> Guest:
        """Invite someone to a private event the caller created"""
        event = self._private_owned_event(ctx, event_id)

        name = (name or "").strip()
        if not name:
            raise ValidationError("Name is required")
        if len(name) > MAX_GUEST_NAME_LENGTH:
            raise ValidationError(f"Name must be at most {MAX_GUEST_NAME_LENGTH} characters")

        try:
            email = validate_email(email)
        except ValueError as e:
            raise ValidationError(str(e)) from e
        if not email:
            raise ValidationError("Email is required")

        try:
            guest = self.repo.create_guest(self.db, event.id, name, email)
        except IntegrityError as e:
            self.db.rollback()
            logger.info(f"Duplicate guest {email} for event {event.id}")
            raise DuplicateGuest() from e

        logger.info(f"✅ Guest {guest.id} ({email}) added to event {event.id}")
        return guest

    def remove_guest(self, ctx: AuthContext, guest_id: int) -> None:
        guest = self.repo.get_guest(self.db, guest_id)
        if not guest:
            raise NotFound("Guest not found")

        # Ownership is checked on the guest's event
        self.events.get_owned_event(ctx, guest.event_id)
        self.repo.delete_guest(self.db, guest)
        logger.info(f"🗑️ Guest {guest_id} removed from event {guest.event_id} by user {ctx.user_id}")
