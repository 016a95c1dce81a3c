"""
Invite dispatcher - emails a calendar invitation to one guest of a private event

Sending never mutates state. Transport failures are classified so the
response tells the host what to fix.
"""

import logging
import smtplib
import ssl

from sqlalchemy.orm import Session

from .. import config, email_service
from ..domain.events.repository import EventRepository
from ..domain.guests.repository import GuestRepository
from ..email_templates import event_invitation_template
from ..errors import ConfigurationError, Forbidden, NotFound, TransportError
from ..models import Event, Guest
from ..schemas import AuthContext
from .calendar_invite import build_invitation, default_description, ics_filename, invitation_location

logger = logging.getLogger(__name__)

AUTH_TROUBLESHOOTING = [
    "Verify EMAIL_USER and EMAIL_PASS in .env",
    "Use App Password (not regular password) for Gmail",
    "Ensure 2-Factor Authentication is enabled",
]
CONNECTION_TROUBLESHOOTING = [
    "Check your internet connection",
    "Try again in a few minutes",
    "Verify EMAIL_HOST and EMAIL_PORT, and that SMTP is not blocked",
]
ADDRESS_TROUBLESHOOTING = [
    "Check EMAIL_USER format (e.g., user@gmail.com)",
    "Verify guest email address is valid",
]
NOT_CONFIGURED_TROUBLESHOOTING = [
    "Add EMAIL_USER to .env",
    "Add EMAIL_PASS to .env",
    "Restart the API server",
]
GENERIC_TROUBLESHOOTING = [
    "Check server logs for more details",
    "Verify all environment variables are set correctly",
]


def classify_send_error(exc: Exception) -> TransportError:
    """Map an SMTP/socket failure onto the error the API reports"""
    # smtplib exceptions subclass OSError, so the specific ones come first
    if isinstance(exc, smtplib.SMTPAuthenticationError):
        return TransportError(
            "Email authentication failed",
            details="Please check your email credentials. Make sure you're using an App Password, "
            "not your regular Gmail password.",
            troubleshooting=AUTH_TROUBLESHOOTING,
        )
    if isinstance(exc, (smtplib.SMTPRecipientsRefused, smtplib.SMTPSenderRefused)):
        return TransportError(
            "Invalid email configuration",
            details="Email address format is invalid.",
            troubleshooting=ADDRESS_TROUBLESHOOTING,
        )
    connection_errors = (smtplib.SMTPConnectError, smtplib.SMTPServerDisconnected, ssl.SSLError, TimeoutError)
    if isinstance(exc, connection_errors) or (
        isinstance(exc, OSError) and not isinstance(exc, smtplib.SMTPException)
    ):
        return TransportError(
            "Connection failed",
            details="Unable to connect to email server. Please check your internet connection.",
            troubleshooting=CONNECTION_TROUBLESHOOTING,
        )
    return TransportError(
        "Failed to send calendar invitation",
        details=str(exc) or "Unknown error occurred",
        troubleshooting=GENERIC_TROUBLESHOOTING,
    )


class InviteService:
    def __init__(self, db: Session):
        self.db = db

    def _load(self, ctx: AuthContext, event_id: int, guest_id: int) -> tuple[Event, Guest]:
        event = EventRepository.get_event(self.db, event_id)
        if not event:
            raise NotFound("Event not found")
        if event.created_by_id != ctx.user_id:
            raise Forbidden("Only event creators can send invites")

        guest = GuestRepository.get_guest_for_event(self.db, guest_id, event.id)
        if not guest:
            raise NotFound("Guest not found for this event")
        return event, guest

    def send_invite(self, ctx: AuthContext, event_id: int, guest_id: int) -> dict:
        """Email `guest` an invitation to `event` with an .ics attachment"""
        event, guest = self._load(ctx, event_id, guest_id)

        if not email_service.smtp_configured():
            logger.error("❌ Invitation requested but EMAIL_USER / EMAIL_PASS are not set")
            raise ConfigurationError(
                "Email not configured",
                details="Email credentials are missing from environment variables.",
                troubleshooting=NOT_CONFIGURED_TROUBLESHOOTING,
            )

        ics = build_invitation(event, guest)
        html = email_service.compile_mjml_to_html(
            event_invitation_template(
                guest_name=guest.name,
                host_name=event.created_by.name,
                event_name=event.name,
                when=event.start_at.strftime("%A, %B %d, %Y at %I:%M %p"),
                location=invitation_location(event),
                description=default_description(event),
            )
        )

        try:
            email_service.send_via_smtp(
                to=guest.email,
                subject=f"Invitation: {event.name}",
                html_content=html,
                from_address=f"{event.created_by.name} via Saskatoon Events <{config.EMAIL_USER}>",
                attachments=[
                    {
                        "filename": ics_filename(event.name),
                        "content": ics,
                        "maintype": "text",
                        "subtype": "calendar",
                        "params": {"method": "REQUEST", "charset": "utf-8"},
                    }
                ],
            )
        except Exception as e:
            error = classify_send_error(e)
            logger.error(f"❌ Invitation for guest {guest.id} / event {event.id} failed: {error.message} ({e})")
            raise error from e

        logger.info(f"📧 Calendar invitation sent to {guest.email} for event {event.id}")
        return {"success": True, "message": "Calendar invitation sent successfully"}
