"""
Calendar invitation builder

Produces an iTIP REQUEST (RFC 5546) carrying one VEVENT, suitable as an
email attachment that mail clients render with accept/decline buttons.
"""

import re
from datetime import datetime, timedelta, timezone
from typing import Optional

from icalendar import Calendar, vCalAddress, vText
from icalendar import Event as CalendarEvent

from ..models import Event, Guest

PRODID = "-//Saskatoon Events//Event Invitations//EN"
UID_DOMAIN = "saskatoonevents.com"
DEFAULT_DURATION = timedelta(hours=2)
DEFAULT_LOCATION = "Saskatoon, SK"


def default_description(event: Event) -> str:
    return event.description or f"You're invited to {event.name}"


def invitation_location(event: Event) -> str:
    return event.location or DEFAULT_LOCATION


def invitation_uid(event_id: int, guest_id: int) -> str:
    """Stable per (event, guest) so a resent invite updates the same calendar entry"""
    return f"event-{event_id}-guest-{guest_id}@{UID_DOMAIN}"


def ics_filename(event_name: str) -> str:
    return re.sub(r"[^a-zA-Z0-9]", "_", event_name) + ".ics"


def _address(email: str, name: str) -> vCalAddress:
    address = vCalAddress(f"mailto:{email}")
    address.params["cn"] = vText(name)
    return address


def build_invitation(event: Event, guest: Guest, dtstamp: Optional[datetime] = None) -> bytes:
    """
    Build the .ics payload for inviting `guest` to `event`.

    Start is the stored (naive, local) start time and the end is two hours
    later. The organizer is the event creator and the guest is the single
    attendee with RSVP requested.
    """
    start = event.start_at
    organizer = event.created_by

    cal = Calendar()
    cal.add("prodid", PRODID)
    cal.add("version", "2.0")
    cal.add("calscale", "GREGORIAN")
    cal.add("method", "REQUEST")

    vevent = CalendarEvent()
    vevent.add("uid", invitation_uid(event.id, guest.id))
    vevent.add("dtstamp", dtstamp or datetime.now(timezone.utc))
    vevent.add("dtstart", start)
    vevent.add("dtend", start + DEFAULT_DURATION)
    vevent.add("summary", event.name)
    vevent.add("description", default_description(event))
    vevent.add("location", invitation_location(event))
    vevent.add("status", "CONFIRMED")
    vevent.add("transp", "OPAQUE")  # busy

    vevent.add("organizer", _address(organizer.email, organizer.name), encode=0)

    attendee = _address(guest.email, guest.name)
    attendee.params["role"] = vText("REQ-PARTICIPANT")
    attendee.params["partstat"] = vText("NEEDS-ACTION")
    attendee.params["rsvp"] = vText("TRUE")
    vevent.add("attendee", attendee, encode=0)

    cal.add_component(vevent)
    return cal.to_ical()
