"""
Booking status transitions

    PENDING   -> CONFIRMED | CANCELLED
    CONFIRMED -> COMPLETED | CANCELLED
    CANCELLED, COMPLETED: terminal

Every status change goes through `ensure_transition`; nothing else decides
whether a move is legal.
"""

from ...errors import InvalidTransition, ValidationError
from ...models import BookingStatus

VALID_TRANSITIONS: dict[BookingStatus, tuple[BookingStatus, ...]] = {
    BookingStatus.PENDING: (BookingStatus.CONFIRMED, BookingStatus.CANCELLED),
    BookingStatus.CONFIRMED: (BookingStatus.COMPLETED, BookingStatus.CANCELLED),
    BookingStatus.CANCELLED: (),  # Terminal state
    BookingStatus.COMPLETED: (),  # Terminal state
}


def parse_status(value: str) -> BookingStatus:
    """Parse a status name, raising ValidationError for anything outside the four states"""
    try:
        return BookingStatus(value)
    except ValueError as e:
        allowed = ", ".join(s.value for s in BookingStatus)
        raise ValidationError(f"Invalid booking status '{value}'. Expected one of: {allowed}") from e


def allowed_transitions(current: BookingStatus) -> list[str]:
    return [status.value for status in VALID_TRANSITIONS[BookingStatus(current)]]


def is_terminal(status: BookingStatus) -> bool:
    return not VALID_TRANSITIONS[BookingStatus(status)]


def ensure_transition(current: BookingStatus, target: BookingStatus) -> BookingStatus:
    """
    Validate a status change against the transition table.

    Returns:
        The target status

    Raises:
        InvalidTransition: carrying the current status and its legal next states
    """
    current = BookingStatus(current)
    target = BookingStatus(target)
    if target not in VALID_TRANSITIONS[current]:
        raise InvalidTransition(current.value, target.value, allowed_transitions(current))
    return target
