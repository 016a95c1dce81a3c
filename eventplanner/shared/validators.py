"""Shared validation utilities"""

import re
from datetime import datetime
from typing import Optional

MAX_TAGS = 12
MAX_TAG_LENGTH = 32

DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
TIME_RE = re.compile(r"^\d{2}:\d{2}$")


def normalize_email(email: str) -> str:
    """Trim and lower-case an address so ' Jo@X.com' and 'jo@x.com' compare equal"""
    return email.strip().lower()


EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")


def validate_email(email: Optional[str]) -> Optional[str]:
    """
    Validate email format.

    Returns:
        The normalized (trimmed, lower-cased) address

    Raises:
        ValueError: If email format is invalid
    """
    if not email:
        return email

    email = normalize_email(email)
    if not EMAIL_PATTERN.match(email):
        raise ValueError("Invalid email format")
    return email


def parse_start_at(
    start_at: Optional[str] = None, date: Optional[str] = None, time: Optional[str] = None
) -> datetime:
    """
    Parse an event start time.

    Accepts either one ISO-8601 string ("2030-01-01T18:00") or the
    date ("YYYY-MM-DD") + time ("HH:MM") pair the create form sends.
    Aware values are converted to naive local time, the storage convention.

    Raises:
        ValueError: If nothing usable was supplied
    """
    if start_at:
        value = datetime.fromisoformat(start_at.strip().replace("Z", "+00:00"))
    elif date and time:
        if not DATE_RE.match(date.strip()) or not TIME_RE.match(time.strip()):
            raise ValueError("Invalid date/time")
        value = datetime.fromisoformat(f"{date.strip()}T{time.strip()}:00")
    else:
        raise ValueError("Start date and time are required")

    if value.tzinfo is not None:
        value = value.astimezone().replace(tzinfo=None)
    return value


def clean_tag_labels(labels: Optional[list[str]]) -> list[str]:
    """
    Trim tag labels and drop duplicates while keeping order.

    Raises:
        ValueError: More than MAX_TAGS labels, or a label empty / too long
    """
    if not labels:
        return []
    if len(labels) > MAX_TAGS:
        raise ValueError(f"At most {MAX_TAGS} tags are allowed")

    cleaned: list[str] = []
    seen: set[str] = set()
    for label in labels:
        label = (label or "").strip()
        if not label:
            raise ValueError("Tags cannot be empty")
        if len(label) > MAX_TAG_LENGTH:
            raise ValueError(f"Tags must be at most {MAX_TAG_LENGTH} characters")
        if label not in seen:
            seen.add(label)
            cleaned.append(label)
    return cleaned
