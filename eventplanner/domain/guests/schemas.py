"""Guest domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict


class GuestCreate(BaseModel):
    """Schema for inviting a guest; name and email are checked by the service"""

    name: str
    email: str


class GuestResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    eventId: int
    createdAt: Optional[datetime] = None

    @classmethod
    def from_model(cls, guest) -> "GuestResponse":
        return cls(
            id=guest.id,
            name=guest.name,
            email=guest.email,
            eventId=guest.event_id,
            createdAt=guest.created_at,
        )


class GuestEnvelope(BaseModel):
    guest: GuestResponse


class GuestListResponse(BaseModel):
    guests: list[GuestResponse]
    eventName: str
