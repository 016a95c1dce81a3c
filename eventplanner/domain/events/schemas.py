"""Event domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from ...models import Event
from ...schemas import UserSummary


class EventCreate(BaseModel):
    """Schema for creating an event; start is `startAt` or `date` + `time`"""

    name: str
    description: Optional[str] = None
    location: Optional[str] = None
    image: Optional[str] = None
    startAt: Optional[str] = None
    date: Optional[str] = None
    time: Optional[str] = None
    isPrivate: bool = True
    tags: list[str] = []
    providerId: Optional[int] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None


class EventUpdate(EventCreate):
    """Schema for editing an event; an empty tag list keeps the current tags"""

    # Omitted keeps the stored visibility
    isPrivate: Optional[bool] = None


class TagResponse(BaseModel):
    id: int
    label: str


class EventProviderSummary(BaseModel):
    id: int
    businessName: str
    address: Optional[str] = None


class EventResponse(BaseModel):
    """Schema for event response"""

    id: int
    name: str
    description: Optional[str]
    location: Optional[str]
    image: Optional[str] = None
    startAt: datetime
    isPrivate: bool
    attendeeCount: int
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    createdBy: Optional[UserSummary] = None
    categoryTags: list[TagResponse] = []
    provider: Optional[EventProviderSummary] = None
    createdAt: Optional[datetime] = None

    @classmethod
    def from_model(cls, event: Event) -> "EventResponse":
        return cls(
            id=event.id,
            name=event.name,
            description=event.description,
            location=event.location,
            image=event.image,
            startAt=event.start_at,
            isPrivate=event.is_private,
            attendeeCount=event.attendee_count,
            latitude=event.latitude,
            longitude=event.longitude,
            createdBy=UserSummary.model_validate(event.created_by) if event.created_by else None,
            categoryTags=[TagResponse(id=t.id, label=t.label) for t in event.category_tags],
            provider=(
                EventProviderSummary(
                    id=event.provider.id,
                    businessName=event.provider.business_name,
                    address=event.provider.address,
                )
                if event.provider
                else None
            ),
            createdAt=event.created_at,
        )


class EventEnvelope(BaseModel):
    event: EventResponse


class EventListResponse(BaseModel):
    events: list[EventResponse]


class PublicEventListResponse(BaseModel):
    events: list[EventResponse]
    count: int
    category: str
