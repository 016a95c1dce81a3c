"""Provider domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, EmailStr, Field

from ...schemas import UserSummary


class ProviderUpdate(BaseModel):
    """Schema for updating the provider's business profile; explicit null clears a field"""

    businessName: Optional[str] = Field(None, min_length=1, max_length=200)
    address: Optional[str] = Field(None, max_length=500)
    phone: Optional[str] = Field(None, max_length=20)
    email: Optional[EmailStr] = None


class BookingStats(BaseModel):
    total: int
    pending: int
    confirmed: int
    cancelled: int
    completed: int


class ProviderProfileResponse(BaseModel):
    id: int
    businessName: str
    address: Optional[str]
    phone: Optional[str]
    email: Optional[str]
    availabilitySchedule: Optional[Any] = None
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None
    user: Optional[UserSummary] = None
    bookingStats: Optional[BookingStats] = None


class ProviderProfileEnvelope(BaseModel):
    provider: ProviderProfileResponse


class ProviderProfileUpdateResponse(BaseModel):
    message: str
    provider: ProviderProfileResponse


class ProviderListItem(BaseModel):
    id: int
    businessName: str
    address: Optional[str]
    phone: Optional[str]
    email: Optional[str]
    user: UserSummary
    bookingCount: int
    activeBookings: int


class ProviderListResponse(BaseModel):
    providers: list[ProviderListItem]
