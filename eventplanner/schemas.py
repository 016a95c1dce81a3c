from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, field_validator

from .models import Role
from .shared.validators import normalize_email


class AuthContext(BaseModel):
    """The resolved caller. Nothing untyped from the session crosses into services."""

    model_config = ConfigDict(frozen=True)

    user_id: int
    role: Role
    email: str
    name: str


class UserSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str


class ProfileBusinessUpdate(BaseModel):
    businessName: Optional[str] = None
    address: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None


class ProfileUpdate(BaseModel):
    name: str
    email: EmailStr
    image: Optional[str] = None
    business: Optional[ProfileBusinessUpdate] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        if not v or not v.strip():
            raise ValueError("Name is required")
        return v.strip()

    @field_validator("email")
    @classmethod
    def validate_email(cls, v):
        return normalize_email(v)


class PasswordChange(BaseModel):
    currentPassword: str
    newPassword: str


class MessageResponse(BaseModel):
    message: str
