import logging

from fastapi import APIRouter, Depends
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from ..auth import get_auth_context
from ..database import get_db
from ..errors import Conflict, NotFound, ValidationError
from ..models import User
from ..schemas import AuthContext, MessageResponse, PasswordChange, ProfileUpdate
from ..security_utils import hash_password, verify_password

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Profile"])

MIN_NEW_PASSWORD_LENGTH = 6


def _serialize_user(user: User) -> dict:
    provider = user.provider
    return {
        "id": user.id,
        "name": user.name,
        "email": user.email,
        "image": user.image,
        "role": user.role,
        "createdAt": user.created_at,
        "provider": (
            {
                "id": provider.id,
                "businessName": provider.business_name,
                "address": provider.address,
                "phone": provider.phone,
                "email": provider.email,
            }
            if provider
            else None
        ),
    }


def _load_user(db: Session, user_id: int) -> User:
    user = db.query(User).options(joinedload(User.provider)).filter(User.id == user_id).first()
    if not user:
        raise NotFound("User not found")
    return user


def _clean(value):
    value = (value or "").strip()
    return value or None


@router.get("/profile")
async def get_profile(ctx: AuthContext = Depends(get_auth_context), db: Session = Depends(get_db)):
    """Get the current user's profile"""
    return {"user": _serialize_user(_load_user(db, ctx.user_id))}


@router.put("/profile")
async def update_profile(
    data: ProfileUpdate,
    ctx: AuthContext = Depends(get_auth_context),
    db: Session = Depends(get_db),
):
    """Update name, email and avatar, plus business details for providers"""
    user = _load_user(db, ctx.user_id)

    if data.email != user.email:
        existing = db.query(User).filter(User.email == data.email).first()
        if existing and existing.id != user.id:
            raise Conflict("Email is already in use")

    user.name = data.name
    user.email = data.email
    if "image" in data.model_fields_set:
        user.image = data.image

    if data.business and user.provider:
        business = data.business
        business_name = _clean(business.businessName)
        if business_name:
            user.provider.business_name = business_name
        user.provider.address = _clean(business.address)
        user.provider.phone = _clean(business.phone)
        user.provider.email = _clean(business.email)

    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise Conflict("Email is already in use") from e

    db.refresh(user)
    logger.info(f"✅ Profile updated for user {user.id}")
    return {"user": _serialize_user(user)}


@router.put("/profile/password", response_model=MessageResponse)
async def change_password(
    data: PasswordChange,
    ctx: AuthContext = Depends(get_auth_context),
    db: Session = Depends(get_db),
):
    if not data.currentPassword or not data.newPassword:
        raise ValidationError("Current and new passwords are required")
    if len(data.newPassword) < MIN_NEW_PASSWORD_LENGTH:
        raise ValidationError(f"New password must be at least {MIN_NEW_PASSWORD_LENGTH} characters")

    user = _load_user(db, ctx.user_id)
    if not verify_password(data.currentPassword, user.password_hash):
        raise ValidationError("Current password is incorrect")

    user.password_hash = hash_password(data.newPassword)
    db.commit()
    logger.info(f"🔑 Password changed for user {user.id}")
    return MessageResponse(message="Password updated successfully")
