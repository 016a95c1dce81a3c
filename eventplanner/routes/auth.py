import logging
from datetime import datetime, timedelta
from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, EmailStr, Field, field_validator
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from .. import config
from ..database import get_db
from ..email_service import send_password_reset_email
from ..errors import Conflict, Gone, NotFound, Unauthenticated, ValidationError
from ..models import PasswordResetToken, Provider, Role, User
from ..rate_limiter import create_rate_limiter
from ..security_utils import create_access_token, generate_secure_token, hash_password, verify_password
from ..shared.validators import normalize_email

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Authentication"])

MIN_PASSWORD_LENGTH = 8
RESET_REQUESTED_MESSAGE = "If an account with that email exists, a password reset link has been sent."

# Account types accepted at registration; USER is the legacy name for GUEST
ACCOUNT_TYPES = {
    "GUEST": Role.GUEST,
    "USER": Role.GUEST,
    "HOST": Role.HOST,
    "PROVIDER": Role.PROVIDER,
}


class RegisterRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=MIN_PASSWORD_LENGTH)
    name: str = Field(min_length=1, max_length=255)
    accountType: str = "GUEST"
    businessName: Optional[str] = Field(None, max_length=200)

    @field_validator("email")
    @classmethod
    def validate_email(cls, v):
        return normalize_email(v)

    @field_validator("accountType")
    @classmethod
    def validate_account_type(cls, v):
        v = (v or "").strip().upper()
        if v not in ACCOUNT_TYPES:
            raise ValueError("accountType must be one of GUEST, HOST, PROVIDER")
        return v


class LoginRequest(BaseModel):
    email: str
    password: str
    loginType: Optional[str] = None


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    role: str
    name: str


class ForgotPasswordRequest(BaseModel):
    email: Optional[str] = None


class VerifyResetTokenRequest(BaseModel):
    token: Optional[str] = None


class ResetPasswordRequest(BaseModel):
    token: Optional[str] = None
    password: Optional[str] = None


# Rate limiters
rate_limit_password_reset = create_rate_limiter(
    limit=10,
    window_seconds=3600,  # 1 hour
    key_prefix="password_reset",
    use_ip=True,
)
rate_limit_login = create_rate_limiter(limit=30, window_seconds=300, key_prefix="login", use_ip=True)


@router.post("/auth/register", status_code=201)
async def register(data: RegisterRequest, db: Session = Depends(get_db)):
    """Create an account; the role chosen here never changes afterwards"""
    role = ACCOUNT_TYPES[data.accountType]
    business_name = (data.businessName or "").strip()

    if role == Role.PROVIDER and not business_name:
        raise ValidationError("Business name is required for provider accounts")

    if db.query(User).filter(User.email == data.email).first():
        raise Conflict("Email already exists")

    user = User(
        email=data.email,
        name=data.name.strip(),
        password_hash=hash_password(data.password),
        role=role.value,
    )
    db.add(user)
    if role == Role.PROVIDER:
        db.add(Provider(user=user, business_name=business_name))

    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise Conflict("Email already exists") from e

    logger.info(f"✅ Registered {role.value} account {user.id} ({user.email})")
    return {"success": True, "message": "User registered successfully. Please sign in."}


@router.post("/auth/login", response_model=TokenResponse)
async def login(data: LoginRequest, db: Session = Depends(get_db), _: None = Depends(rate_limit_login)):
    """Exchange credentials for a bearer token"""
    user = db.query(User).filter(User.email == normalize_email(data.email)).first()
    if not user or not verify_password(data.password, user.password_hash):
        logger.warning(f"⚠️ Failed login for {data.email}")
        raise Unauthenticated("Invalid email or password")

    if (data.loginType or "").lower() == "provider":
        provider = db.query(Provider).filter(Provider.user_id == user.id).first()
        if not provider:
            raise Unauthenticated("This account is not registered as a service provider")

    token = create_access_token({"sub": str(user.id), "email": user.email})
    logger.info(f"🔑 User {user.id} signed in")
    return TokenResponse(access_token=token, role=user.role, name=user.name)


@router.post("/auth/forgot-password")
async def forgot_password(
    data: ForgotPasswordRequest,
    db: Session = Depends(get_db),
    _: None = Depends(rate_limit_password_reset),
):
    """Email a single-use reset link; the reply never reveals whether the account exists"""
    if not data.email or not data.email.strip():
        raise ValidationError("Email is required")

    email = normalize_email(data.email)
    user = db.query(User).filter(User.email == email).first()
    if not user:
        return {"message": RESET_REQUESTED_MESSAGE}

    # One live token per address
    db.query(PasswordResetToken).filter(PasswordResetToken.email == email).delete()
    token = generate_secure_token(32)
    db.add(
        PasswordResetToken(
            email=email,
            token=token,
            expires_at=datetime.utcnow() + timedelta(minutes=config.PASSWORD_RESET_TOKEN_TTL_MINUTES),
        )
    )
    try:
        db.commit()
    except IntegrityError:
        # A concurrent request for this address already issued its token
        db.rollback()
        logger.warning(f"⚠️ Concurrent password reset request for {email}, keeping the other token")
        return {"message": RESET_REQUESTED_MESSAGE}

    reset_link = f"{config.FRONTEND_URL.rstrip('/')}/reset-password?token={token}"
    try:
        await send_password_reset_email(email, reset_link)
        logger.info(f"📧 Password reset link sent to {email}")
    except Exception as e:
        # Same reply either way, or delivery failures would reveal the account
        logger.error(f"❌ Failed to send password reset email to {email}: {e}")

    return {"message": RESET_REQUESTED_MESSAGE}


def _live_reset_token(db: Session, token: Optional[str]) -> PasswordResetToken:
    """Look up a reset token; expired tokens are deleted and reported as gone"""
    reset_token = db.query(PasswordResetToken).filter(PasswordResetToken.token == token).first()
    if not reset_token:
        raise NotFound("Invalid reset token")

    if reset_token.expires_at < datetime.utcnow():
        db.delete(reset_token)
        db.commit()
        logger.info(f"Expired reset token for {reset_token.email} removed")
        raise Gone("Reset token has expired")

    return reset_token


@router.post("/auth/verify-reset-token")
async def verify_reset_token(data: VerifyResetTokenRequest, db: Session = Depends(get_db)):
    if not data.token:
        raise ValidationError("Token is required")
    _live_reset_token(db, data.token)
    return {"message": "Token is valid"}


@router.post("/auth/reset-password")
async def reset_password(data: ResetPasswordRequest, db: Session = Depends(get_db)):
    """Set a new password with a reset token; the token is consumed"""
    if not data.token or not data.password:
        raise ValidationError("Token and password are required")
    if len(data.password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")

    reset_token = _live_reset_token(db, data.token)

    user = db.query(User).filter(User.email == reset_token.email).first()
    if not user:
        raise NotFound("User not found")

    user.password_hash = hash_password(data.password)
    db.delete(reset_token)
    db.commit()

    logger.info(f"✅ Password reset for user {user.id}")
    return {"message": "Password reset successful", "success": True}
