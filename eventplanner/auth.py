import logging
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from .database import get_db
from .errors import Forbidden, Unauthenticated
from .models import Role, User
from .schemas import AuthContext
from .security_utils import verify_access_token

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


def resolve_auth_context(db: Session, token: Optional[str]) -> AuthContext:
    """Resolve a bearer token to the caller's identity and role, or raise Unauthenticated"""
    if not token:
        raise Unauthenticated()

    payload = verify_access_token(token)
    if not payload:
        raise Unauthenticated()

    try:
        user_id = int(payload.get("sub"))
    except (TypeError, ValueError):
        logger.warning("⚠️ Session token missing a usable subject claim")
        raise Unauthenticated() from None

    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        logger.warning(f"⚠️ Session token for unknown user {user_id}")
        raise Unauthenticated()

    # Role comes from the store, not the token, so the token can't escalate it
    return AuthContext(user_id=user.id, role=Role(user.role), email=user.email, name=user.name)


async def get_auth_context(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
) -> AuthContext:
    """Get the current caller from the Authorization bearer token"""
    token = credentials.credentials if credentials else None
    ctx = resolve_auth_context(db, token)
    logger.debug(f"✅ User authenticated: {ctx.email} ({ctx.role.value})")
    return ctx


def require_role(*roles: Role):
    """Build a dependency that admits only callers holding one of `roles`"""

    async def dependency(ctx: AuthContext = Depends(get_auth_context)) -> AuthContext:
        if ctx.role not in roles:
            allowed = ", ".join(r.value for r in roles)
            logger.warning(f"⚠️ {ctx.role.value} user {ctx.user_id} denied; requires {allowed}")
            raise Forbidden(f"Forbidden. Only {allowed} accounts can perform this action.")
        return ctx

    return dependency
