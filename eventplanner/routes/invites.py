from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.orm import Session

from ..auth import get_auth_context
from ..database import get_db
from ..schemas import AuthContext
from ..services.invite_service import InviteService

router = APIRouter(tags=["Invitations"])


class InviteRequest(BaseModel):
    guestId: int
    eventId: int


@router.post("/send-invite")
async def send_invite(
    data: InviteRequest,
    ctx: AuthContext = Depends(get_auth_context),
    db: Session = Depends(get_db),
):
    """Email a guest a calendar invitation for a private event"""
    return InviteService(db).send_invite(ctx, data.eventId, data.guestId)
