"""Anniversary routes."""
from datetime import datetime
from zoneinfo import ZoneInfo

from fastapi import APIRouter, Depends

from app.api.deps import get_current_user, get_pairing_service
from app.domain.anniversary.calculator import build_summary
from app.domain.anniversary.models import AnniversarySummary
from app.domain.common import messages
from app.domain.common.errors import ValidationError
from app.domain.common.types import ApiResponse
from app.domain.pairing.models import User
from app.domain.pairing.services import PairingService
from app.settings import settings

router = APIRouter()


@router.get("/summary", response_model=ApiResponse[AnniversarySummary])
async def get_anniversary_summary(
    current_user: User = Depends(get_current_user),
    pairing: PairingService = Depends(get_pairing_service),
):
    """Duration, next anniversary, milestones and reminders for the caller's couple."""
    couple = await pairing.require_couple(current_user.id)
    if couple.relationship_start_date is None:
        raise ValidationError(messages.NO_START_DATE)
    today = datetime.now(ZoneInfo(settings.reference_timezone)).date()
    summary = build_summary(
        couple.relationship_start_date, today, limit=settings.upcoming_milestones_limit
    )
    return ApiResponse.ok(summary)
