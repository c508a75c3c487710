"""Activity ledger and streak routes."""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from app.api.deps import get_activity_service, get_current_user
from app.domain.activity.models import DailyActivity, StreakData, WeeklyRecap
from app.domain.activity.services import ActivityService
from app.domain.common.types import ApiResponse
from app.domain.pairing.models import User

router = APIRouter()


class LogActivityRequest(BaseModel):
    """Log activity request."""
    kind: str  # photo | mood | bucket | question_submit | question_unlock
    date_key: Optional[str] = None


@router.post("/log", response_model=ApiResponse[StreakData])
async def log_activity(
    request: LogActivityRequest,
    current_user: User = Depends(get_current_user),
    service: ActivityService = Depends(get_activity_service),
):
    """Mark an activity for the day and return the recomputed streaks."""
    streak = await service.log_activity(current_user.id, request.kind, date_key=request.date_key)
    return ApiResponse.ok(streak)


@router.get("/today", response_model=ApiResponse[DailyActivity])
async def get_today_activity(
    current_user: User = Depends(get_current_user),
    service: ActivityService = Depends(get_activity_service),
):
    activity = await service.get_today_activity(current_user.id)
    return ApiResponse.ok(activity)


@router.get("/streak", response_model=ApiResponse[StreakData])
async def get_streak(
    current_user: User = Depends(get_current_user),
    service: ActivityService = Depends(get_activity_service),
):
    streak = await service.get_streak(current_user.id)
    return ApiResponse.ok(streak)


@router.get("/weekly-recap", response_model=ApiResponse[WeeklyRecap])
async def get_weekly_recap(
    moods: Optional[List[str]] = Query(None),
    current_user: User = Depends(get_current_user),
    service: ActivityService = Depends(get_activity_service),
):
    """Recap of the current Monday-Sunday week."""
    recap = await service.get_weekly_recap(current_user.id, moods=moods)
    return ApiResponse.ok(recap)
