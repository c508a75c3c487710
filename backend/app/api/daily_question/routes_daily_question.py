"""Daily question routes."""
from typing import Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from app.api.deps import (
    get_current_user,
    get_daily_question_service,
    get_pairing_service,
    resolve_date_key,
)
from app.domain.common.types import ApiResponse
from app.domain.daily_question.models import Answer, DailyQuestionView, RevealedAnswers
from app.domain.daily_question.services import DailyQuestionService
from app.domain.pairing.models import User
from app.domain.pairing.services import PairingService

router = APIRouter()


class SubmitAnswerRequest(BaseModel):
    """Submit answer request."""
    text: str
    date_key: Optional[str] = None


@router.get("", response_model=ApiResponse[DailyQuestionView])
async def get_daily_question(
    date_key: Optional[str] = Query(None, description="YYYY-MM-DD; defaults to today"),
    current_user: User = Depends(get_current_user),
    pairing: PairingService = Depends(get_pairing_service),
    service: DailyQuestionService = Depends(get_daily_question_service),
):
    """Get (allocating on first access) the couple's question for the day."""
    couple = await pairing.require_couple(current_user.id)
    view = await service.get_daily_question(current_user.id, couple, resolve_date_key(date_key))
    return ApiResponse.ok(view)


@router.post("/answer", response_model=ApiResponse[Answer])
async def submit_answer(
    request: SubmitAnswerRequest,
    current_user: User = Depends(get_current_user),
    pairing: PairingService = Depends(get_pairing_service),
    service: DailyQuestionService = Depends(get_daily_question_service),
):
    """Submit the caller's one answer for the day."""
    couple = await pairing.require_couple(current_user.id)
    answer = await service.submit_answer(
        current_user.id, couple, resolve_date_key(request.date_key), request.text
    )
    return ApiResponse.ok(answer)


@router.get("/revealed", response_model=ApiResponse[RevealedAnswers])
async def get_revealed_answers(
    date_key: Optional[str] = Query(None, description="YYYY-MM-DD; defaults to today"),
    current_user: User = Depends(get_current_user),
    pairing: PairingService = Depends(get_pairing_service),
    service: DailyQuestionService = Depends(get_daily_question_service),
):
    couple = await pairing.require_couple(current_user.id)
    revealed = await service.get_revealed_answers(
        current_user.id, couple, resolve_date_key(date_key)
    )
    return ApiResponse.ok(revealed)
