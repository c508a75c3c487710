"""Daily question API routes."""
from fastapi import APIRouter

from app.api.daily_question import routes_daily_question

router = APIRouter()

router.include_router(
    routes_daily_question.router, prefix="/daily-question", tags=["daily-question"]
)
