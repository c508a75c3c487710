"""Database models."""
from app.infra.db.models.user import UserModel
from app.infra.db.models.couple import CoupleModel
from app.infra.db.models.question import (
    QuestionModel,
    QuestionTagModel,
    QuestionHistoryModel,
)
from app.infra.db.models.daily_question import DailyPromptModel, AnswerModel
from app.infra.db.models.activity import DailyActivityModel

__all__ = [
    "UserModel",
    "CoupleModel",
    "QuestionModel",
    "QuestionTagModel",
    "QuestionHistoryModel",
    "DailyPromptModel",
    "AnswerModel",
    "DailyActivityModel",
]
