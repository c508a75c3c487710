"""Daily question domain models."""
from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class QuestionStatus(str, Enum):
    """Display status of a day's question for one member."""
    NOT_ANSWERED = "not_answered"
    WAITING = "waiting"
    UNLOCKED = "unlocked"
    MISSED = "missed"  # derived for closed days only, never stored


class Question(BaseModel):
    """Static catalog question."""
    id: str
    text: str
    tags: List[str] = Field(default_factory=list)


class DailyPrompt(BaseModel):
    """The one question allocated to a couple for a calendar day."""
    couple_id: str
    date_key: str
    question_id: str
    question: Optional[Question] = None
    created_at: datetime
    unlocked_at: Optional[datetime] = None


class Answer(BaseModel):
    """A member's immutable answer for a day."""
    couple_id: str
    date_key: str
    user_id: str
    text: str
    created_at: datetime


class DailyQuestionView(BaseModel):
    """What one member sees for a day."""
    prompt: DailyPrompt
    status: QuestionStatus
    my_status: str  # "answered" | "not_answered"
    is_unlocked: bool
    my_answer: Optional[Answer] = None
    partner_answer: Optional[Answer] = None


class RevealedAnswers(BaseModel):
    """Both answers, only available once the day is unlocked."""
    my_answer: Answer
    partner_answer: Answer
