"""Activity domain models."""
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class ActivityKind(str, Enum):
    """One flag of the daily activity ledger."""
    PHOTO = "photo"
    MOOD = "mood"
    BUCKET = "bucket"
    QUESTION_SUBMIT = "question_submit"
    QUESTION_UNLOCK = "question_unlock"


# ActivityKind -> DailyActivity attribute
ACTIVITY_FLAGS = {
    ActivityKind.PHOTO: "did_photo",
    ActivityKind.MOOD: "did_mood",
    ActivityKind.BUCKET: "did_bucket",
    ActivityKind.QUESTION_SUBMIT: "did_question_submit",
    ActivityKind.QUESTION_UNLOCK: "did_question_unlock",
}


class DailyActivity(BaseModel):
    """Per-user, per-day ledger row. Flags only ever go from False to True."""
    user_id: str
    date_key: str
    did_photo: bool = False
    did_mood: bool = False
    did_bucket: bool = False
    did_question_submit: bool = False
    did_question_unlock: bool = False

    @property
    def is_active(self) -> bool:
        # Unlock depends on the partner too, so it has its own streak.
        return self.did_photo or self.did_mood or self.did_bucket or self.did_question_submit


class StreakData(BaseModel):
    """Derived metrics; recomputed from the ledger, never stored."""
    current_streak: int = 0
    longest_streak: int = 0
    active_days_this_week: int = 0
    couple_unlock_streak: int = 0


class WeeklyRecap(BaseModel):
    """Monday-Sunday summary of the ledger."""
    week_start_date: str
    week_end_date: str
    active_days: int
    photos_liked: int
    photos_shared: int
    questions_answered: int
    questions_unlocked: int
    bucket_items_completed: int
    moods: List[Optional[str]] = Field(default_factory=list)
