"""Daily question repository protocols."""
from datetime import datetime
from typing import List, Optional, Protocol

from app.domain.daily_question.models import Answer, DailyPrompt


class QuestionRepository(Protocol):
    """Repository protocol for the question catalog and per-couple history."""

    async def select_question_for_couple(
        self,
        couple_id: str,
        relationship_type: str,
        shown_since: datetime,
    ) -> Optional[str]:
        """Pick one question id not shown to the couple since ``shown_since``.

        History exclusion, tag filtering and the random pick happen in one
        statement. Returns None when nothing qualifies.
        """
        ...

    async def record_history(self, couple_id: str, question_id: str, shown_at: datetime) -> None:
        """Upsert the (couple, question) history row, refreshing shown_at."""
        ...


class DailyPromptRepository(Protocol):
    """Repository protocol for daily prompts."""

    async def get(self, couple_id: str, date_key: str) -> Optional[DailyPrompt]:
        """Get the prompt for (couple, day) joined with its question."""
        ...

    async def create_if_absent(self, prompt: DailyPrompt) -> DailyPrompt:
        """Insert the prompt; on a unique-key conflict return the stored one."""
        ...

    async def mark_unlocked(self, couple_id: str, date_key: str, unlocked_at: datetime) -> bool:
        """Set unlocked_at only if it is still null. True if this call set it."""
        ...


class AnswerRepository(Protocol):
    """Repository protocol for answers."""

    async def get(self, couple_id: str, date_key: str, user_id: str) -> Optional[Answer]:
        """Get one member's answer for a day."""
        ...

    async def create(self, answer: Answer) -> Answer:
        """Insert an answer; raises DuplicateAnswer on the unique key."""
        ...

    async def list_for_day(self, couple_id: str, date_key: str) -> List[Answer]:
        """All answers for (couple, day)."""
        ...


class ActivityRecorder(Protocol):
    """Sink for activity events raised by the question exchange."""

    async def record(self, user_id: str, date_key: str, kind: str) -> None:
        ...


class DuplicateAnswer(Exception):
    """Raised when (couple, day, user) already has an answer."""
