"""Daily prompt repository implementation."""
import logging
from datetime import datetime
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import selectinload

from app.domain.common.types import generate_id
from app.domain.daily_question.models import DailyPrompt
from app.domain.daily_question.repositories import DailyPromptRepository
from app.infra.db.models.daily_question import DailyPromptModel
from app.infra.db.models.question import QuestionModel

logger = logging.getLogger(__name__)


class DailyPromptRepositoryImpl(DailyPromptRepository):
    """Daily prompt repository implementation."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, couple_id: str, date_key: str) -> Optional[DailyPrompt]:
        """Get the prompt for (couple, day) with its question."""
        result = await self.session.execute(
            select(DailyPromptModel)
            .where(
                DailyPromptModel.couple_id == couple_id,
                DailyPromptModel.date_key == date_key,
            )
            .options(selectinload(DailyPromptModel.question).selectinload(QuestionModel.tags))
            .execution_options(populate_existing=True)
        )
        model = result.scalar_one_or_none()
        return model.to_entity() if model else None

    async def create_if_absent(self, prompt: DailyPrompt) -> DailyPrompt:
        """Insert the prompt, or return the one a concurrent caller stored first."""
        self.session.add(DailyPromptModel.from_entity(prompt, id=generate_id()))
        try:
            await self.session.commit()
        except IntegrityError:
            await self.session.rollback()
            existing = await self.get(prompt.couple_id, prompt.date_key)
            if existing is None:
                raise
            logger.debug("Prompt %s/%s existed, re-read", prompt.couple_id, prompt.date_key)
            return existing
        stored = await self.get(prompt.couple_id, prompt.date_key)
        return stored or prompt

    async def mark_unlocked(self, couple_id: str, date_key: str, unlocked_at: datetime) -> bool:
        """Conditional set of unlocked_at; True only for the caller that set it."""
        result = await self.session.execute(
            update(DailyPromptModel)
            .where(
                DailyPromptModel.couple_id == couple_id,
                DailyPromptModel.date_key == date_key,
                DailyPromptModel.unlocked_at.is_(None),
            )
            .values(unlocked_at=unlocked_at)
            .execution_options(synchronize_session=False)
        )
        await self.session.commit()
        return result.rowcount == 1
