"""Question catalog and history repository implementation."""
import logging
from datetime import datetime
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, func, or_
from sqlalchemy.exc import IntegrityError

from app.domain.daily_question.models import Question
from app.domain.daily_question.repositories import QuestionRepository
from app.domain.pairing.models import RelationshipType
from app.infra.db.models.question import (
    QuestionHistoryModel,
    QuestionModel,
    QuestionTagModel,
)

logger = logging.getLogger(__name__)

RELATIONSHIP_TAGS = [t.value for t in RelationshipType]


class QuestionRepositoryImpl(QuestionRepository):
    """Question repository implementation."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def select_question_for_couple(
        self,
        couple_id: str,
        relationship_type: str,
        shown_since: datetime,
    ) -> Optional[str]:
        """Random active question, not recently shown, matching the relationship type.

        A question matches when it carries the type's tag or carries no
        relationship-type tag at all.
        """
        recently_shown = select(QuestionHistoryModel.question_id).where(
            QuestionHistoryModel.couple_id == couple_id,
            QuestionHistoryModel.shown_at >= shown_since,
        )
        type_tagged = select(QuestionTagModel.question_id).where(
            QuestionTagModel.tag.in_(RELATIONSHIP_TAGS)
        )
        matching_type = select(QuestionTagModel.question_id).where(
            QuestionTagModel.tag == relationship_type
        )
        result = await self.session.execute(
            select(QuestionModel.id)
            .where(
                QuestionModel.is_active.is_(True),
                QuestionModel.id.not_in(recently_shown),
                or_(
                    QuestionModel.id.in_(matching_type),
                    QuestionModel.id.not_in(type_tagged),
                ),
            )
            .order_by(func.random())
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def record_history(self, couple_id: str, question_id: str, shown_at: datetime) -> None:
        """Upsert the (couple, question) history row."""
        if await self._touch_history(couple_id, question_id, shown_at):
            return
        self.session.add(
            QuestionHistoryModel(couple_id=couple_id, question_id=question_id, shown_at=shown_at)
        )
        try:
            await self.session.commit()
        except IntegrityError:
            # Partner's request inserted the row first.
            await self.session.rollback()
            await self._touch_history(couple_id, question_id, shown_at)

    async def _touch_history(self, couple_id: str, question_id: str, shown_at: datetime) -> bool:
        result = await self.session.execute(
            update(QuestionHistoryModel)
            .where(
                QuestionHistoryModel.couple_id == couple_id,
                QuestionHistoryModel.question_id == question_id,
            )
            .values(shown_at=shown_at)
            .execution_options(synchronize_session=False)
        )
        await self.session.commit()
        return result.rowcount > 0

    async def get(self, question_id: str) -> Optional[Question]:
        """Get question by ID."""
        result = await self.session.execute(
            select(QuestionModel).where(QuestionModel.id == question_id)
        )
        model = result.scalar_one_or_none()
        return model.to_entity() if model else None

    async def add(self, question: Question) -> Question:
        """Add a catalog question (used by the seed script)."""
        model = QuestionModel.from_entity(question)
        self.session.add(model)
        await self.session.commit()
        return question
