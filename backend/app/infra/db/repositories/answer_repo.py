"""Answer repository implementation."""
from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from app.domain.common.types import generate_id
from app.domain.daily_question.models import Answer
from app.domain.daily_question.repositories import AnswerRepository, DuplicateAnswer
from app.infra.db.models.daily_question import AnswerModel


class AnswerRepositoryImpl(AnswerRepository):
    """Answer repository implementation."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, couple_id: str, date_key: str, user_id: str) -> Optional[Answer]:
        """Get one member's answer for a day."""
        result = await self.session.execute(
            select(AnswerModel).where(
                AnswerModel.couple_id == couple_id,
                AnswerModel.date_key == date_key,
                AnswerModel.user_id == user_id,
            )
        )
        model = result.scalar_one_or_none()
        return model.to_entity() if model else None

    async def create(self, answer: Answer) -> Answer:
        """Insert an answer; the unique key rejects a second one."""
        model = AnswerModel.from_entity(answer, id=generate_id())
        self.session.add(model)
        try:
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            raise DuplicateAnswer(answer.user_id) from e
        return model.to_entity()

    async def list_for_day(self, couple_id: str, date_key: str) -> List[Answer]:
        """All answers for (couple, day), oldest first."""
        result = await self.session.execute(
            select(AnswerModel)
            .where(AnswerModel.couple_id == couple_id, AnswerModel.date_key == date_key)
            .order_by(AnswerModel.created_at)
        )
        return [m.to_entity() for m in result.scalars().all()]
