"""Daily prompt and answer models."""
from datetime import datetime
from sqlalchemy import Column, String, Text, DateTime, ForeignKey, UniqueConstraint, Index
from sqlalchemy.orm import relationship

from app.infra.db.base import Base
from app.domain.daily_question.models import (
    Answer as AnswerEntity,
    DailyPrompt as DailyPromptEntity,
)


class DailyPromptModel(Base):
    """One question per couple per calendar day."""

    __tablename__ = "daily_prompts"
    __table_args__ = (
        UniqueConstraint("couple_id", "date_key", name="uq_daily_prompt_couple_date"),
    )

    id = Column(String, primary_key=True)
    couple_id = Column(String, ForeignKey("couples.id", ondelete="CASCADE"), nullable=False, index=True)
    date_key = Column(String(10), nullable=False)  # YYYY-MM-DD
    question_id = Column(String, ForeignKey("questions.id"), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    unlocked_at = Column(DateTime, nullable=True)  # set once, never cleared

    question = relationship("QuestionModel", lazy="selectin")

    def to_entity(self) -> DailyPromptEntity:
        """Convert to domain entity."""
        return DailyPromptEntity(
            couple_id=self.couple_id,
            date_key=self.date_key,
            question_id=self.question_id,
            question=self.question.to_entity() if self.question is not None else None,
            created_at=self.created_at,
            unlocked_at=self.unlocked_at,
        )

    @classmethod
    def from_entity(cls, entity: DailyPromptEntity, id: str) -> "DailyPromptModel":
        """Create from domain entity."""
        return cls(
            id=id,
            couple_id=entity.couple_id,
            date_key=entity.date_key,
            question_id=entity.question_id,
            created_at=entity.created_at,
            unlocked_at=entity.unlocked_at,
        )


class AnswerModel(Base):
    """A member's answer; at most one per (couple, day, user) and never edited."""

    __tablename__ = "answers"
    __table_args__ = (
        UniqueConstraint("couple_id", "date_key", "user_id", name="uq_answer_couple_date_user"),
        Index("ix_answers_couple_date", "couple_id", "date_key"),
    )

    id = Column(String, primary_key=True)
    couple_id = Column(String, ForeignKey("couples.id", ondelete="CASCADE"), nullable=False)
    date_key = Column(String(10), nullable=False)
    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    text = Column(Text, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    def to_entity(self) -> AnswerEntity:
        """Convert to domain entity."""
        return AnswerEntity(
            couple_id=self.couple_id,
            date_key=self.date_key,
            user_id=self.user_id,
            text=self.text,
            created_at=self.created_at,
        )

    @classmethod
    def from_entity(cls, entity: AnswerEntity, id: str) -> "AnswerModel":
        """Create from domain entity."""
        return cls(
            id=id,
            couple_id=entity.couple_id,
            date_key=entity.date_key,
            user_id=entity.user_id,
            text=entity.text,
            created_at=entity.created_at,
        )
