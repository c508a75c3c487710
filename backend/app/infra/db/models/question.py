"""Question catalog and per-couple history models."""
from datetime import datetime
from sqlalchemy import Column, String, Text, Boolean, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from app.infra.db.base import Base
from app.domain.daily_question.models import Question as QuestionEntity


class QuestionModel(Base):
    """Static question catalog."""

    __tablename__ = "questions"

    id = Column(String, primary_key=True)
    text = Column(Text, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    tags = relationship("QuestionTagModel", lazy="selectin", cascade="all, delete-orphan")

    def to_entity(self) -> QuestionEntity:
        """Convert to domain entity."""
        return QuestionEntity(
            id=self.id,
            text=self.text,
            tags=sorted(t.tag for t in (self.tags or [])),
        )

    @classmethod
    def from_entity(cls, entity: QuestionEntity) -> "QuestionModel":
        """Create from domain entity."""
        return cls(
            id=entity.id,
            text=entity.text,
            is_active=True,
            created_at=datetime.utcnow(),
            tags=[QuestionTagModel(question_id=entity.id, tag=t) for t in entity.tags],
        )


class QuestionTagModel(Base):
    """One tag of a question (relationship type or theme). Untagged questions suit everyone."""

    __tablename__ = "question_tags"

    question_id = Column(String, ForeignKey("questions.id", ondelete="CASCADE"), primary_key=True)
    tag = Column(String, primary_key=True, index=True)


class QuestionHistoryModel(Base):
    """Existence record of a question shown to a couple; shown_at is refreshed on reuse."""

    __tablename__ = "question_history"

    couple_id = Column(String, ForeignKey("couples.id", ondelete="CASCADE"), primary_key=True)
    question_id = Column(String, ForeignKey("questions.id", ondelete="CASCADE"), primary_key=True)
    shown_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
