"""Daily activity ledger model."""
from sqlalchemy import Column, String, Boolean, ForeignKey, UniqueConstraint

from app.infra.db.base import Base
from app.domain.activity.models import DailyActivity as DailyActivityEntity


class DailyActivityModel(Base):
    """Per-user, per-day activity flags; flags are only ever set to true."""

    __tablename__ = "daily_activities"
    __table_args__ = (
        UniqueConstraint("user_id", "date_key", name="uq_daily_activity_user_date"),
    )

    id = Column(String, primary_key=True)
    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    date_key = Column(String(10), nullable=False)
    did_photo = Column(Boolean, default=False, nullable=False)
    did_mood = Column(Boolean, default=False, nullable=False)
    did_bucket = Column(Boolean, default=False, nullable=False)
    did_question_submit = Column(Boolean, default=False, nullable=False)
    did_question_unlock = Column(Boolean, default=False, nullable=False)

    def to_entity(self) -> DailyActivityEntity:
        """Convert to domain entity."""
        return DailyActivityEntity(
            user_id=self.user_id,
            date_key=self.date_key,
            did_photo=bool(self.did_photo),
            did_mood=bool(self.did_mood),
            did_bucket=bool(self.did_bucket),
            did_question_submit=bool(self.did_question_submit),
            did_question_unlock=bool(self.did_question_unlock),
        )
