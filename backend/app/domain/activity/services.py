"""Activity domain services."""
import logging
from datetime import date, datetime
from typing import List, Optional
from zoneinfo import ZoneInfo

from sqlalchemy.exc import SQLAlchemyError

from app.domain.activity.models import ActivityKind, DailyActivity, StreakData, WeeklyRecap
from app.domain.activity.repositories import ActivityRepository
from app.domain.activity.streaks import build_weekly_recap, calculate_streak
from app.domain.common import messages
from app.domain.common.errors import UnavailableError, ValidationError
from app.domain.common.types import parse_date_key

logger = logging.getLogger(__name__)


class ActivityService:
    """Logs ledger events and derives streaks from the full ledger.

    Streaks are recomputed from the ledger on every read, never cached.
    """

    def __init__(self, repo: ActivityRepository, timezone_name: str = "UTC"):
        self.repo = repo
        self.timezone_name = timezone_name

    def today(self) -> date:
        return datetime.now(ZoneInfo(self.timezone_name)).date()

    async def record(self, user_id: str, date_key: str, kind: str) -> None:
        """Mark one flag; used by the question exchange."""
        await self.repo.mark(user_id, date_key, ActivityKind(kind))

    async def log_activity(
        self,
        user_id: str,
        kind: str,
        date_key: Optional[str] = None,
        today: Optional[date] = None,
    ) -> StreakData:
        """Mark a flag for the day and return freshly recomputed streaks."""
        try:
            activity_kind = ActivityKind(kind)
        except ValueError:
            raise ValidationError(messages.UNKNOWN_ACTIVITY_KIND)
        today = today or self.today()
        key = date_key or today.isoformat()
        try:
            parse_date_key(key)
        except ValueError:
            raise ValidationError(messages.INVALID_DATE_KEY)
        try:
            await self.repo.mark(user_id, key, activity_kind)
            streak = await self._streak(user_id, today)
        except SQLAlchemyError as e:
            logger.warning("Activity log failed for %s: %s", user_id, e, exc_info=True)
            raise UnavailableError(messages.FAILED_LOG_ACTIVITY) from e
        logger.info("User %s logged %s on %s", user_id, activity_kind.value, key)
        return streak

    async def get_today_activity(self, user_id: str, today: Optional[date] = None) -> DailyActivity:
        key = (today or self.today()).isoformat()
        try:
            row = await self.repo.get(user_id, key)
        except SQLAlchemyError as e:
            logger.warning("Activity read failed for %s: %s", user_id, e, exc_info=True)
            raise UnavailableError(messages.FAILED_GET_ACTIVITY) from e
        return row or DailyActivity(user_id=user_id, date_key=key)

    async def get_streak(self, user_id: str, today: Optional[date] = None) -> StreakData:
        try:
            return await self._streak(user_id, today or self.today())
        except SQLAlchemyError as e:
            logger.warning("Streak read failed for %s: %s", user_id, e, exc_info=True)
            raise UnavailableError(messages.FAILED_GET_STREAK) from e

    async def get_weekly_recap(
        self,
        user_id: str,
        moods: Optional[List[Optional[str]]] = None,
        today: Optional[date] = None,
    ) -> WeeklyRecap:
        try:
            rows = await self.repo.list_for_user(user_id)
        except SQLAlchemyError as e:
            logger.warning("Recap read failed for %s: %s", user_id, e, exc_info=True)
            raise UnavailableError(messages.FAILED_GET_ACTIVITY) from e
        return build_weekly_recap(rows, today or self.today(), moods)

    async def _streak(self, user_id: str, today: date) -> StreakData:
        rows = await self.repo.list_for_user(user_id)
        streak = calculate_streak(rows, today)
        logger.debug("Streak for %s on %s: %s", user_id, today, streak)
        return streak
