"""Activity repository protocols."""
from typing import List, Optional, Protocol

from app.domain.activity.models import ActivityKind, DailyActivity


class ActivityRepository(Protocol):
    """Repository protocol for the daily activity ledger."""

    async def mark(self, user_id: str, date_key: str, kind: ActivityKind) -> DailyActivity:
        """OR one flag into the (user, day) row, creating it if needed."""
        ...

    async def get(self, user_id: str, date_key: str) -> Optional[DailyActivity]:
        """Get the (user, day) row."""
        ...

    async def list_for_user(self, user_id: str) -> List[DailyActivity]:
        """Full ledger for a user."""
        ...
