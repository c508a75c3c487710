"""Daily activity ledger repository implementation."""
from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError

from app.domain.activity.models import ACTIVITY_FLAGS, ActivityKind, DailyActivity
from app.domain.activity.repositories import ActivityRepository
from app.domain.common.types import generate_id
from app.infra.db.models.activity import DailyActivityModel


class ActivityRepositoryImpl(ActivityRepository):
    """Activity repository implementation."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def mark(self, user_id: str, date_key: str, kind: ActivityKind) -> DailyActivity:
        """Set one flag to true; other flags on the row are left as they are."""
        flag = ACTIVITY_FLAGS[kind]
        if not await self._set_flag(user_id, date_key, flag):
            self.session.add(
                DailyActivityModel(id=generate_id(), user_id=user_id, date_key=date_key, **{flag: True})
            )
            try:
                await self.session.commit()
            except IntegrityError:
                # Row created concurrently; OR the flag into it instead.
                await self.session.rollback()
                await self._set_flag(user_id, date_key, flag)
        return await self.get(user_id, date_key)

    async def _set_flag(self, user_id: str, date_key: str, flag: str) -> bool:
        result = await self.session.execute(
            update(DailyActivityModel)
            .where(DailyActivityModel.user_id == user_id, DailyActivityModel.date_key == date_key)
            .values({flag: True})
            .execution_options(synchronize_session=False)
        )
        await self.session.commit()
        return result.rowcount > 0

    async def get(self, user_id: str, date_key: str) -> Optional[DailyActivity]:
        """Get the (user, day) row."""
        result = await self.session.execute(
            select(DailyActivityModel)
            .where(DailyActivityModel.user_id == user_id, DailyActivityModel.date_key == date_key)
            .execution_options(populate_existing=True)
        )
        model = result.scalar_one_or_none()
        return model.to_entity() if model else None

    async def list_for_user(self, user_id: str) -> List[DailyActivity]:
        """Full ledger for a user, oldest day first."""
        result = await self.session.execute(
            select(DailyActivityModel)
            .where(DailyActivityModel.user_id == user_id)
            .order_by(DailyActivityModel.date_key)
            .execution_options(populate_existing=True)
        )
        return [m.to_entity() for m in result.scalars().all()]
