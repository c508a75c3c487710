"""Couple repository implementation."""
import logging
from datetime import date
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, delete, or_
from sqlalchemy.exc import IntegrityError

from app.domain.common import messages
from app.domain.common.types import utcnow
from app.domain.pairing.models import Couple, RelationshipType
from app.domain.pairing.repositories import (
    CoupleRepository,
    InviteCodeCollision,
    JoinRejected,
    MembershipConflict,
)
from app.infra.db.models.couple import CoupleModel
from app.infra.db.models.daily_question import AnswerModel, DailyPromptModel
from app.infra.db.models.question import QuestionHistoryModel

logger = logging.getLogger(__name__)


def _is_invite_code_violation(error: IntegrityError) -> bool:
    return "invite_code" in str(error.orig)


class CoupleRepositoryImpl(CoupleRepository):
    """Couple repository implementation."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, couple: Couple) -> Couple:
        """Create a new couple."""
        model = CoupleModel.from_entity(couple)
        self.session.add(model)
        try:
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            if _is_invite_code_violation(e):
                raise InviteCodeCollision(couple.invite_code) from e
            raise MembershipConflict(couple.member_a) from e
        await self.session.refresh(model)
        return model.to_entity()

    async def get_by_id(self, couple_id: str) -> Optional[Couple]:
        """Get couple by ID."""
        result = await self.session.execute(
            select(CoupleModel)
            .where(CoupleModel.id == couple_id)
            .execution_options(populate_existing=True)
        )
        model = result.scalar_one_or_none()
        return model.to_entity() if model else None

    async def get_by_member(self, user_id: str) -> Optional[Couple]:
        """Get the couple where the user is member_a or member_b."""
        result = await self.session.execute(
            select(CoupleModel)
            .where(or_(CoupleModel.member_a == user_id, CoupleModel.member_b == user_id))
            .order_by(CoupleModel.created_at)
            .limit(1)
            .execution_options(populate_existing=True)
        )
        model = result.scalars().first()
        return model.to_entity() if model else None

    async def redeem_invite_code(self, user_id: str, invite_code: str) -> Couple:
        """Verify and claim the invite code in one transaction.

        The final conditional UPDATE is the arbiter: of two joiners racing past
        the checks, only one sees rowcount == 1.
        """
        if not user_id:
            raise JoinRejected(messages.NOT_AUTHENTICATED)
        try:
            result = await self.session.execute(
                select(CoupleModel).where(CoupleModel.invite_code == invite_code)
            )
            model = result.scalar_one_or_none()
            if model is None or model.member_b is not None:
                raise JoinRejected(messages.INVALID_INVITE_CODE)
            if model.member_a == user_id:
                raise JoinRejected(messages.CANNOT_JOIN_OWN_COUPLE)

            existing = await self.session.execute(
                select(CoupleModel.id)
                .where(or_(CoupleModel.member_a == user_id, CoupleModel.member_b == user_id))
                .limit(1)
            )
            if existing.first() is not None:
                raise JoinRejected(messages.ALREADY_IN_COUPLE)

            claimed = await self.session.execute(
                update(CoupleModel)
                .where(
                    CoupleModel.invite_code == invite_code,
                    CoupleModel.member_b.is_(None),
                    CoupleModel.member_a != user_id,
                )
                .values(member_b=user_id, updated_at=utcnow())
                .execution_options(synchronize_session=False)
            )
            if claimed.rowcount != 1:
                raise JoinRejected(messages.INVALID_INVITE_CODE)
            await self.session.commit()
        except JoinRejected:
            await self.session.rollback()
            raise
        except IntegrityError as e:
            # member_b unique: the joiner was claimed by another couple meanwhile.
            await self.session.rollback()
            raise JoinRejected(messages.ALREADY_IN_COUPLE) from e

        await self.session.refresh(model)
        return model.to_entity()

    async def delete(self, couple_id: str) -> None:
        """Delete a couple and everything scoped to it."""
        # Order matters: delete child records before parent
        await self.session.execute(delete(AnswerModel).where(AnswerModel.couple_id == couple_id))
        await self.session.execute(
            delete(DailyPromptModel).where(DailyPromptModel.couple_id == couple_id)
        )
        await self.session.execute(
            delete(QuestionHistoryModel).where(QuestionHistoryModel.couple_id == couple_id)
        )
        await self.session.execute(delete(CoupleModel).where(CoupleModel.id == couple_id))
        await self.session.commit()

    async def clear_member_b(self, couple_id: str, user_id: str) -> None:
        """Clear member_b if it is still the given user."""
        await self.session.execute(
            update(CoupleModel)
            .where(CoupleModel.id == couple_id, CoupleModel.member_b == user_id)
            .values(member_b=None, updated_at=utcnow())
            .execution_options(synchronize_session=False)
        )
        await self.session.commit()

    async def set_invite_code(self, couple_id: str, invite_code: str) -> Optional[Couple]:
        """Replace the invite code while member_b is empty."""
        try:
            result = await self.session.execute(
                update(CoupleModel)
                .where(CoupleModel.id == couple_id, CoupleModel.member_b.is_(None))
                .values(invite_code=invite_code, updated_at=utcnow())
                .execution_options(synchronize_session=False)
            )
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            raise InviteCodeCollision(invite_code) from e
        if result.rowcount != 1:
            return None
        return await self.get_by_id(couple_id)

    async def update_profile(
        self,
        couple_id: str,
        relationship_type: Optional[RelationshipType],
        relationship_start_date: Optional[date],
    ) -> Couple:
        """Update relationship type / start date."""
        await self.session.execute(
            update(CoupleModel)
            .where(CoupleModel.id == couple_id)
            .values(
                relationship_type=relationship_type.value if relationship_type else None,
                relationship_start_date=relationship_start_date,
                updated_at=utcnow(),
            )
            .execution_options(synchronize_session=False)
        )
        await self.session.commit()
        return await self.get_by_id(couple_id)
