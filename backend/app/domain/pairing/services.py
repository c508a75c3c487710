"""Pairing domain services."""
import logging
import secrets
import string
from datetime import date
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from app.domain.common import messages
from app.domain.common.errors import (
    AuthorizationError,
    ConflictError,
    NotFoundError,
    UnavailableError,
    ValidationError,
)
from app.domain.common.types import generate_id, utcnow
from app.domain.pairing.models import Couple, RelationshipType
from app.domain.pairing.repositories import (
    CoupleRepository,
    InviteCodeCollision,
    JoinRejected,
    MembershipConflict,
)

logger = logging.getLogger(__name__)

INVITE_CODE_ALPHABET = string.ascii_uppercase + string.digits
MAX_CODE_ATTEMPTS = 5


def generate_invite_code(length: int = 6) -> str:
    """Uniformly random code drawn from [A-Z0-9]."""
    return "".join(secrets.choice(INVITE_CODE_ALPHABET) for _ in range(length))


def normalize_invite_code(code: str) -> str:
    return (code or "").strip().upper()


class PairingService:
    """Issues and redeems invite codes; creates and dissolves couples."""

    def __init__(self, couple_repo: CoupleRepository, invite_code_length: int = 6):
        self.couple_repo = couple_repo
        self.invite_code_length = invite_code_length

    async def create_couple(self, actor_id: Optional[str]) -> Couple:
        """Create a pending couple with actor as member_a and a fresh invite code."""
        if not actor_id:
            raise AuthorizationError(messages.NOT_AUTHENTICATED)
        try:
            # Best-effort; the unique member_a / member_b columns are the real guard.
            if await self.couple_repo.get_by_member(actor_id):
                raise ConflictError(messages.ALREADY_IN_COUPLE)

            for attempt in range(MAX_CODE_ATTEMPTS):
                couple = Couple(
                    id=generate_id(),
                    member_a=actor_id,
                    member_b=None,
                    invite_code=generate_invite_code(self.invite_code_length),
                    created_at=utcnow(),
                )
                try:
                    created = await self.couple_repo.create(couple)
                except InviteCodeCollision:
                    logger.info("Invite code collision on attempt %d, regenerating", attempt + 1)
                    continue
                logger.info("Couple %s created by %s", created.id, actor_id)
                return created
        except MembershipConflict:
            raise ConflictError(messages.ALREADY_IN_COUPLE)
        except SQLAlchemyError as e:
            logger.warning("Create couple failed for %s: %s", actor_id, e, exc_info=True)
            raise UnavailableError(messages.FAILED_CREATE_COUPLE) from e
        raise UnavailableError(messages.FAILED_CREATE_COUPLE)

    async def join_couple(self, actor_id: Optional[str], code: str) -> Couple:
        """Redeem an invite code through the repository's atomic procedure."""
        if not actor_id:
            raise AuthorizationError(messages.NOT_AUTHENTICATED)
        normalized = normalize_invite_code(code)
        if not normalized:
            raise ValidationError(messages.INVALID_INVITE_CODE)
        try:
            couple = await self.couple_repo.redeem_invite_code(actor_id, normalized)
        except JoinRejected as e:
            logger.info("Join rejected for %s: %s", actor_id, e.reason)
            raise self._join_error(e.reason) from e
        except SQLAlchemyError as e:
            logger.warning("Join couple failed for %s: %s", actor_id, e, exc_info=True)
            raise UnavailableError(messages.FAILED_JOIN_COUPLE) from e
        logger.info("User %s joined couple %s", actor_id, couple.id)
        return couple

    @staticmethod
    def _join_error(reason: str) -> Exception:
        if reason not in messages.JOIN_REJECTIONS:
            return UnavailableError(messages.FAILED_JOIN_COUPLE)
        if reason == messages.NOT_AUTHENTICATED:
            return AuthorizationError(reason)
        if reason == messages.ALREADY_IN_COUPLE:
            return ConflictError(reason)
        return ValidationError(reason)

    async def get_current_couple(self, actor_id: str) -> Optional[Couple]:
        """Return the actor's couple, or None when unpaired."""
        try:
            return await self.couple_repo.get_by_member(actor_id)
        except SQLAlchemyError as e:
            logger.warning("Couple lookup failed for %s: %s", actor_id, e, exc_info=True)
            raise UnavailableError(messages.FAILED_GET_COUPLE) from e

    async def require_couple(self, actor_id: str) -> Couple:
        """Like get_current_couple, but absence is an error."""
        couple = await self.get_current_couple(actor_id)
        if couple is None:
            raise NotFoundError(messages.NOT_IN_COUPLE)
        return couple

    async def unpair_couple(self, actor_id: str) -> None:
        """member_a deletes the row; member_b only clears its own slot."""
        couple = await self.require_couple(actor_id)
        try:
            if couple.member_a == actor_id:
                await self.couple_repo.delete(couple.id)
                logger.info("Couple %s deleted by creator %s", couple.id, actor_id)
            else:
                await self.couple_repo.clear_member_b(couple.id, actor_id)
                logger.info("User %s left couple %s", actor_id, couple.id)
        except SQLAlchemyError as e:
            logger.warning("Unpair failed for %s: %s", actor_id, e, exc_info=True)
            raise UnavailableError(messages.FAILED_UNPAIR) from e

    async def regenerate_invite_code(self, actor_id: str) -> Couple:
        """Issue a new invite code; only while member_b is empty."""
        couple = await self.require_couple(actor_id)
        if couple.is_complete:
            raise ConflictError(messages.COUPLE_ALREADY_COMPLETE)
        try:
            for _ in range(MAX_CODE_ATTEMPTS):
                try:
                    updated = await self.couple_repo.set_invite_code(
                        couple.id, generate_invite_code(self.invite_code_length)
                    )
                except InviteCodeCollision:
                    continue
                if updated is None:
                    # A joiner won the race between our read and the update.
                    raise ConflictError(messages.COUPLE_ALREADY_COMPLETE)
                logger.info("Invite code regenerated for couple %s", couple.id)
                return updated
        except SQLAlchemyError as e:
            logger.warning("Regenerate code failed for %s: %s", couple.id, e, exc_info=True)
            raise UnavailableError(messages.FAILED_REGENERATE_CODE) from e
        raise UnavailableError(messages.FAILED_REGENERATE_CODE)

    async def update_relationship_profile(
        self,
        actor_id: str,
        relationship_type: Optional[str] = None,
        relationship_start_date: Optional[date] = None,
    ) -> Couple:
        """Set relationship type and/or start date; either member may do it."""
        couple = await self.require_couple(actor_id)
        rel_type = couple.relationship_type
        if relationship_type is not None:
            try:
                rel_type = RelationshipType(relationship_type)
            except ValueError:
                raise ValidationError(messages.INVALID_RELATIONSHIP_TYPE)
        start = relationship_start_date if relationship_start_date is not None else couple.relationship_start_date
        try:
            return await self.couple_repo.update_profile(couple.id, rel_type, start)
        except SQLAlchemyError as e:
            logger.warning("Profile update failed for %s: %s", couple.id, e, exc_info=True)
            raise UnavailableError(messages.FAILED_UPDATE_PROFILE) from e
