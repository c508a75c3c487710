"""Pairing repository protocols."""
from datetime import date
from typing import Optional, Protocol

from app.domain.pairing.models import Couple, RelationshipType, User


class UserRepository(Protocol):
    """Repository protocol for users."""

    async def get_by_id(self, user_id: str) -> Optional[User]:
        """Get user by ID."""
        ...


class CoupleRepository(Protocol):
    """Repository protocol for couples.

    Implementations must make ``redeem_invite_code`` a single atomic operation;
    it is never decomposed into a client-visible read and write.
    """

    async def create(self, couple: Couple) -> Couple:
        """Insert a couple; raises InviteCodeCollision if the code is taken."""
        ...

    async def get_by_id(self, couple_id: str) -> Optional[Couple]:
        """Get couple by ID."""
        ...

    async def get_by_member(self, user_id: str) -> Optional[Couple]:
        """Get the couple where the user is member_a or member_b."""
        ...

    async def redeem_invite_code(self, user_id: str, invite_code: str) -> Couple:
        """Atomically set member_b on the unresolved couple owning the code.

        Raises JoinRejected with one of the closed-set reasons.
        """
        ...

    async def delete(self, couple_id: str) -> None:
        """Delete a couple row."""
        ...

    async def clear_member_b(self, couple_id: str, user_id: str) -> None:
        """Clear member_b if it is still the given user."""
        ...

    async def set_invite_code(self, couple_id: str, invite_code: str) -> Optional[Couple]:
        """Replace the invite code while member_b is empty.

        Returns None when the couple is already complete.
        """
        ...

    async def update_profile(
        self,
        couple_id: str,
        relationship_type: Optional[RelationshipType],
        relationship_start_date: Optional[date],
    ) -> Couple:
        """Update relationship type / start date."""
        ...


class InviteCodeCollision(Exception):
    """Raised by repositories when a freshly generated invite code already exists."""


class JoinRejected(Exception):
    """Raised by the redemption procedure with a human-readable reason."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(reason)


class MembershipConflict(Exception):
    """Raised when the creating user already belongs to a couple row."""
