"""Pairing domain models."""
from datetime import date, datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, EmailStr


class RelationshipType(str, Enum):
    """Relationship type used to match daily questions."""
    DATING = "dating"
    MARRIED = "married"
    LONG_DISTANCE = "long-distance"


class CoupleState(str, Enum):
    """Lifecycle of a couple row as seen by one user."""
    UNPAIRED = "unpaired"
    PENDING = "pending"
    PAIRED = "paired"


class User(BaseModel):
    """Authenticated end-user identity."""
    id: str
    email: EmailStr
    created_at: Optional[datetime] = None


class Couple(BaseModel):
    """Couple domain model."""
    id: str
    member_a: str
    member_b: Optional[str] = None
    invite_code: str
    relationship_type: Optional[RelationshipType] = None
    relationship_start_date: Optional[date] = None
    created_at: datetime

    @property
    def is_complete(self) -> bool:
        return self.member_b is not None

    @property
    def state(self) -> CoupleState:
        return CoupleState.PAIRED if self.is_complete else CoupleState.PENDING

    def includes(self, user_id: str) -> bool:
        """Check if this couple includes the given user."""
        return user_id == self.member_a or (self.member_b is not None and user_id == self.member_b)

    def partner_of(self, user_id: str) -> Optional[str]:
        """Given one member, return the other (None while pending)."""
        if user_id == self.member_a:
            return self.member_b
        if user_id == self.member_b:
            return self.member_a
        return None

    @property
    def members(self) -> list[str]:
        return [m for m in (self.member_a, self.member_b) if m]
