"""Couple database model."""
from datetime import datetime
from sqlalchemy import Column, String, DateTime, Date, ForeignKey

from app.infra.db.base import Base
from app.domain.pairing.models import Couple as CoupleEntity, RelationshipType


class CoupleModel(Base):
    """Couple database model.

    member_a and member_b are each unique, so a user sits in at most one row
    per column; the join procedure checks the cross-column case.
    """

    __tablename__ = "couples"

    id = Column(String, primary_key=True)
    member_a = Column(String, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)
    member_b = Column(String, ForeignKey("users.id", ondelete="SET NULL"), unique=True, nullable=True)
    invite_code = Column(String(16), unique=True, index=True, nullable=False)
    relationship_type = Column(String, nullable=True)  # dating | married | long-distance
    relationship_start_date = Column(Date, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    def to_entity(self) -> CoupleEntity:
        """Convert to domain entity."""
        rel_type = None
        if self.relationship_type:
            try:
                rel_type = RelationshipType(self.relationship_type)
            except ValueError:
                rel_type = None
        return CoupleEntity(
            id=self.id,
            member_a=self.member_a,
            member_b=self.member_b,
            invite_code=self.invite_code,
            relationship_type=rel_type,
            relationship_start_date=self.relationship_start_date,
            created_at=self.created_at,
        )

    @classmethod
    def from_entity(cls, entity: CoupleEntity) -> "CoupleModel":
        """Create from domain entity."""
        return cls(
            id=entity.id,
            member_a=entity.member_a,
            member_b=entity.member_b,
            invite_code=entity.invite_code,
            relationship_type=entity.relationship_type.value if entity.relationship_type else None,
            relationship_start_date=entity.relationship_start_date,
            created_at=entity.created_at,
            updated_at=entity.created_at,
        )
