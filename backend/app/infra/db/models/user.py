"""User database model."""
from datetime import datetime
from sqlalchemy import Column, String, DateTime

from app.infra.db.base import Base
from app.domain.pairing.models import User as UserEntity


class UserModel(Base):
    """User database model. Rows are created by the auth provider."""

    __tablename__ = "users"

    id = Column(String, primary_key=True)
    email = Column(String, unique=True, index=True, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    def to_entity(self) -> UserEntity:
        """Convert to domain entity."""
        return UserEntity(id=self.id, email=self.email, created_at=self.created_at)

    @classmethod
    def from_entity(cls, entity: UserEntity) -> "UserModel":
        """Create from domain entity."""
        now = entity.created_at or datetime.utcnow()
        return cls(id=entity.id, email=entity.email, created_at=now, updated_at=now)
