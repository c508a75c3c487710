"""Common domain types."""
import re
from datetime import date, datetime, timezone
from typing import Generic, Optional, TypeVar
from uuid import uuid4
from zoneinfo import ZoneInfo

from pydantic import BaseModel

DATE_KEY_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")

T = TypeVar("T")


def generate_id() -> str:
    """Generate a new UUID string."""
    return str(uuid4())


def utcnow() -> datetime:
    """Naive UTC timestamp (columns are stored without tz)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def today_key(tz_name: str = "UTC") -> str:
    """Today's calendar day in the given IANA timezone as YYYY-MM-DD."""
    return datetime.now(ZoneInfo(tz_name)).date().isoformat()


def parse_date_key(date_key: str) -> date:
    """Parse a YYYY-MM-DD day key; raises ValueError on anything else."""
    if not DATE_KEY_PATTERN.match(date_key or ""):
        raise ValueError(f"Invalid date key: {date_key!r}")
    return date.fromisoformat(date_key)


class ApiResponse(BaseModel, Generic[T]):
    """Uniform envelope returned by every public operation."""
    success: bool
    data: Optional[T] = None
    error: Optional[str] = None

    @classmethod
    def ok(cls, data: Optional[T] = None) -> "ApiResponse[T]":
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, error: str) -> "ApiResponse[T]":
        return cls(success=False, error=error)
