"""Anniversary domain models."""
import datetime as dt
from typing import Literal, Optional

from pydantic import BaseModel

MilestoneType = Literal["days", "months", "years"]


class RelationshipDuration(BaseModel):
    years: int
    months: int
    days: int
    total_days: int


class NextAnniversary(BaseModel):
    date: dt.date
    years_completed: int
    days_until: int
    is_today: bool
    is_this_week: bool
    is_this_month: bool


class AnniversaryMilestone(BaseModel):
    type: MilestoneType
    value: int
    date: dt.date
    days_until: int
    label: str


class MilestoneCheck(BaseModel):
    """Whether a given date is itself a milestone."""
    is_milestone: bool
    milestone_type: Optional[MilestoneType] = None
    milestone_value: Optional[int] = None


class AnniversaryReminders(BaseModel):
    """Reminder dates leading up to the next anniversary."""
    one_month_before: dt.date
    one_week_before: dt.date
    one_day_before: dt.date
    on_day: dt.date


class AnniversarySummary(BaseModel):
    """Everything the anniversary screen shows for one start date."""
    start_date: dt.date
    today: dt.date
    duration: RelationshipDuration
    duration_text: str
    next_anniversary: NextAnniversary
    upcoming_milestones: list[AnniversaryMilestone]
    today_milestone: MilestoneCheck
    reminders: AnniversaryReminders
