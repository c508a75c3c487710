"""Anniversary calculations.

Calendar-aware: durations borrow days from the previous month and months from
the year, so results read like "1 year, 2 months, 3 days". Month and year
arithmetic rolls overflowing days into the next month (Jan 31 + 1 month is
Mar 2 or 3; a Feb 29 anniversary falls on Mar 1 in common years).
"""
import calendar
from datetime import date, datetime, timedelta
from typing import List, Optional, Union

from app.domain.anniversary.models import (
    AnniversaryMilestone,
    AnniversaryReminders,
    AnniversarySummary,
    MilestoneCheck,
    NextAnniversary,
    RelationshipDuration,
)

DateLike = Union[date, datetime]

DAY_MILESTONES = (100, 200, 365, 500, 1000, 1500, 2000, 3000, 5000, 10000)
MONTH_MILESTONES = (6, 18)
YEAR_MILESTONES_AHEAD = 5


def _as_date(value: DateLike) -> date:
    return value.date() if isinstance(value, datetime) else value


def _rolled_date(year: int, month: int, day: int) -> date:
    """date(year, month, day), letting days past month end spill forward."""
    year += (month - 1) // 12
    month = (month - 1) % 12 + 1
    last = calendar.monthrange(year, month)[1]
    if day <= last:
        return date(year, month, day)
    return date(year, month, last) + timedelta(days=day - last)


def add_months(start: date, months: int) -> date:
    return _rolled_date(start.year, start.month + months, start.day)


def add_years(start: date, years: int) -> date:
    return _rolled_date(start.year + years, start.month, start.day)


def calculate_duration(start: DateLike, end: Optional[DateLike] = None) -> RelationshipDuration:
    """Years/months/days between two dates plus the flat day count."""
    start_d = _as_date(start)
    end_d = _as_date(end) if end is not None else date.today()

    years = end_d.year - start_d.year
    months = end_d.month - start_d.month
    days = end_d.day - start_d.day

    if days < 0:
        months -= 1
        prev_year, prev_month = (end_d.year, end_d.month - 1) if end_d.month > 1 else (end_d.year - 1, 12)
        days += calendar.monthrange(prev_year, prev_month)[1]
    if months < 0:
        years -= 1
        months += 12

    return RelationshipDuration(
        years=years,
        months=months,
        days=days,
        total_days=(end_d - start_d).days,
    )


def get_next_anniversary(start: DateLike, today: Optional[DateLike] = None) -> NextAnniversary:
    """Nearest same month/day at or after today."""
    start_d = _as_date(start)
    today_d = _as_date(today) if today is not None else date.today()

    this_year = _rolled_date(today_d.year, start_d.month, start_d.day)
    if this_year >= today_d:
        upcoming = this_year
        years_completed = today_d.year - start_d.year
    else:
        upcoming = _rolled_date(today_d.year + 1, start_d.month, start_d.day)
        years_completed = today_d.year - start_d.year + 1

    days_until = (upcoming - today_d).days
    return NextAnniversary(
        date=upcoming,
        years_completed=years_completed,
        days_until=days_until,
        is_today=days_until == 0,
        is_this_week=0 <= days_until <= 7,
        is_this_month=0 <= days_until <= 30,
    )


def get_upcoming_milestones(
    start: DateLike,
    today: Optional[DateLike] = None,
    limit: int = 3,
) -> List[AnniversaryMilestone]:
    """Future day/month/year milestones, nearest first."""
    start_d = _as_date(start)
    today_d = _as_date(today) if today is not None else date.today()
    duration = calculate_duration(start_d, today_d)
    milestones: List[AnniversaryMilestone] = []

    for days in DAY_MILESTONES:
        if duration.total_days < days:
            when = start_d + timedelta(days=days)
            milestones.append(AnniversaryMilestone(
                type="days",
                value=days,
                date=when,
                days_until=(when - today_d).days,
                label=f"{days} days",
            ))

    total_months = duration.years * 12 + duration.months
    for months in MONTH_MILESTONES:
        if total_months < months:
            when = add_months(start_d, months)
            days_until = (when - today_d).days
            if days_until > 0:
                milestones.append(AnniversaryMilestone(
                    type="months",
                    value=months,
                    date=when,
                    days_until=days_until,
                    label=f"{months} months",
                ))

    for years in range(duration.years + 1, duration.years + YEAR_MILESTONES_AHEAD + 1):
        when = add_years(start_d, years)
        days_until = (when - today_d).days
        if days_until > 0:
            milestones.append(AnniversaryMilestone(
                type="years",
                value=years,
                date=when,
                days_until=days_until,
                label=f"{years} {'year' if years == 1 else 'years'}",
            ))

    milestones.sort(key=lambda m: m.days_until)
    return milestones[:limit]


def is_special_milestone(start: DateLike, check: Optional[DateLike] = None) -> MilestoneCheck:
    """Is ``check`` itself a day-count milestone, a yearly anniversary or the 6-month mark?"""
    start_d = _as_date(start)
    check_d = _as_date(check) if check is not None else date.today()
    duration = calculate_duration(start_d, check_d)

    if duration.total_days in DAY_MILESTONES:
        return MilestoneCheck(is_milestone=True, milestone_type="days", milestone_value=duration.total_days)

    if (start_d.month, start_d.day) == (check_d.month, check_d.day):
        years = check_d.year - start_d.year
        if years > 0:
            return MilestoneCheck(is_milestone=True, milestone_type="years", milestone_value=years)

    if duration.years == 0 and duration.months == 6 and duration.days == 0:
        return MilestoneCheck(is_milestone=True, milestone_type="months", milestone_value=6)

    return MilestoneCheck(is_milestone=False)


def get_anniversary_reminders(start: DateLike, today: Optional[DateLike] = None) -> AnniversaryReminders:
    """Month/week/day-before reminder dates for the next anniversary."""
    anniversary = get_next_anniversary(start, today).date
    return AnniversaryReminders(
        one_month_before=add_months(anniversary, -1),
        one_week_before=anniversary - timedelta(days=7),
        one_day_before=anniversary - timedelta(days=1),
        on_day=anniversary,
    )


def _plural(n: int, unit: str) -> str:
    return f"{n} {unit if n == 1 else unit + 's'}"


def format_duration(duration: RelationshipDuration, short: bool = False) -> str:
    """Render as '1 year, 2 months, 3 days' or '1y 2m 3d'; zero parts are skipped."""
    parts = []
    if duration.years > 0:
        parts.append(f"{duration.years}y" if short else _plural(duration.years, "year"))
    if duration.months > 0:
        parts.append(f"{duration.months}m" if short else _plural(duration.months, "month"))
    if duration.days > 0 or not parts:
        parts.append(f"{duration.days}d" if short else _plural(duration.days, "day"))
    return (" " if short else ", ").join(parts)


def format_duration_simple(duration: RelationshipDuration) -> str:
    """At most two units: years+months, months+days, or days."""
    if duration.years > 0:
        if duration.months > 0:
            return f"{_plural(duration.years, 'year')}, {_plural(duration.months, 'month')}"
        return _plural(duration.years, "year")
    if duration.months > 0:
        if duration.days > 0:
            return f"{_plural(duration.months, 'month')}, {_plural(duration.days, 'day')}"
        return _plural(duration.months, "month")
    return _plural(duration.days, "day")


def build_summary(start: DateLike, today: Optional[DateLike] = None, limit: int = 3) -> AnniversarySummary:
    start_d = _as_date(start)
    today_d = _as_date(today) if today is not None else date.today()
    duration = calculate_duration(start_d, today_d)
    return AnniversarySummary(
        start_date=start_d,
        today=today_d,
        duration=duration,
        duration_text=format_duration_simple(duration),
        next_anniversary=get_next_anniversary(start_d, today_d),
        upcoming_milestones=get_upcoming_milestones(start_d, today_d, limit=limit),
        today_milestone=is_special_milestone(start_d, today_d),
        reminders=get_anniversary_reminders(start_d, today_d),
    )
