"""Streak and recap calculations over the activity ledger.

Everything here is a pure function of (ledger, today); callers recompute after
every ledger mutation instead of keeping counters in sync.
"""
from datetime import date, timedelta
from typing import Iterable, List, Optional, Sequence

from app.domain.activity.models import DailyActivity, StreakData, WeeklyRecap


def week_dates(today: date) -> List[date]:
    """The seven dates of today's ISO week, Monday first."""
    monday = today - timedelta(days=today.weekday())
    return [monday + timedelta(days=i) for i in range(7)]


def _consecutive_days_back(days: set, today: date) -> int:
    """Count days present in ``days`` walking back from today until the first gap."""
    count = 0
    cursor = today
    while cursor in days:
        count += 1
        cursor -= timedelta(days=1)
    return count


def _longest_run(days_desc: Sequence[date]) -> int:
    longest = 0
    run = 0
    last: Optional[date] = None
    for day in days_desc:
        if last is not None and (last - day).days == 1:
            run += 1
        else:
            longest = max(longest, run)
            run = 1
        last = day
    return max(longest, run)


def calculate_streak(activities: Iterable[DailyActivity], today: date) -> StreakData:
    """Recompute all four streak numbers from the raw ledger."""
    rows = list(activities)
    active_days = {date.fromisoformat(a.date_key) for a in rows if a.is_active}
    unlock_days = {date.fromisoformat(a.date_key) for a in rows if a.did_question_unlock}

    current = _consecutive_days_back(active_days, today)
    longest = max(_longest_run(sorted(active_days, reverse=True)), current)
    this_week = sum(1 for d in week_dates(today) if d in active_days)

    return StreakData(
        current_streak=current,
        longest_streak=longest,
        active_days_this_week=this_week,
        couple_unlock_streak=_consecutive_days_back(unlock_days, today),
    )


def build_weekly_recap(
    activities: Iterable[DailyActivity],
    today: date,
    moods: Optional[List[Optional[str]]] = None,
) -> WeeklyRecap:
    """Summarize the current Monday-Sunday window."""
    by_key = {a.date_key: a for a in activities}
    dates = week_dates(today)

    active_days = photos_liked = answered = unlocked = bucket_done = 0
    for d in dates:
        row = by_key.get(d.isoformat())
        if row is None:
            continue
        if row.did_photo:
            photos_liked += 1
            active_days += 1
        if row.did_question_submit:
            answered += 1
        if row.did_question_unlock:
            unlocked += 1
        if row.did_bucket:
            bucket_done += 1

    return WeeklyRecap(
        week_start_date=dates[0].isoformat(),
        week_end_date=dates[-1].isoformat(),
        active_days=active_days,
        photos_liked=photos_liked,
        photos_shared=0,  # not tracked in the ledger
        questions_answered=answered,
        questions_unlocked=unlocked,
        bucket_items_completed=bucket_done,
        moods=list(moods) if moods else [],
    )
