"""Tests for anniversary calculations."""
from datetime import date, datetime

from app.domain.anniversary.calculator import (
    add_months,
    build_summary,
    calculate_duration,
    format_duration,
    format_duration_simple,
    get_anniversary_reminders,
    get_next_anniversary,
    get_upcoming_milestones,
    is_special_milestone,
)
from app.domain.anniversary.models import RelationshipDuration


class TestDuration:
    def test_hundred_days(self):
        duration = calculate_duration(date(2024, 1, 1), date(2024, 4, 10))
        assert (duration.years, duration.months, duration.days) == (0, 3, 9)
        assert duration.total_days == 100

        check = is_special_milestone(date(2024, 1, 1), date(2024, 4, 10))
        assert check.is_milestone
        assert check.milestone_type == "days"
        assert check.milestone_value == 100

    def test_borrows_days_from_previous_month(self):
        duration = calculate_duration(date(2023, 11, 20), date(2025, 3, 5))
        # Feb 2025 has 28 days: 5 - 20 + 28 = 13
        assert (duration.years, duration.months, duration.days) == (1, 3, 13)

    def test_same_day(self):
        duration = calculate_duration(date(2024, 5, 5), date(2024, 5, 5))
        assert duration.total_days == 0
        assert format_duration(duration) == "0 days"

    def test_accepts_datetimes(self):
        duration = calculate_duration(datetime(2024, 1, 1, 23, 59), datetime(2024, 1, 2, 0, 1))
        assert duration.total_days == 1


class TestNextAnniversary:
    def test_later_this_year(self):
        nxt = get_next_anniversary(date(2020, 6, 15), date(2025, 3, 1))
        assert nxt.date == date(2025, 6, 15)
        assert nxt.years_completed == 5
        assert nxt.days_until == 106
        assert not nxt.is_this_month

    def test_already_passed_this_year(self):
        nxt = get_next_anniversary(date(2020, 1, 10), date(2025, 3, 1))
        assert nxt.date == date(2026, 1, 10)
        assert nxt.years_completed == 6

    def test_today(self):
        nxt = get_next_anniversary(date(2020, 3, 1), date(2025, 3, 1))
        assert nxt.is_today and nxt.is_this_week and nxt.is_this_month
        assert nxt.days_until == 0
        assert nxt.years_completed == 5

    def test_leap_day_rolls_forward(self):
        nxt = get_next_anniversary(date(2020, 2, 29), date(2025, 1, 15))
        assert nxt.date == date(2025, 3, 1)

    def test_month_overflow_rolls_forward(self):
        assert add_months(date(2025, 1, 31), 1) == date(2025, 3, 3)
        assert add_months(date(2024, 1, 31), 1) == date(2024, 3, 2)
        assert add_months(date(2025, 3, 15), -1) == date(2025, 2, 15)


class TestMilestones:
    def test_upcoming_nearest_first(self):
        milestones = get_upcoming_milestones(date(2025, 1, 1), date(2025, 3, 1))
        assert [(m.type, m.value) for m in milestones] == [
            ("days", 100),
            ("months", 6),
            ("days", 200),
        ]
        assert milestones[0].date == date(2025, 4, 11)
        assert milestones[0].days_until == 41
        assert milestones[0].label == "100 days"
        assert milestones[1].date == date(2025, 7, 1)

    def test_limit(self):
        milestones = get_upcoming_milestones(date(2025, 1, 1), date(2025, 3, 1), limit=5)
        assert len(milestones) == 5
        assert [m.days_until for m in milestones] == sorted(m.days_until for m in milestones)

    def test_year_labels(self):
        milestones = get_upcoming_milestones(date(2015, 3, 2), date(2025, 3, 1), limit=1)
        assert milestones[0].type == "years"
        assert milestones[0].value == 10
        assert milestones[0].label == "10 years"

    def test_yearly_anniversary_is_special(self):
        check = is_special_milestone(date(2020, 3, 1), date(2025, 3, 1))
        assert check.milestone_type == "years"
        assert check.milestone_value == 5

    def test_six_months_is_special(self):
        check = is_special_milestone(date(2025, 1, 1), date(2025, 7, 1))
        assert check.milestone_type == "months"
        assert check.milestone_value == 6

    def test_ordinary_day(self):
        check = is_special_milestone(date(2025, 1, 1), date(2025, 1, 20))
        assert not check.is_milestone
        assert check.milestone_type is None


class TestFormatting:
    def test_format_duration(self):
        duration = RelationshipDuration(years=1, months=2, days=3, total_days=428)
        assert format_duration(duration) == "1 year, 2 months, 3 days"
        assert format_duration(duration, short=True) == "1y 2m 3d"

    def test_format_duration_skips_zero_parts(self):
        duration = RelationshipDuration(years=2, months=0, days=1, total_days=731)
        assert format_duration(duration) == "2 years, 1 day"

    def test_format_duration_simple(self):
        assert format_duration_simple(RelationshipDuration(years=2, months=0, days=5, total_days=735)) == "2 years"
        assert format_duration_simple(RelationshipDuration(years=1, months=3, days=5, total_days=460)) == "1 year, 3 months"
        assert format_duration_simple(RelationshipDuration(years=0, months=1, days=1, total_days=32)) == "1 month, 1 day"
        assert format_duration_simple(RelationshipDuration(years=0, months=0, days=9, total_days=9)) == "9 days"


class TestRemindersAndSummary:
    def test_reminders(self):
        reminders = get_anniversary_reminders(date(2020, 6, 15), date(2025, 3, 1))
        assert reminders.on_day == date(2025, 6, 15)
        assert reminders.one_day_before == date(2025, 6, 14)
        assert reminders.one_week_before == date(2025, 6, 8)
        assert reminders.one_month_before == date(2025, 5, 15)

    def test_summary(self):
        summary = build_summary(date(2024, 1, 1), date(2024, 4, 10))
        assert summary.duration.total_days == 100
        assert summary.duration_text == "3 months, 9 days"
        assert summary.today_milestone.is_milestone
        assert summary.next_anniversary.date == date(2025, 1, 1)
        assert len(summary.upcoming_milestones) == 3
        assert summary.reminders.on_day == date(2025, 1, 1)
