"""Tests for recurrence expansion within a calendar window."""
from datetime import date, datetime, timedelta, timezone

import pytest

from conftest import make_task, utc
from task_calendar.recurrence import base_date, calendar_date, expand, project
from task_server.models import RecurrenceRule, TaskFrequency

# March 2024 grid
MARCH_START = date(2024, 2, 25)
MARCH_END = date(2024, 4, 6)


def test_weekly_task_lands_on_every_matching_weekday() -> None:
    """A weekly task anchored on Friday 2024-03-01 repeats every Friday in the window."""
    task = make_task(frequency=TaskFrequency.WEEKLY, recurrence_date=utc(2024, 3, 1))

    assert expand(task, MARCH_START, MARCH_END) == [
        date(2024, 3, 1),
        date(2024, 3, 8),
        date(2024, 3, 15),
        date(2024, 3, 22),
        date(2024, 3, 29),
        date(2024, 4, 5),
    ]


def test_daily_task_starts_on_its_base_date() -> None:
    task = make_task(frequency=TaskFrequency.DAILY, due_date=utc(2024, 3, 10))

    occurrences = expand(task, MARCH_START, MARCH_END)

    assert occurrences[0] == date(2024, 3, 10)
    assert occurrences[-1] == MARCH_END
    assert len(occurrences) == 28


def test_old_daily_task_fills_the_whole_window() -> None:
    """Expansion is bounded by the window no matter how old the base date is."""
    task = make_task(frequency=TaskFrequency.DAILY, due_date=utc(1950, 6, 1))

    occurrences = expand(task, MARCH_START, MARCH_END)

    assert len(occurrences) == 42
    assert occurrences == [MARCH_START + timedelta(days=i) for i in range(42)]


def test_old_weekly_task_keeps_its_weekday() -> None:
    task = make_task(frequency=TaskFrequency.WEEKLY, due_date=utc(2001, 1, 3))  # a Wednesday

    occurrences = expand(task, MARCH_START, MARCH_END)

    assert len(occurrences) == 6
    assert all(day.weekday() == 2 for day in occurrences)


def test_monthly_task_clamps_to_short_months() -> None:
    """A task due on the 31st lands on the last day of shorter months."""
    task = make_task(frequency=TaskFrequency.MONTHLY, due_date=utc(2023, 5, 31))

    # April 2024 grid: 2024-03-31 .. 2024-05-04
    assert expand(task, date(2024, 3, 31), date(2024, 5, 4)) == [
        date(2024, 3, 31),
        date(2024, 4, 30),
    ]


def test_monthly_task_in_february() -> None:
    task = make_task(frequency=TaskFrequency.MONTHLY, due_date=utc(2024, 1, 31))

    # February 2024 grid: 2024-01-28 .. 2024-03-02
    assert expand(task, date(2024, 1, 28), date(2024, 3, 2)) == [
        date(2024, 1, 31),
        date(2024, 2, 29),
    ]


def test_monthly_task_keeps_its_day_of_month() -> None:
    task = make_task(frequency=TaskFrequency.MONTHLY, due_date=utc(2022, 11, 15))

    assert expand(task, MARCH_START, MARCH_END) == [date(2024, 3, 15)]


def test_yearly_leap_day_clamps_in_common_years() -> None:
    task = make_task(frequency=TaskFrequency.YEARLY, due_date=utc(2020, 2, 29))

    # February 2023 grid: 2023-01-29 .. 2023-03-04
    assert expand(task, date(2023, 1, 29), date(2023, 3, 4)) == [date(2023, 2, 28)]
    # February 2024 grid: 2024-01-28 .. 2024-03-02
    assert expand(task, date(2024, 1, 28), date(2024, 3, 2)) == [date(2024, 2, 29)]


def test_yearly_task_is_not_expanded_before_its_base_date() -> None:
    task = make_task(frequency=TaskFrequency.YEARLY, due_date=utc(2024, 3, 15))

    # March 2023 grid: 2023-02-26 .. 2023-04-01
    assert expand(task, date(2023, 2, 26), date(2023, 4, 1)) == []
    assert expand(task, date(2025, 2, 23), date(2025, 4, 5)) == [date(2025, 3, 15)]


def test_due_date_is_preferred_over_recurrence_date() -> None:
    task = make_task(
        frequency=TaskFrequency.WEEKLY,
        due_date=utc(2024, 3, 4),          # Monday
        recurrence_date=utc(2024, 3, 1),   # Friday
    )

    assert base_date(task) == date(2024, 3, 4)
    assert all(day.weekday() == 0 for day in expand(task, MARCH_START, MARCH_END))


@pytest.mark.parametrize("frequency", [TaskFrequency.NONE, TaskFrequency.INVALID])
def test_non_recurring_frequencies_produce_nothing(frequency: TaskFrequency) -> None:
    task = make_task(frequency=frequency, due_date=utc(2024, 3, 10))

    assert expand(task, MARCH_START, MARCH_END) == []


def test_recurring_task_without_base_date_produces_nothing() -> None:
    task = make_task(frequency=TaskFrequency.DAILY)

    assert expand(task, MARCH_START, MARCH_END) == []


def test_base_date_after_window_produces_nothing() -> None:
    task = make_task(frequency=TaskFrequency.DAILY, due_date=utc(2024, 5, 1))

    assert expand(task, MARCH_START, MARCH_END) == []


def test_custom_task_without_rule_produces_nothing() -> None:
    task = make_task(frequency=TaskFrequency.CUSTOM, due_date=utc(2024, 3, 1))

    assert expand(task, MARCH_START, MARCH_END) == []


def test_custom_every_three_days() -> None:
    task = make_task(frequency=TaskFrequency.CUSTOM, due_date=utc(2024, 3, 1))

    occurrences = expand(task, MARCH_START, MARCH_END, RecurrenceRule("daily", interval=3))

    assert occurrences == [date(2024, 3, 1) + timedelta(days=3 * i) for i in range(13)]


def test_custom_every_other_week_on_monday_and_wednesday() -> None:
    task = make_task(frequency=TaskFrequency.CUSTOM, due_date=utc(2024, 3, 4))  # Monday
    rule = RecurrenceRule("weekly", interval=2, weekdays=(0, 2))

    assert expand(task, MARCH_START, MARCH_END, rule) == [
        date(2024, 3, 4),
        date(2024, 3, 6),
        date(2024, 3, 18),
        date(2024, 3, 20),
        date(2024, 4, 1),
        date(2024, 4, 3),
    ]


def test_custom_every_other_week_counts_sunday_start_weeks() -> None:
    """A Sunday base date opens a week that already holds the following Monday and Wednesday."""
    task = make_task(frequency=TaskFrequency.CUSTOM, due_date=utc(2024, 3, 3))  # Sunday
    rule = RecurrenceRule("weekly", interval=2, weekdays=(0, 2))

    assert expand(task, MARCH_START, MARCH_END, rule) == [
        date(2024, 3, 4),
        date(2024, 3, 6),
        date(2024, 3, 18),
        date(2024, 3, 20),
        date(2024, 4, 1),
        date(2024, 4, 3),
    ]


def test_custom_biweekly_rule_stays_aligned_for_old_tasks() -> None:
    task = make_task(frequency=TaskFrequency.CUSTOM, due_date=utc(2024, 1, 1))  # Monday
    rule = RecurrenceRule("weekly", interval=2, weekdays=(0, 2))

    assert expand(task, MARCH_START, MARCH_END, rule) == [
        date(2024, 2, 26),
        date(2024, 2, 28),
        date(2024, 3, 11),
        date(2024, 3, 13),
        date(2024, 3, 25),
        date(2024, 3, 27),
    ]


def test_custom_rule_is_ignored_for_builtin_frequencies() -> None:
    task = make_task(frequency=TaskFrequency.WEEKLY, due_date=utc(2024, 3, 1))

    assert expand(task, MARCH_START, MARCH_END, RecurrenceRule("daily")) == expand(task, MARCH_START, MARCH_END)


@pytest.mark.parametrize("kwargs", [
    {"unit": "hourly"},
    {"unit": "daily", "interval": 0},
    {"unit": "weekly", "weekdays": (7,)},
    {"unit": "daily", "weekdays": (1,)},
])
def test_invalid_rules_are_rejected(kwargs: dict) -> None:
    with pytest.raises(ValueError):
        RecurrenceRule(**kwargs)


def test_projection_moves_only_the_due_date() -> None:
    task = make_task(name="Standup", frequency=TaskFrequency.DAILY, due_date=utc(2024, 3, 1, 9, 30))

    occurrence = project(task, date(2024, 3, 5))

    assert occurrence.due_date == utc(2024, 3, 5, 9, 30)
    assert occurrence.id == task.id
    assert occurrence.name == task.name
    assert occurrence.status == task.status
    assert occurrence.frequency == task.frequency
    # the source record is untouched
    assert task.due_date == utc(2024, 3, 1, 9, 30)


def test_calendar_date_is_taken_in_utc() -> None:
    eastern = timezone(timedelta(hours=-5))

    assert calendar_date(datetime(2024, 3, 10, 23, tzinfo=eastern)) == date(2024, 3, 11)
    assert calendar_date(datetime(2024, 3, 10, 23)) == date(2024, 3, 10)


def test_offset_base_date_expands_from_its_utc_day() -> None:
    eastern = timezone(timedelta(hours=-5))
    task = make_task(frequency=TaskFrequency.WEEKLY, due_date=datetime(2024, 3, 10, 23, tzinfo=eastern))

    assert base_date(task) == date(2024, 3, 11)
    assert expand(task, MARCH_START, MARCH_END) == [date(2024, 3, 11), date(2024, 3, 18), date(2024, 3, 25), date(2024, 4, 1)]
    assert project(task, date(2024, 3, 18)).due_date == datetime(2024, 3, 18, 4, tzinfo=timezone.utc)
