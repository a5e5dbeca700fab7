"""
Month view assembly.

Merges tasks, and the occurrences of repeating tasks, into the month grid and
annotates each day with its today / current month / current week flags.
"""
from __future__ import annotations

import logging
import typing as t
import uuid
from collections import defaultdict
from datetime import date, timedelta

from task_server.models import CalendarDay, CalendarMonth, CalendarWeek, RecurrenceRule, Task, TaskStatus
from task_calendar.grid import build_grid, start_of_week
from task_calendar.recurrence import calendar_date, expand, project

logger = logging.getLogger(__name__)


def _place_tasks(
    tasks: t.Sequence[Task],
    grid_start: date,
    grid_end: date,
    custom_rules: t.Mapping[uuid.UUID, RecurrenceRule],
) -> dict[date, list[Task]]:
    """Group tasks by the date they land on.

    Due-date placements go first, then expanded occurrences, each in input
    order. An occurrence on the task's own due date is not added twice.
    """
    tasks_by_date: dict[date, list[Task]] = defaultdict(list)
    placed: set[tuple[date, uuid.UUID]] = set()

    for task in tasks:
        if task.due_date is not None:
            due = calendar_date(task.due_date)
            tasks_by_date[due].append(task)
            placed.add((due, task.id))

    for task in tasks:
        for occurrence in expand(task, grid_start, grid_end, custom_rules.get(task.id)):
            if (occurrence, task.id) in placed:
                continue
            tasks_by_date[occurrence].append(project(task, occurrence))
            placed.add((occurrence, task.id))

    return tasks_by_date


def assemble(
    year: int,
    month: int,
    tasks: t.Sequence[Task],
    today: date,
    custom_rules: t.Optional[t.Mapping[uuid.UUID, RecurrenceRule]] = None,
) -> CalendarMonth:
    """Build the calendar month for (year, month).

    Args:
        year: Requested year.
        month: Requested month, 1-12.
        tasks: Every task that may appear in the view. Not modified.
        today: The date to flag as today; also selects the current week.
        custom_rules: Rules for Custom-frequency tasks, keyed by task id.

    Returns:
        A CalendarMonth of 4-6 weeks, Sunday through Saturday.

    Raises:
        InvalidArgumentError: If (year, month) has no grid. Raised before any
            task is looked at.
    """
    grid = build_grid(year, month)
    grid_start, grid_end = grid[0][0], grid[-1][-1]

    tasks_by_date = _place_tasks(tasks, grid_start, grid_end, custom_rules or {})

    current_week_start = start_of_week(today)
    current_week_end = current_week_start + timedelta(days=6)

    weeks = []
    for week_dates in grid:
        days = [
            CalendarDay(
                date=day,
                tasks=list(tasks_by_date.get(day, [])),
                is_today=day == today,
                is_current_month=(day.year, day.month) == (year, month),
                is_current_week=current_week_start <= day <= current_week_end,
            )
            for day in week_dates
        ]
        weeks.append(CalendarWeek(days=days))

    logger.debug("Assembled %04d-%02d: %d weeks, %d tasks", year, month, len(weeks), len(tasks))
    return CalendarMonth(year=year, month=month, weeks=weeks)


def generate_month_view(
    year: int,
    month: int,
    tasks: t.Sequence[Task],
    today: t.Optional[date] = None,
    custom_rules: t.Optional[t.Mapping[uuid.UUID, RecurrenceRule]] = None,
) -> CalendarMonth:
    """Month view for the transport layer; today defaults to the local date."""
    return assemble(year, month, tasks, today or date.today(), custom_rules)


_STATUS_MARK = {
    TaskStatus.PENDING: " ",
    TaskStatus.IN_PROGRESS: "~",
    TaskStatus.COMPLETED: "x",
    TaskStatus.CANCELLED: "-",
}


def format_month(calendar_month: CalendarMonth) -> str:
    """Format a month view as a clean agenda, one block per day with tasks.

    :param calendar_month: The assembled month.
    :return: Formatted text listing each day of the month that has tasks.
    """
    title = date(calendar_month.year, calendar_month.month, 1).strftime("%B %Y")
    lines = []
    lines.append(f"📅 {title.upper()}")
    lines.append("=" * 60)

    total = 0
    for week in calendar_month.weeks:
        for day in week.days:
            if not day.is_current_month or not day.tasks:
                continue
            marker = "  ← today" if day.is_today else ""
            lines.append(f"{day.date.strftime('%a %d')}{marker}")
            for task in day.tasks:
                mark = _STATUS_MARK.get(task.status, "?")
                repeat = f" ({task.frequency.value})" if task.frequency.value not in ("None", "Invalid") else ""
                lines.append(f"   [{mark}] {task.name}{repeat}")
                total += 1

    if total == 0:
        lines.append("No tasks this month.")
    lines.append("=" * 60)
    lines.append(f"Total: {total} task occurrence(s)")
    return "\n".join(lines)
