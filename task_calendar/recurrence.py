"""Recurrence expansion: the dates a repeating task lands on inside a window.

Expansion is always evaluated against a bounded window (one month grid), so
the start of each rule is moved forward to just before the window; the cost
does not grow with the age of the task.
"""
from __future__ import annotations

import logging
import typing as t
from dataclasses import replace
from datetime import date, datetime, time, timedelta, timezone

from dateutil.rrule import DAILY, MONTHLY, SU, WEEKLY, YEARLY, rrule

from task_server.models import RecurrenceRule, Task, TaskFrequency

logger = logging.getLogger(__name__)

_RRULE_FREQ = {
    "daily": DAILY,
    "weekly": WEEKLY,
    "monthly": MONTHLY,
    "yearly": YEARLY,
}

_BUILTIN_RULES = {
    TaskFrequency.DAILY: RecurrenceRule("daily"),
    TaskFrequency.WEEKLY: RecurrenceRule("weekly"),
    TaskFrequency.MONTHLY: RecurrenceRule("monthly"),
    TaskFrequency.YEARLY: RecurrenceRule("yearly"),
}


def _utc(moment: datetime) -> datetime:
    return moment.astimezone(timezone.utc) if moment.tzinfo is not None else moment


def calendar_date(moment: datetime) -> date:
    """The day a timestamp falls on in UTC. Naive timestamps are already UTC."""
    return _utc(moment).date()


def base_date(task: Task) -> t.Optional[date]:
    """Anchor for expansion: the due date when set, else the recurrence date."""
    anchor = task.due_date or task.recurrence_date
    return calendar_date(anchor) if anchor is not None else None


def rule_for(task: Task, custom_rule: t.Optional[RecurrenceRule] = None) -> t.Optional[RecurrenceRule]:
    """Resolve the rule to expand a task with, or None if it doesn't repeat."""
    if task.frequency == TaskFrequency.CUSTOM:
        if custom_rule is None:
            logger.debug("Task %s is Custom but no rule was supplied; not expanding", task.id)
        return custom_rule
    if task.frequency == TaskFrequency.INVALID:
        logger.debug("Task %s has an unrecognized frequency; not expanding", task.id)
    return _BUILTIN_RULES.get(task.frequency)


def _fast_forward(base: date, rule: RecurrenceRule, window_start: date) -> date:
    """Latest rule start on or before window_start that keeps the series aligned."""
    if window_start <= base:
        return base
    if rule.unit in ("daily", "weekly"):
        period = rule.interval * (7 if rule.unit == "weekly" else 1)
        skipped = (window_start - base).days // period
        return base + timedelta(days=skipped * period)
    if rule.unit == "monthly":
        months = (window_start.year - base.year) * 12 + window_start.month - base.month
        months -= months % rule.interval
        year, month0 = divmod(base.month - 1 + months, 12)
        return date(base.year + year, month0 + 1, 1)
    years = window_start.year - base.year
    years -= years % rule.interval
    return date(base.year + years, 1, 1)


def _build_rrule(base: date, rule: RecurrenceRule, window_start: date) -> rrule:
    dtstart = datetime.combine(_fast_forward(base, rule, window_start), time.min)
    if rule.unit == "weekly":
        weekdays = rule.weekdays or (base.weekday(),)
        return rrule(WEEKLY, dtstart=dtstart, interval=rule.interval, byweekday=weekdays, wkst=SU)
    if rule.unit == "monthly":
        # (day, -1) with bysetpos=1 clamps day 29-31 to the last day of short months
        return rrule(MONTHLY, dtstart=dtstart, interval=rule.interval,
                     bymonthday=(base.day, -1), bysetpos=1)
    if rule.unit == "yearly":
        return rrule(YEARLY, dtstart=dtstart, interval=rule.interval, bymonth=base.month,
                     bymonthday=(base.day, -1), bysetpos=1)
    return rrule(_RRULE_FREQ[rule.unit], dtstart=dtstart, interval=rule.interval)


def expand(
    task: Task,
    window_start: date,
    window_end: date,
    rule: t.Optional[RecurrenceRule] = None,
) -> list[date]:
    """Compute the dates within [window_start, window_end] a task recurs on.

    Args:
        task: The task to expand. It is only read.
        window_start: First date of the window, inclusive.
        window_end: Last date of the window, inclusive.
        rule: Rule to apply when the task's frequency is Custom.

    Returns:
        Sorted occurrence dates on or after the task's base date. Empty for
        non-recurring tasks, unrecognized frequencies, Custom tasks without a
        rule, and recurring tasks with no base date.
    """
    resolved = rule_for(task, rule)
    if resolved is None:
        return []

    base = base_date(task)
    if base is None:
        logger.debug("Task %s repeats %s but has no base date; not expanding",
                     task.id, task.frequency.value)
        return []

    start = max(base, window_start)
    if start > window_end:
        return []

    series = _build_rrule(base, resolved, window_start)
    occurrences = series.between(
        datetime.combine(start, time.min),
        datetime.combine(window_end, time.min),
        inc=True,
    )
    return [occurrence.date() for occurrence in occurrences]


def project(task: Task, on: date) -> Task:
    """A copy of the task moved onto an occurrence date.

    The time of day of the base date is kept; every other field, including
    the id, is unchanged, so the projection differs from the stored record
    only in its due date.
    """
    anchor = task.due_date or task.recurrence_date
    if anchor is None:
        return replace(task, due_date=datetime.combine(on, time.min))
    return replace(task, due_date=datetime.combine(on, _utc(anchor).timetz()))
