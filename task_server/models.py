"""
Data models for the task server and its calendar view.

This module contains the dataclasses used to represent tasks, the custom
recurrence rules attached to them, and the month grid produced by the
calendar view.
"""
from __future__ import annotations

import typing as t
import uuid
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum


class TaskStatus(Enum):
    """Lifecycle status of a task."""
    PENDING = "Pending"
    IN_PROGRESS = "InProgress"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"
    INVALID = "Invalid"

    @classmethod
    def from_str(cls, value: t.Any) -> TaskStatus:
        """Parse a wire or storage value, falling back to INVALID.

        Accepts the wire form ("InProgress"), the storage form ("in_progress")
        and any case variation of either.
        """
        if isinstance(value, cls):
            return value
        return _lookup(cls, value, cls.INVALID)


class TaskFrequency(Enum):
    """How often a task repeats."""
    NONE = "None"
    DAILY = "Daily"
    WEEKLY = "Weekly"
    MONTHLY = "Monthly"
    YEARLY = "Yearly"
    CUSTOM = "Custom"
    INVALID = "Invalid"

    @classmethod
    def from_str(cls, value: t.Any) -> TaskFrequency:
        """Parse a wire or storage value, falling back to INVALID."""
        if isinstance(value, cls):
            return value
        if value is None:
            return cls.NONE
        return _lookup(cls, value, cls.INVALID)


def _lookup(enum_cls, value: t.Any, default):
    key = str(value).replace("_", "").replace("-", "").replace(" ", "").lower()
    for member in enum_cls:
        if member.value.lower() == key:
            return member
    return default


RuleUnit = t.Literal["daily", "weekly", "monthly", "yearly"]


@dataclass(frozen=True)
class RecurrenceRule:
    """
    Caller-supplied rule for tasks with the Custom frequency, e.g.:
    - every 3 days:              RecurrenceRule("daily", interval=3)
    - every other Mon/Wed/Fri:   RecurrenceRule("weekly", 2, (0, 2, 4))
    """
    unit: RuleUnit = "daily"
    interval: int = 1
    weekdays: tuple[int, ...] = ()  # 0=Monday .. 6=Sunday, weekly rules only

    def __post_init__(self) -> None:
        if self.unit not in ("daily", "weekly", "monthly", "yearly"):
            raise ValueError(f"Unknown recurrence unit: {self.unit!r}")
        if self.interval < 1:
            raise ValueError(f"Recurrence interval must be positive, got {self.interval}")
        if any(day not in range(7) for day in self.weekdays):
            raise ValueError(f"Weekdays must be within 0..6, got {self.weekdays}")
        if self.weekdays and self.unit != "weekly":
            raise ValueError("Weekdays can only be combined with a weekly unit")


@dataclass
class Task:
    """Represents a task with its status, due date and recurrence settings."""
    name: str
    id: uuid.UUID = field(default_factory=uuid.uuid4)
    description: t.Optional[str] = None
    status: TaskStatus = TaskStatus.PENDING
    created_at: t.Optional[datetime] = None
    updated_at: t.Optional[datetime] = None
    due_date: t.Optional[datetime] = None
    frequency: TaskFrequency = TaskFrequency.NONE
    recurrence_date: t.Optional[datetime] = None


@dataclass
class TaskCreate:
    """Fields a client supplies when creating a task."""
    name: str
    description: t.Optional[str] = None
    due_date: t.Optional[datetime] = None
    frequency: TaskFrequency = TaskFrequency.NONE
    recurrence_date: t.Optional[datetime] = None


@dataclass
class TaskUpdate:
    """Partial update; fields left as None are not changed."""
    name: t.Optional[str] = None
    description: t.Optional[str] = None
    status: t.Optional[TaskStatus] = None
    due_date: t.Optional[datetime] = None
    frequency: t.Optional[TaskFrequency] = None
    recurrence_date: t.Optional[datetime] = None


@dataclass
class TaskFilter:
    """Predicates for querying the task store. None means "don't filter"."""
    status: t.Optional[TaskStatus] = None
    frequency: t.Optional[TaskFrequency] = None
    name: t.Optional[str] = None
    created_start_date: t.Optional[datetime] = None
    created_end_date: t.Optional[datetime] = None
    updated_start_date: t.Optional[datetime] = None
    updated_end_date: t.Optional[datetime] = None
    due_start_date: t.Optional[datetime] = None
    due_end_date: t.Optional[datetime] = None


@dataclass
class CalendarDay:
    """One grid cell: a date, the tasks landing on it and its context flags."""
    date: date
    tasks: list[Task] = field(default_factory=list)
    is_today: bool = False
    is_current_month: bool = False
    is_current_week: bool = False


@dataclass
class CalendarWeek:
    """Seven days, Sunday through Saturday."""
    days: list[CalendarDay] = field(default_factory=list)


@dataclass
class CalendarMonth:
    """The month view returned for a requested (year, month)."""
    year: int
    month: int
    weeks: list[CalendarWeek] = field(default_factory=list)
