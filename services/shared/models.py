"""
Shared Pydantic models for REST API serialization.

This module contains Pydantic equivalents of the dataclass models in
task_server.models, ensuring consistent JSON serialization between the task
service and its clients.
"""
from __future__ import annotations

import datetime as dt
import typing as t
import uuid

from pydantic import BaseModel, ConfigDict, Field, field_validator

from task_server.models import TaskFrequency, TaskStatus


RuleUnit = t.Literal["daily", "weekly", "monthly", "yearly"]


def as_utc(value: t.Optional[dt.datetime]) -> t.Optional[dt.datetime]:
    """Normalize a timestamp to UTC; naive values are taken to be UTC already."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=dt.timezone.utc)
    return value.astimezone(dt.timezone.utc)


class Task(BaseModel):
    """A task as it appears on the wire."""
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    description: t.Optional[str] = None
    status: TaskStatus = TaskStatus.PENDING
    created_at: t.Optional[dt.datetime] = None
    updated_at: t.Optional[dt.datetime] = None
    due_date: t.Optional[dt.datetime] = None
    frequency: TaskFrequency = TaskFrequency.NONE
    recurrence_date: t.Optional[dt.datetime] = None

    @field_validator("created_at", "updated_at", "due_date", "recurrence_date")
    @classmethod
    def _normalize_datetime(cls, value: t.Optional[dt.datetime]) -> t.Optional[dt.datetime]:
        return as_utc(value)

    # Unknown values deserialize to the Invalid variant instead of failing
    @field_validator("status", mode="before")
    @classmethod
    def _parse_status(cls, value: t.Any) -> TaskStatus:
        return TaskStatus.from_str(value)

    @field_validator("frequency", mode="before")
    @classmethod
    def _parse_frequency(cls, value: t.Any) -> TaskFrequency:
        return TaskFrequency.from_str(value)


class CalendarDay(BaseModel):
    """One cell of the month grid."""
    model_config = ConfigDict(from_attributes=True)

    date: dt.date
    tasks: list[Task] = Field(default_factory=list)
    is_today: bool = False
    is_current_month: bool = False
    is_current_week: bool = False


class CalendarWeek(BaseModel):
    """Seven days, Sunday through Saturday."""
    model_config = ConfigDict(from_attributes=True)

    days: list[CalendarDay] = Field(default_factory=list)


class CalendarMonth(BaseModel):
    """Month view returned by GET /api/calendar/{year}/{month}."""
    model_config = ConfigDict(from_attributes=True)

    year: int
    month: int
    weeks: list[CalendarWeek] = Field(default_factory=list)


class RecurrenceRule(BaseModel):
    """
    Custom recurrence rule, e.g.:
    - {"unit": "daily", "interval": 3}
    - {"unit": "weekly", "interval": 2, "weekdays": [0, 2, 4]}
    """
    model_config = ConfigDict(from_attributes=True)

    unit: RuleUnit = "daily"
    interval: int = Field(default=1, ge=1)
    weekdays: list[int] = Field(default_factory=list)  # 0=Monday .. 6=Sunday


# Request/Response Models for API endpoints
class CreateTaskRequest(BaseModel):
    """Request model for creating a task."""
    name: str = Field(min_length=1)
    description: t.Optional[str] = None
    due_date: t.Optional[dt.datetime] = None
    frequency: TaskFrequency = TaskFrequency.NONE
    recurrence_date: t.Optional[dt.datetime] = None

    @field_validator("due_date", "recurrence_date")
    @classmethod
    def _normalize_datetime(cls, value: t.Optional[dt.datetime]) -> t.Optional[dt.datetime]:
        return as_utc(value)

    @field_validator("frequency", mode="before")
    @classmethod
    def _parse_frequency(cls, value: t.Any) -> TaskFrequency:
        return TaskFrequency.from_str(value)


class UpdateTaskRequest(BaseModel):
    """Request model for updating a task; omitted or null fields are kept."""
    name: t.Optional[str] = Field(default=None, min_length=1)
    description: t.Optional[str] = None
    status: t.Optional[TaskStatus] = None
    due_date: t.Optional[dt.datetime] = None
    frequency: t.Optional[TaskFrequency] = None
    recurrence_date: t.Optional[dt.datetime] = None

    @field_validator("due_date", "recurrence_date")
    @classmethod
    def _normalize_datetime(cls, value: t.Optional[dt.datetime]) -> t.Optional[dt.datetime]:
        return as_utc(value)

    @field_validator("status", mode="before")
    @classmethod
    def _parse_status(cls, value: t.Any) -> t.Optional[TaskStatus]:
        return None if value is None else TaskStatus.from_str(value)

    @field_validator("frequency", mode="before")
    @classmethod
    def _parse_frequency(cls, value: t.Any) -> t.Optional[TaskFrequency]:
        return None if value is None else TaskFrequency.from_str(value)


class ShowCalendarResponse(BaseModel):
    """Response model for the formatted month display."""
    formatted_calendar: str
