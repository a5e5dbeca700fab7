"""
MCP wrapper for the task service.

This module exposes the task operations as MCP tools but makes HTTP calls
to the task service. It handles serialization/deserialization between the
dataclass records in task_server.models and the Pydantic wire models.
"""
from __future__ import annotations

import typing as t
import uuid
from datetime import datetime

import httpx
from fastmcp import FastMCP

# Dataclass models for the MCP interface
from task_server.models import (
    CalendarDay,
    CalendarMonth,
    CalendarWeek,
    RecurrenceRule,
    Task,
    TaskFrequency,
    TaskStatus,
)
# Pydantic models for HTTP serialization
from services.shared.config import STANDARD_TIMEOUT, TASK_SERVICE_URL
from services.shared.models import (
    Task as PydanticTask,
    CalendarMonth as PydanticCalendarMonth,
    RecurrenceRule as PydanticRecurrenceRule,
    CreateTaskRequest,
    UpdateTaskRequest,
    ShowCalendarResponse,
)


mcp = FastMCP("TaskMCPWrapper")


def _request(method: str, path: str, **kwargs: t.Any) -> httpx.Response:
    """Call the task service and raise RuntimeError on any failure."""
    try:
        with httpx.Client(timeout=STANDARD_TIMEOUT) as client:
            response = client.request(method, f"{TASK_SERVICE_URL}{path}", **kwargs)
            response.raise_for_status()
        return response

    except httpx.TimeoutException:
        raise RuntimeError(f"{method} {path} timed out after {STANDARD_TIMEOUT} seconds")
    except httpx.HTTPStatusError as e:
        raise RuntimeError(f"HTTP error from task service: {e.response.status_code} {e.response.text}")
    except httpx.HTTPError as e:
        raise RuntimeError(f"Error calling task service: {str(e)}")


def _create_task(
    name: str,
    description: t.Optional[str] = None,
    due_date: t.Optional[datetime] = None,
    frequency: str = "None",
    recurrence_date: t.Optional[datetime] = None,
) -> Task:
    """
    Create a task.

    Makes an HTTP call to the task service and returns the stored task.
    """
    request = CreateTaskRequest(
        name=name,
        description=description,
        due_date=due_date,
        frequency=frequency,
        recurrence_date=recurrence_date,
    )
    response = _request("POST", "/api/tasks", json=request.model_dump(mode="json"))
    return _pydantic_to_dataclass_task(PydanticTask(**response.json()))


def _list_tasks(
    status: t.Optional[str] = None,
    frequency: t.Optional[str] = None,
    name: t.Optional[str] = None,
    due_start_date: t.Optional[datetime] = None,
    due_end_date: t.Optional[datetime] = None,
) -> list[Task]:
    """
    List tasks, optionally filtered by status, frequency, name or due range.
    """
    params = {
        "status": status,
        "frequency": frequency,
        "name": name,
        "due_start_date": due_start_date.isoformat() if due_start_date else None,
        "due_end_date": due_end_date.isoformat() if due_end_date else None,
    }
    response = _request("GET", "/api/tasks", params={k: v for k, v in params.items() if v is not None})
    return [_pydantic_to_dataclass_task(PydanticTask(**task_data)) for task_data in response.json()]


def _get_task(task_id: str) -> Task:
    """Get a single task by id."""
    response = _request("GET", f"/api/tasks/{uuid.UUID(task_id)}")
    return _pydantic_to_dataclass_task(PydanticTask(**response.json()))


def _update_task(
    task_id: str,
    name: t.Optional[str] = None,
    description: t.Optional[str] = None,
    status: t.Optional[str] = None,
    due_date: t.Optional[datetime] = None,
    frequency: t.Optional[str] = None,
    recurrence_date: t.Optional[datetime] = None,
) -> Task:
    """
    Update a task. Arguments left as None are not changed.
    """
    request = UpdateTaskRequest(
        name=name,
        description=description,
        status=status,
        due_date=due_date,
        frequency=frequency,
        recurrence_date=recurrence_date,
    )
    response = _request(
        "PUT",
        f"/api/tasks/{uuid.UUID(task_id)}",
        json=request.model_dump(mode="json", exclude_none=True),
    )
    return _pydantic_to_dataclass_task(PydanticTask(**response.json()))


def _delete_task(task_id: str) -> bool:
    """Delete a task. Returns True once the service confirms the delete."""
    _request("DELETE", f"/api/tasks/{uuid.UUID(task_id)}")
    return True


def _set_recurrence_rule(task_id: str, unit: str, interval: int = 1, weekdays: t.Optional[list[int]] = None) -> RecurrenceRule:
    """
    Attach a custom recurrence rule to a task with the Custom frequency.
    """
    request = PydanticRecurrenceRule(unit=unit, interval=interval, weekdays=weekdays or [])
    response = _request("PUT", f"/api/tasks/{uuid.UUID(task_id)}/recurrence-rule", json=request.model_dump())
    rule = PydanticRecurrenceRule(**response.json())
    return RecurrenceRule(unit=rule.unit, interval=rule.interval, weekdays=tuple(rule.weekdays))


def _get_calendar(year: int, month: int) -> CalendarMonth:
    """
    Get the month view for a year and month.

    Returns the grid of weeks with each day's tasks and flags.
    """
    response = _request("GET", f"/api/calendar/{year}/{month}")
    return _pydantic_to_dataclass_calendar_month(PydanticCalendarMonth(**response.json()))


def _show_calendar(year: int, month: int) -> str:
    """
    Show the month view as formatted text.
    """
    response = _request("GET", f"/api/calendar/{year}/{month}/show")
    return ShowCalendarResponse(**response.json()).formatted_calendar


def _pydantic_to_dataclass_task(pydantic_task: PydanticTask) -> Task:
    """Convert Pydantic Task to dataclass Task."""
    return Task(
        id=pydantic_task.id,
        name=pydantic_task.name,
        description=pydantic_task.description,
        status=TaskStatus.from_str(pydantic_task.status),
        created_at=pydantic_task.created_at,
        updated_at=pydantic_task.updated_at,
        due_date=pydantic_task.due_date,
        frequency=TaskFrequency.from_str(pydantic_task.frequency),
        recurrence_date=pydantic_task.recurrence_date,
    )


def _pydantic_to_dataclass_calendar_month(pydantic_month: PydanticCalendarMonth) -> CalendarMonth:
    """Convert Pydantic CalendarMonth to dataclass CalendarMonth."""
    return CalendarMonth(
        year=pydantic_month.year,
        month=pydantic_month.month,
        weeks=[
            CalendarWeek(days=[
                CalendarDay(
                    date=day.date,
                    tasks=[_pydantic_to_dataclass_task(task) for task in day.tasks],
                    is_today=day.is_today,
                    is_current_month=day.is_current_month,
                    is_current_week=day.is_current_week,
                )
                for day in week.days
            ])
            for week in pydantic_month.weeks
        ],
    )


# MCP tool wrappers that call the raw functions
@mcp.tool()
def create_task(
    name: str,
    description: t.Optional[str] = None,
    due_date: t.Optional[datetime] = None,
    frequency: str = "None",
    recurrence_date: t.Optional[datetime] = None,
) -> Task:
    """Creates a task."""
    return _create_task(name, description, due_date, frequency, recurrence_date)


@mcp.tool()
def list_tasks(
    status: t.Optional[str] = None,
    frequency: t.Optional[str] = None,
    name: t.Optional[str] = None,
    due_start_date: t.Optional[datetime] = None,
    due_end_date: t.Optional[datetime] = None,
) -> list[Task]:
    """Lists tasks, optionally filtered."""
    return _list_tasks(status, frequency, name, due_start_date, due_end_date)


@mcp.tool()
def update_task(
    task_id: str,
    name: t.Optional[str] = None,
    description: t.Optional[str] = None,
    status: t.Optional[str] = None,
    due_date: t.Optional[datetime] = None,
    frequency: t.Optional[str] = None,
    recurrence_date: t.Optional[datetime] = None,
) -> Task:
    """Updates a task."""
    return _update_task(task_id, name, description, status, due_date, frequency, recurrence_date)


@mcp.tool()
def delete_task(task_id: str) -> bool:
    """Deletes a task."""
    return _delete_task(task_id)


@mcp.tool()
def get_calendar(year: int, month: int) -> CalendarMonth:
    """Gets the month calendar view."""
    return _get_calendar(year, month)


@mcp.tool()
def show_calendar(year: int, month: int) -> str:
    """Displays the month calendar as formatted text."""
    return _show_calendar(year, month)


@mcp.tool()
def get_task(task_id: str) -> Task:
    """Gets a single task by id."""
    return _get_task(task_id)


@mcp.tool()
def set_recurrence_rule(task_id: str, unit: str, interval: int = 1, weekdays: t.Optional[list[int]] = None) -> RecurrenceRule:
    """Attaches a custom recurrence rule to a task."""
    return _set_recurrence_rule(task_id, unit, interval, weekdays)
