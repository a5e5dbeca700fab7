"""
FastAPI service for task tracking and the month calendar view.

Exposes task CRUD with filtering over an in-memory store, custom recurrence
rules, and the month view that groups tasks (and their recurring
occurrences) by date.
"""
from __future__ import annotations

import logging
import typing as t
import uuid
from contextlib import asynccontextmanager
from datetime import datetime

from fastapi import Depends, FastAPI, HTTPException, Response

from services.shared.config import LOG_DIR, LOG_LEVEL, TASK_SERVICE_HOST, TASK_SERVICE_PORT
from services.shared.models import (
    Task as PydanticTask,
    CalendarMonth as PydanticCalendarMonth,
    RecurrenceRule as PydanticRecurrenceRule,
    CreateTaskRequest,
    UpdateTaskRequest,
    ShowCalendarResponse,
    as_utc,
)
from task_calendar import InvalidArgumentError, format_month, generate_month_view
from task_server.models import (
    CalendarMonth,
    RecurrenceRule,
    TaskCreate,
    TaskFilter,
    TaskFrequency,
    TaskStatus,
    TaskUpdate,
)
from task_server.store import TaskStore

logger = logging.getLogger(__name__)


# In-memory task store shared by all requests of this process
store = TaskStore()


def get_store() -> TaskStore:
    """Dependency returning the task store."""
    return store


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize resources on startup and cleanup on shutdown."""
    logger.info("Task service starting")
    yield
    logger.info("Task service stopped")


app = FastAPI(
    title="Task Service",
    description="REST API for task management and the month calendar view",
    version="1.0.0",
    lifespan=lifespan,
)


@app.get("/health")
async def health_check():
    """Health check endpoint for container orchestration."""
    return {"status": "healthy", "service": "task-service"}


@app.post("/api/tasks", response_model=PydanticTask, status_code=201)
async def create_task(request: CreateTaskRequest, task_store: TaskStore = Depends(get_store)) -> PydanticTask:
    """
    Create a task.

    New tasks always start out Pending.
    """
    task = task_store.create(
        TaskCreate(
            name=request.name,
            description=request.description,
            due_date=request.due_date,
            frequency=request.frequency,
            recurrence_date=request.recurrence_date,
        )
    )
    return PydanticTask.model_validate(task)


@app.get("/api/tasks", response_model=list[PydanticTask])
async def list_tasks(
    status: t.Optional[str] = None,
    frequency: t.Optional[str] = None,
    name: t.Optional[str] = None,
    created_start_date: t.Optional[datetime] = None,
    created_end_date: t.Optional[datetime] = None,
    updated_start_date: t.Optional[datetime] = None,
    updated_end_date: t.Optional[datetime] = None,
    due_start_date: t.Optional[datetime] = None,
    due_end_date: t.Optional[datetime] = None,
    task_store: TaskStore = Depends(get_store),
) -> list[PydanticTask]:
    """
    List tasks, optionally filtered.

    Name matching is a case-insensitive substring match; date ranges are
    inclusive on both ends. Timestamps without an offset are read as UTC.
    """
    task_filter = TaskFilter(
        status=TaskStatus.from_str(status) if status is not None else None,
        frequency=TaskFrequency.from_str(frequency) if frequency is not None else None,
        name=name,
        created_start_date=as_utc(created_start_date),
        created_end_date=as_utc(created_end_date),
        updated_start_date=as_utc(updated_start_date),
        updated_end_date=as_utc(updated_end_date),
        due_start_date=as_utc(due_start_date),
        due_end_date=as_utc(due_end_date),
    )
    return [PydanticTask.model_validate(task) for task in task_store.fetch(task_filter)]


@app.get("/api/tasks/{task_id}", response_model=PydanticTask)
async def get_task(task_id: uuid.UUID, task_store: TaskStore = Depends(get_store)) -> PydanticTask:
    """Get a single task by id."""
    task = task_store.get(task_id)
    if task is None:
        raise HTTPException(status_code=404, detail=f"Task {task_id} not found")
    return PydanticTask.model_validate(task)


@app.put("/api/tasks/{task_id}", response_model=PydanticTask)
async def update_task(
    task_id: uuid.UUID,
    request: UpdateTaskRequest,
    task_store: TaskStore = Depends(get_store),
) -> PydanticTask:
    """
    Update a task.

    Only the fields present (and not null) in the request are changed.
    """
    task = task_store.update(task_id, TaskUpdate(**request.model_dump()))
    if task is None:
        raise HTTPException(status_code=404, detail=f"Task {task_id} not found")
    return PydanticTask.model_validate(task)


@app.delete("/api/tasks/{task_id}", status_code=204)
async def delete_task(task_id: uuid.UUID, task_store: TaskStore = Depends(get_store)) -> Response:
    """Delete a task."""
    if not task_store.delete(task_id):
        raise HTTPException(status_code=404, detail=f"Task {task_id} not found")
    return Response(status_code=204)


@app.put("/api/tasks/{task_id}/recurrence-rule", response_model=PydanticRecurrenceRule)
async def set_recurrence_rule(
    task_id: uuid.UUID,
    request: PydanticRecurrenceRule,
    task_store: TaskStore = Depends(get_store),
) -> PydanticRecurrenceRule:
    """
    Attach a custom recurrence rule to a task.

    The rule is used by the calendar view when the task's frequency is Custom.
    """
    try:
        rule = RecurrenceRule(unit=request.unit, interval=request.interval, weekdays=tuple(request.weekdays))
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))

    if task_store.set_rule(task_id, rule) is None:
        raise HTTPException(status_code=404, detail=f"Task {task_id} not found")
    return PydanticRecurrenceRule.model_validate(rule)


def _month_view(year: int, month: int, task_store: TaskStore) -> CalendarMonth:
    tasks = task_store.fetch()
    try:
        return generate_month_view(year, month, tasks, custom_rules=task_store.rules())
    except InvalidArgumentError as e:
        raise HTTPException(status_code=400, detail=str(e))


@app.get("/api/calendar/{year}/{month}", response_model=PydanticCalendarMonth)
async def get_calendar(year: int, month: int, task_store: TaskStore = Depends(get_store)) -> PydanticCalendarMonth:
    """
    Get the month view for a year and month.

    Returns 4-6 Sunday-start weeks; days from adjacent months pad the first
    and last week and still show their own tasks.
    """
    return PydanticCalendarMonth.model_validate(_month_view(year, month, task_store))


@app.get("/api/calendar/{year}/{month}/show", response_model=ShowCalendarResponse)
async def show_calendar(year: int, month: int, task_store: TaskStore = Depends(get_store)) -> ShowCalendarResponse:
    """
    Show the month view as formatted text.

    Lists each day of the month that has tasks.
    """
    return ShowCalendarResponse(formatted_calendar=format_month(_month_view(year, month, task_store)))


if __name__ == "__main__":
    import uvicorn

    from services.shared.logging_setup import setup_logging

    setup_logging(level=LOG_LEVEL, log_dir=LOG_DIR)
    uvicorn.run(app, host=TASK_SERVICE_HOST, port=TASK_SERVICE_PORT, log_config=None)
