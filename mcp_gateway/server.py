"""
MCP Gateway Server - Unified entry point for the task service tools.

This server imports the raw functions from the MCP wrapper and registers them
with a single FastMCP instance, routing every tool call to the task service
via HTTP.
"""
from __future__ import annotations

import logging
import typing as t
from datetime import datetime

from fastmcp import FastMCP

# Import the raw functions from the MCP wrapper (not the decorated versions)
# This allows us to register them with our own unified FastMCP instance
from mcp_wrappers.tasks.mcp_service import (
    _create_task, _list_tasks, _get_task, _update_task, _delete_task,
    _set_recurrence_rule, _get_calendar, _show_calendar,
)
from services.shared.config import LOG_DIR, LOG_LEVEL, TASK_SERVICE_URL

# Import models for type hints
from task_server.models import CalendarMonth, RecurrenceRule, Task

logger = logging.getLogger(__name__)

# Create the unified MCP server
mcp = FastMCP("TaskCalendarGateway")


def get_service_status() -> dict[str, str]:
    """
    Get the status of the gateway and the task service it calls.
    """
    return {
        "task_service": TASK_SERVICE_URL,
        "gateway_status": "running",
    }


# Task Service Tools
@mcp.tool()
def create_task(
    name: str,
    description: t.Optional[str] = None,
    due_date: t.Optional[datetime] = None,
    frequency: str = "None",
    recurrence_date: t.Optional[datetime] = None,
) -> Task:
    """Creates a task. Frequency is one of None, Daily, Weekly, Monthly, Yearly, Custom."""
    return _create_task(name, description, due_date, frequency, recurrence_date)


@mcp.tool()
def list_tasks(
    status: t.Optional[str] = None,
    frequency: t.Optional[str] = None,
    name: t.Optional[str] = None,
    due_start_date: t.Optional[datetime] = None,
    due_end_date: t.Optional[datetime] = None,
) -> list[Task]:
    """Lists tasks, optionally filtered by status, frequency, name or due range."""
    return _list_tasks(status, frequency, name, due_start_date, due_end_date)


@mcp.tool()
def get_task(task_id: str) -> Task:
    """Gets a single task by id."""
    return _get_task(task_id)


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
    """Updates a task; omitted fields are left unchanged."""
    return _update_task(task_id, name, description, status, due_date, frequency, recurrence_date)


@mcp.tool()
def delete_task(task_id: str) -> bool:
    """Deletes a task."""
    return _delete_task(task_id)


@mcp.tool()
def set_recurrence_rule(task_id: str, unit: str, interval: int = 1, weekdays: t.Optional[list[int]] = None) -> RecurrenceRule:
    """Attaches a custom recurrence rule (daily/weekly/monthly/yearly, every N) to a Custom task."""
    return _set_recurrence_rule(task_id, unit, interval, weekdays)


@mcp.tool()
def get_calendar(year: int, month: int) -> CalendarMonth:
    """Gets the month calendar view with tasks grouped by date."""
    return _get_calendar(year, month)


@mcp.tool()
def show_calendar(year: int, month: int) -> str:
    """Displays the month calendar as formatted text."""
    return _show_calendar(year, month)


@mcp.tool()
def get_gateway_info() -> dict[str, str]:
    """
    Get information about the MCP Gateway and the task service.

    This tool provides status information about the gateway and the
    URL of the task service it connects to.
    """
    return get_service_status()


if __name__ == "__main__":
    from services.shared.logging_setup import setup_logging

    setup_logging(level=LOG_LEVEL, log_dir=LOG_DIR)
    logger.info("Starting MCP Gateway Server, task service at %s", TASK_SERVICE_URL)
    mcp.run()
