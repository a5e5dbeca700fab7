# -*- coding: utf-8 -*-
"""Terminal client for the task service."""
import logging
import typing as t
from datetime import date, datetime

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from mcp_wrappers.tasks.mcp_service import (
    _create_task, _list_tasks, _update_task, _delete_task, _get_calendar,
)
from services.shared.config import LOG_DIR, TASK_SERVICE_URL
from services.shared.logging_setup import setup_logging
from task_server.models import CalendarMonth, Task, TaskStatus

console = Console()
logger = logging.getLogger(__name__)

WEEKDAY_HEADERS = ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")

STATUS_STYLE = {
    TaskStatus.PENDING: "white",
    TaskStatus.IN_PROGRESS: "yellow",
    TaskStatus.COMPLETED: "green strike",
    TaskStatus.CANCELLED: "dim strike",
}


def truncate_title(title: str, max_length: int = 14) -> str:
    """Truncate title to max_length characters, adding ellipsis if needed."""
    if len(title) <= max_length:
        return title
    return title[:max_length-3] + "..."


def format_due(due: t.Optional[datetime]) -> str:
    """Render a due date as 'Mon 1/15 2:30 PM', or a dash when unset."""
    if due is None:
        return "-"
    hour = due.hour % 12 or 12
    return f"{due:%a} {due.month}/{due.day} {hour}:{due:%M %p}"


def build_month_table(calendar_month: CalendarMonth) -> Table:
    """Create a Sunday-start grid table for a month view."""
    title = date(calendar_month.year, calendar_month.month, 1).strftime("%B %Y")
    table = Table(title=f"📅 {title}", show_header=True, header_style="bold magenta", show_lines=True)
    for header in WEEKDAY_HEADERS:
        table.add_column(header, width=16, vertical="top")

    for week in calendar_month.weeks:
        cells = []
        for day in week.days:
            cell = Text()
            if day.is_today:
                cell.append(f"{day.date.day:>2}", style="bold reverse cyan")
            elif not day.is_current_month:
                cell.append(f"{day.date.day:>2}", style="dim")
            else:
                cell.append(f"{day.date.day:>2}", style="bold")
            for task in day.tasks:
                cell.append("\n• ")
                cell.append(truncate_title(task.name), style=STATUS_STYLE.get(task.status, "red"))
            cells.append(cell)
        is_current_week = any(day.is_current_week for day in week.days)
        table.add_row(*cells, style="on grey11" if is_current_week else None)

    return table


def create_task_table(tasks: list[Task]) -> Table:
    """Create a summary table for tasks."""
    table = Table(title="✅ Tasks", show_header=True, header_style="bold magenta")
    table.add_column("ID", style="dim", no_wrap=True)
    table.add_column("Name", style="white")
    table.add_column("Status", style="cyan")
    table.add_column("Due", style="yellow")
    table.add_column("Repeats", style="green")

    for task in tasks:
        table.add_row(
            str(task.id),
            task.name,
            task.status.value,
            format_due(task.due_date),
            task.frequency.value,
        )
    return table


def _fail(message: str) -> t.NoReturn:
    console.print(f"[red]Error:[/red] {message}")
    raise SystemExit(1)


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
def main(verbose: bool) -> None:
    """Manage tasks and view them on a month calendar.

    Talks to the task service configured by TASK_SERVICE_URL.
    """
    setup_logging(level=logging.DEBUG if verbose else logging.WARNING, log_dir=LOG_DIR)
    logger.debug("Using task service at %s", TASK_SERVICE_URL)


@main.command()
@click.argument("name")
@click.option("--description", "-d", default=None, help="Longer description.")
@click.option("--due", type=click.DateTime(), default=None, help="Due date/time.")
@click.option(
    "--frequency", "-f",
    type=click.Choice(["None", "Daily", "Weekly", "Monthly", "Yearly", "Custom"], case_sensitive=False),
    default="None", help="How often the task repeats.",
)
@click.option("--recurrence-date", type=click.DateTime(), default=None, help="Anchor date for repeating tasks.")
def add(name: str, description: t.Optional[str], due: t.Optional[datetime], frequency: str,
        recurrence_date: t.Optional[datetime]) -> None:
    """Create a task called NAME."""
    try:
        task = _create_task(name, description, due, frequency, recurrence_date)
    except RuntimeError as e:
        _fail(str(e))
    console.print(f"[bold green]✓[/bold green] Created [bold]{task.name}[/bold] ({task.id})")


@main.command("list")
@click.option("--status", "-s", default=None, help="Only tasks with this status.")
@click.option("--frequency", "-f", default=None, help="Only tasks with this frequency.")
@click.option("--name", "-n", default=None, help="Only tasks whose name contains this text.")
def list_command(status: t.Optional[str], frequency: t.Optional[str], name: t.Optional[str]) -> None:
    """List tasks."""
    try:
        tasks = _list_tasks(status=status, frequency=frequency, name=name)
    except RuntimeError as e:
        _fail(str(e))
    if not tasks:
        console.print("✅ No tasks found.")
        return
    console.print(create_task_table(tasks))


@main.command()
@click.argument("task_id")
def done(task_id: str) -> None:
    """Mark task TASK_ID as completed."""
    try:
        task = _update_task(task_id, status=TaskStatus.COMPLETED.value)
    except (RuntimeError, ValueError) as e:
        _fail(str(e))
    console.print(f"[bold green]✓[/bold green] Completed [bold]{task.name}[/bold]")


@main.command()
@click.argument("task_id")
def rm(task_id: str) -> None:
    """Delete task TASK_ID."""
    try:
        _delete_task(task_id)
    except (RuntimeError, ValueError) as e:
        _fail(str(e))
    console.print(f"[bold green]✓[/bold green] Deleted {task_id}")


@main.command()
@click.argument("year", type=int, required=False)
@click.argument("month", type=int, required=False)
def calendar(year: t.Optional[int], month: t.Optional[int]) -> None:
    """Show the month calendar for YEAR MONTH (default: this month)."""
    today = date.today()
    year = year if year is not None else today.year
    month = month if month is not None else today.month

    try:
        with console.status("[bold green]Fetching calendar..."):
            calendar_month = _get_calendar(year, month)
    except RuntimeError as e:
        _fail(str(e))

    console.print(build_month_table(calendar_month))

    occurrences = sum(
        len(day.tasks)
        for week in calendar_month.weeks
        for day in week.days
        if day.is_current_month
    )
    stats_text = Text()
    stats_text.append("Task occurrences this month: ", style="white")
    stats_text.append(f"{occurrences}", style="bold green")
    console.print(Panel(stats_text, title="📊 Statistics", border_style="green"))


if __name__ == "__main__":
    main()
