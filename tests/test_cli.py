"""Tests for the terminal client."""
from datetime import date, datetime

import pytest
from click.testing import CliRunner
from rich.console import Console

from cli import run
from conftest import make_task, utc
from task_calendar import assemble
from task_server.models import TaskFrequency, TaskStatus


@pytest.fixture(autouse=True)
def quiet_logging(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the CLI from reconfiguring the root logger during tests."""
    monkeypatch.setattr(run, "setup_logging", lambda **kwargs: None)


def _render(renderable) -> str:
    console = Console(width=140, record=True, color_system=None)
    console.print(renderable)
    return console.export_text()


def test_truncate_title() -> None:
    assert run.truncate_title("short") == "short"
    assert run.truncate_title("a much longer task title", max_length=10) == "a much ..."


def test_month_table_has_sunday_first_columns_and_tasks() -> None:
    calendar_month = assemble(2024, 3, [make_task(name="Dentist", due_date=utc(2024, 3, 15))], today=date(2024, 3, 15))

    table = run.build_month_table(calendar_month)
    text = _render(table)

    assert [column.header for column in table.columns] == list(run.WEEKDAY_HEADERS)
    assert table.row_count == 6
    assert "March 2024" in text
    assert "Dentist" in text


def test_task_table_lists_each_task() -> None:
    tasks = [
        make_task(name="Pay rent", frequency=TaskFrequency.MONTHLY, due_date=utc(2024, 3, 1)),
        make_task(name="Someday", status=TaskStatus.IN_PROGRESS),
    ]

    text = _render(run.create_task_table(tasks))

    assert "Pay rent" in text
    assert "Monthly" in text
    assert "InProgress" in text
    assert "Fri 3/1 9:00 AM" in text


def test_format_due_without_platform_specific_padding() -> None:
    assert run.format_due(None) == "-"
    assert run.format_due(datetime(2024, 1, 5, 14, 30)) == "Fri 1/5 2:30 PM"
    assert run.format_due(datetime(2024, 11, 25, 0, 5)) == "Mon 11/25 12:05 AM"


def test_calendar_command(monkeypatch: pytest.MonkeyPatch) -> None:
    calendar_month = assemble(2024, 3, [make_task(name="Dentist", due_date=utc(2024, 3, 15))], today=date(2024, 3, 15))
    requested = []

    def fake_get_calendar(year: int, month: int):
        requested.append((year, month))
        return calendar_month

    monkeypatch.setattr(run, "_get_calendar", fake_get_calendar)

    result = CliRunner().invoke(run.main, ["calendar", "2024", "3"])

    assert result.exit_code == 0, result.output
    assert requested == [(2024, 3)]
    assert "Dentist" in result.output
    assert "Task occurrences this month: 1" in result.output


def test_calendar_command_reports_service_errors(monkeypatch: pytest.MonkeyPatch) -> None:
    def failing_get_calendar(year: int, month: int):
        raise RuntimeError("HTTP error from task service: 400 month out of range")

    monkeypatch.setattr(run, "_get_calendar", failing_get_calendar)

    result = CliRunner().invoke(run.main, ["calendar", "2024", "13"])

    assert result.exit_code == 1
    assert "400" in result.output


def test_add_command(monkeypatch: pytest.MonkeyPatch) -> None:
    calls = []

    def fake_create_task(name, description, due, frequency, recurrence_date):
        calls.append((name, frequency, due))
        return make_task(name=name)

    monkeypatch.setattr(run, "_create_task", fake_create_task)

    result = CliRunner().invoke(run.main, ["add", "Dentist", "--due", "2024-03-15", "-f", "weekly"])

    assert result.exit_code == 0, result.output
    assert calls[0][0] == "Dentist"
    assert calls[0][1].lower() == "weekly"
    assert calls[0][2].date() == date(2024, 3, 15)
    assert "Created" in result.output


def test_list_command_without_tasks(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(run, "_list_tasks", lambda **kwargs: [])

    result = CliRunner().invoke(run.main, ["list"])

    assert result.exit_code == 0
    assert "No tasks found" in result.output
