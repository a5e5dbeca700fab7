# -*- coding: utf-8 -*-
"""Shared fixtures for the task service tests."""
from __future__ import annotations

import typing as t
from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from services.task_service.app import app, get_store
from task_server.models import Task, TaskFrequency, TaskStatus
from task_server.store import TaskStore


def utc(year: int, month: int, day: int, hour: int = 9, minute: int = 0) -> datetime:
    """Shorthand for an aware UTC datetime."""
    return datetime(year, month, day, hour, minute, tzinfo=timezone.utc)


def make_task(
    name: str = "Task",
    due_date: t.Optional[datetime] = None,
    frequency: TaskFrequency = TaskFrequency.NONE,
    recurrence_date: t.Optional[datetime] = None,
    status: TaskStatus = TaskStatus.PENDING,
) -> Task:
    """Build a task record the way the store would."""
    now = utc(2024, 1, 1)
    return Task(
        name=name,
        status=status,
        created_at=now,
        updated_at=now,
        due_date=due_date,
        frequency=frequency,
        recurrence_date=recurrence_date,
    )


@pytest.fixture()
def store() -> TaskStore:
    """A fresh, empty task store."""
    return TaskStore()


@pytest.fixture()
def client(store: TaskStore) -> t.Iterator[TestClient]:
    """TestClient for the task service, wired to the per-test store."""
    app.dependency_overrides[get_store] = lambda: store
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
