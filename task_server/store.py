# -*- coding: utf-8 -*-
import logging
import typing as t
import uuid
from dataclasses import replace
from datetime import datetime, timezone

from .models import RecurrenceRule, Task, TaskCreate, TaskFilter, TaskFrequency, TaskStatus, TaskUpdate

logger = logging.getLogger(__name__)


# In-memory storage for tasks and their custom recurrence rules
# In a real application, this would be replaced with a persistent database


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _in_range(value: t.Optional[datetime], start: t.Optional[datetime], end: t.Optional[datetime]) -> bool:
    """Inclusive range check; a missing value only passes when no bound is set."""
    if start is None and end is None:
        return True
    if value is None:
        return False
    if start is not None and value < start:
        return False
    if end is not None and value > end:
        return False
    return True


def matches(task: Task, task_filter: TaskFilter) -> bool:
    """Check a task against every predicate set on the filter.

    :param task: The task to test.
    :param task_filter: Predicates to apply; unset fields are ignored.
    :return: True when all supplied predicates hold.
    """
    if task_filter.status is not None and task.status != task_filter.status:
        return False
    if task_filter.frequency is not None and task.frequency != task_filter.frequency:
        return False
    if task_filter.name is not None and task_filter.name.lower() not in task.name.lower():
        return False
    return (
        _in_range(task.created_at, task_filter.created_start_date, task_filter.created_end_date)
        and _in_range(task.updated_at, task_filter.updated_start_date, task_filter.updated_end_date)
        and _in_range(task.due_date, task_filter.due_start_date, task_filter.due_end_date)
    )


class TaskStore:
    """Keeps tasks keyed by id, in creation order."""

    def __init__(self, clock: t.Callable[[], datetime] = _utcnow) -> None:
        self._tasks: dict[uuid.UUID, Task] = {}
        self._rules: dict[uuid.UUID, RecurrenceRule] = {}
        self._clock = clock

    def __len__(self) -> int:
        return len(self._tasks)

    def create(self, task_create: TaskCreate) -> Task:
        """Adds a new pending task.

        :param task_create: The client-supplied fields.
        :return: The stored task.
        """
        now = self._clock()
        task = Task(
            id=uuid.uuid4(),
            name=task_create.name,
            description=task_create.description,
            status=TaskStatus.PENDING,
            created_at=now,
            updated_at=now,
            due_date=task_create.due_date,
            frequency=task_create.frequency,
            recurrence_date=task_create.recurrence_date,
        )
        self._tasks[task.id] = task
        logger.info("Created task %s (%s)", task.id, task.name)
        return task

    def get(self, task_id: uuid.UUID) -> t.Optional[Task]:
        return self._tasks.get(task_id)

    def fetch(self, task_filter: t.Optional[TaskFilter] = None) -> list[Task]:
        """Returns every task, or those matching the filter.

        :param task_filter: Optional predicates to apply.
        :return: Matching tasks in creation order.
        """
        tasks = list(self._tasks.values())
        if task_filter is None:
            return tasks
        return [task for task in tasks if matches(task, task_filter)]

    def update(self, task_id: uuid.UUID, task_update: TaskUpdate) -> t.Optional[Task]:
        """Applies the non-None fields of an update.

        :param task_id: The task to update.
        :param task_update: Fields to change.
        :return: The updated task, or None if the id is unknown.
        """
        task = self._tasks.get(task_id)
        if task is None:
            return None

        changes = {
            name: value
            for name, value in vars(task_update).items()
            if value is not None
        }
        if not changes:
            return task

        updated = replace(task, updated_at=self._clock(), **changes)
        self._tasks[task_id] = updated
        logger.info("Updated task %s: %s", task_id, ", ".join(sorted(changes)))
        return updated

    def delete(self, task_id: uuid.UUID) -> bool:
        """Removes a task and any custom rule attached to it.

        :param task_id: The task to delete.
        :return: True if a task was removed.
        """
        self._rules.pop(task_id, None)
        if self._tasks.pop(task_id, None) is None:
            return False
        logger.info("Deleted task %s", task_id)
        return True

    def set_rule(self, task_id: uuid.UUID, rule: RecurrenceRule) -> t.Optional[Task]:
        """Attaches a custom recurrence rule to an existing task.

        :param task_id: The task the rule applies to.
        :param rule: The rule used when the task's frequency is Custom.
        :return: The task, or None if the id is unknown.
        """
        task = self._tasks.get(task_id)
        if task is None:
            return None
        if task.frequency != TaskFrequency.CUSTOM:
            logger.warning("Task %s has frequency %s; rule is stored but unused until it is Custom",
                           task_id, task.frequency.value)
        self._rules[task_id] = rule
        return task

    def rules(self) -> dict[uuid.UUID, RecurrenceRule]:
        return dict(self._rules)
