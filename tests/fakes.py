# tests/fakes.py

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from taskboard.schemas import Task, TaskPriority, TaskStatus
from taskboard.storage import MemoryBackend


class FakeClock:
    """
    Controllable clock for the task store.

    Returns the same instant until advanced explicitly.
    """

    def __init__(self, start: datetime) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now = self.now + timedelta(**kwargs)


class FailingBackend(MemoryBackend):
    """MemoryBackend that raises on demand.

    ``fail_writes`` breaks ``set_item`` and ``remove_item``, ``fail_reads``
    breaks ``get_item``.
    """

    def __init__(self) -> None:
        super().__init__()
        self.fail_writes = False
        self.fail_reads = False

    def get_item(self, key: str) -> str | None:
        if self.fail_reads:
            raise RuntimeError("disk unreadable")
        return super().get_item(key)

    def set_item(self, key: str, value: str) -> None:
        if self.fail_writes:
            raise RuntimeError("disk full")
        super().set_item(key, value)

    def remove_item(self, key: str) -> None:
        if self.fail_writes:
            raise RuntimeError("disk full")
        super().remove_item(key)


NOW = datetime(2024, 3, 15, 12, 0, tzinfo=timezone.utc)


def make_task(
    task_id: str,
    *,
    title: str = "Task",
    description: str = "",
    status: TaskStatus = TaskStatus.PENDING,
    priority: TaskPriority = TaskPriority.MEDIUM,
    assignee_id: str = "u-john",
    deadline: datetime = NOW + timedelta(days=7),
    created_at: datetime = NOW,
    updated_at: datetime | None = None,
) -> Task:
    return Task(
        id=task_id,
        title=title,
        description=description,
        status=status,
        priority=priority,
        assignee_id=assignee_id,
        assignee_name="",
        created_by_id="u-admin",
        created_by_name="Ada Admin",
        deadline=deadline,
        created_at=created_at,
        updated_at=updated_at or created_at,
    )
