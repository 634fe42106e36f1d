"""Aggregates, deadline checks and sort orders over task lists.

Every function here is pure: it takes the tasks (and ``now`` where time
matters) and returns a new value without touching any store.
"""

import enum
from collections import Counter
from datetime import datetime, timedelta
from typing import Dict, Iterable, List, Optional

from pydantic import BaseModel

from .schemas import Role, Task, TaskPriority, TaskStatus, User
from .schemas.base import as_utc, utcnow

APPROACHING_WINDOW = timedelta(days=2)


class SortOrder(str, enum.Enum):
    NEWEST = "newest"
    OLDEST = "oldest"
    DEADLINE = "deadline"
    PRIORITY = "priority"
    STATUS = "status"


PRIORITY_RANK = {TaskPriority.HIGH: 0, TaskPriority.MEDIUM: 1, TaskPriority.LOW: 2}
STATUS_RANK = {TaskStatus.PENDING: 0, TaskStatus.IN_PROGRESS: 1, TaskStatus.COMPLETED: 2}


class EmployeeProductivity(BaseModel):
    user_id: str
    name: str
    total_tasks: int
    completed_tasks: int
    pending_tasks: int
    in_progress_tasks: int
    productivity_rate: int


def count_by_status(tasks: Iterable[Task]) -> Dict[str, int]:
    return dict(Counter(t.status.value for t in tasks))


def count_by_priority(tasks: Iterable[Task]) -> Dict[str, int]:
    return dict(Counter(t.priority.value for t in tasks))


def _now(now: Optional[datetime]) -> datetime:
    return as_utc(now) if now is not None else utcnow()


def is_deadline_past(deadline: datetime, now: Optional[datetime] = None) -> bool:
    return as_utc(deadline) < _now(now)


def is_deadline_approaching(deadline: datetime, now: Optional[datetime] = None) -> bool:
    """True when the deadline falls within the next two days and has not passed."""
    now = _now(now)
    deadline = as_utc(deadline)
    return deadline <= now + APPROACHING_WINDOW and not is_deadline_past(deadline, now)


def sort_tasks(tasks: Iterable[Task], sort_by: str) -> List[Task]:
    """Return a sorted copy; ties keep their input order.

    An unknown ``sort_by`` returns the tasks unchanged.
    """
    tasks = list(tasks)
    try:
        order = SortOrder(sort_by)
    except ValueError:
        return tasks

    if order == SortOrder.NEWEST:
        return sorted(tasks, key=lambda t: t.created_at, reverse=True)
    if order == SortOrder.OLDEST:
        return sorted(tasks, key=lambda t: t.created_at)
    if order == SortOrder.DEADLINE:
        return sorted(tasks, key=lambda t: t.deadline)
    if order == SortOrder.PRIORITY:
        return sorted(tasks, key=lambda t: PRIORITY_RANK[t.priority])
    return sorted(tasks, key=lambda t: STATUS_RANK[t.status])


def overdue_tasks(tasks: Iterable[Task], now: Optional[datetime] = None) -> List[Task]:
    now = _now(now)
    return [
        t for t in tasks
        if t.status != TaskStatus.COMPLETED and is_deadline_past(t.deadline, now)
    ]


def completed_today(tasks: Iterable[Task], now: Optional[datetime] = None) -> List[Task]:
    today = _now(now).date()
    return [
        t for t in tasks
        if t.status == TaskStatus.COMPLETED and t.updated_at.date() == today
    ]


def tasks_for_assignee(tasks: Iterable[Task], user_id: str) -> List[Task]:
    return [t for t in tasks if t.assignee_id == user_id]


def recent_tasks(tasks: Iterable[Task], limit: int = 5) -> List[Task]:
    return sort_tasks(tasks, SortOrder.NEWEST)[:limit]


def _percent(part: int, total: int) -> int:
    if total == 0:
        return 0
    # Half rounds up.
    return int(part * 100 / total + 0.5)


def employee_productivity(users: Iterable[User], tasks: Iterable[Task]) -> List[EmployeeProductivity]:
    tasks = list(tasks)
    report = []
    for user in users:
        if user.role != Role.EMPLOYEE:
            continue
        assigned = tasks_for_assignee(tasks, user.id)
        counts = count_by_status(assigned)
        completed = counts.get(TaskStatus.COMPLETED.value, 0)
        report.append(
            EmployeeProductivity(
                user_id=user.id,
                name=user.name,
                total_tasks=len(assigned),
                completed_tasks=completed,
                pending_tasks=counts.get(TaskStatus.PENDING.value, 0),
                in_progress_tasks=counts.get(TaskStatus.IN_PROGRESS.value, 0),
                productivity_rate=_percent(completed, len(assigned)),
            )
        )
    return report


def filter_users(users: Iterable[User], role: Optional[str] = None, search: Optional[str] = None) -> List[User]:
    result = list(users)
    if role and role != "all":
        result = [u for u in result if u.role == role]
    if search:
        needle = search.lower()
        result = [u for u in result if needle in u.name.lower() or needle in u.email.lower()]
    return result


def can_edit_task(task: Task, user: Optional[User]) -> bool:
    if user is None:
        return False
    return user.role == Role.ADMIN or user.id == task.assignee_id
