import logging
from datetime import datetime
from typing import Callable, Iterable, List, Optional, Tuple, Union

from .identity import IdentityProvider, generate_id
from .schemas import (
    Comment,
    ErrorKind,
    Notification,
    OperationResult,
    Role,
    Task,
    TaskFilter,
    TaskFormData,
    TaskStatus,
    TaskUpdate,
    User,
)
from .schemas.base import utcnow
from .storage import TASKS, DocumentStorage, validate_records

logger = logging.getLogger(__name__)

ALL = "all"

Clock = Callable[[], datetime]


def _active(value: Optional[str]) -> bool:
    return bool(value) and value != ALL


def filter_tasks(tasks: Iterable[Task], task_filter: TaskFilter, viewer: Optional[User]) -> List[Task]:
    """Apply ``task_filter`` and the viewer's role restriction.

    Employees only ever see tasks assigned to them, whatever the assignee
    filter says.
    """
    result = list(tasks)

    if _active(task_filter.status):
        result = [t for t in result if t.status == task_filter.status]

    if _active(task_filter.priority):
        result = [t for t in result if t.priority == task_filter.priority]

    if _active(task_filter.assignee_id):
        result = [t for t in result if t.assignee_id == task_filter.assignee_id]

    if task_filter.search:
        needle = task_filter.search.lower()
        result = [
            t for t in result
            if needle in t.title.lower() or needle in t.description.lower()
        ]

    if viewer is not None and viewer.role == Role.EMPLOYEE:
        result = [t for t in result if t.assignee_id == viewer.id]

    return result


def _get_update_data(data: Union[TaskFormData, TaskUpdate]) -> dict:
    # A full form replaces every editable field, defaults included.
    if isinstance(data, TaskFormData):
        return data.model_dump()
    return data.model_dump(exclude_unset=True, exclude_none=True)


class TaskStore:
    """In-memory task collection backed by ``DocumentStorage``.

    Mutations write to storage first and only then replace the in-memory
    snapshot, so ``get_task`` right after a successful call sees the new value.
    """

    def __init__(
        self,
        storage: DocumentStorage,
        identity: IdentityProvider,
        clock: Clock = utcnow,
    ) -> None:
        self._storage = storage
        self._identity = identity
        self._clock = clock
        self._tasks: Tuple[Task, ...] = ()
        self._filter = TaskFilter()
        self.loading = False

    # ---- views ----

    @property
    def tasks(self) -> List[Task]:
        return list(self._tasks)

    @property
    def filter(self) -> TaskFilter:
        return self._filter

    def set_filter(self, task_filter: TaskFilter) -> None:
        self._filter = task_filter

    @property
    def filtered_tasks(self) -> List[Task]:
        return filter_tasks(self._tasks, self._filter, self._identity.user)

    def get_task(self, task_id: str) -> Optional[Task]:
        for task in self._tasks:
            if task.id == task_id:
                return task
        return None

    # ---- helpers ----

    def fetch_tasks(self) -> None:
        self.loading = True
        try:
            self._tasks = tuple(validate_records(Task, self._storage.get(TASKS), TASKS))
        finally:
            self.loading = False
        logger.debug("Loaded %d tasks", len(self._tasks))

    def _stored_task(self, task_id: str) -> Optional[Task]:
        record = self._storage.find(TASKS, task_id)
        if record is None:
            return None
        found = validate_records(Task, [record], TASKS)
        return found[0] if found else None

    def _assignee_name(self, assignee_id: str) -> str:
        user = self._identity.get_user(assignee_id)
        return user.name if user is not None else ""

    def _commit(self, task: Task) -> None:
        self._storage.put(TASKS, task.to_record())
        replaced = False
        tasks = []
        for existing in self._tasks:
            if existing.id == task.id:
                tasks.append(task)
                replaced = True
            else:
                tasks.append(existing)
        if not replaced:
            tasks.append(task)
        self._tasks = tuple(tasks)

    def _notify(self, user_id: str, message: str) -> None:
        notification = Notification(id=generate_id(), message=message, created_at=self._clock())
        try:
            self._storage.add_notification(user_id, notification)
        except Exception:
            logger.exception("Failed to store notification for user_id=%s", user_id)

    # ---- mutations ----

    def create_task(self, data: TaskFormData) -> OperationResult:
        """Create a task assigned to ``data.assignee_id``, authored by the current user.

        In addition to the stored task, the assignee gets a "New task assigned"
        notification when someone else created the task. The notification is an
        extra on top of the plain create; a failure to write it is only logged.
        """
        user = self._identity.user
        if user is None:
            return OperationResult.fail(
                ErrorKind.AUTHORIZATION, "You must be logged in to create a task."
            )

        try:
            now = self._clock()
            task = Task(
                id=generate_id(),
                title=data.title,
                description=data.description,
                status=data.status,
                priority=data.priority,
                assignee_id=data.assignee_id,
                assignee_name=self._assignee_name(data.assignee_id),
                created_by_id=user.id,
                created_by_name=user.name,
                deadline=data.deadline,
                created_at=now,
                updated_at=now,
                comments=(),
            )
            self._commit(task)
        except Exception:
            logger.exception("Failed to create task title=%r", data.title)
            return OperationResult.fail(ErrorKind.UNEXPECTED, "Failed to create task.")

        logger.info("Task created id=%s assignee=%s by=%s", task.id, task.assignee_id, user.id)
        if task.assignee_id and task.assignee_id != user.id:
            self._notify(task.assignee_id, f"New task assigned: {task.title}")
        return OperationResult.ok("Task created successfully!", task_id=task.id)

    def update_task(self, task_id: str, data: Union[TaskFormData, TaskUpdate]) -> OperationResult:
        try:
            existing = self._stored_task(task_id)
            if existing is None:
                return OperationResult.fail(ErrorKind.NOT_FOUND, "Task not found.")

            changes = _get_update_data(data)
            assignee_id = changes.get("assignee_id", existing.assignee_id)
            changes["assignee_name"] = self._assignee_name(assignee_id)
            changes["updated_at"] = self._clock()
            self._commit(existing.model_copy(update=changes))
        except Exception:
            logger.exception("Failed to update task id=%s", task_id)
            return OperationResult.fail(ErrorKind.UNEXPECTED, "Failed to update task.")

        logger.info("Task updated id=%s fields=%s", task_id, sorted(changes))
        return OperationResult.ok("Task updated successfully!")

    def delete_task(self, task_id: str) -> OperationResult:
        try:
            self._storage.delete(TASKS, task_id)
            self._tasks = tuple(t for t in self._tasks if t.id != task_id)
        except Exception:
            logger.exception("Failed to delete task id=%s", task_id)
            return OperationResult.fail(ErrorKind.UNEXPECTED, "Failed to delete task.")

        logger.info("Task deleted id=%s", task_id)
        return OperationResult.ok("Task deleted successfully!")

    def update_task_status(self, task_id: str, status: TaskStatus) -> OperationResult:
        try:
            existing = self._stored_task(task_id)
            if existing is None:
                return OperationResult.fail(ErrorKind.NOT_FOUND, "Task not found.")

            self._commit(
                existing.model_copy(update={"status": TaskStatus(status), "updated_at": self._clock()})
            )
        except Exception:
            logger.exception("Failed to update status of task id=%s", task_id)
            return OperationResult.fail(ErrorKind.UNEXPECTED, "Failed to update task status.")

        logger.info("Task status changed id=%s status=%s", task_id, TaskStatus(status).value)
        return OperationResult.ok("Task status updated successfully!")

    def add_comment(self, task_id: str, text: str) -> OperationResult:
        user = self._identity.user
        if user is None:
            return OperationResult.fail(
                ErrorKind.AUTHORIZATION, "You must be logged in to add a comment."
            )

        try:
            existing = self._stored_task(task_id)
            if existing is None:
                return OperationResult.fail(ErrorKind.NOT_FOUND, "Task not found.")

            now = self._clock()
            comment = Comment(
                id=generate_id(),
                text=text,
                user_id=user.id,
                user_name=user.name,
                created_at=now,
            )
            self._commit(
                existing.model_copy(
                    update={"comments": existing.comments + (comment,), "updated_at": now}
                )
            )
        except Exception:
            logger.exception("Failed to add comment to task id=%s", task_id)
            return OperationResult.fail(ErrorKind.UNEXPECTED, "Failed to add comment.")

        logger.debug("Comment added task=%s by=%s", task_id, user.id)
        return OperationResult.ok("Comment added successfully!")
