import enum
from typing import Optional, Tuple

from .base import Document, Payload, Timestamp


class TaskStatus(str, enum.Enum):
    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"


class TaskPriority(str, enum.Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class Comment(Document):
    """A comment on a task. Never edited once written."""

    id: str
    text: str
    user_id: str
    user_name: str
    created_at: Timestamp


class Task(Document):
    """Complete task record as stored in the ``tasks`` collection.

    ``assignee_name`` and ``created_by_name`` are copies of the users' names
    taken at write time; a later rename does not update them.
    """

    id: str
    title: str
    description: str = ""
    status: TaskStatus = TaskStatus.PENDING
    priority: TaskPriority = TaskPriority.MEDIUM
    assignee_id: str = ""
    assignee_name: str = ""
    created_by_id: str = ""
    created_by_name: str = ""
    deadline: Timestamp
    created_at: Timestamp
    updated_at: Timestamp
    comments: Tuple[Comment, ...] = ()


class TaskFormData(Payload):
    """Schema for creating tasks (and full-form updates)."""

    title: str
    description: str = ""
    status: TaskStatus = TaskStatus.PENDING
    priority: TaskPriority = TaskPriority.MEDIUM
    assignee_id: str
    deadline: Timestamp


class TaskUpdate(Payload):
    """Schema for partial updates; only supplied fields are merged."""

    title: Optional[str] = None
    description: Optional[str] = None
    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None
    assignee_id: Optional[str] = None
    deadline: Optional[Timestamp] = None


class TaskFilter(Payload):
    """Current list filter. ``"all"`` disables a field the same way ``None`` does."""

    status: Optional[str] = None
    priority: Optional[str] = None
    assignee_id: Optional[str] = None
    search: Optional[str] = None
