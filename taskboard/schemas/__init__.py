from .notification import Notification, NotificationType
from .result import ErrorKind, OperationResult
from .task import (
    Comment,
    Task,
    TaskFilter,
    TaskFormData,
    TaskPriority,
    TaskStatus,
    TaskUpdate,
)
from .user import LoginFormData, Role, SignupFormData, User

__all__ = [
    "Comment",
    "ErrorKind",
    "LoginFormData",
    "Notification",
    "NotificationType",
    "OperationResult",
    "Role",
    "SignupFormData",
    "Task",
    "TaskFilter",
    "TaskFormData",
    "TaskPriority",
    "TaskStatus",
    "TaskUpdate",
    "User",
]
