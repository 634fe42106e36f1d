import enum

from .base import Document, Timestamp


class NotificationType(str, enum.Enum):
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


class Notification(Document):
    """Per-user notice stored under ``notifications_{userId}``."""

    id: str
    message: str
    type: NotificationType = NotificationType.INFO
    read: bool = False
    created_at: Timestamp
