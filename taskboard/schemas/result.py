import enum
from typing import Optional

from pydantic import BaseModel


class ErrorKind(str, enum.Enum):
    NOT_FOUND = "not_found"
    VALIDATION = "validation"
    AUTHORIZATION = "authorization"
    UNEXPECTED = "unexpected"


class OperationResult(BaseModel):
    """Outcome of a store or identity operation.

    Operations report failures through this object instead of raising, so the
    caller always gets a user-readable ``message``.
    """

    success: bool
    message: str
    task_id: Optional[str] = None
    error: Optional[ErrorKind] = None

    @classmethod
    def ok(cls, message: str, task_id: Optional[str] = None) -> "OperationResult":
        return cls(success=True, message=message, task_id=task_id)

    @classmethod
    def fail(cls, error: ErrorKind, message: str) -> "OperationResult":
        return cls(success=False, message=message, error=error)
