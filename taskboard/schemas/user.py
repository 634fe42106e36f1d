import enum
from typing import Optional

from .base import Document, Payload


class Role(str, enum.Enum):
    ADMIN = "admin"
    EMPLOYEE = "employee"


class User(Document):
    """A user of the board. Role is fixed at creation."""

    id: str
    name: str
    email: str
    role: Role = Role.EMPLOYEE
    avatar: Optional[str] = None


class LoginFormData(Payload):
    email: str
    password: str


class SignupFormData(Payload):
    name: str
    email: str
    password: str
    confirm_password: str
