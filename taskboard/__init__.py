from .identity import AuthState, IdentityProvider
from .main import Taskboard, create_app
from .storage import DocumentStorage, MemoryBackend, SQLBackend
from .task_store import TaskStore, filter_tasks

__all__ = [
    "AuthState",
    "DocumentStorage",
    "IdentityProvider",
    "MemoryBackend",
    "SQLBackend",
    "TaskStore",
    "Taskboard",
    "create_app",
    "filter_tasks",
]
