import logging
from dataclasses import dataclass
from typing import Optional

from . import config
from .identity import IdentityProvider
from .schemas.base import utcnow
from .seed import seed_demo_data
from .storage import DocumentStorage, KeyValueBackend, MemoryBackend, SQLBackend
from .task_store import Clock, TaskStore

logger = logging.getLogger(__name__)


def create_backend(kind: str, database_url: str) -> KeyValueBackend:
    if kind == "memory":
        return MemoryBackend()
    if kind == "sql":
        return SQLBackend.from_url(database_url)
    raise ValueError(f"Unknown storage backend: {kind!r}")


@dataclass
class Taskboard:
    """Process-wide container: one storage, one identity, one task store."""

    storage: DocumentStorage
    identity: IdentityProvider
    tasks: TaskStore

    def close(self) -> None:
        self.storage.close()

    def __enter__(self) -> "Taskboard":
        return self

    def __exit__(self, *exc) -> None:
        self.close()


def create_app(
    backend: Optional[KeyValueBackend] = None,
    *,
    database_url: Optional[str] = None,
    storage_backend: Optional[str] = None,
    session_key: Optional[str] = None,
    seed: Optional[bool] = None,
    clock: Clock = utcnow,
) -> Taskboard:
    """Build the board, restore the session and load the tasks.

    Arguments left as ``None`` fall back to ``taskboard.config``.
    """
    if backend is None:
        backend = create_backend(
            storage_backend or config.STORAGE_BACKEND,
            database_url or config.DATABASE_URL,
        )
    storage = DocumentStorage(backend, session_key=session_key or config.SESSION_KEY)

    if seed is None:
        seed = config.SEED_DEMO_DATA
    if seed:
        seed_demo_data(storage, clock())

    identity = IdentityProvider(storage)
    tasks = TaskStore(storage, identity, clock=clock)
    identity.check_auth()
    tasks.fetch_tasks()

    logger.info(
        "Taskboard started tasks=%d user=%s",
        len(tasks.tasks),
        identity.user.id if identity.user else None,
    )
    return Taskboard(storage=storage, identity=identity, tasks=tasks)
