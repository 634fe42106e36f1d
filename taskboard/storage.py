"""Key-value persistence for the board's collections.

Collections (``users``, ``tasks``, ``notifications_<userId>``) are stored as
JSON arrays under a single key each, the session token as a plain string.
"""

import json
import logging
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional, Protocol, Type, TypeVar

from pydantic import BaseModel, ValidationError
from sqlalchemy.engine import Engine

from .database import create_db_engine, create_session_factory, create_tables, get_session
from .models import StorageEntry
from .schemas import Notification

logger = logging.getLogger(__name__)

USERS = "users"
TASKS = "tasks"
DEFAULT_SESSION_KEY = "currentUser"


def notifications_key(user_id: str) -> str:
    return f"notifications_{user_id}"


ModelT = TypeVar("ModelT", bound=BaseModel)


def validate_records(model: Type[ModelT], records: Iterable[dict], collection: str) -> List[ModelT]:
    """Parse stored records, skipping (and logging) the ones that do not validate."""
    items = []
    for record in records:
        try:
            items.append(model.model_validate(record))
        except ValidationError as exc:
            logger.warning(
                "Skipping invalid record in %s id=%s (%d errors)",
                collection,
                record.get("id"),
                exc.error_count(),
            )
    return items


class KeyValueBackend(Protocol):
    def get_item(self, key: str) -> Optional[str]: ...

    def set_item(self, key: str, value: str) -> None: ...

    def remove_item(self, key: str) -> None: ...

    def close(self) -> None: ...


class MemoryBackend:
    """Process-local backend; contents are lost when the process exits."""

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._items: Dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    def close(self) -> None:
        return


class SQLBackend:
    """Durable backend: one ``storage_entries`` row per key."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine
        create_tables(engine)
        self._session_factory = create_session_factory(engine)
        logger.info("SQLBackend ready url=%s", engine.url.render_as_string(hide_password=True))

    @classmethod
    def from_url(cls, database_url: str) -> "SQLBackend":
        return cls(create_db_engine(database_url))

    def get_item(self, key: str) -> Optional[str]:
        with get_session(self._session_factory) as session:
            entry = session.get(StorageEntry, key)
            return entry.value if entry is not None else None

    def set_item(self, key: str, value: str) -> None:
        with get_session(self._session_factory) as session:
            entry = session.get(StorageEntry, key)
            if entry is None:
                entry = StorageEntry(key=key, value=value)
            else:
                entry.value = value
                entry.updated_at = datetime.now(timezone.utc)
            session.add(entry)
            session.commit()

    def remove_item(self, key: str) -> None:
        with get_session(self._session_factory) as session:
            entry = session.get(StorageEntry, key)
            if entry is None:
                return
            session.delete(entry)
            session.commit()

    def close(self) -> None:
        self._engine.dispose()


class DocumentStorage:
    """Collection-scoped access to a key-value backend.

    Writes go straight to the backend and every read parses the current
    value, so a write is visible to the very next read.
    """

    def __init__(self, backend: KeyValueBackend, session_key: str = DEFAULT_SESSION_KEY) -> None:
        self.backend = backend
        self.session_key = session_key

    # ---- collections ----

    def _load(self, key: str) -> List[dict]:
        raw = self.backend.get_item(key)
        if not raw:
            return []
        try:
            value = json.loads(raw)
        except ValueError:
            logger.warning("Ignoring corrupt JSON under key=%s", key)
            return []
        if not isinstance(value, list):
            logger.warning("Ignoring non-list value under key=%s", key)
            return []
        return [item for item in value if isinstance(item, dict)]

    def _save(self, key: str, records: List[dict]) -> None:
        self.backend.set_item(key, json.dumps(records, ensure_ascii=False))

    def get(self, collection: str) -> List[dict]:
        return self._load(collection)

    def find(self, collection: str, record_id: str) -> Optional[dict]:
        for record in self._load(collection):
            if record.get("id") == record_id:
                return record
        return None

    def put(self, collection: str, record: dict) -> None:
        """Insert or replace ``record`` by its ``id``."""
        records = self._load(collection)
        for index, existing in enumerate(records):
            if existing.get("id") == record["id"]:
                records[index] = record
                break
        else:
            records.append(record)
        self._save(collection, records)

    def delete(self, collection: str, record_id: str) -> None:
        records = self._load(collection)
        remaining = [r for r in records if r.get("id") != record_id]
        if len(remaining) != len(records):
            self._save(collection, remaining)

    # ---- session token ----

    def get_token(self) -> Optional[str]:
        return self.backend.get_item(self.session_key)

    def set_token(self, token: str) -> None:
        self.backend.set_item(self.session_key, token)

    def remove_token(self) -> None:
        self.backend.remove_item(self.session_key)

    # ---- notifications ----

    def get_notifications(self, user_id: str) -> List[Notification]:
        key = notifications_key(user_id)
        return validate_records(Notification, self._load(key), key)

    def add_notification(self, user_id: str, notification: Notification) -> None:
        records = self._load(notifications_key(user_id))
        records.append(notification.to_record())
        self._save(notifications_key(user_id), records)

    def mark_notification_read(self, user_id: str, notification_id: str) -> None:
        key = notifications_key(user_id)
        records = self._load(key)
        for record in records:
            if record.get("id") == notification_id:
                record["read"] = True
        self._save(key, records)

    def clear_notifications(self, user_id: str) -> None:
        self.backend.remove_item(notifications_key(user_id))

    def close(self) -> None:
        self.backend.close()
