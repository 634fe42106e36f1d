from sqlmodel import SQLModel, Field
from datetime import datetime, timezone


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class StorageEntry(SQLModel, table=True):
    """One key of the key-value store.

    ``value`` holds the JSON text of a whole collection (``users``, ``tasks``,
    ``notifications_<id>``) or a scalar such as the session token.
    """
    __tablename__ = "storage_entries"

    key: str = Field(primary_key=True)
    value: str
    updated_at: datetime = Field(default_factory=_utcnow)
