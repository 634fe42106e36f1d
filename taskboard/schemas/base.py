from datetime import datetime, timezone
from typing import Annotated

from pydantic import AfterValidator, BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


def as_utc(value: datetime) -> datetime:
    # Naive timestamps are read as UTC so every comparison stays tz-aware.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


Timestamp = Annotated[datetime, AfterValidator(as_utc)]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Document(BaseModel):
    """Base for stored records.

    Serialises with the camelCase keys used by the stored collections
    (``assigneeId``, ``createdAt``...) and accepts either spelling on input.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    def to_record(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class Payload(BaseModel):
    """Base for caller-supplied form data."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
