from datetime import datetime, timezone
from uuid import UUID, uuid4

from sqlalchemy import DateTime
from sqlmodel import Field, SQLModel


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime | None) -> datetime | None:
    # SQLite devolve datetimes sem fuso; tudo que gravamos está em UTC
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class TimestampedModel(SQLModel):
    created_at: datetime = Field(
        default_factory=utcnow, nullable=False, index=True, sa_type=DateTime(timezone=True)
    )
    updated_at: datetime | None = Field(default=None, nullable=True, sa_type=DateTime(timezone=True))

    def touch(self) -> None:
        self.updated_at = utcnow()


class UUIDModel(SQLModel):
    id: UUID = Field(default_factory=uuid4, primary_key=True, index=True)
