from datetime import datetime

from sqlalchemy import DateTime
from sqlmodel import Field

from apontt.models.base import TimestampedModel, UUIDModel


class User(UUIDModel, TimestampedModel, table=True):
    """Usuário administrativo do painel (o acesso de parceiros usa tokens próprios)."""

    __tablename__ = "users"

    username: str = Field(index=True, unique=True, max_length=64)
    full_name: str = Field(default="Administrador")
    email: str | None = Field(default=None)

    password_hash: str
    is_active: bool = Field(default=True)
    last_login_at: datetime | None = Field(default=None, sa_type=DateTime(timezone=True))
