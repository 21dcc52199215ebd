import os
from typing import Any, Generator

from sqlmodel import Session, SQLModel, create_engine, select

from apontt.core.config import settings
from apontt.core.logging_setup import logger
from apontt.db import base  # noqa: F401
from apontt.models.user import User
from apontt.utils.security import get_password_hash

connect_args: dict[str, Any] = {}
if settings.database_url.startswith("sqlite"):
    connect_args["check_same_thread"] = False
elif settings.database_url.startswith("postgresql"):
    client_encoding = os.getenv("POSTGRES_CLIENT_ENCODING", "UTF8")
    connect_args["options"] = f"-c client_encoding={client_encoding}"

engine = create_engine(
    settings.database_url,
    echo=settings.debug,
    future=True,
    connect_args=connect_args,
)


def init_db() -> None:
    SQLModel.metadata.create_all(bind=engine)
    with Session(engine) as session:
        ensure_admin_user(session)


def get_session() -> Generator[Session, None, None]:
    with Session(engine) as session:
        yield session


def ensure_admin_user(session: Session) -> User | None:
    """Cria o usuário administrador a partir de ADMIN_PASSWORD quando ainda não existe."""
    existing = session.exec(select(User).where(User.username == settings.admin_username)).first()
    if existing:
        return existing
    if not settings.admin_password:
        logger.warning("ADMIN_PASSWORD não configurado; usuário administrador não foi criado.")
        return None
    user = User(
        username=settings.admin_username,
        password_hash=get_password_hash(settings.admin_password),
    )
    session.add(user)
    session.commit()
    session.refresh(user)
    logger.info("Usuário administrador '%s' criado.", user.username)
    return user
