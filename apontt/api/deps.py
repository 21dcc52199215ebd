from typing import Annotated
from uuid import UUID

from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer
from sqlmodel import Session

from apontt.core.config import settings
from apontt.core.exceptions import AuthenticationError
from apontt.db.session import get_session
from apontt.models.user import User
from apontt.utils.security import decode_token

oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{settings.api_prefix}/auth/login", auto_error=False)


def get_db() -> Session:
    yield from get_session()


def get_current_user(
    token: Annotated[str | None, Depends(oauth2_scheme)],
    session: Annotated[Session, Depends(get_db)],
) -> User:
    if not token:
        raise AuthenticationError("Not authenticated")
    try:
        payload = decode_token(token)
    except ValueError as exc:
        raise AuthenticationError("Invalid token") from exc

    try:
        user_id = UUID(str(payload["sub"]))
    except (KeyError, ValueError, TypeError) as exc:
        raise AuthenticationError("Invalid token subject") from exc

    user = session.get(User, user_id)
    if not user or not user.is_active:
        raise AuthenticationError("User not found or inactive")
    return user


def get_client_ip(request: Request) -> str | None:
    """Primeiro IP de X-Forwarded-For (atrás de proxy) ou o endereço da conexão."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    return request.client.host if request.client else None
