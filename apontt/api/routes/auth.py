from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from apontt.api.deps import get_current_user, get_db
from apontt.models.user import User
from apontt.schemas.auth import ChangePasswordRequest, LoginRequest, Token, UserRead
from apontt.schemas.common import Message
from apontt.services.auth import AuthService

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login", response_model=Token)
def login(payload: LoginRequest, session: Session = Depends(get_db)) -> Token:
    return AuthService(session).authenticate(payload)


@router.get("/me", response_model=UserRead)
def me(current_user: User = Depends(get_current_user)) -> UserRead:
    return UserRead.model_validate(current_user)


@router.post("/change-password", response_model=Message, status_code=status.HTTP_200_OK)
def change_password(
    payload: ChangePasswordRequest,
    session: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Message:
    AuthService(session).change_password(current_user, payload)
    return Message(message="Senha alterada com sucesso")
