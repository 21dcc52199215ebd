from datetime import datetime, timezone

from sqlmodel import Session, select

from apontt.core.exceptions import AuthenticationError, ValidationError
from apontt.models.user import User
from apontt.schemas.auth import ChangePasswordRequest, LoginRequest, Token
from apontt.utils.security import create_access_token, get_password_hash, verify_password


class AuthService:
    def __init__(self, session: Session) -> None:
        self.session = session

    def authenticate(self, payload: LoginRequest) -> Token:
        statement = select(User).where(User.username == payload.username.strip())
        user = self.session.exec(statement).first()

        if not user or not user.is_active:
            raise AuthenticationError("Invalid credentials")

        if not verify_password(payload.password, user.password_hash):
            raise AuthenticationError("Invalid credentials")

        user.last_login_at = datetime.now(timezone.utc)
        self.session.add(user)
        self.session.commit()
        self.session.refresh(user)

        return Token(access_token=create_access_token(str(user.id), {"username": user.username}))

    def change_password(self, user: User, payload: ChangePasswordRequest) -> None:
        if not verify_password(payload.current_password, user.password_hash):
            raise ValidationError.for_field("current_password", "Senha atual incorreta")
        if payload.current_password == payload.new_password:
            raise ValidationError.for_field("new_password", "A nova senha deve ser diferente da atual")
        user.password_hash = get_password_hash(payload.new_password)
        user.updated_at = datetime.now(timezone.utc)
        self.session.add(user)
        self.session.commit()
