from datetime import datetime

from pydantic import BaseModel, Field

from apontt.schemas.common import IDModel, Timestamped


class LoginRequest(BaseModel):
    username: str
    password: str


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"


class ChangePasswordRequest(BaseModel):
    current_password: str
    new_password: str = Field(min_length=6)


class UserRead(IDModel, Timestamped):
    username: str
    full_name: str
    email: str | None = None
    is_active: bool
    last_login_at: datetime | None = None
