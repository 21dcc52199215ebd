from typing import List

from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from apontt.api.deps import get_current_user, get_db
from apontt.models.user import User
from apontt.schemas.contract import AuthorizationTermCreate, AuthorizationTermRead
from apontt.services.contracts import AuthorizationTermService

router = APIRouter(prefix="/authorization-terms", tags=["authorization-terms"])


@router.get("", response_model=List[AuthorizationTermRead])
def list_terms(
    session: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> List[AuthorizationTermRead]:
    return [AuthorizationTermRead.model_validate(term) for term in AuthorizationTermService(session).list_terms()]


@router.post("", response_model=AuthorizationTermRead, status_code=status.HTTP_201_CREATED)
def create_term(
    payload: AuthorizationTermCreate,
    session: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> AuthorizationTermRead:
    term = AuthorizationTermService(session).create_term(payload)
    return AuthorizationTermRead.model_validate(term)
