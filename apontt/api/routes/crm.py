from __future__ import annotations

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlmodel import Session

from apontt.api.deps import get_current_user, get_db
from apontt.models.user import User
from apontt.schemas.crm import ActivityRead, OpportunityCreate, OpportunityRead, OpportunityUpdate
from apontt.services.activity import ActivityService
from apontt.services.opportunities import OpportunityService

router = APIRouter(tags=["crm"])


@router.get("/opportunities", response_model=List[OpportunityRead])
def list_opportunities(
    stage: str | None = None,
    session: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> List[OpportunityRead]:
    return [OpportunityRead.model_validate(item) for item in OpportunityService(session).list_opportunities(stage)]


@router.post("/opportunities", response_model=OpportunityRead, status_code=status.HTTP_201_CREATED)
def create_opportunity(
    payload: OpportunityCreate,
    session: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> OpportunityRead:
    return OpportunityRead.model_validate(OpportunityService(session).create_opportunity(payload))


@router.patch("/opportunities/{opportunity_id}", response_model=OpportunityRead)
def update_opportunity(
    opportunity_id: UUID,
    payload: OpportunityUpdate,
    session: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> OpportunityRead:
    return OpportunityRead.model_validate(OpportunityService(session).update_opportunity(opportunity_id, payload))


@router.get("/activities", response_model=List[ActivityRead])
def list_activities(
    limit: int = Query(default=10, ge=1, le=100),
    session: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> List[ActivityRead]:
    return [ActivityRead.model_validate(item) for item in ActivityService(session).list_recent(limit)]
