from fastapi import APIRouter, Depends
from sqlmodel import Session

from apontt.api.deps import get_current_user, get_db
from apontt.models.user import User
from apontt.schemas.reporting import MetricsRead
from apontt.services.reporting import ReportingService

router = APIRouter(tags=["dashboard"])


@router.get("/metrics", response_model=MetricsRead)
def get_metrics(
    session: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> MetricsRead:
    return MetricsRead(**ReportingService(session).metrics())
