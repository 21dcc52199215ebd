from decimal import Decimal
from uuid import UUID

from sqlmodel import Session, select

from apontt.models.crm import Activity


class ActivityService:
    def __init__(self, session: Session) -> None:
        self.session = session

    def record(
        self,
        activity_type: str,
        description: str,
        *,
        value: Decimal | None = None,
        related_id: UUID | None = None,
        commit: bool = True,
    ) -> Activity:
        activity = Activity(
            type=activity_type,
            description=description,
            value=value,
            related_id=related_id,
        )
        self.session.add(activity)
        if commit:
            self.session.commit()
        return activity

    def list_recent(self, limit: int = 10) -> list[Activity]:
        statement = select(Activity).order_by(Activity.created_at.desc()).limit(limit)
        return list(self.session.exec(statement).all())
