from __future__ import annotations

from uuid import UUID

from sqlmodel import Session, select

from apontt.core.exceptions import NotFoundError
from apontt.models.crm import Opportunity
from apontt.models.customer import Customer
from apontt.models.partner import Partner
from apontt.schemas.crm import OpportunityCreate, OpportunityUpdate
from apontt.services.activity import ActivityService


class OpportunityService:
    def __init__(self, session: Session) -> None:
        self.session = session
        self.activities = ActivityService(session)

    def list_opportunities(self, stage: str | None = None) -> list[Opportunity]:
        statement = select(Opportunity)
        if stage:
            statement = statement.where(Opportunity.stage == stage)
        return list(self.session.exec(statement.order_by(Opportunity.created_at.desc())).all())

    def get_opportunity(self, opportunity_id: str | UUID) -> Opportunity:
        opportunity = self.session.get(Opportunity, UUID(str(opportunity_id)))
        if not opportunity:
            raise NotFoundError("Opportunity not found")
        return opportunity

    def create_opportunity(self, payload: OpportunityCreate) -> Opportunity:
        self._ensure_references(payload.customer_id, payload.partner_id)
        opportunity = Opportunity(**payload.model_dump(exclude={"stage"}), stage=payload.stage.value)
        self.session.add(opportunity)
        self.activities.record(
            "opportunity_created",
            f"Oportunidade {opportunity.title} criada",
            value=opportunity.value,
            related_id=opportunity.id,
            commit=False,
        )
        self.session.commit()
        self.session.refresh(opportunity)
        return opportunity

    def update_opportunity(self, opportunity_id: str | UUID, payload: OpportunityUpdate) -> Opportunity:
        opportunity = self.get_opportunity(opportunity_id)
        update_data = payload.model_dump(exclude_unset=True)
        self._ensure_references(update_data.get("customer_id"), update_data.get("partner_id"))
        if update_data.get("stage") is not None:
            update_data["stage"] = update_data["stage"].value
        for field, value in update_data.items():
            if value is None and field in {"title", "value", "stage", "probability"}:
                continue
            setattr(opportunity, field, value)
        opportunity.touch()
        self.session.add(opportunity)
        self.session.commit()
        self.session.refresh(opportunity)
        return opportunity

    def _ensure_references(self, customer_id: UUID | None, partner_id: UUID | None) -> None:
        if customer_id and not self.session.get(Customer, customer_id):
            raise NotFoundError("Customer not found")
        if partner_id and not self.session.get(Partner, partner_id):
            raise NotFoundError("Partner not found")
