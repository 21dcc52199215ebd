from __future__ import annotations

from uuid import UUID

from sqlmodel import Session, select

from apontt.core.exceptions import NotFoundError
from apontt.models.contract import Contract
from apontt.models.crm import Opportunity
from apontt.models.customer import Customer
from apontt.models.partner import Partner
from apontt.schemas.customer import CustomerCreate, CustomerUpdate
from apontt.services.activity import ActivityService


class CustomerService:
    def __init__(self, session: Session) -> None:
        self.session = session
        self.activities = ActivityService(session)

    def list_customers(
        self,
        status: str | None = None,
        partner_id: UUID | None = None,
    ) -> list[tuple[Customer, Partner | None]]:
        """Clientes com nome/e-mail do parceiro vinculado (quando houver)."""
        statement = select(Customer, Partner).join(Partner, Customer.partner_id == Partner.id, isouter=True)
        if status:
            statement = statement.where(Customer.status == status)
        if partner_id:
            statement = statement.where(Customer.partner_id == partner_id)
        statement = statement.order_by(Customer.created_at.desc())
        return [(customer, partner) for customer, partner in self.session.exec(statement).all()]

    def get_customer(self, customer_id: str | UUID) -> Customer:
        customer = self.session.get(Customer, UUID(str(customer_id)))
        if not customer:
            raise NotFoundError("Customer not found")
        return customer

    def get_partner(self, customer: Customer) -> Partner | None:
        if not customer.partner_id:
            return None
        return self.session.get(Partner, customer.partner_id)

    def create_customer(self, payload: CustomerCreate) -> Customer:
        self._ensure_partner(payload.partner_id)
        customer = Customer(**payload.model_dump(exclude={"status"}), status=payload.status.value)
        self.session.add(customer)
        self.activities.record(
            "customer_created",
            f"Cliente {customer.name} cadastrado",
            value=customer.value,
            related_id=customer.id,
            commit=False,
        )
        self.session.commit()
        self.session.refresh(customer)
        return customer

    def update_customer(self, customer_id: str | UUID, payload: CustomerUpdate) -> Customer:
        customer = self.get_customer(customer_id)
        update_data = payload.model_dump(exclude_unset=True)
        if "partner_id" in update_data:
            self._ensure_partner(update_data["partner_id"])
        if update_data.get("status") is not None:
            update_data["status"] = update_data["status"].value
        for field, value in update_data.items():
            if value is None and field in {"name", "cpf", "status"}:
                continue
            setattr(customer, field, value)
        customer.touch()
        self.session.add(customer)
        self.session.commit()
        self.session.refresh(customer)
        return customer

    def delete_customer(self, customer_id: str | UUID) -> None:
        customer = self.get_customer(customer_id)
        for opportunity in self.session.exec(select(Opportunity).where(Opportunity.customer_id == customer.id)).all():
            opportunity.customer_id = None
            self.session.add(opportunity)
        for contract in self.session.exec(select(Contract).where(Contract.customer_id == customer.id)).all():
            contract.customer_id = None
            self.session.add(contract)
        name, customer_ref = customer.name, customer.id
        self.session.flush()
        self.session.delete(customer)
        self.activities.record("customer_deleted", f"Cliente {name} removido", related_id=customer_ref, commit=False)
        self.session.commit()

    def _ensure_partner(self, partner_id: UUID | None) -> None:
        if partner_id and not self.session.get(Partner, partner_id):
            raise NotFoundError("Partner not found")
