from __future__ import annotations

from datetime import date
from decimal import Decimal
from enum import Enum
from uuid import UUID

from sqlmodel import Field

from apontt.models.base import TimestampedModel, UUIDModel


class OpportunityStage(str, Enum):
    PROSPECTING = "prospecting"
    QUALIFIED = "qualified"
    PROPOSAL = "proposal"
    NEGOTIATION = "negotiation"
    CLOSED_WON = "closed-won"
    CLOSED_LOST = "closed-lost"


class Opportunity(UUIDModel, TimestampedModel, table=True):
    __tablename__ = "opportunities"

    title: str
    description: str | None = Field(default=None)
    customer_id: UUID | None = Field(default=None, foreign_key="customers.id", index=True)
    partner_id: UUID | None = Field(default=None, foreign_key="partners.id", index=True)
    value: Decimal = Field(max_digits=12, decimal_places=2)
    stage: str = Field(default=OpportunityStage.PROSPECTING.value, index=True)
    probability: int = Field(default=0)
    expected_close_date: date | None = Field(default=None)


class Activity(UUIDModel, TimestampedModel, table=True):
    __tablename__ = "activities"

    type: str = Field(index=True, max_length=64)
    description: str
    value: Decimal | None = Field(default=None, max_digits=12, decimal_places=2)
    related_id: UUID | None = Field(default=None, index=True)
