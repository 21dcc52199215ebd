from __future__ import annotations

from datetime import date
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, Field

from apontt.models.crm import OpportunityStage
from apontt.schemas.common import IDModel, Money, Timestamped


class OpportunityCreate(BaseModel):
    title: str = Field(min_length=1)
    description: str | None = None
    customer_id: UUID | None = None
    partner_id: UUID | None = None
    value: Money = Field(ge=0)
    stage: OpportunityStage = OpportunityStage.PROSPECTING
    probability: int = Field(default=0, ge=0, le=100)
    expected_close_date: date | None = None


class OpportunityUpdate(BaseModel):
    title: str | None = Field(default=None, min_length=1)
    description: str | None = None
    customer_id: UUID | None = None
    partner_id: UUID | None = None
    value: Money | None = Field(default=None, ge=0)
    stage: OpportunityStage | None = None
    probability: int | None = Field(default=None, ge=0, le=100)
    expected_close_date: date | None = None


class OpportunityRead(IDModel, Timestamped):
    title: str
    description: str | None = None
    customer_id: UUID | None = None
    partner_id: UUID | None = None
    value: Decimal
    stage: str
    probability: int
    expected_close_date: date | None = None


class ActivityRead(IDModel, Timestamped):
    type: str
    description: str
    value: Decimal | None = None
    related_id: UUID | None = None
