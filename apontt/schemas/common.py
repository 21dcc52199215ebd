from datetime import datetime
from decimal import Decimal
from typing import Annotated
from uuid import UUID

from pydantic import AfterValidator, BaseModel, BeforeValidator, ConfigDict

from apontt.utils.documents import normalize_tax_id, parse_money

Money = Annotated[Decimal, BeforeValidator(parse_money)]
TaxId = Annotated[str, AfterValidator(normalize_tax_id)]


class Timestamped(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    created_at: datetime
    updated_at: datetime | None = None


class IDModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID


class FieldError(BaseModel):
    field: str
    message: str


class ErrorResponse(BaseModel):
    error: str
    detail: str
    fields: list[FieldError] = []


class Message(BaseModel):
    message: str
