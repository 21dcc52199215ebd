from pydantic import AliasChoices, BaseModel, Field


class WhatsAppSendRequest(BaseModel):
    phone: str = Field(min_length=8)
    message: str = Field(min_length=1)
    contract_id: str | None = Field(default=None, validation_alias=AliasChoices("contractId", "contract_id"))


class WhatsAppLink(BaseModel):
    phone: str
    url: str
