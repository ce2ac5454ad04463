"""Payment Schemas."""

from pydantic import BaseModel, Field


class PaymentIntentRequest(BaseModel):
    amount: float = Field(gt=0)


class PaymentIntentResponse(BaseModel):
    client_secret: str
