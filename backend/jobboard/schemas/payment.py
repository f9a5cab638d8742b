from __future__ import annotations
from typing import Any, Literal

from pydantic import BaseModel, Field


class PendingSubmissionIn(BaseModel):
    session_id: str = Field(min_length=1)
    employer_id: str | None = None
    pricing_tier: Literal["standard", "featured", "annual"] = "standard"
    amount: int = 0
    currency: str = "aud"
    job_form_data: dict[str, Any]


class PendingSubmissionOut(BaseModel):
    id: int
    session_id: str
    status: str
    pricing_tier: str

    class Config:
        from_attributes = True


class PaymentEventObject(BaseModel):
    id: str

    class Config:
        extra = "allow"


class PaymentEventData(BaseModel):
    object: PaymentEventObject


class PaymentEvent(BaseModel):
    id: str | None = None
    type: str
    data: PaymentEventData
