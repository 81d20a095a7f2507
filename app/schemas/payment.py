from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class PaymentIntentIn(BaseModel):
    amount: int = Field(..., gt=0, description="Сумма в центах")
    currency: str = Field(..., min_length=3, max_length=3)


class PaymentIntentOut(BaseModel):
    client_secret: Optional[str] = None
    payment_intent_id: str


class PaymentConfirmIn(BaseModel):
    payment_intent_id: str = Field(..., min_length=1)


class PaymentStatusOut(BaseModel):
    status: str
    amount: int
    currency: str


class PaymentDetailsOut(PaymentStatusOut):
    id: str
    created: Optional[int] = None
    metadata: dict = {}
