from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class PromoCreate(BaseModel):
    code: str = Field(..., min_length=1, max_length=64)
    discount: float = Field(..., gt=0, le=100, description="Скидка в процентах")
    expiration_date: datetime


class PromoValidateIn(BaseModel):
    promo_code: str = Field(..., min_length=1, max_length=64)


class PromoValidateOut(BaseModel):
    success: bool
    final_discount: Optional[float] = None
    message: Optional[str] = None


class PromoOut(BaseModel):
    code: str
    discount: float
    expiration_date: datetime
