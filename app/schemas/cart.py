from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class CartItemCreate(BaseModel):
    dish_id: int
    quantity: int = Field(default=1, ge=1, le=100)


class CartItemUpdate(BaseModel):
    quantity: int = Field(..., ge=1, le=100)


class CartItemOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    dish_id: int
    name: str
    price: float
    quantity: int
    created_at: datetime


class CartAddOut(BaseModel):
    message: str
    cart_item_id: int
    quantity: int
    merged: bool = False
