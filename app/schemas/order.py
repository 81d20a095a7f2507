from __future__ import annotations

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

OrderStatus = Literal["pending", "preparing", "ready", "delivered", "cancelled"]


class OrderItemIn(BaseModel):
    dish_id: int
    quantity: int = Field(default=1, ge=1, le=100)


class OrderCreate(BaseModel):
    """
    Если items не переданы — заказ собирается из корзины.
    Цены берутся из каталога (с учётом gold), клиенту не доверяем.
    """
    model_config = ConfigDict(extra="forbid")

    items: Optional[List[OrderItemIn]] = None
    promo_code: Optional[str] = Field(default=None, max_length=64)
    payment_intent_id: Optional[str] = Field(default=None, max_length=255)
    delivery_address: Optional[str] = Field(default=None, max_length=255)
    comment: Optional[str] = Field(default=None, max_length=500)


class OrderItemOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    dish_id: Optional[int] = None
    name: str
    price: float
    quantity: int


class OrderOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    status: str
    subtotal: float
    discount: float
    total_price: float
    promo_code: Optional[str] = None
    rewards_earned: int
    payment_intent_id: Optional[str] = None
    delivery_address: Optional[str] = None
    comment: Optional[str] = None
    order_date: datetime
    items: List[OrderItemOut] = []


class OrderCreatedOut(BaseModel):
    message: str
    order: OrderOut
    rewards_earned: int
    new_reward_value: int


class OrderStatusIn(BaseModel):
    status: OrderStatus


class OrderCountOut(BaseModel):
    total_orders: int
