from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CategoryCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=120)


class CategoryOut(BaseModel):
    category_id: str
    category_name: str


class DishIn(BaseModel):
    """Данные блюда, приходят JSON-строкой в multipart-поле dish_data."""
    model_config = ConfigDict(extra="ignore")

    category: str = Field(..., min_length=1, max_length=120)
    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    price: float = Field(..., ge=0)


class DishUpdate(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = None
    price: Optional[float] = Field(default=None, ge=0)
    available: Optional[bool] = None
    image_url: Optional[str] = None

    @field_validator("name", "price", "available")
    @classmethod
    def _not_null(cls, v):
        # поле можно не передавать, но обнулить NOT NULL колонку нельзя
        if v is None:
            raise ValueError("must not be null")
        return v


class DishOut(BaseModel):
    dish_id: int
    category: Optional[str] = None
    name: str
    description: Optional[str] = None
    price: float
    discount: Optional[float] = None
    offer_available: bool = False
    available: bool = True
    image_url: Optional[str] = None


class DishAdminOut(DishOut):
    member_price: float


class DishCreatedOut(BaseModel):
    dish_id: int
    image_url: str = ""


class DiscountIn(BaseModel):
    discount: float = Field(..., gt=0, le=100)


class AvailabilityIn(BaseModel):
    category: str
    id: int


class GoldPriceIn(BaseModel):
    gold_price: float


class GoldPriceOut(BaseModel):
    gold_price: float


class CategoryGoldPriceIn(BaseModel):
    category: str = Field(..., min_length=1)
    gold_price: float


class MessageOut(BaseModel):
    message: str
    updated: Optional[int] = None
