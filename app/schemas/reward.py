from __future__ import annotations

from pydantic import BaseModel, Field


class RewardSettingsIn(BaseModel):
    points: int = Field(..., gt=0, description="Сколько баллов стоят `dollars` долларов")
    dollars: float = Field(..., gt=0)


class RewardSettingsOut(BaseModel):
    points: int
    dollars: float
    redemption_points: int


class RewardApplyIn(BaseModel):
    total_price: float = Field(..., ge=0)


class RewardApplyOut(BaseModel):
    total_price: float
    dollar_value: float
    points: int
