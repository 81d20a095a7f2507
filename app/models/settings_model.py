from __future__ import annotations

from datetime import datetime

from sqlalchemy import Column, DateTime, Integer, Numeric

from app.core.database import Base


class GoldPrice(Base):
    """Глобальный процент цены для gold-участников (одна строка)."""
    __tablename__ = "gold_price"

    id = Column(Integer, primary_key=True)
    percent = Column(Numeric(5, 2), nullable=False)  # 0–100

    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)


class RewardSettings(Base):
    """
    Курс бонусных баллов (одна строка).
    points баллов стоят dollars долларов, за каждые dollars в заказе начисляется 1 балл.
    """
    __tablename__ = "reward_settings"

    id = Column(Integer, primary_key=True)
    points = Column(Integer, nullable=False, default=1)
    dollars = Column(Numeric(10, 2), nullable=False, default=1)

    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
