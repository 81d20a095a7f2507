from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship

from app.core.database import Base


class Category(Base):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(120), unique=True, index=True, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    dishes = relationship("Dish", back_populates="category", cascade="all, delete-orphan")


class Dish(Base):
    __tablename__ = "dishes"

    id = Column(Integer, primary_key=True, index=True)

    category_id = Column(Integer, ForeignKey("categories.id", ondelete="CASCADE"), nullable=False, index=True)

    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)

    price = Column(Numeric(10, 2), nullable=False)
    # пересчитывается при каждом изменении gold-процента
    member_price = Column(Numeric(10, 2), nullable=False, default=0)

    # спецпредложение, процент скидки
    discount = Column(Numeric(5, 2), nullable=True)
    offer_available = Column(Boolean, default=False, nullable=False)

    available = Column(Boolean, default=True, nullable=False)
    image_url = Column(String(500), nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    category = relationship("Category", back_populates="dishes")
    # удалённое блюдо уходит и из корзин
    cart_items = relationship("CartItem", back_populates="dish", cascade="all, delete")
