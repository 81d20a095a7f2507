from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, Integer, String
from sqlalchemy.orm import relationship

from app.core.database import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)

    email = Column(String(255), unique=True, index=True, nullable=False)
    first_name = Column(String(120), nullable=False)
    last_name = Column(String(120), nullable=False)
    phone = Column(String(32), nullable=True)
    address = Column(String(255), nullable=True)
    image_url = Column(String(500), nullable=True)

    # user / admin
    role = Column(String(32), default="user", nullable=False)

    gold_member = Column(Boolean, default=False, nullable=False)
    gold_member_since = Column(DateTime, nullable=True)

    # бонусные баллы, меняются только через начисление за заказ и списание блоками
    points = Column(Integer, default=0, nullable=False)

    password_salt = Column(String(255), nullable=False)
    password_hash = Column(String(255), nullable=False)

    is_active = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    last_login_at = Column(DateTime, nullable=True)

    cart_items = relationship("CartItem", back_populates="user", cascade="all, delete-orphan")
    orders = relationship("Order", back_populates="user")
