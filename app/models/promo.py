from __future__ import annotations

from datetime import datetime

from sqlalchemy import Column, DateTime, Numeric, String

from app.core.database import Base


class PromoCode(Base):
    __tablename__ = "promo_codes"

    code = Column(String(64), primary_key=True)

    # доля 0..1 (на входе API — проценты)
    discount = Column(Numeric(6, 4), nullable=False)
    expires_at = Column(DateTime, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
