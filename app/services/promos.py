from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy.orm import Session

from app.core.errors import ValidationError
from app.core.pricing import PromoCheck, PromoRecord, check_promo
from app.models.promo import PromoCode


def _utcnow() -> datetime:
    return datetime.utcnow()


def load_promo(db: Session, code: str) -> Optional[PromoRecord]:
    row = db.get(PromoCode, (code or "").strip())
    if not row:
        return None
    return PromoRecord(code=row.code, discount=Decimal(str(row.discount)), expires_at=row.expires_at)


def validate_promo(db: Session, code: str, now: datetime | None = None) -> PromoCheck:
    return check_promo(load_promo(db, code), now or _utcnow())


def require_promo(db: Session, code: str, now: datetime | None = None) -> Decimal:
    """Как validate_promo, но невалидный/просроченный код — ValidationError."""
    result = validate_promo(db, code, now)
    if not result.valid:
        raise ValidationError(result.message)
    return result.discount
