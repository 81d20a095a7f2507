from __future__ import annotations

from datetime import timezone
from decimal import Decimal
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.errors import ConflictError, NotFoundError
from app.core.role_guards import RequestContext, require_admin
from app.models.promo import PromoCode
from app.schemas.promo import PromoCreate, PromoOut, PromoValidateIn, PromoValidateOut
from app.services.promos import validate_promo

router = APIRouter(prefix="/promos", tags=["promos"])


def _naive_utc(dt):
    # в базе храним naive UTC
    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc).replace(tzinfo=None)
    return dt


@router.post("/", status_code=201)
def create_promo(
    payload: PromoCreate,
    ctx: RequestContext = Depends(require_admin),
    db: Session = Depends(get_db),
):
    code = payload.code.strip()
    if db.get(PromoCode, code):
        raise ConflictError("Promo code already exists")

    db.add(PromoCode(
        code=code,
        discount=Decimal(str(payload.discount)) / Decimal("100"),
        expires_at=_naive_utc(payload.expiration_date),
    ))
    db.commit()
    return {"message": "Promo code created successfully", "code": code}


@router.post("/validate", response_model=PromoValidateOut)
def validate_promo_code(payload: PromoValidateIn, db: Session = Depends(get_db)) -> PromoValidateOut:
    result = validate_promo(db, payload.promo_code)
    if not result.valid:
        return PromoValidateOut(success=False, message=result.message)
    return PromoValidateOut(success=True, final_discount=result.discount)


@router.get("/", response_model=List[PromoOut])
def list_promos(
    ctx: RequestContext = Depends(require_admin),
    db: Session = Depends(get_db),
) -> List[PromoOut]:
    rows = db.scalars(select(PromoCode).order_by(PromoCode.created_at.asc())).all()
    if not rows:
        raise NotFoundError("Promo codes")
    return [
        PromoOut(
            code=p.code,
            discount=Decimal(str(p.discount)) * Decimal("100"),
            expiration_date=p.expires_at.replace(tzinfo=timezone.utc),
        )
        for p in rows
    ]
