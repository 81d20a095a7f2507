from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.errors import NotFoundError
from app.core.role_guards import RequestContext, feature_guard, require_admin
from app.schemas.catalog import CategoryGoldPriceIn, GoldPriceIn, GoldPriceOut, MessageOut
from app.services.catalog import (
    get_gold_percent,
    reapply_gold_percent,
    set_category_gold_percent,
    set_gold_percent,
)

router = APIRouter(
    prefix="/gold-price",
    tags=["gold-price"],
    dependencies=[Depends(feature_guard("ENABLE_GOLD_MEMBERSHIP"))],
)


@router.get("", response_model=GoldPriceOut, include_in_schema=False)
@router.get("/", response_model=GoldPriceOut)
def read_gold_price(db: Session = Depends(get_db)) -> GoldPriceOut:
    percent = get_gold_percent(db)
    if percent is None:
        raise NotFoundError("Gold price")
    return GoldPriceOut(gold_price=percent)


@router.post("/", response_model=MessageOut, status_code=201)
def update_gold_price(
    payload: GoldPriceIn,
    ctx: RequestContext = Depends(require_admin),
    db: Session = Depends(get_db),
) -> MessageOut:
    updated = set_gold_percent(db, payload.gold_price)
    return MessageOut(message="Gold price updated successfully", updated=updated)


@router.post("/apply-all", response_model=MessageOut)
def apply_gold_price_to_all(
    ctx: RequestContext = Depends(require_admin),
    db: Session = Depends(get_db),
) -> MessageOut:
    updated = reapply_gold_percent(db)
    return MessageOut(message="Discount applied successfully to all dishes", updated=updated)


@router.post("/category", response_model=MessageOut)
def update_category_gold_price(
    payload: CategoryGoldPriceIn,
    ctx: RequestContext = Depends(require_admin),
    db: Session = Depends(get_db),
) -> MessageOut:
    updated = set_category_gold_percent(db, payload.category, payload.gold_price)
    return MessageOut(message="Prices updated successfully", updated=updated)
