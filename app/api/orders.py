from __future__ import annotations

from typing import Dict, List

from fastapi import APIRouter, Depends
from sqlalchemy import desc, func, select
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.errors import NotFoundError
from app.core.role_guards import RequestContext, require_admin, require_user
from app.models.order import Order
from app.schemas.order import OrderCountOut, OrderCreate, OrderCreatedOut, OrderOut, OrderStatusIn
from app.services.orders import daily_summary, get_user_order, place_order

router = APIRouter(prefix="/orders", tags=["orders"])


@router.post("/", response_model=OrderCreatedOut, status_code=201)
def create_order(
    payload: OrderCreate,
    ctx: RequestContext = Depends(require_user),
    db: Session = Depends(get_db),
) -> OrderCreatedOut:
    order, earned = place_order(db, ctx, payload)
    return OrderCreatedOut(
        message="Order placed successfully",
        order=OrderOut.model_validate(order),
        rewards_earned=earned,
        new_reward_value=int(order.user.points or 0),
    )


@router.get("/", response_model=List[OrderOut])
def list_all_orders(
    ctx: RequestContext = Depends(require_admin),
    db: Session = Depends(get_db),
) -> List[OrderOut]:
    rows = db.scalars(select(Order).order_by(desc(Order.id))).all()
    return [OrderOut.model_validate(o) for o in rows]


@router.get("/mine", response_model=List[OrderOut])
def list_my_orders(ctx: RequestContext = Depends(require_user), db: Session = Depends(get_db)) -> List[OrderOut]:
    rows = db.scalars(select(Order).where(Order.user_id == ctx.user_id).order_by(desc(Order.id))).all()
    return [OrderOut.model_validate(o) for o in rows]


@router.get("/total-count", response_model=OrderCountOut)
def total_order_count(
    ctx: RequestContext = Depends(require_admin),
    db: Session = Depends(get_db),
) -> OrderCountOut:
    return OrderCountOut(total_orders=int(db.scalar(select(func.count(Order.id))) or 0))


@router.get("/daily-summary", response_model=Dict[str, int])
def order_daily_summary(
    ctx: RequestContext = Depends(require_admin),
    db: Session = Depends(get_db),
) -> Dict[str, int]:
    rows = db.scalars(select(Order)).all()
    if not rows:
        raise NotFoundError("Orders")
    return daily_summary(rows)


@router.get("/{order_id}", response_model=OrderOut)
def get_order(
    order_id: int,
    ctx: RequestContext = Depends(require_user),
    db: Session = Depends(get_db),
) -> OrderOut:
    return OrderOut.model_validate(get_user_order(db, ctx.user_id, order_id))


@router.patch("/{order_id}", response_model=OrderOut)
def update_my_order_status(
    order_id: int,
    payload: OrderStatusIn,
    ctx: RequestContext = Depends(require_user),
    db: Session = Depends(get_db),
) -> OrderOut:
    order = get_user_order(db, ctx.user_id, order_id)
    order.status = payload.status
    db.commit()
    db.refresh(order)
    return OrderOut.model_validate(order)


@router.patch("/{order_id}/admin", response_model=OrderOut)
def update_order_status_admin(
    order_id: int,
    payload: OrderStatusIn,
    ctx: RequestContext = Depends(require_admin),
    db: Session = Depends(get_db),
) -> OrderOut:
    order = db.get(Order, order_id)
    if not order:
        raise NotFoundError("Order")
    order.status = payload.status
    db.commit()
    db.refresh(order)
    return OrderOut.model_validate(order)
