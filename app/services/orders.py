from __future__ import annotations

import logging
from collections import OrderedDict
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.errors import NotFoundError, ValidationError
from app.core.pricing import apply_promo_discount
from app.core.role_guards import RequestContext
from app.models.cart import CartItem
from app.models.catalog import Dish
from app.models.order import Order, OrderItem
from app.models.user import User
from app.schemas.order import OrderCreate
from app.services.promos import require_promo
from app.services.rewards import accrue_for_order, get_ledger
from app.services.users import get_user

logger = logging.getLogger(__name__)


def _q2(x: Decimal) -> Decimal:
    return x.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def _requested_items(db: Session, user: User, payload: OrderCreate) -> list[tuple[int, int]]:
    if payload.items:
        return [(i.dish_id, i.quantity) for i in payload.items]
    cart = db.scalars(select(CartItem).where(CartItem.user_id == user.id).order_by(CartItem.id)).all()
    return [(c.dish_id, int(c.quantity)) for c in cart]


def _merge(pairs: list[tuple[int, int]]) -> "OrderedDict[int, int]":
    merged: OrderedDict[int, int] = OrderedDict()
    for dish_id, qty in pairs:
        merged[dish_id] = merged.get(dish_id, 0) + qty
    return merged


def place_order(db: Session, ctx: RequestContext, payload: OrderCreate, now: datetime | None = None) -> tuple[Order, int]:
    """
    Оформление заказа:
      1) позиции из payload или корзины, цены из каталога (gold — member_price)
      2) промокод, если передан, должен быть валиден
      3) баллы: floor(total / dollars) по текущему курсу
    Возвращает (заказ, начисленные баллы).
    """
    now = now or datetime.utcnow()
    user = get_user(db, ctx.user_id)

    # курс нужен до записи заказа, без него заказ не оформляем
    if settings.ENABLE_REWARDS:
        get_ledger(db)

    items = _merge(_requested_items(db, user, payload))
    if not items:
        raise ValidationError("Order has no items")

    order = Order(user_id=user.id, status="pending", order_date=now)
    subtotal = Decimal("0.00")
    for dish_id, qty in items.items():
        dish = db.get(Dish, dish_id)
        if not dish:
            raise NotFoundError(f"Dish {dish_id}")
        if not dish.available:
            raise ValidationError(f"Dish '{dish.name}' is not available")

        unit = Decimal(str(dish.member_price if user.gold_member else dish.price))
        subtotal += unit * qty
        order.items.append(OrderItem(dish_id=dish.id, name=dish.name, price=unit, quantity=qty))

    subtotal = _q2(subtotal)
    total = subtotal
    if payload.promo_code:
        fraction = require_promo(db, payload.promo_code, now)
        total = apply_promo_discount(subtotal, fraction)
        order.promo_code = payload.promo_code.strip()

    order.subtotal = subtotal
    order.discount = subtotal - total
    order.total_price = total
    order.payment_intent_id = payload.payment_intent_id
    order.delivery_address = payload.delivery_address or user.address
    order.comment = payload.comment

    earned = accrue_for_order(db, user, total) if settings.ENABLE_REWARDS else 0
    order.rewards_earned = earned

    db.add(order)
    if not payload.items:
        user.cart_items.clear()
    db.commit()
    db.refresh(order)

    logger.info(f"Order {order.id} placed by user {user.id}: total={total}, points +{earned}")
    return order, earned


def get_user_order(db: Session, user_id: int, order_id: int) -> Order:
    order = db.scalar(select(Order).where(Order.id == order_id, Order.user_id == user_id))
    if not order:
        raise NotFoundError("Order")
    return order


def daily_summary(orders) -> dict[str, int]:
    summary: dict[str, int] = {}
    for o in orders:
        if not o.order_date:
            continue
        day = o.order_date.strftime("%Y-%m-%d")
        summary[day] = summary.get(day, 0) + 1
    return dict(sorted(summary.items()))
