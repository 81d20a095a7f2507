from __future__ import annotations

import logging
from decimal import Decimal
from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.core.errors import NotFoundError
from app.core.pricing import check_percent, compute_discounted_price, compute_member_price
from app.models.catalog import Category, Dish
from app.models.settings_model import GoldPrice
from app.models.user import User

logger = logging.getLogger(__name__)


def get_gold_row(db: Session) -> Optional[GoldPrice]:
    return db.scalar(select(GoldPrice).order_by(GoldPrice.id.asc()).limit(1))


def get_gold_percent(db: Session) -> Optional[Decimal]:
    row = get_gold_row(db)
    return Decimal(str(row.percent)) if row else None


def get_category(db: Session, name: str) -> Category:
    cat = db.scalar(select(Category).where(Category.name == name))
    if not cat:
        raise NotFoundError("Category")
    return cat


def get_or_create_category(db: Session, name: str) -> Category:
    cat = db.scalar(select(Category).where(Category.name == name))
    if cat:
        return cat
    cat = Category(name=name)
    db.add(cat)
    db.flush()
    return cat


def get_dish(db: Session, category: str, dish_id: int) -> Dish:
    dish = db.scalar(
        select(Dish)
        .join(Category, Category.id == Dish.category_id)
        .where(Category.name == category, Dish.id == dish_id)
    )
    if not dish:
        raise NotFoundError("Dish")
    return dish


def member_price_for(db: Session, price) -> Decimal:
    # без заданного процента gold-цена совпадает с обычной
    percent = get_gold_percent(db)
    if percent is None:
        return compute_member_price(price, 100)
    return compute_member_price(price, percent)


def _reprice(dishes, percent) -> int:
    n = 0
    for d in dishes:
        d.member_price = compute_member_price(d.price, percent)
        n += 1
    return n


def set_gold_percent(db: Session, percent) -> int:
    """Сохраняет глобальный процент и пересчитывает member_price всех блюд."""
    percent = check_percent(percent, "gold_price")
    row = get_gold_row(db)
    if row:
        row.percent = percent
    else:
        row = GoldPrice(percent=percent)
        db.add(row)

    updated = _reprice(db.scalars(select(Dish)).all(), percent)
    db.commit()
    logger.info(f"Gold percent set to {percent}, repriced {updated} dishes")
    return updated


def reapply_gold_percent(db: Session) -> int:
    percent = get_gold_percent(db)
    if percent is None:
        raise NotFoundError("Gold price")
    updated = _reprice(db.scalars(select(Dish)).all(), percent)
    db.commit()
    return updated


def set_category_gold_percent(db: Session, category: str, percent) -> int:
    """Как set_gold_percent, но только для одной категории: gold платит percent% от цены."""
    percent = check_percent(percent, "gold_price")
    cat = get_category(db, category)
    dishes = db.scalars(select(Dish).where(Dish.category_id == cat.id)).all()
    if not dishes:
        raise NotFoundError("Dishes in the specified category")
    updated = _reprice(dishes, percent)
    db.commit()
    return updated


def dish_view(dish: Dish, user: Optional[User] = None, category: Optional[str] = None) -> dict:
    """Представление блюда для клиента: gold-участник видит member_price как price."""
    price = Decimal(str(dish.price))
    if user is not None and user.gold_member:
        price = Decimal(str(dish.member_price))
    return {
        "dish_id": dish.id,
        "category": category or (dish.category.name if dish.category else None),
        "name": dish.name,
        "description": dish.description,
        "price": price,
        "discount": dish.discount,
        "offer_available": bool(dish.offer_available),
        "available": bool(dish.available),
        "image_url": dish.image_url,
    }


def special_offer_view(dish: Dish) -> dict:
    out = dish_view(dish)
    out["price"] = compute_discounted_price(dish.price, dish.discount or 0)
    return out
