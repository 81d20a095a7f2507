from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.errors import NotFoundError, ValidationError
from app.core.role_guards import RequestContext, require_user
from app.models.cart import CartItem
from app.models.catalog import Dish
from app.schemas.cart import CartAddOut, CartItemCreate, CartItemOut, CartItemUpdate
from app.schemas.catalog import MessageOut

router = APIRouter(prefix="/cart", tags=["cart"])


def _get_item(db: Session, user_id: int, item_id: int) -> CartItem:
    item = db.scalar(select(CartItem).where(CartItem.id == item_id, CartItem.user_id == user_id))
    if not item:
        raise NotFoundError("Cart item")
    return item


@router.post("/", response_model=CartAddOut, status_code=201)
def add_to_cart(
    payload: CartItemCreate,
    ctx: RequestContext = Depends(require_user),
    db: Session = Depends(get_db),
) -> CartAddOut:
    dish = db.get(Dish, payload.dish_id)
    if not dish:
        raise NotFoundError("Dish")
    if not dish.available:
        raise ValidationError("Dish is not available")

    # то же блюдо уже в корзине — увеличиваем количество
    existing = db.scalar(
        select(CartItem).where(CartItem.user_id == ctx.user_id, CartItem.dish_id == dish.id)
    )
    if existing:
        existing.quantity = int(existing.quantity) + payload.quantity
        db.commit()
        return CartAddOut(
            message="Item added to cart successfully",
            cart_item_id=existing.id,
            quantity=existing.quantity,
            merged=True,
        )

    item = CartItem(
        user_id=ctx.user_id,
        dish_id=dish.id,
        name=dish.name,
        price=dish.price,
        quantity=payload.quantity,
    )
    db.add(item)
    db.commit()
    db.refresh(item)
    return CartAddOut(message="Item added to cart successfully", cart_item_id=item.id, quantity=item.quantity)


@router.get("/", response_model=List[CartItemOut])
def get_cart(ctx: RequestContext = Depends(require_user), db: Session = Depends(get_db)) -> List[CartItemOut]:
    rows = db.scalars(select(CartItem).where(CartItem.user_id == ctx.user_id).order_by(CartItem.id)).all()
    return [CartItemOut.model_validate(r) for r in rows]


@router.put("/{item_id}", response_model=CartItemOut)
def update_cart_item(
    item_id: int,
    payload: CartItemUpdate,
    ctx: RequestContext = Depends(require_user),
    db: Session = Depends(get_db),
) -> CartItemOut:
    item = _get_item(db, ctx.user_id, item_id)
    item.quantity = payload.quantity
    db.commit()
    db.refresh(item)
    return CartItemOut.model_validate(item)


@router.delete("/{item_id}", response_model=MessageOut)
def delete_cart_item(
    item_id: int,
    ctx: RequestContext = Depends(require_user),
    db: Session = Depends(get_db),
) -> MessageOut:
    item = _get_item(db, ctx.user_id, item_id)
    db.delete(item)
    db.commit()
    return MessageOut(message="Cart item deleted successfully")
