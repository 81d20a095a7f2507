# app/api/dishes.py
from __future__ import annotations

import json
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.database import get_db
from app.core.errors import ValidationError
from app.core.role_guards import RequestContext, optional_user, require_admin
from app.models.catalog import Category, Dish
from app.models.user import User
from app.schemas.catalog import (
    AvailabilityIn,
    DiscountIn,
    DishAdminOut,
    DishCreatedOut,
    DishIn,
    DishOut,
    DishUpdate,
    MessageOut,
)
from app.services.catalog import (
    dish_view,
    get_category,
    get_dish,
    get_or_create_category,
    member_price_for,
    special_offer_view,
)
from app.services.storage import LocalObjectStore, get_object_store

router = APIRouter(prefix="/dishes", tags=["dishes"])


# ── Helpers ────────────────────────────────────────────────
def _parse_json(raw: Optional[str], model):
    if not raw:
        raise ValidationError("dish_data is required")
    try:
        return model.model_validate(json.loads(raw))
    except json.JSONDecodeError:
        raise ValidationError("dish_data must be valid JSON")
    except PydanticValidationError as e:
        raise ValidationError(
            "Invalid dish data",
            errors=[{"field": ".".join(str(p) for p in err["loc"]), "message": err["msg"]} for err in e.errors()],
        )


def _viewer(db: Session, ctx: Optional[RequestContext]) -> Optional[User]:
    # без gold-программы все видят обычную цену
    if ctx is None or not settings.ENABLE_GOLD_MEMBERSHIP:
        return None
    return db.get(User, ctx.user_id)


def _admin_view(dish: Dish) -> DishAdminOut:
    return DishAdminOut(**dish_view(dish), member_price=dish.member_price)


def _replace_image(store: LocalObjectStore, dish: Dish, image: UploadFile, category: str) -> None:
    old_url = dish.image_url
    dish.image_url = store.upload(image.file.read(), category, image.filename or "dish", image.content_type)
    if old_url:
        store.delete(old_url)


# ── Public ─────────────────────────────────────────────────
@router.get("/", response_model=List[DishOut])
def list_all_dishes(
    ctx: Optional[RequestContext] = Depends(optional_user),
    db: Session = Depends(get_db),
) -> List[DishOut]:
    viewer = _viewer(db, ctx)
    rows = db.scalars(select(Dish).join(Category).order_by(Category.id.asc(), Dish.id.asc())).all()
    return [DishOut(**dish_view(d, viewer)) for d in rows]


@router.get("/category/{category}", response_model=List[DishOut])
def list_dishes_by_category(
    category: str,
    ctx: Optional[RequestContext] = Depends(optional_user),
    db: Session = Depends(get_db),
) -> List[DishOut]:
    viewer = _viewer(db, ctx)
    cat = get_category(db, category)
    rows = db.scalars(
        select(Dish).where(Dish.category_id == cat.id, Dish.available.is_(True)).order_by(Dish.id.asc())
    ).all()
    return [DishOut(**dish_view(d, viewer, category=cat.name)) for d in rows]


@router.get("/special-offers", response_model=List[DishOut])
def special_offers(db: Session = Depends(get_db)) -> List[DishOut]:
    rows = db.scalars(
        select(Dish).where(Dish.offer_available.is_(True), Dish.available.is_(True)).order_by(Dish.id.asc())
    ).all()
    return [DishOut(**special_offer_view(d)) for d in rows]


# ── Admin ──────────────────────────────────────────────────
@router.post("/", response_model=DishCreatedOut, status_code=201)
def add_dish(
    dish_data: str = Form(...),
    image: Optional[UploadFile] = File(default=None),
    ctx: RequestContext = Depends(require_admin),
    db: Session = Depends(get_db),
    store: LocalObjectStore = Depends(get_object_store),
) -> DishCreatedOut:
    payload: DishIn = _parse_json(dish_data, DishIn)
    cat = get_or_create_category(db, payload.category.strip())

    image_url = ""
    if image is not None and image.filename:
        image_url = store.upload(image.file.read(), cat.name, image.filename, image.content_type)

    dish = Dish(
        category_id=cat.id,
        name=payload.name,
        description=payload.description,
        price=payload.price,
        member_price=member_price_for(db, payload.price),
        available=True,
        image_url=image_url or None,
    )
    db.add(dish)
    db.commit()
    db.refresh(dish)
    return DishCreatedOut(dish_id=dish.id, image_url=image_url)


@router.get("/admin/{category}", response_model=List[DishAdminOut])
def list_dishes_admin(
    category: str,
    ctx: RequestContext = Depends(require_admin),
    db: Session = Depends(get_db),
) -> List[DishAdminOut]:
    cat = get_category(db, category)
    rows = db.scalars(select(Dish).where(Dish.category_id == cat.id).order_by(Dish.id.asc())).all()
    return [_admin_view(d) for d in rows]


@router.put("/{category}/{dish_id}", response_model=DishAdminOut)
def update_dish(
    category: str,
    dish_id: int,
    dish_data: str = Form(...),
    image: Optional[UploadFile] = File(default=None),
    ctx: RequestContext = Depends(require_admin),
    db: Session = Depends(get_db),
    store: LocalObjectStore = Depends(get_object_store),
) -> DishAdminOut:
    dish = get_dish(db, category, dish_id)
    payload: DishUpdate = _parse_json(dish_data, DishUpdate)

    if payload.name is not None:
        dish.name = payload.name
    if payload.description is not None:
        dish.description = payload.description
    if payload.price is not None:
        dish.price = payload.price
        dish.member_price = member_price_for(db, payload.price)
    if payload.available is not None:
        dish.available = payload.available

    if image is not None and image.filename:
        _replace_image(store, dish, image, category)
    elif payload.image_url is not None:
        dish.image_url = payload.image_url

    db.commit()
    db.refresh(dish)
    return _admin_view(dish)


@router.patch("/admin/{category}/{dish_id}", response_model=DishAdminOut)
def patch_dish_admin(
    category: str,
    dish_id: int,
    payload: DishUpdate,
    ctx: RequestContext = Depends(require_admin),
    db: Session = Depends(get_db),
) -> DishAdminOut:
    dish = get_dish(db, category, dish_id)

    data = payload.model_dump(exclude_unset=True)
    for field, value in data.items():
        setattr(dish, field, value)
    if "price" in data and data["price"] is not None:
        dish.member_price = member_price_for(db, data["price"])

    db.commit()
    db.refresh(dish)
    return _admin_view(dish)


@router.delete("/{category}/{dish_id}", response_model=MessageOut)
def delete_dish(
    category: str,
    dish_id: int,
    ctx: RequestContext = Depends(require_admin),
    db: Session = Depends(get_db),
    store: LocalObjectStore = Depends(get_object_store),
) -> MessageOut:
    dish = get_dish(db, category, dish_id)
    image_url = dish.image_url

    db.delete(dish)
    db.commit()

    if image_url:
        store.delete(image_url)
    return MessageOut(message="Dish deleted successfully")


@router.put("/discount/{category}/{dish_id}", response_model=DishAdminOut)
def apply_discount(
    category: str,
    dish_id: int,
    payload: DiscountIn,
    ctx: RequestContext = Depends(require_admin),
    db: Session = Depends(get_db),
) -> DishAdminOut:
    dish = get_dish(db, category, dish_id)
    dish.offer_available = True
    dish.discount = payload.discount
    db.commit()
    db.refresh(dish)
    return _admin_view(dish)


@router.patch("/availability", response_model=DishAdminOut)
def toggle_availability(
    payload: AvailabilityIn,
    ctx: RequestContext = Depends(require_admin),
    db: Session = Depends(get_db),
) -> DishAdminOut:
    dish = get_dish(db, payload.category, payload.id)
    dish.available = not bool(dish.available)
    db.commit()
    db.refresh(dish)
    return _admin_view(dish)
