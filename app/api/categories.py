from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.errors import ConflictError
from app.core.role_guards import RequestContext, require_admin
from app.models.catalog import Category
from app.schemas.catalog import CategoryCreate, CategoryOut, MessageOut
from app.services.catalog import get_category
from app.services.storage import LocalObjectStore, get_object_store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/categories", tags=["categories"])


@router.get("/", response_model=list[str])
def list_categories(db: Session = Depends(get_db)) -> list[str]:
    return list(db.scalars(select(Category.name).order_by(Category.id.asc())).all())


@router.post("/", response_model=CategoryOut, status_code=201)
def create_category(
    payload: CategoryCreate,
    ctx: RequestContext = Depends(require_admin),
    db: Session = Depends(get_db),
) -> CategoryOut:
    name = payload.name.strip()
    if db.scalar(select(Category).where(Category.name == name)):
        raise ConflictError("Category already exists")

    db.add(Category(name=name))
    db.commit()
    return CategoryOut(category_id=name, category_name=name)


@router.delete("/{category}", response_model=MessageOut)
def delete_category(
    category: str,
    ctx: RequestContext = Depends(require_admin),
    db: Session = Depends(get_db),
    store: LocalObjectStore = Depends(get_object_store),
) -> MessageOut:
    cat = get_category(db, category)
    images = [d.image_url for d in cat.dishes if d.image_url]
    removed = len(cat.dishes)

    db.delete(cat)
    db.commit()

    for url in images:
        store.delete(url)

    logger.info(f"Category '{category}' deleted with {removed} dishes")
    return MessageOut(message="Category and associated dishes deleted successfully", updated=removed)
