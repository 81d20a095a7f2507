from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.errors import NotFoundError, ValidationError
from app.core.role_guards import RequestContext, require_admin
from app.models.location import Location
from app.schemas.catalog import MessageOut
from app.schemas.misc import LocationOut
from app.services.storage import LocalObjectStore, get_object_store

router = APIRouter(prefix="/locations", tags=["locations"])


def _get_location(db: Session, location_id: int) -> Location:
    loc = db.get(Location, location_id)
    if not loc:
        raise NotFoundError("Location")
    return loc


def _require_fields(name: str, address: str) -> None:
    if not (name or "").strip() or not (address or "").strip():
        raise ValidationError("Location name and address are required")


@router.post("/", response_model=LocationOut, status_code=201)
def create_location(
    name: str = Form(...),
    address: str = Form(...),
    image: Optional[UploadFile] = File(default=None),
    ctx: RequestContext = Depends(require_admin),
    db: Session = Depends(get_db),
    store: LocalObjectStore = Depends(get_object_store),
) -> LocationOut:
    _require_fields(name, address)

    image_url = None
    if image is not None and image.filename:
        image_url = store.upload(image.file.read(), "locations", image.filename, image.content_type)

    loc = Location(name=name.strip(), address=address.strip(), image_url=image_url)
    db.add(loc)
    db.commit()
    db.refresh(loc)
    return LocationOut.model_validate(loc)


@router.get("/", response_model=List[LocationOut])
def list_locations(db: Session = Depends(get_db)) -> List[LocationOut]:
    rows = db.scalars(select(Location).order_by(Location.id)).all()
    return [LocationOut.model_validate(r) for r in rows]


@router.put("/{location_id}", response_model=LocationOut)
def update_location(
    location_id: int,
    name: str = Form(...),
    address: str = Form(...),
    image: Optional[UploadFile] = File(default=None),
    ctx: RequestContext = Depends(require_admin),
    db: Session = Depends(get_db),
    store: LocalObjectStore = Depends(get_object_store),
) -> LocationOut:
    _require_fields(name, address)
    loc = _get_location(db, location_id)

    if image is not None and image.filename:
        old_url = loc.image_url
        loc.image_url = store.upload(image.file.read(), "locations", image.filename, image.content_type)
        if old_url:
            store.delete(old_url)

    loc.name = name.strip()
    loc.address = address.strip()
    db.commit()
    db.refresh(loc)
    return LocationOut.model_validate(loc)


@router.delete("/{location_id}", response_model=MessageOut)
def delete_location(
    location_id: int,
    ctx: RequestContext = Depends(require_admin),
    db: Session = Depends(get_db),
    store: LocalObjectStore = Depends(get_object_store),
) -> MessageOut:
    loc = _get_location(db, location_id)
    image_url = loc.image_url

    db.delete(loc)
    db.commit()

    if image_url:
        store.delete(image_url)
    return MessageOut(message="Location deleted successfully")
