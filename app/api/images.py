from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, File, Form, UploadFile

from app.core.errors import NotFoundError, ValidationError
from app.core.role_guards import RequestContext, require_admin
from app.schemas.catalog import MessageOut
from app.schemas.misc import ImageOut, ImagesUploadedOut
from app.services.storage import LocalObjectStore, get_object_store

router = APIRouter(prefix="/images", tags=["images"])

MAX_IMAGES_PER_UPLOAD = 50


@router.post("/", response_model=ImagesUploadedOut, status_code=201)
def upload_images(
    directory: str = Form(...),
    images: List[UploadFile] = File(...),
    ctx: RequestContext = Depends(require_admin),
    store: LocalObjectStore = Depends(get_object_store),
) -> ImagesUploadedOut:
    if not images:
        raise ValidationError("No files uploaded")
    if len(images) > MAX_IMAGES_PER_UPLOAD:
        raise ValidationError(f"At most {MAX_IMAGES_PER_UPLOAD} files per upload")
    if not directory.strip():
        raise ValidationError("No directory specified")

    urls = [store.upload(f.file.read(), directory, f.filename or "image", f.content_type) for f in images]
    return ImagesUploadedOut(message="Images uploaded successfully", image_urls=urls)


@router.get("/", response_model=List[ImageOut])
def list_images(
    ctx: RequestContext = Depends(require_admin),
    store: LocalObjectStore = Depends(get_object_store),
) -> List[ImageOut]:
    return [ImageOut(**f) for f in store.list()]


@router.delete("/", response_model=MessageOut)
def delete_images(
    ctx: RequestContext = Depends(require_admin),
    store: LocalObjectStore = Depends(get_object_store),
) -> MessageOut:
    removed = store.delete_all()
    if removed == 0:
        raise NotFoundError("Images")
    return MessageOut(message="All images deleted successfully", updated=removed)
