from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, Depends, File, UploadFile
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.errors import AuthorizationError, ValidationError
from app.core.role_guards import RequestContext, feature_guard, require_admin, require_user
from app.core.security import is_valid_phone
from app.models.user import User
from app.schemas.user import UserOut, UserRewardOut, UserUpdate
from app.services.users import get_user
from app.services.storage import LocalObjectStore, get_object_store

router = APIRouter(prefix="/users", tags=["users"])


def _self_or_admin(ctx: RequestContext, user_id: int) -> None:
    if ctx.user_id != user_id and not ctx.is_admin:
        raise AuthorizationError("You can only access your own profile")


@router.get("/", response_model=list[UserOut])
def list_users(
    ctx: RequestContext = Depends(require_admin),
    db: Session = Depends(get_db),
) -> list[UserOut]:
    users = db.query(User).order_by(User.id.desc()).all()
    return [UserOut.model_validate(u) for u in users]


@router.get("/me/rewards", response_model=UserRewardOut, dependencies=[Depends(feature_guard("ENABLE_REWARDS"))])
def my_rewards(ctx: RequestContext = Depends(require_user), db: Session = Depends(get_db)) -> UserRewardOut:
    user = get_user(db, ctx.user_id)
    return UserRewardOut(user_id=user.id, points=int(user.points or 0))


@router.post("/me/image", response_model=UserOut)
def upload_user_image(
    image: UploadFile = File(...),
    ctx: RequestContext = Depends(require_user),
    db: Session = Depends(get_db),
    store: LocalObjectStore = Depends(get_object_store),
) -> UserOut:
    user = get_user(db, ctx.user_id)
    old_url = user.image_url

    user.image_url = store.upload(image.file.read(), "users", image.filename or "avatar", image.content_type)
    db.commit()
    db.refresh(user)

    if old_url:
        store.delete(old_url)
    return UserOut.model_validate(user)


@router.get("/{user_id}", response_model=UserOut)
def get_user_by_id(
    user_id: int,
    ctx: RequestContext = Depends(require_user),
    db: Session = Depends(get_db),
) -> UserOut:
    _self_or_admin(ctx, user_id)
    return UserOut.model_validate(get_user(db, user_id))


@router.put("/{user_id}", response_model=UserOut)
def update_user(
    user_id: int,
    payload: UserUpdate,
    ctx: RequestContext = Depends(require_user),
    db: Session = Depends(get_db),
) -> UserOut:
    _self_or_admin(ctx, user_id)
    user = get_user(db, user_id)

    if payload.phone is not None and not is_valid_phone(payload.phone):
        raise ValidationError("Phone number must have 10 to 15 digits")

    if payload.first_name is not None:
        user.first_name = payload.first_name.strip()
    if payload.last_name is not None:
        user.last_name = payload.last_name.strip()
    if payload.phone is not None:
        user.phone = payload.phone
    if payload.address is not None:
        user.address = payload.address

    db.commit()
    db.refresh(user)
    return UserOut.model_validate(user)


@router.put(
    "/{user_id}/gold-member",
    response_model=UserOut,
    dependencies=[Depends(feature_guard("ENABLE_GOLD_MEMBERSHIP"))],
)
def make_gold_member(
    user_id: int,
    ctx: RequestContext = Depends(require_admin),
    db: Session = Depends(get_db),
) -> UserOut:
    user = get_user(db, user_id)
    if not user.gold_member:
        user.gold_member = True
        user.gold_member_since = datetime.utcnow()
        db.commit()
        db.refresh(user)
    return UserOut.model_validate(user)
