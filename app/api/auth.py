# app/api/auth.py
from __future__ import annotations

import logging
from datetime import datetime

from fastapi import APIRouter, Body, Depends, Request
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.errors import AuthenticationError, ConflictError, ValidationError
from app.core.role_guards import RequestContext, require_user
from app.core.security import (
    hash_password,
    is_strong_password,
    is_valid_phone,
    normalize_email,
    verify_password,
)
from app.models.user import User
from app.schemas.user import ChangePasswordIn, LoginIn, RegisterIn, UserOut
from app.services.users import get_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


def _start_session(request: Request, user: User) -> None:
    request.session.clear()
    request.session["uid"] = user.id
    request.session["email"] = user.email
    request.session["role"] = user.role


def _parse_registration(body: dict) -> RegisterIn:
    # ошибки схемы (в т.ч. EmailStr) отдаём тем же списком field/message, что и ручные проверки
    try:
        return RegisterIn.model_validate(body)
    except PydanticValidationError as e:
        raise ValidationError(
            "Validation failed",
            errors=[
                {"field": ".".join(str(p) for p in err["loc"]) or "body", "message": err["msg"]}
                for err in e.errors()
            ],
        )


def _validate_registration(payload: RegisterIn) -> list[dict]:
    errors = []
    if len((payload.first_name or "").strip()) < 2:
        errors.append({"field": "first_name", "message": "First name must be at least 2 characters"})
    if len((payload.last_name or "").strip()) < 2:
        errors.append({"field": "last_name", "message": "Last name must be at least 2 characters"})
    if not is_strong_password(payload.password):
        errors.append({
            "field": "password",
            "message": "Password must be at least 8 characters with uppercase, lowercase and a number",
        })
    if payload.phone and not is_valid_phone(payload.phone):
        errors.append({"field": "phone", "message": "Phone number must have 10 to 15 digits"})
    return errors


@router.post("/register", response_model=UserOut, status_code=201)
def register(request: Request, body: dict = Body(...), db: Session = Depends(get_db)) -> UserOut:
    payload = _parse_registration(body)
    errors = _validate_registration(payload)
    if errors:
        raise ValidationError("Validation failed", errors=errors)

    email = normalize_email(payload.email)
    if db.scalar(select(User).where(User.email == email)):
        raise ConflictError("Email already registered")

    salt, pw_hash = hash_password(payload.password)
    user = User(
        email=email,
        first_name=payload.first_name.strip(),
        last_name=payload.last_name.strip(),
        phone=payload.phone,
        address=payload.address,
        role="user",
        gold_member=False,
        points=0,
        password_salt=salt,
        password_hash=pw_hash,
    )
    db.add(user)
    db.commit()
    db.refresh(user)

    _start_session(request, user)
    logger.info(f"User registered: {user.id}")
    return UserOut.model_validate(user)


@router.post("/login", response_model=UserOut)
def login(payload: LoginIn, request: Request, db: Session = Depends(get_db)) -> UserOut:
    user = db.scalar(select(User).where(User.email == normalize_email(payload.email)))
    if not user or not user.is_active:
        raise AuthenticationError("Invalid email or password")
    if not verify_password(payload.password, user.password_salt, user.password_hash):
        raise AuthenticationError("Invalid email or password")

    user.last_login_at = datetime.utcnow()
    db.commit()
    db.refresh(user)

    _start_session(request, user)
    return UserOut.model_validate(user)


@router.post("/logout")
def logout(request: Request):
    request.session.clear()
    return {"message": "Logged out successfully"}


@router.post("/change-password")
def change_password(
    payload: ChangePasswordIn,
    ctx: RequestContext = Depends(require_user),
    db: Session = Depends(get_db),
):
    user = get_user(db, ctx.user_id)
    if not verify_password(payload.current_password, user.password_salt, user.password_hash):
        raise AuthenticationError("Current password is incorrect")
    if not is_strong_password(payload.new_password):
        raise ValidationError("New password must be at least 8 characters with uppercase, lowercase and a number")

    user.password_salt, user.password_hash = hash_password(payload.new_password)
    db.commit()
    return {"message": "Password changed successfully"}


@router.get("/me", response_model=UserOut)
def me(ctx: RequestContext = Depends(require_user), db: Session = Depends(get_db)) -> UserOut:
    return UserOut.model_validate(get_user(db, ctx.user_id))
