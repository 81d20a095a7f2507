# app/core/role_guards.py
"""
Контекст запроса и проверки ролей.

Пользователь определяется из подписанной сессии в AuthContextMiddleware
и кладётся в request.state.user. Роуты получают RequestContext через
Depends и передают его в сервисы явно.

Роли:
  admin — каталог, цены, промокоды, заказы всех клиентов, рассылки
  user  — корзина, свои заказы, баллы
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from fastapi import HTTPException, Request

from app.core.config import settings
from app.core.errors import AuthenticationError, AuthorizationError


@dataclass(frozen=True)
class RequestContext:
    user_id: int
    email: str = ""
    role: str = "user"

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


def _get_user(request: Request) -> dict:
    return getattr(request.state, "user", None) or {}


def optional_user(request: Request) -> Optional[RequestContext]:
    """Авторизация необязательна (каталог видят и гости)."""
    user = _get_user(request)
    if not user.get("id"):
        return None
    return RequestContext(
        user_id=int(user["id"]),
        email=str(user.get("email") or ""),
        role=str(user.get("role") or "user").lower(),
    )


def require_user(request: Request) -> RequestContext:
    ctx = optional_user(request)
    if ctx is None:
        raise AuthenticationError("Authentication required")
    return ctx


def require_admin(request: Request) -> RequestContext:
    ctx = require_user(request)
    if not ctx.is_admin:
        raise AuthorizationError("Admin access required")
    return ctx


def feature_guard(flag: str):
    """Depends-фабрика: роут недоступен, если флаг ENABLE_* выключен в настройках."""
    def _check() -> None:
        if not getattr(settings, flag, True):
            raise HTTPException(status_code=404, detail="Feature disabled")

    return _check
