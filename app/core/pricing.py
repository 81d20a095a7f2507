"""
Расчёт цен для gold-участников, проверка промокодов и арифметика бонусных баллов.

Все функции чистые: никакого I/O, записи приходят уже загруженными
из базы, результат вызывающий код сохраняет сам.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation, ROUND_FLOOR, ROUND_HALF_UP
from typing import Optional

from app.core.errors import ValidationError

REDEMPTION_POINTS = 10

_CENT = Decimal("0.01")
_HUNDRED = Decimal("100")


@dataclass(frozen=True)
class RewardLedger:
    # `points` баллов стоят `dollars` долларов; за каждые `dollars` в заказе начисляется балл
    points: int
    dollars: Decimal


@dataclass(frozen=True)
class PromoRecord:
    code: str
    discount: Decimal  # доля 0..1
    expires_at: datetime


@dataclass(frozen=True)
class PromoCheck:
    valid: bool
    expired: bool = False
    discount: Optional[Decimal] = None
    message: str = ""


@dataclass(frozen=True)
class Redemption:
    new_balance: int
    dollar_value: Decimal


def _q2(x: Decimal) -> Decimal:
    return x.quantize(_CENT, rounding=ROUND_HALF_UP)


def to_decimal(value, field: str = "value") -> Decimal:
    if value is None or isinstance(value, bool):
        raise ValidationError(f"{field} must be a number")
    try:
        d = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValidationError(f"{field} must be a number")
    if not d.is_finite():
        raise ValidationError(f"{field} must be a finite number")
    return d


def check_percent(percent, field: str) -> Decimal:
    p = to_decimal(percent, field)
    if p < 0 or p > _HUNDRED:
        raise ValidationError(f"{field} must be between 0 and 100")
    return p


def _check_price(price, field: str = "price") -> Decimal:
    p = to_decimal(price, field)
    if p < 0:
        raise ValidationError(f"{field} must be >= 0")
    return p


def compute_member_price(base_price, percent) -> Decimal:
    """Цена для gold-участника: base_price × percent / 100, округление до центов."""
    base = _check_price(base_price, "base_price")
    pct = check_percent(percent, "percent")
    return _q2(base * pct / _HUNDRED)


def compute_discounted_price(base_price, discount_percent) -> Decimal:
    """Цена спецпредложения: base_price за вычетом discount_percent процентов."""
    base = _check_price(base_price, "base_price")
    pct = check_percent(discount_percent, "discount")
    return _q2(base - base * pct / _HUNDRED)


def _epoch_seconds(dt: datetime) -> int:
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return int(dt.timestamp())


def check_promo(promo: Optional[PromoRecord], now: datetime) -> PromoCheck:
    """
    Проверка уже загруженного промокода.
    Граница: now == expires_at ещё валиден, сравнение с точностью до секунды.
    """
    if promo is None:
        return PromoCheck(valid=False, message="Invalid promo code")

    if _epoch_seconds(now) > _epoch_seconds(promo.expires_at):
        return PromoCheck(valid=False, expired=True, message="Promo code expired")

    discount = to_decimal(promo.discount, "discount")
    if discount < 0 or discount > 1:
        raise ValidationError("Promo discount must be between 0 and 1")
    return PromoCheck(valid=True, discount=discount)


def apply_promo_discount(total, discount) -> Decimal:
    t = _check_price(total, "total")
    d = to_decimal(discount, "discount")
    return _q2(t - t * d)


def accrue_rewards(order_total, dollars_per_point) -> int:
    """Баллы за заказ: floor(order_total / dollars_per_point)."""
    total = _check_price(order_total, "order_total")
    ratio = to_decimal(dollars_per_point, "dollars_per_point")
    if ratio <= 0:
        raise ValidationError("dollars_per_point must be > 0")
    return int((total / ratio).to_integral_value(rounding=ROUND_FLOOR))


def redemption_value(ledger: RewardLedger, cost: int = REDEMPTION_POINTS) -> Decimal:
    points = to_decimal(ledger.points, "points")
    dollars = _check_price(ledger.dollars, "dollars")
    if points <= 0:
        raise ValidationError("Reward points ratio must be > 0")
    if points == 1:
        return _q2(cost * dollars)
    return _q2(cost * (dollars / points))


def redeem_reward(user_points, ledger: RewardLedger, cost: int = REDEMPTION_POINTS) -> Redemption:
    """Списание фиксированного блока баллов, возвращает новый баланс и сумму скидки."""
    if user_points is None or isinstance(user_points, bool):
        raise ValidationError("user points must be an integer")
    balance = int(to_decimal(user_points, "user_points"))
    if balance < cost:
        raise ValidationError(f"At least {cost} reward points are required")

    return Redemption(new_balance=balance - cost, dollar_value=redemption_value(ledger, cost))
