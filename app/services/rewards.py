from __future__ import annotations

from decimal import Decimal
from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.errors import NotFoundError
from app.core.pricing import Redemption, RewardLedger, accrue_rewards, redeem_reward, to_decimal
from app.models.settings_model import RewardSettings
from app.models.user import User


def get_reward_row(db: Session) -> Optional[RewardSettings]:
    return db.scalar(select(RewardSettings).order_by(RewardSettings.id.asc()).limit(1))


def get_ledger(db: Session) -> RewardLedger:
    row = get_reward_row(db)
    if not row:
        raise NotFoundError("Reward data")
    return RewardLedger(points=int(row.points), dollars=Decimal(str(row.dollars)))


def upsert_ledger(db: Session, points: int, dollars) -> bool:
    """True — создана новая запись, False — обновлена существующая."""
    row = get_reward_row(db)
    created = row is None
    if created:
        row = RewardSettings()
        db.add(row)
    row.points = int(points)
    row.dollars = to_decimal(dollars, "dollars")
    db.commit()
    return created


def accrue_for_order(db: Session, user: User, order_total) -> int:
    ledger = get_ledger(db)
    earned = accrue_rewards(order_total, ledger.dollars)
    user.points = int(user.points or 0) + earned
    return earned


def redeem_for_user(db: Session, user: User) -> Redemption:
    ledger = get_ledger(db)
    result = redeem_reward(int(user.points or 0), ledger, settings.REWARD_REDEMPTION_POINTS)
    user.points = result.new_balance
    db.commit()
    return result
