from __future__ import annotations

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.database import get_db
from app.core.pricing import to_decimal
from app.core.role_guards import RequestContext, feature_guard, require_admin, require_user
from app.schemas.reward import RewardApplyIn, RewardApplyOut, RewardSettingsIn, RewardSettingsOut
from app.services.rewards import get_ledger, redeem_for_user, upsert_ledger
from app.services.users import get_user

router = APIRouter(
    prefix="/rewards",
    tags=["rewards"],
    dependencies=[Depends(feature_guard("ENABLE_REWARDS"))],
)


@router.get("", response_model=RewardSettingsOut, include_in_schema=False)
@router.get("/", response_model=RewardSettingsOut)
def read_rewards(db: Session = Depends(get_db)) -> RewardSettingsOut:
    ledger = get_ledger(db)
    return RewardSettingsOut(
        points=ledger.points,
        dollars=ledger.dollars,
        redemption_points=settings.REWARD_REDEMPTION_POINTS,
    )


@router.put("/", response_model=RewardSettingsOut)
def create_or_update_rewards(
    payload: RewardSettingsIn,
    response: Response,
    ctx: RequestContext = Depends(require_admin),
    db: Session = Depends(get_db),
) -> RewardSettingsOut:
    created = upsert_ledger(db, payload.points, payload.dollars)
    response.status_code = 201 if created else 200
    return read_rewards(db)


@router.post("/apply", response_model=RewardApplyOut)
def apply_reward(
    payload: RewardApplyIn,
    ctx: RequestContext = Depends(require_user),
    db: Session = Depends(get_db),
) -> RewardApplyOut:
    """Списывает блок баллов и возвращает сумму заказа со скидкой (не ниже нуля)."""
    user = get_user(db, ctx.user_id)
    result = redeem_for_user(db, user)

    total = to_decimal(payload.total_price, "total_price") - result.dollar_value
    if total < 0:
        total = to_decimal(0)
    return RewardApplyOut(
        total_price=round(float(total), 2),
        dollar_value=result.dollar_value,
        points=result.new_balance,
    )
