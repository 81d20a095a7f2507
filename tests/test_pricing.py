from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from app.core.errors import ValidationError
from app.core.pricing import (
    REDEMPTION_POINTS,
    PromoRecord,
    RewardLedger,
    accrue_rewards,
    apply_promo_discount,
    check_promo,
    compute_discounted_price,
    compute_member_price,
    redeem_reward,
    redemption_value,
)

NOW = datetime(2024, 6, 1, 12, 0, 0)


# ── compute_member_price ──────────────────────────────────────
def test_member_price_half():
    assert compute_member_price(200, 50) == Decimal("100.00")


@pytest.mark.parametrize("base", [0, 0.99, 10, 123.45, 9999.99])
@pytest.mark.parametrize("percent", [0, 1, 33.3, 50, 99.9, 100])
def test_member_price_within_base(base, percent):
    price = compute_member_price(base, percent)
    assert Decimal("0") <= price <= Decimal(str(base))
    assert price == price.quantize(Decimal("0.01"))


def test_member_price_rounds_half_up():
    # 10.05 * 50% = 5.025
    assert compute_member_price("10.05", 50) == Decimal("5.03")


def test_member_price_full_percent_is_base():
    assert compute_member_price("12.34", 100) == Decimal("12.34")


@pytest.mark.parametrize("percent", [-1, 100.01, float("nan"), float("inf"), None, True])
def test_member_price_rejects_bad_percent(percent):
    with pytest.raises(ValidationError):
        compute_member_price(100, percent)


@pytest.mark.parametrize("base", [-0.01, float("nan"), "abc", None])
def test_member_price_rejects_bad_base(base):
    with pytest.raises(ValidationError):
        compute_member_price(base, 50)


def test_discounted_price_subtracts_percent():
    assert compute_discounted_price(200, 25) == Decimal("150.00")
    assert compute_discounted_price(200, 0) == Decimal("200.00")


# ── check_promo ───────────────────────────────────────────────
def _promo(expires_at, discount="0.10"):
    return PromoRecord(code="SAVE10", discount=Decimal(discount), expires_at=expires_at)


def test_promo_unknown_code_invalid():
    result = check_promo(None, NOW)
    assert not result.valid
    assert not result.expired
    assert result.message == "Invalid promo code"


def test_promo_valid_before_expiry():
    result = check_promo(_promo(NOW + timedelta(days=1)), NOW)
    assert result.valid
    assert result.discount == Decimal("0.10")


def test_promo_valid_one_second_before_expiry():
    result = check_promo(_promo(NOW), NOW - timedelta(seconds=1))
    assert result.valid
    assert not result.expired
    assert result.discount == Decimal("0.10")


def test_promo_valid_at_exact_expiry():
    assert check_promo(_promo(NOW), NOW).valid


def test_promo_expired_one_second_after():
    result = check_promo(_promo(NOW), NOW + timedelta(seconds=1))
    assert not result.valid
    assert result.expired
    assert result.message == "Promo code expired"


def test_promo_ignores_sub_second_difference():
    assert check_promo(_promo(NOW), NOW + timedelta(milliseconds=500)).valid


def test_promo_aware_and_naive_datetimes_compare_as_utc():
    aware_now = NOW.replace(tzinfo=timezone.utc)
    assert check_promo(_promo(NOW), aware_now).valid
    assert not check_promo(_promo(NOW), aware_now + timedelta(seconds=2)).valid


def test_promo_discount_out_of_range_rejected():
    with pytest.raises(ValidationError):
        check_promo(_promo(NOW + timedelta(days=1), discount="1.5"), NOW)


def test_apply_promo_discount():
    assert apply_promo_discount(80, Decimal("0.25")) == Decimal("60.00")
    assert apply_promo_discount("19.99", Decimal("0.10")) == Decimal("17.99")


# ── accrue_rewards ────────────────────────────────────────────
@pytest.mark.parametrize(
    "total, ratio, expected",
    [(100, 10, 10), (5, 10, 0), (99.99, 10, 9), (0, 10, 0), (30, 2, 15), ("10.50", "0.5", 21)],
)
def test_accrue_floors(total, ratio, expected):
    assert accrue_rewards(total, ratio) == expected


@pytest.mark.parametrize("ratio", [0, -5])
def test_accrue_rejects_non_positive_ratio(ratio):
    with pytest.raises(ValidationError):
        accrue_rewards(100, ratio)


def test_accrue_rejects_negative_total():
    with pytest.raises(ValidationError):
        accrue_rewards(-1, 10)


# ── redeem_reward ─────────────────────────────────────────────
def test_redeem_one_point_per_two_dollars():
    result = redeem_reward(30, RewardLedger(points=1, dollars=Decimal("2")))
    assert result.new_balance == 20
    assert result.dollar_value == Decimal("20.00")


def test_redeem_ratio_of_points_to_dollars():
    # 100 баллов = 5 долларов → 10 баллов = 0.50
    result = redeem_reward(10, RewardLedger(points=100, dollars=Decimal("5")))
    assert result.new_balance == 0
    assert result.dollar_value == Decimal("0.50")


def test_redeem_requires_full_block():
    with pytest.raises(ValidationError):
        redeem_reward(REDEMPTION_POINTS - 1, RewardLedger(points=1, dollars=Decimal("1")))


def test_redeem_never_negative_balance():
    for points in range(REDEMPTION_POINTS, REDEMPTION_POINTS + 25):
        result = redeem_reward(points, RewardLedger(points=3, dollars=Decimal("1")))
        assert result.new_balance == points - REDEMPTION_POINTS
        assert result.new_balance >= 0


@pytest.mark.parametrize("points", [None, True, "many"])
def test_redeem_rejects_non_numeric_balance(points):
    with pytest.raises(ValidationError):
        redeem_reward(points, RewardLedger(points=1, dollars=Decimal("1")))


def test_redemption_value_rejects_zero_points():
    with pytest.raises(ValidationError):
        redemption_value(RewardLedger(points=0, dollars=Decimal("1")))
