from app.schemas.user import UserOut, RegisterIn, LoginIn
from app.schemas.catalog import DishOut, DishIn, CategoryCreate
from app.schemas.promo import PromoCreate, PromoOut, PromoValidateOut
from app.schemas.reward import RewardSettingsIn, RewardSettingsOut, RewardApplyOut
from app.schemas.order import OrderCreate, OrderOut
__all__ = [
    "UserOut",
    "RegisterIn",
    "LoginIn",
    "DishOut",
    "DishIn",
    "CategoryCreate",
    "PromoCreate",
    "PromoOut",
    "PromoValidateOut",
    "RewardSettingsIn",
    "RewardSettingsOut",
    "RewardApplyOut",
    "OrderCreate",
    "OrderOut",
]
