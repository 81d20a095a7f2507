# app/models/__init__.py
from app.models.user import User
from app.models.catalog import Category, Dish
from app.models.settings_model import GoldPrice, RewardSettings
from app.models.promo import PromoCode
from app.models.cart import CartItem
from app.models.order import Order, OrderItem
from app.models.notification import Notification, DeviceToken
from app.models.location import Location, MiniGame

__all__ = [
    "User",
    "Category",
    "Dish",
    "GoldPrice",
    "RewardSettings",
    "PromoCode",
    "CartItem",
    "Order",
    "OrderItem",
    "Notification",
    "DeviceToken",
    "Location",
    "MiniGame",
]
