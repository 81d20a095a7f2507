from app.api.auth import router as auth_router
from app.api.users import router as users_router
from app.api.categories import router as categories_router
from app.api.dishes import router as dishes_router
from app.api.gold_price import router as gold_price_router
from app.api.promos import router as promos_router
from app.api.rewards import router as rewards_router
from app.api.cart import router as cart_router
from app.api.orders import router as orders_router
from app.api.payments import router as payments_router
from app.api.notifications import router as notifications_router
from app.api.locations import router as locations_router
from app.api.mini_games import router as mini_games_router
from app.api.images import router as images_router

__all__ = [
    "auth_router",
    "users_router",
    "categories_router",
    "dishes_router",
    "gold_price_router",
    "promos_router",
    "rewards_router",
    "cart_router",
    "orders_router",
    "payments_router",
    "notifications_router",
    "locations_router",
    "mini_games_router",
    "images_router",
]
