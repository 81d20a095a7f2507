# main.py
import logging
import os

from dotenv import load_dotenv
load_dotenv()

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.middleware.sessions import SessionMiddleware

from app.core.config import settings
from app.core.database import engine, Base, SessionLocal
from app.core.errors import register_error_handlers

from app.api import (
    auth_router,
    users_router,
    categories_router,
    dishes_router,
    gold_price_router,
    promos_router,
    rewards_router,
    cart_router,
    orders_router,
    payments_router,
    notifications_router,
    locations_router,
    mini_games_router,
    images_router,
)

# чтобы SQLAlchemy увидел модели
import app.models  # noqa: F401

logging.basicConfig(
    level=(settings.LOG_LEVEL or "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("darbar")

app = FastAPI(title="Biryani Darbar API")

register_error_handlers(app)

# -------------------------
# Uploads
# -------------------------
os.makedirs(settings.UPLOAD_DIR, exist_ok=True)
app.mount(settings.UPLOAD_URL_PREFIX, StaticFiles(directory=settings.UPLOAD_DIR), name="uploads")


class AuthContextMiddleware(BaseHTTPMiddleware):
    """
    Переносит пользователя из подписанной сессии в request.state.user.
    Проверки ролей — в роутерах через Depends (app/core/role_guards.py).
    """

    async def dispatch(self, request: Request, call_next):
        sess = request.session or {}
        uid = sess.get("uid")

        if uid:
            request.state.user = {
                "id":    uid,
                "email": sess.get("email"),
                "role":  sess.get("role"),
            }
        else:
            request.state.user = None

        return await call_next(request)


# IMPORTANT: SessionMiddleware должен быть outermost (добавлен ПОСЛЕДНИМ)
app.add_middleware(AuthContextMiddleware)

app.add_middleware(
    SessionMiddleware,
    secret_key=settings.SESSION_SECRET or "dev-secret-change-me",
    session_cookie="darbar.sid",
    max_age=60 * 60 * 24 * settings.SESSION_MAX_AGE_DAYS,
    same_site="lax",
    https_only=settings.COOKIE_SECURE,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "X-Requested-With", "Accept", "Origin"],
)


@app.on_event("startup")
def bootstrap():
    from app.models.user import User
    from app.core.security import hash_password, normalize_email

    Base.metadata.create_all(bind=engine)

    if not settings.SESSION_SECRET:
        logger.warning("[BOOTSTRAP] SESSION_SECRET is not set, using development secret")

    admin_email = normalize_email(settings.ADMIN_EMAIL or "")
    admin_password = settings.ADMIN_PASSWORD or ""

    db = SessionLocal()
    try:
        if db.query(User).filter(User.role == "admin").count() > 0:
            logger.info("[BOOTSTRAP] Admin already exists. Skip admin create.")
            return

        if not admin_email or not admin_password:
            logger.info("[BOOTSTRAP] No ADMIN_EMAIL/ADMIN_PASSWORD. Admin not created.")
            return

        salt, pw_hash = hash_password(admin_password)
        user = User(
            email=admin_email,
            first_name="Admin",
            last_name="Admin",
            role="admin",
            password_salt=salt,
            password_hash=pw_hash,
            is_active=True,
        )
        db.add(user)
        db.commit()
        logger.info(f"[BOOTSTRAP] Admin created: {user.email}")
    finally:
        db.close()


app.include_router(auth_router, prefix="/api")
app.include_router(users_router, prefix="/api")
app.include_router(categories_router, prefix="/api")
app.include_router(dishes_router, prefix="/api")
app.include_router(gold_price_router, prefix="/api")
app.include_router(promos_router, prefix="/api")
app.include_router(rewards_router, prefix="/api")
app.include_router(cart_router, prefix="/api")
app.include_router(orders_router, prefix="/api")
app.include_router(payments_router, prefix="/api")
app.include_router(notifications_router, prefix="/api")
app.include_router(locations_router, prefix="/api")
app.include_router(mini_games_router, prefix="/api")
app.include_router(images_router, prefix="/api")


@app.get("/health")
def health():
    return {"status": "ok"}


@app.get("/")
def root():
    return {"status": "ok", "app": "Biryani Darbar API"}
