from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # SQLite по умолчанию, в проде — PostgreSQL.
    DATABASE_URL: str = "sqlite:///./darbar.db"

    # --- Session / auth ---
    SESSION_SECRET: str = ""
    SESSION_MAX_AGE_DAYS: int = 30
    COOKIE_SECURE: bool = False

    ADMIN_EMAIL: str | None = None
    ADMIN_PASSWORD: str | None = None

    # comma separated
    ALLOWED_ORIGINS: str = "http://localhost:3000,http://localhost:4200,http://localhost:8080"

    LOG_LEVEL: str = "INFO"

    # --- Stripe ---
    STRIPE_SECRET_KEY: str | None = None
    STRIPE_API_BASE: str = "https://api.stripe.com/v1"

    # --- Pushy ---
    PUSHY_API_KEY: str | None = None
    PUSHY_API_BASE: str = "https://api.pushy.me"

    # --- Uploads ---
    UPLOAD_DIR: str = "./uploads"
    UPLOAD_URL_PREFIX: str = "/uploads"
    ALLOWED_IMAGE_TYPES: str = "image/jpeg,image/png,image/gif,image/webp"

    # --- Rewards / games ---
    REWARD_REDEMPTION_POINTS: int = 10
    MAX_MINI_GAMES: int = 6

    # --- Feature flags ---
    ENABLE_GOLD_MEMBERSHIP: bool = True
    ENABLE_REWARDS: bool = True
    ENABLE_NOTIFICATIONS: bool = True
    ENABLE_MINI_GAMES: bool = True

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @property
    def allowed_origins(self) -> list[str]:
        return [o.strip() for o in (self.ALLOWED_ORIGINS or "").split(",") if o.strip()]

    @property
    def allowed_image_types(self) -> list[str]:
        return [t.strip() for t in (self.ALLOWED_IMAGE_TYPES or "").split(",") if t.strip()]


settings = Settings()
