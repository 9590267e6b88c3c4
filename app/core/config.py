"""Application configuration."""

from os import getenv

from pydantic import BaseModel


class Settings(BaseModel):
    """Runtime settings for the application."""

    app_name: str = "Cardápio Digital"
    app_env: str = getenv("APP_ENV", "dev")
    debug: bool = getenv("DEBUG", "0") == "1"
    database_url: str = getenv("DATABASE_URL", "sqlite:///./cardapio.db")
    jwt_secret_key: str = getenv("JWT_SECRET_KEY", "dev-only-change-me-to-a-long-random-secret")
    jwt_algorithm: str = getenv("JWT_ALGORITHM", "HS256")
    jwt_expire_minutes: int = int(getenv("JWT_EXPIRE_MINUTES", "60"))
    session_secret: str = getenv("SESSION_SECRET", "dev-session-secret-change-me")
    session_secret_fallback: str = "dev-session-secret-change-me"
    seed_demo: bool = getenv("SEED_DEMO", "1") == "1"
    demo_restaurant_id: str = getenv("DEMO_RESTAURANT_ID", "550e8400-e29b-41d4-a716-446655440000")
    public_base_url: str = getenv("PUBLIC_BASE_URL", "http://localhost:8000")


settings: Settings = Settings()
