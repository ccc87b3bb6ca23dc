# linkforge/config.py
import os
from pydantic import BaseModel
from dotenv import load_dotenv

load_dotenv()  # Load environment variables from .env file

class Settings(BaseModel):
    # General app settings
    APP_NAME: str = "LinkForge API"
    env: str = os.getenv("ENV", "dev")

    # Host & Port settings
    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "8000"))

    # CORS origins for frontend
    CORS_ORIGINS: list[str] = [
        o.strip()
        for o in os.getenv(
            "CORS_ORIGINS",
            "http://localhost:3000,http://127.0.0.1:3000",
        ).split(",")
        if o.strip()
    ]

    # Upper bound (seconds) for a single storage operation before it is reported as transient
    store_timeout_sec: float = float(os.getenv("STORE_TIMEOUT_SEC", "5"))

    # Cookies
    access_cookie_name: str = os.getenv("ACCESS_COOKIE_NAME", "accessToken")
    visitor_cookie_name: str = os.getenv("VISITOR_COOKIE_NAME", "visitor_id")
    visitor_cookie_max_age_days: int = int(os.getenv("VISITOR_COOKIE_MAX_AGE_DAYS", "365"))
    cookie_secure: bool = os.getenv("COOKIE_SECURE", "false").lower() in ("true", "1", "yes")

    # Public page defaults
    recent_activity_limit: int = int(os.getenv("RECENT_ACTIVITY_LIMIT", "5"))

settings = Settings()  # Instantiate configuration
