import os
from datetime import timedelta
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv


class Settings:
    """Centralised application configuration sourced from environment variables."""

    def __init__(self) -> None:
        load_dotenv()
        self.database_path = Path(os.getenv("DATABASE_PATH", "data/addressbook.db")).resolve()
        self.redis_url = os.getenv("REDIS_URL", "redis://localhost:6379/0")
        self.cache_backend = os.getenv("CACHE_BACKEND", "redis").strip().lower()
        self.cache_ttl_minutes = self._get_int("CACHE_TTL_MINUTES", default=10)
        self.reset_token_ttl_minutes = self._get_int("RESET_TOKEN_TTL_MINUTES", default=60)
        self.jwt_secret = os.getenv("JWT_SECRET", "change-me")
        self.jwt_issuer = os.getenv("JWT_ISSUER", "addressbook-api")
        self.jwt_audience = os.getenv("JWT_AUDIENCE", "addressbook-clients")
        self.jwt_expiration_minutes = self._get_int("JWT_EXPIRATION_MINUTES", default=60)
        self.notification_queue = os.getenv("NOTIFICATION_QUEUE", "AddressBook_Notifications")
        self.notification_consumer_enabled = self._get_bool("NOTIFICATION_CONSUMER_ENABLED", default=True)
        self.smtp_host = os.getenv("SMTP_HOST", "")
        self.smtp_port = self._get_int("SMTP_PORT", default=587)
        self.smtp_username = os.getenv("SMTP_USERNAME", "")
        self.smtp_password = os.getenv("SMTP_PASSWORD", "")
        self.smtp_from_email = os.getenv("SMTP_FROM_EMAIL", "")
        self.frontend_base_url = os.getenv("FRONTEND_BASE_URL", "http://localhost:3000")
        origins = os.getenv("CORS_ALLOW_ORIGINS")
        if origins:
            self.cors_allow_origins = [item.strip() for item in origins.split(",") if item.strip()]
        else:
            self.cors_allow_origins = ["*"]
        if self.cache_backend not in ("redis", "memory"):
            raise RuntimeError("CACHE_BACKEND must be either 'redis' or 'memory'")

    @property
    def cache_ttl(self) -> timedelta:
        return timedelta(minutes=self.cache_ttl_minutes)

    @property
    def reset_token_ttl(self) -> timedelta:
        return timedelta(minutes=self.reset_token_ttl_minutes)

    @staticmethod
    def _get_int(key: str, default: Optional[int] = None) -> int:
        value = os.getenv(key)
        if value is None:
            if default is None:
                raise RuntimeError(f"Missing required environment variable: {key}")
            return default
        try:
            return int(value)
        except ValueError as exc:
            raise RuntimeError(f"Environment variable {key} must be an integer") from exc

    @staticmethod
    def _get_bool(key: str, default: bool) -> bool:
        value = os.getenv(key)
        if value is None:
            return default
        return value.strip().lower() in ("1", "true", "yes", "on")
