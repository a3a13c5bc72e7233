from typing import List

from dotenv import load_dotenv
from pydantic_settings import BaseSettings

from .url_parser import parser

load_dotenv()


class Settings(BaseSettings):
    PROJECT_NAME: str = "RENTAL PROPERTY PAYMENTS SERVICE"
    DATABASE_URL: str = "sqlite+aiosqlite:///./rental.db"
    CREATE_TABLES: bool = False
    STRIPE_SECRET_KEY: str | None = None
    STRIPE_WEBHOOK_SECRET: str | None = None
    STRIPE_API_BASE: str = "https://api.stripe.com"
    STRIPE_SIGNATURE_TOLERANCE_SECONDS: int = 300
    # Strict mode rejects webhooks when no signing secret is configured.
    WEBHOOK_STRICT_MODE: bool = True
    WEB_BASE_URL: str = "http://localhost:3000"
    CURRENCY: str = "eur"
    PORT: int = 8080
    TIMEZONE: str = "Europe/Rome"
    LATE_GRACE_DAYS: int = 5
    PROVIDER_TIMEOUT_SECONDS: float = 10.0
    STORE_TIMEOUT_SECONDS: float = 5.0
    STORE_RETRY_ATTEMPTS: int = 3
    REDIS_URL: str = "redis://localhost:6379/0"
    DUE_PAYMENTS_CRON_HOUR: int = 6
    ALLOWED_HOSTS_RAW: str = ""

    @property
    def ALLOWED_HOSTS(self) -> List[str]:
        return parser.parse_url_list(self.ALLOWED_HOSTS_RAW, "ALLOWED_HOSTS")

    @property
    def stripe_configured(self) -> bool:
        return bool(self.STRIPE_SECRET_KEY)

    class Config:
        env_file = ".env"
        extra = "ignore"
        case_sensitive = False


settings = Settings()
