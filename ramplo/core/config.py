from pydantic_settings import BaseSettings
from pydantic import field_validator, ValidationInfo, model_validator
from pathlib import Path
from typing import Optional, Any
import logging

DATA_DIR = Path(__file__).resolve().parent.parent / "data"

class Settings(BaseSettings):
    # App
    APP_NAME: str = "RampLO"
    ENVIRONMENT: str = "development" # development, production, test
    SECRET_KEY: str = "super-secret-key-change-in-production"
    ALLOWED_ORIGINS: str = "*"

    # Database
    DATABASE_URL: str
    POSTGRES_URL: Optional[str] = None

    @model_validator(mode='before')
    @classmethod
    def check_database_url(cls, data: Any) -> Any:
        if isinstance(data, dict):
            if not data.get("DATABASE_URL") and data.get("POSTGRES_URL"):
                data["DATABASE_URL"] = data.get("POSTGRES_URL")
        return data

    @field_validator("DATABASE_URL", mode="before")
    @classmethod
    def assemble_db_connection(cls, v: Optional[str], info: ValidationInfo) -> str:
        if isinstance(v, str):
            if v.startswith("postgres://"):
                return v.replace("postgres://", "postgresql://", 1)
        return v

    # AI (advisory service)
    OPENAI_API_KEY: Optional[str] = None
    OPENAI_MODEL: str = "gpt-4o"
    OPENAI_FALLBACK_MODEL: str = "gpt-4o-mini"
    ADVISORY_TIMEOUT_SECONDS: float = 20.0
    ADVISORY_MAX_TOKENS: int = 500

    # Catalogs (versioned JSON, loaded once at startup)
    ROADMAP_CATALOG_PATH: str = str(DATA_DIR / "roadmap_catalog.json")
    TEMPLATE_CATALOG_PATH: str = str(DATA_DIR / "outreach_templates.json")

    # Paywall
    TRIAL_DAYS: int = 7
    COMPED_EMAIL_DOMAINS: list[str] = ["morty.com", "platform.morty.com", "getmorty.com"]

    # Rate limiting (slowapi syntax)
    RATE_LIMIT_DEFAULT: str = "120/minute"
    RATE_LIMIT_ADVISORY: str = "10/minute"

    # Monitoring (Sentry)
    SENTRY_DSN: Optional[str] = None

    class Config:
        env_file = ".env"
        extra = "ignore" # Prevent crash on extra env vars

settings = Settings()

if not settings.OPENAI_API_KEY:
    logging.getLogger(__name__).critical(
        "OPENAI_API_KEY is missing. Advisory features will use rule-based fallbacks."
    )
