from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path

from pydantic import BaseModel, Field

PROJECT_ROOT = Path(os.getenv("PROJECT_ROOT", Path(__file__).resolve().parents[2]))


class Settings(BaseModel):
    # Database URL:
    # - Default for local dev: sqlite file in the project root (sms_manager.db)
    # - Override in Docker / production using the DATABASE_URL env var
    database_url: str = Field(
        default_factory=lambda: os.getenv(
            "DATABASE_URL", f"sqlite:///{PROJECT_ROOT / 'sms_manager.db'}"
        )
    )

    # Token required in the X-Admin-Token header for /admin endpoints
    admin_token: str | None = Field(default_factory=lambda: os.getenv("ADMIN_TOKEN"))

    # Seconds before an outbound Twilio request is abandoned
    twilio_timeout: float = Field(
        default_factory=lambda: float(os.getenv("TWILIO_HTTP_TIMEOUT", "10"))
    )

    # Order status whose transition sends the automatic SMS
    trigger_status: str = Field(
        default_factory=lambda: os.getenv("SMS_TRIGGER_STATUS", "completed")
    )

    log_level: str = Field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))


@lru_cache
def get_settings() -> Settings:
    return Settings()
