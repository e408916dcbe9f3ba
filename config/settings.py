"""Application settings and configuration management."""
from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from environment variables or defaults."""

    DB_PATH: str = Field(default="data/screening.db")
    LLM_CONFIG_PATH: str = Field(default="app_config.json")
    LLM_ROUTE: str = "interviewer"
    TEMPLATE_DIR: str | None = None

    COMPANY_NAME: str = "Regional Medical Center"
    COMPANY_POSITION: str = "ICU Registered Nurse"
    COMPANY_LOCATION: str = "California"
    COMPANY_BENEFITS: str = "Health insurance, 401k, PTO, continuing education support"
    COMPANY_SCHEDULE: str = "12-hour shifts, rotating weekends"

    MAX_SALARY: int = 72000
    SALARY_FLOOR: int = 20000
    SALARY_CEILING: int = 200000
    LICENSE_GRACE_MONTHS: int = 6
    # minimum story length that completes the interview; 0 accepts any answer
    EXPERIENCE_DETAILS_MIN_CHARS: int = Field(default=30, ge=0)

    model_config = SettingsConfigDict(env_file=".env", validate_assignment=True)


settings = Settings()
