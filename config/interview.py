"""Immutable interview configuration built once at startup."""
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .settings import Settings, settings as default_settings


class CompanyInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str = "Regional Medical Center"
    position: str = "ICU Registered Nurse"
    location: str = "California"
    benefits: str = "Health insurance, 401k, PTO, continuing education support"
    schedule: str = "12-hour shifts, rotating weekends"


class InterviewConfig(BaseModel):
    """Thresholds and company facts shared by the extractor and prompt composer."""

    model_config = ConfigDict(frozen=True)

    company: CompanyInfo = Field(default_factory=CompanyInfo)
    max_salary: int = Field(default=72000, gt=0)
    salary_floor: int = Field(default=20000, ge=0)
    salary_ceiling: int = Field(default=200000, gt=0)
    license_grace_months: int = Field(default=6, ge=0)
    experience_details_min_chars: int = Field(default=30, ge=0)

    @model_validator(mode="after")
    def _check_band(self) -> "InterviewConfig":
        if self.salary_floor >= self.salary_ceiling:
            raise ValueError("salary_floor must be below salary_ceiling")
        return self

    def salary_in_band(self, value: float) -> bool:
        """Sanity band check; both bounds are exclusive."""
        return self.salary_floor < value < self.salary_ceiling

    @classmethod
    def from_settings(cls, source: Optional[Settings] = None) -> "InterviewConfig":
        s = source or default_settings
        return cls(
            company=CompanyInfo(
                name=s.COMPANY_NAME,
                position=s.COMPANY_POSITION,
                location=s.COMPANY_LOCATION,
                benefits=s.COMPANY_BENEFITS,
                schedule=s.COMPANY_SCHEDULE,
            ),
            max_salary=s.MAX_SALARY,
            salary_floor=s.SALARY_FLOOR,
            salary_ceiling=s.SALARY_CEILING,
            license_grace_months=s.LICENSE_GRACE_MONTHS,
            experience_details_min_chars=s.EXPERIENCE_DETAILS_MIN_CHARS,
        )


__all__ = ["CompanyInfo", "InterviewConfig"]
