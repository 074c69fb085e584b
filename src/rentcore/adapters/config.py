# src/rentcore/adapters/config.py
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppConfig(BaseSettings):
    # App & logging
    ENV: str = Field(default="dev")
    LOG_LEVEL: str = Field(default="INFO")

    # Portfolio analytics defaults
    # Fiscal reports never apply vacancy; only profitability metrics do.
    VACANCY_RATE: float = Field(default=0.0)

    # -----------------------------
    # Billing
    # -----------------------------
    GRACE_PERIOD_DAYS: int = Field(default=7)
    DEFAULT_PLAN: str = Field(default="free")

    model_config = SettingsConfigDict(
        env_prefix="RENTCORE_",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("VACANCY_RATE", mode="before")
    @classmethod
    def _to_fraction(cls, v: Any) -> Any:
        if v is None:
            return v
        # "1%" is one percent; bare numbers above 1 are read as percents too
        is_percent = isinstance(v, str) and "%" in v
        if isinstance(v, str):
            v = v.strip().replace("%", "")
        try:
            f = float(v)
        except Exception as err:
            raise ValueError("rate must be numeric or percent-like") from err
        if is_percent or f > 1.0:
            f = f / 100.0
        if f < 0 or f > 1.0:
            raise ValueError("rate must be between 0 and 100%")
        return f

    @field_validator("GRACE_PERIOD_DAYS", mode="before")
    @classmethod
    def _days_positive(cls, v: Any) -> Any:
        d = int(v)
        if d <= 0:
            raise ValueError("GRACE_PERIOD_DAYS must be > 0")
        return d

    @field_validator("DEFAULT_PLAN", mode="before")
    @classmethod
    def _known_plan(cls, v: Any) -> Any:
        p = str(v).strip().lower()
        if p not in {"free", "solo", "pro", "agency"}:
            raise ValueError(f"unknown plan: {v}")
        return p


config = AppConfig()
