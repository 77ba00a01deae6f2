"""Configuration settings for the report engine."""

from decimal import Decimal
from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ReportSettings(BaseSettings):
    """Flat settings read from environment variables or a .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # IRS 1099-NEC thresholds
    form_1099_threshold: Decimal = Field(
        default=Decimal("600"),
        validation_alias="FORM_1099_THRESHOLD",
        description="Total paid to a contractor at which a 1099-NEC is required",
    )
    form_1099_warning_floor: Decimal = Field(
        default=Decimal("500"),
        validation_alias="FORM_1099_WARNING_FLOOR",
        description="Lower bound of the 'approaching 1099' band",
    )

    # Storage fetch
    transaction_fetch_limit: int = Field(
        default=10000,
        validation_alias="REPORT_TRANSACTION_LIMIT",
        description="Max transactions fetched for a single report",
    )

    # Category table override
    category_rules_path: Path | None = Field(
        default=None,
        validation_alias="CATEGORY_RULES_PATH",
        description="Alternate category rules YAML file",
    )

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO", validation_alias="LOG_LEVEL"
    )
    log_format: Literal["json", "console"] = Field(
        default="console", validation_alias="LOG_FORMAT"
    )


@lru_cache
def get_settings() -> ReportSettings:
    """Get cached settings instance."""
    return ReportSettings()
