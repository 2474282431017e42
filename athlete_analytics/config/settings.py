from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from loguru import logger
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AnalyticsSettings(BaseSettings):
    timezone: str = Field(default="UTC", validation_alias="ANALYTICS_TIMEZONE")
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    log_file: str | None = Field(default=None, validation_alias="ANALYTICS_LOG_FILE")
    kcal_per_kg: float = Field(
        default=7700.0,
        validation_alias="ANALYTICS_KCAL_PER_KG",
        description="Energy density of body-mass change used by the TDEE energy balance",
        gt=0,
    )
    weight_ema_alpha: float = Field(
        default=0.1,
        validation_alias="ANALYTICS_WEIGHT_EMA_ALPHA",
        description="Smoothing factor for the weight trend (0 < alpha <= 1)",
        gt=0,
        le=1,
    )
    tdee_lookback_days: int = Field(default=14, validation_alias="ANALYTICS_TDEE_LOOKBACK_DAYS", ge=1)
    tdee_min_days: int = Field(
        default=3,
        validation_alias="ANALYTICS_TDEE_MIN_DAYS",
        description="Minimum distinct days of weight AND calories before a TDEE is estimated",
        ge=1,
    )
    low_readiness_threshold: int = Field(
        default=40,
        validation_alias="ANALYTICS_LOW_READINESS_THRESHOLD",
        ge=0,
        le=100,
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Validate that log level is one of the standard logging levels."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper_value = value.upper()
        if upper_value not in valid_levels:
            logger.warning(f"Invalid LOG_LEVEL '{value}'. Valid levels are: {', '.join(sorted(valid_levels))}. Defaulting to INFO.")
            return "INFO"
        return upper_value

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, value: str) -> str:
        """Fall back to UTC when the configured zone is unknown."""
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError):
            logger.warning(f"Unknown ANALYTICS_TIMEZONE '{value}'. Defaulting to UTC.")
            return "UTC"
        return value

    @property
    def tzinfo(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)


settings = AnalyticsSettings()
