"""
Centralized configuration management with validation.

All environment variables are loaded and validated here.
This ensures consistent configuration across the application.
"""
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
from typing import Optional
from dotenv import load_dotenv

load_dotenv()


class Settings(BaseSettings):
    """Application settings with validation."""

    # Pydantic v2 configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore"
    )

    # Environment
    ENVIRONMENT: str = Field(default="development")
    DEBUG: bool = Field(default=False)

    # Logging Configuration
    LOG_LEVEL: str = Field(default="INFO")
    LOG_FORMAT: str = Field(default="json")  # json or text

    # Periodization table override (YAML). When unset, the repo-level
    # config/periodization.yaml is used if present, else the built-in table.
    PERIODIZATION_CONFIG_PATH: Optional[str] = Field(default=None)

    # Rounding applied when snapping weights to the 2.5kg / 5lbs increment.
    # half_even matches banker's rounding; half_up rounds .5 away from zero.
    WEIGHT_ROUNDING_MODE: str = Field(default="half_even", pattern="^(half_even|half_up)$")

    # Program defaults
    DEFAULT_TOTAL_WEEKS: int = Field(default=21, ge=1, le=21)
    DEFAULT_LINEAR_BASE_SETS: int = Field(default=4, ge=3, le=8)


# Global settings instance
settings = Settings()
