"""Application configuration."""

from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # App settings
    app_name: str = "COLA Label Verification API"
    debug: bool = False

    # CORS - Allow all origins for prototype (restrict in production)
    cors_origins: list[str] = ["*"]

    # Text comparison thresholds (bigram Dice coefficient, 0-1)
    moderate_match_threshold: float = 0.80  # At or above: match
    moderate_review_threshold: float = 0.55  # At or above: needs_correction
    lenient_word_overlap: float = 0.60  # Share of the shorter value's words

    # Numeric comparison
    abv_tolerance: float = 0.05  # Absolute, after rounding to one decimal
    numeric_match_min_confidence: int = 85
    # Net contents stated in US units on one side only (25.4 fl oz vs 750 mL)
    customary_conversion_tolerance: float = 0.01

    # Correction windows
    conditional_deadline_days: int = 7
    correction_deadline_days: int = 30

    # Approved labels skip the specialist queue when enabled
    auto_approval_enabled: bool = False

    # Batch processing
    max_batch_size: int = 50

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
