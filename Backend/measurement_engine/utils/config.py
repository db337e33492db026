"""
Measurement Engine Configuration
Environment-based configuration management
"""

from typing import List, Optional, Tuple
from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    """Measurement engine configuration settings"""

    # Environment
    ENVIRONMENT: str = Field(default="development", description="Environment (development/staging/production)")
    DEBUG: bool = Field(default=False, description="Debug mode")
    LOG_LEVEL: str = Field(default="INFO", description="Logging level")
    LOG_DIR: Optional[str] = Field(default=None, description="Directory for rotating log files; console only when unset")

    # Registration policy
    MIN_REGISTRATION_CONFIDENCE: float = Field(default=0.3, description="Minimum confidence to accept a tap")
    HIGH_CONFIDENCE_THRESHOLD: float = Field(default=0.7, description="Confidence considered display quality")
    CONFIDENCE_DISTANCE_CAP: float = Field(default=2.0, description="Distance in meters where the proximity bonus vanishes")
    JITTER_OFFSETS: List[Tuple[float, float]] = Field(
        default=[(-30.0, 0.0), (30.0, 0.0), (0.0, -30.0), (0.0, 30.0), (-20.0, -20.0), (20.0, 20.0)],
        description="Screen-space retry offsets in pixels, tried in order"
    )
    MIN_PLANE_EXTENT: float = Field(default=0.1, description="Minimum plane extent in meters for plane overlays")

    # Capacities
    MAX_ANCHORS: int = Field(default=10, description="Maximum live anchors before FIFO eviction")
    HISTORY_CAPACITY: int = Field(default=10, description="Maximum measurements kept in history")

    # Live preview smoothing
    SMOOTHING_FACTOR: float = Field(default=0.8, description="Exponential moving average factor")
    SMOOTHING_WINDOW: int = Field(default=5, description="Number of preview samples kept for smoothing")

    # UI defaults
    TAP_DEBOUNCE_MS: int = Field(default=300, description="Minimum interval between accepted taps")
    DEFAULT_USE_METRIC: bool = Field(default=True, description="Start in metric units")

    # Monitoring
    ENABLE_METRICS: bool = Field(default=True, description="Enable in-process engine metrics")

    class Config:
        env_file = ".env"
        env_prefix = "MEASUREMENT_"
        case_sensitive = True

    @property
    def is_development(self) -> bool:
        """Check if running in development mode"""
        return self.ENVIRONMENT.lower() == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode"""
        return self.ENVIRONMENT.lower() == "production"


def validate_settings(settings: Settings) -> None:
    """Validate configuration values the engine relies on"""
    errors = []

    if settings.MAX_ANCHORS < 2:
        errors.append("MAX_ANCHORS must be at least 2")
    if settings.HISTORY_CAPACITY < 1:
        errors.append("HISTORY_CAPACITY must be at least 1")
    for name in ("MIN_REGISTRATION_CONFIDENCE", "HIGH_CONFIDENCE_THRESHOLD"):
        if not (0.0 <= getattr(settings, name) <= 1.0):
            errors.append(f"{name} must be between 0.0 and 1.0")
    if settings.CONFIDENCE_DISTANCE_CAP <= 0:
        errors.append("CONFIDENCE_DISTANCE_CAP must be positive")
    if not (0.0 <= settings.SMOOTHING_FACTOR < 1.0):
        errors.append("SMOOTHING_FACTOR must be in [0.0, 1.0)")
    if settings.SMOOTHING_WINDOW < 1:
        errors.append("SMOOTHING_WINDOW must be positive")
    if settings.TAP_DEBOUNCE_MS < 0:
        errors.append("TAP_DEBOUNCE_MS must not be negative")

    if errors:
        raise ValueError(f"Invalid measurement engine settings: {'; '.join(errors)}")


# Global settings instance
_settings = None


def get_settings() -> Settings:
    """Get application settings (singleton)"""
    global _settings
    if _settings is None:
        _settings = Settings()
        validate_settings(_settings)
    return _settings


__all__ = ["Settings", "get_settings", "validate_settings"]
