import logging

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


logger = logging.getLogger(__name__)


class CatalogSettings(BaseSettings):
    """Catalog policy settings loaded from environment variables.

    Validates configuration at startup to catch misconfiguration early.
    """

    default_group: str = "Default"
    fallback_title: str = "精彩节目"
    fallback_lookback_hours: int = 48  # Hours of synthetic programs behind now
    fallback_block_hours: int = 2  # Length of one synthetic program
    live_threshold_seconds: int = 3  # Requests this close to now play live
    seek_live_edge_seconds: int = 30  # Seek clamp window near the live edge
    catchup_tail_offset_seconds: int = 0  # Safety margin behind the live edge
    catchup_segment_max_seconds: int = 3600  # Longest single time-shifted segment
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="TVCATALOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("default_group", "fallback_title")
    @classmethod
    def validate_non_empty(cls, value: str, info) -> str:
        """Reject blank labels."""
        if not value or not value.strip():
            raise ValueError(f"{info.field_name} must not be empty")
        return value

    @field_validator(
        "fallback_lookback_hours",
        "live_threshold_seconds",
        "seek_live_edge_seconds",
        "catchup_tail_offset_seconds",
    )
    @classmethod
    def validate_non_negative_ints(cls, value: int, info) -> int:
        """Ensure durations are non-negative."""
        if value < 0:
            raise ValueError(f"{info.field_name} must be >= 0")
        return value

    @field_validator("catchup_segment_max_seconds")
    @classmethod
    def validate_segment_length(cls, value: int) -> int:
        """Ensure time-shifted segments have a positive length."""
        if value <= 0:
            raise ValueError("catchup_segment_max_seconds must be > 0")
        return value

    @field_validator("fallback_block_hours")
    @classmethod
    def validate_block_hours(cls, value: int) -> int:
        """Blocks must tile a day so alignment is stable across days."""
        if value <= 0:
            raise ValueError("fallback_block_hours must be > 0")
        if 24 % value != 0:
            raise ValueError("fallback_block_hours must divide 24")
        return value

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Validate logging level name."""
        normalized = value.upper()
        allowed = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}
        if normalized not in allowed:
            raise ValueError(f"log_level must be one of {sorted(allowed)}")
        return normalized

    @model_validator(mode="after")
    def validate_catchup_configuration(self):
        """Validate cross-field configuration."""
        lookback_seconds = self.fallback_lookback_hours * 3600
        if lookback_seconds and self.catchup_tail_offset_seconds >= lookback_seconds:
            logger.warning(
                "Catchup tail offset covers the whole fallback window - "
                "time-shifted requests inside it will be rejected"
            )
        return self

    def __init__(self, **data):
        """Initialize settings and log configuration."""
        super().__init__(**data)

        logger.debug("Catalog configuration loaded:")
        logger.debug("  Default Group: %s", self.default_group)
        logger.debug(
            "  Fallback Programs: %sh lookback, %sh blocks",
            self.fallback_lookback_hours,
            self.fallback_block_hours,
        )
        logger.debug("  Live Threshold: %ss", self.live_threshold_seconds)
        logger.debug("  Seek Live Edge: %ss", self.seek_live_edge_seconds)
        logger.debug("  Catchup Tail Offset: %ss", self.catchup_tail_offset_seconds)
        logger.debug("  Catchup Segment Max: %ss", self.catchup_segment_max_seconds)


settings = CatalogSettings()


def setup_logging() -> None:
    """Configure application logging."""
    logging.basicConfig(
        level=getattr(logging, settings.log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
