"""Engine settings.

Settings come from environment variables (optionally via a ``.env`` file):

    CALENDAR_EXPANSION_HORIZON   last date expanded for series without an end
                                 date (YYYY-MM-DD, default 2025-12-31)
    CALENDAR_RETRACT_DETACHED    whether a full-series edit also deletes events
                                 detached by earlier single edits (default false)
    CALENDAR_LOG_LEVEL           logging level for the application (default INFO)
"""

import logging
import os
from datetime import date

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

from calendar_core.calendar_math import parse_ymd


logger = logging.getLogger(__name__)

# Default cutoff for series with no explicit end date.
DEFAULT_EXPANSION_HORIZON = date(2025, 12, 31)

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


class Settings(BaseModel):
    """Runtime settings for the calendar engine.

    Args:
        expansion_horizon: Last date generated for open-ended series.
        retract_detached_on_full_edit: Delete single-edit detached events when
            their series is edited as a whole.
        log_level: Logging level name.
    """

    expansion_horizon: date = Field(
        default=DEFAULT_EXPANSION_HORIZON,
        description="Last date generated for series without an end date",
    )
    retract_detached_on_full_edit: bool = Field(
        default=False,
        description="Delete detached single-edit events on full-series edit",
    )
    log_level: str = Field(default="INFO", description="Logging level name")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, level: str) -> str:
        """Normalize and check the logging level name.

        Args:
            level: Level name such as "debug" or "INFO".

        Returns:
            Upper-cased level name.

        Raises:
            ValueError: If the level is not a standard logging level.
        """
        normalized = level.strip().upper()
        if normalized not in logging.getLevelNamesMapping():
            raise ValueError(f"Unknown log level: {level}")
        return normalized


def _parse_bool(name: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ValueError(f"{name} must be a boolean, got {raw!r}")


def load_settings() -> Settings:
    """Build Settings from the environment.

    Returns:
        Settings with environment overrides applied.

    Raises:
        ValueError: If an environment value cannot be parsed.
    """
    load_dotenv()

    overrides = {}
    horizon = os.environ.get("CALENDAR_EXPANSION_HORIZON")
    if horizon:
        try:
            overrides["expansion_horizon"] = parse_ymd(horizon.strip())
        except ValueError as e:
            raise ValueError(
                f"CALENDAR_EXPANSION_HORIZON must be YYYY-MM-DD, got {horizon!r}"
            ) from e

    retract = os.environ.get("CALENDAR_RETRACT_DETACHED")
    if retract is not None:
        overrides["retract_detached_on_full_edit"] = _parse_bool(
            "CALENDAR_RETRACT_DETACHED", retract
        )

    log_level = os.environ.get("CALENDAR_LOG_LEVEL")
    if log_level:
        overrides["log_level"] = log_level

    settings = Settings(**overrides)
    logger.debug(f"Loaded settings: {settings.model_dump(mode='json')}")
    return settings
