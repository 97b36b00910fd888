"""Dependency injection providers for the FastAPI application.

This module defines dependencies that can be injected into route handlers,
providing access to the shared CalendarService.
"""

import logging
from typing import Annotated, Optional

from fastapi import Depends

from calendar_core.config import Settings, load_settings
from calendar_core.service import CalendarService
from calendar_core.store import InMemoryEventStore


logger = logging.getLogger(__name__)

# Global state
# A single in-memory service is created when the app starts
_calendar_service: CalendarService | None = None


def get_calendar_service() -> CalendarService:
    """Get the shared CalendarService instance.

    This function is a FastAPI dependency; tests replace it through
    ``app.dependency_overrides``.

    Returns:
        The shared CalendarService instance.

    Raises:
        RuntimeError: If the service hasn't been initialized yet.
    """
    if _calendar_service is None:
        raise RuntimeError(
            "CalendarService not initialized. Call initialize_calendar_service() first."
        )

    return _calendar_service


def initialize_calendar_service(settings: Optional[Settings] = None) -> CalendarService:
    """Initialize the shared CalendarService instance.

    This should be called once when the FastAPI app starts up.

    Args:
        settings: Settings to use (loaded from the environment if omitted).

    Returns:
        The newly created CalendarService instance.
    """
    global _calendar_service

    settings = settings or load_settings()
    _calendar_service = CalendarService(store=InMemoryEventStore(), settings=settings)
    logger.info(
        f"CalendarService initialized (horizon {settings.expansion_horizon.isoformat()})"
    )
    return _calendar_service


def shutdown_calendar_service() -> None:
    """Drop the shared CalendarService when the app shuts down."""
    global _calendar_service

    _calendar_service = None


# Type alias for dependency injection
CalendarServiceDep = Annotated[CalendarService, Depends(get_calendar_service)]
