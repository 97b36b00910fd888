"""Main entry point for the recurring calendar FastAPI application.

This module creates and configures the FastAPI app instance that serves the REST
API for stored events and their expanded occurrences.

To run the development server:
    uvicorn main:app --reload

To run in production:
    uvicorn main:app --host 0.0.0.0 --port 8000
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from pydantic import ValidationError

from api.dependencies import initialize_calendar_service, shutdown_calendar_service
from api.exceptions import (
    event_not_found_handler,
    event_overlap_handler,
    generic_exception_handler,
    validation_exception_handler,
    value_error_handler,
)
from api.routes import events as events_routes
from api.routes import occurrences as occurrences_routes
from calendar_core.config import load_settings
from calendar_core.exceptions import EventNotFoundError, EventOverlapError


logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifespan events.

    Loads settings, configures logging and creates the shared CalendarService at
    startup; drops it at shutdown.

    Args:
        app: The FastAPI application instance.

    Yields:
        Control back to FastAPI to handle requests.
    """
    settings = load_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info("Starting calendar service")
    initialize_calendar_service(settings)

    yield

    logger.info("Shutting down calendar service")
    shutdown_calendar_service()


app = FastAPI(
    title="Recurring Calendar",
    description="API for calendar events with daily, weekly, monthly and yearly repeats",
    version="0.1.0",
    lifespan=lifespan,
)

# Register exception handlers
# Order matters: specific exceptions before general ones
app.add_exception_handler(EventNotFoundError, event_not_found_handler)
app.add_exception_handler(EventOverlapError, event_overlap_handler)
app.add_exception_handler(ValidationError, validation_exception_handler)
app.add_exception_handler(ValueError, value_error_handler)
app.add_exception_handler(Exception, generic_exception_handler)

app.include_router(events_routes.router)
app.include_router(occurrences_routes.router)


@app.get("/")
async def root():
    """Root endpoint - returns a welcome message."""
    return {
        "message": "Welcome to the Recurring Calendar API",
        "version": "0.1.0",
        "docs_url": "/docs",
    }


@app.get("/health")
async def health_check():
    """Health check endpoint for monitoring.

    Returns:
        A dictionary indicating the service is healthy.
    """
    return {"status": "healthy"}
