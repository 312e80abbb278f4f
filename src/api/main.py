"""
FastAPI Application

Main entry point for the Call Alerts API.
Handles application lifecycle and router mounting.
"""
from contextlib import asynccontextmanager
from fastapi import FastAPI
from loguru import logger

from src.repositories import (
    db_manager,
    AlertRepository,
    CallAnalysisRepository,
    RuleConfigurationRepository,
)
from src.services.alert_materializer import AlertMaterializer
from src.utils.observability import configure_logging
from src.api.routes import health_router, alert_settings_router, alerts_router, calls_router
from src.api.routes.health import API_VERSION


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application lifecycle: startup and shutdown events.

    Startup:
    - Connect to MongoDB and ensure indexes (incl. alert dedup index)
    - Wire repositories and the alert materializer

    Shutdown:
    - Disconnect from MongoDB
    """
    configure_logging()
    logger.info("Starting Call Alerts API server...")

    await db_manager.connect()
    await db_manager.create_indexes()
    database = db_manager.database

    alert_repo = AlertRepository(database)
    call_repo = CallAnalysisRepository(database)
    config_repo = RuleConfigurationRepository(database)

    # Store in app state for access in routes
    app.state.alert_repo = alert_repo
    app.state.call_repo = call_repo
    app.state.config_repo = config_repo
    app.state.materializer = AlertMaterializer(
        alert_repo=alert_repo,
        call_repo=call_repo,
        config_repo=config_repo,
    )

    logger.info("API server ready")

    yield

    logger.info("Shutting down API server...")
    await db_manager.disconnect()
    logger.info("Shutdown complete")


# Create FastAPI application
app = FastAPI(
    title="Call Alerts API",
    description="Rule-based alert derivation for analyzed call-center calls",
    version=API_VERSION,
    lifespan=lifespan
)

# Mount routers
app.include_router(health_router)
app.include_router(alert_settings_router)
app.include_router(alerts_router)
app.include_router(calls_router)
