"""
FastAPI Dependencies

Accessors for the repositories and services wired at startup.
"""

from fastapi import Request, HTTPException, status
from loguru import logger

from src.repositories.alerts import AlertRepository
from src.repositories.rule_configurations import RuleConfigurationRepository
from src.services.alert_materializer import AlertMaterializer


def _from_state(request: Request, name: str):
    component = getattr(request.app.state, name, None)
    if component is None:
        logger.error(f"Application component not initialized: {name}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Service not initialized"
        )
    return component


def get_alert_repo(request: Request) -> AlertRepository:
    return _from_state(request, "alert_repo")


def get_config_repo(request: Request) -> RuleConfigurationRepository:
    return _from_state(request, "config_repo")


def get_materializer(request: Request) -> AlertMaterializer:
    return _from_state(request, "materializer")
