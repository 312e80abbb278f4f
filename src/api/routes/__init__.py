"""
API Routes

Modular route definitions for the Call Alerts API.
"""
from src.api.routes.health import router as health_router
from src.api.routes.alert_settings import router as alert_settings_router
from src.api.routes.alerts import router as alerts_router
from src.api.routes.calls import router as calls_router

__all__ = [
    "health_router",
    "alert_settings_router",
    "alerts_router",
    "calls_router",
]
