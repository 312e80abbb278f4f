"""
Health and Readiness Endpoints

Kubernetes-compatible health checks for load balancers and orchestration.
"""
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from loguru import logger

from src.repositories import db_manager

router = APIRouter(tags=["Health"])

# API version - single source of truth
API_VERSION = "1.0.0"
SERVICE_NAME = "call-alerts"


@router.get("/health")
async def health_check():
    """
    Basic health check endpoint.

    Returns 200 if service is running.
    """
    return {
        "status": "healthy",
        "service": SERVICE_NAME,
        "version": API_VERSION
    }


@router.get("/ready")
async def readiness_check(request: Request):
    """
    Readiness check - whether the service can handle requests.

    Verifies:
    - Alert materializer is wired
    - MongoDB connection is active

    Returns 200 if ready, 503 if not ready.
    """
    try:
        materializer = getattr(request.app.state, "materializer", None)
        if materializer is None:
            return JSONResponse(
                status_code=503,
                content={
                    "status": "not_ready",
                    "reason": "Alert materializer not initialized"
                }
            )

        await db_manager.client.admin.command("ping")

        return {
            "status": "ready",
            "mongodb": "connected",
            "materializer": "initialized"
        }

    except Exception as e:
        logger.error(f"Readiness check failed: {e}")
        return JSONResponse(
            status_code=503,
            content={
                "status": "not_ready",
                "reason": str(e)
            }
        )


@router.get("/")
async def root():
    """Root endpoint with API information."""
    return {
        "service": "Call Alerts API",
        "version": API_VERSION,
        "endpoints": {
            "health": "/health",
            "ready": "/ready",
            "alert_settings": "/companies/{company_id}/alert-settings (GET, PUT)",
            "alerts": "/companies/{company_id}/alerts",
            "generate_alerts": "/companies/{company_id}/alerts/generate (POST)",
            "evaluate_call": "/calls/{call_id}/alerts/evaluate (POST)"
        }
    }
