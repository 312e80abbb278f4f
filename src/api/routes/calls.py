"""
Call Evaluation Endpoint

Invoked by the analysis-completion handler once the AI pipeline has
stored a call's analysis.
"""
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import JSONResponse
from loguru import logger

from src.api.dependencies import get_materializer
from src.services.alert_materializer import AlertMaterializer, CallNotFoundError

router = APIRouter(prefix="/calls", tags=["Calls"])


@router.post("/{call_id}/alerts/evaluate")
async def evaluate_call_alerts(
    call_id: str,
    materializer: AlertMaterializer = Depends(get_materializer)
):
    """
    Evaluate alert rules for a single analyzed call.

    Safe to repeat: alerts that already exist are not recreated, so a
    second request returns an empty list.
    """
    try:
        alerts = await materializer.evaluate_call_by_id(call_id)
    except CallNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Call not found")
    except Exception as e:
        logger.exception(f"Alert evaluation failed for call {call_id}: {e}")
        return JSONResponse(
            status_code=500,
            content={"error": "Failed to evaluate alerts"}
        )

    return {
        "call_id": call_id,
        "alerts_created": len(alerts),
        "alerts": [alert.model_dump(mode="json") for alert in alerts],
    }
