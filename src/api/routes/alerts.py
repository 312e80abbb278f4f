"""
Alert Endpoints

Dashboard listing, read state and administrative regeneration of alerts.
"""
import datetime as dt
from dataclasses import asdict
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import JSONResponse
from loguru import logger

from src.api.dependencies import get_alert_repo, get_materializer
from src.models.alert import AlertFilters, AlertType
from src.repositories.alerts import AlertRepository
from src.services.alert_materializer import AlertMaterializer

router = APIRouter(prefix="/companies/{company_id}/alerts", tags=["Alerts"])


@router.get("")
async def list_alerts(
    company_id: str,
    unread_only: bool = False,
    agent_id: Optional[str] = None,
    type: Optional[AlertType] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    alert_repo: AlertRepository = Depends(get_alert_repo)
):
    """
    Paginated alerts for a company, newest first.

    Returns:
        {data, total, page, limit, total_pages}
    """
    filters = AlertFilters(
        unread_only=unread_only,
        agent_id=agent_id,
        type=type,
        page=page,
        limit=limit,
    )
    alert_page = await alert_repo.list_for_company(company_id, filters)
    return alert_page.model_dump(mode="json")


@router.get("/unread-count")
async def unread_count(
    company_id: str,
    agent_id: Optional[str] = None,
    alert_repo: AlertRepository = Depends(get_alert_repo)
):
    """Number of unread alerts (dashboard badge)."""
    total = await alert_repo.count_unread(company_id, agent_id=agent_id)
    return {"company_id": company_id, "unread": total}


@router.patch("/{alert_id}/read")
async def mark_alert_read(
    company_id: str,
    alert_id: str,
    alert_repo: AlertRepository = Depends(get_alert_repo)
):
    """Mark one of the company's alerts as read. 404 if it does not exist."""
    found = await alert_repo.mark_read(alert_id, company_id=company_id)
    if not found:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Alert not found")
    return {"message": "Alert marked as read"}


@router.post("/generate")
async def generate_alerts(
    company_id: str,
    since_days: Optional[int] = Query(None, ge=1),
    limit: Optional[int] = Query(None, ge=1),
    materializer: AlertMaterializer = Depends(get_materializer)
):
    """
    Re-evaluate the company's calls against its current settings.

    Existing alerts are preserved; only missing ones are created. Calls
    that fail are listed in `failures` and do not abort the run.
    """
    since = None
    if since_days is not None:
        since = dt.datetime.now(dt.UTC) - dt.timedelta(days=since_days)

    try:
        result = await materializer.backfill_company(company_id, since=since, limit=limit)
    except Exception as e:
        logger.exception(f"Alert generation failed for company {company_id}: {e}")
        return JSONResponse(
            status_code=500,
            content={"error": "Failed to generate alerts"}
        )

    return {
        "message": f"Generated {result.alerts_created} alerts",
        "alerts_created": result.alerts_created,
        "calls_analyzed": result.calls_evaluated,
        "by_type": result.by_type,
        "failures": [asdict(failure) for failure in result.failures],
        "settings": (
            result.configuration.model_dump(mode="json", exclude={"id", "created_at", "updated_at"})
            if result.configuration else None
        ),
    }
