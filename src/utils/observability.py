"""
Structured Logging & Observability
Human-readable in development, JSON in production.
"""
import sys
from loguru import logger
from typing import Any, Dict
from src.config import get_settings


def configure_logging():
    """
    Configure loguru for production observability.

    In development: Human-readable colorized output
    In production: Structured JSON logs for ingestion (ELK, Datadog, etc.)
    """
    settings = get_settings()

    # Remove default handler
    logger.remove()

    if not settings.enable_structured_logging:
        logger.add(
            sys.stderr,
            format=(
                "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
                "<level>{level: <8}</level> | "
                "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
                "{message}"
            ),
            level=settings.log_level,
            colorize=True,
        )
    else:
        logger.add(
            sys.stderr,
            format="{message}",
            level=settings.log_level,
            serialize=True,  # Output as JSON
        )

    logger.info(f"Logging configured: level={settings.log_level}, structured={settings.enable_structured_logging}")


def log_alert_event(
    event_type: str,
    company_id: str,
    call_id: str,
    **details: Dict[str, Any]
):
    """
    Log alert lifecycle events for analytics.

    Examples:
        - alert_created
        - alert_duplicate_skipped
        - alert_marked_read

    Args:
        event_type: Type of event
        company_id: Owning company
        call_id: Call the alert belongs to
        **details: Event-specific data (alert type, alert id, ...)
    """
    log_data = {
        "event_type": event_type,
        "company_id": company_id,
        "call_id": call_id,
        **details
    }

    logger.bind(**log_data).info(f"Alert Event: {event_type}")


def log_batch_summary(
    company_id: str | None,
    calls_evaluated: int,
    alerts_created: int,
    failures: int,
    duration_ms: float | None = None,
    **context
):
    """
    Structured summary of a batch evaluation (backfill) run.

    Args:
        company_id: Company the batch ran for (None for ad hoc batches)
        calls_evaluated: Number of calls processed
        alerts_created: Number of new alerts persisted
        failures: Number of calls that failed
        duration_ms: Wall time of the batch
        **context: Additional context (alert counts by type, ...)
    """
    log_data = {
        "event_type": "alert_batch",
        "company_id": company_id,
        "calls_evaluated": calls_evaluated,
        "alerts_created": alerts_created,
        "failures": failures,
    }

    if duration_ms is not None:
        log_data["duration_ms"] = round(duration_ms, 2)

    log_data.update(context)

    level = "WARNING" if failures else "SUCCESS"
    logger.bind(**log_data).log(
        level,
        f"Alert batch | {calls_evaluated} calls | {alerts_created} created | {failures} failed"
    )
