"""
Alert Backfill Command
Re-evaluates a company's analyzed calls after its alert settings change.

    python -m src.core.backfill --company-id 42 --since-days 30
"""
import argparse
import asyncio
import datetime as dt
import sys
from typing import Optional, Sequence

from loguru import logger

from src.repositories import db_manager
from src.services.alert_materializer import BatchEvaluationResult, build_alert_materializer
from src.utils.observability import configure_logging


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Backfill call alerts for a company")
    parser.add_argument("--company-id", required=True, help="Company whose calls are re-evaluated")
    parser.add_argument("--since-days", type=int, default=None, help="Only calls analyzed in the last N days")
    parser.add_argument("--limit", type=int, default=None, help="Maximum number of calls to evaluate")
    return parser.parse_args(argv)


async def run_backfill(
    company_id: str,
    since_days: Optional[int] = None,
    limit: Optional[int] = None
) -> BatchEvaluationResult:
    """
    Connect, ensure indexes, backfill one company and disconnect.

    Returns:
        The batch result (created alerts and per-call failures)
    """
    since = None
    if since_days is not None:
        since = dt.datetime.now(dt.UTC) - dt.timedelta(days=since_days)

    await db_manager.connect()
    try:
        await db_manager.create_indexes()
        materializer = build_alert_materializer(db_manager.database)
        return await materializer.backfill_company(company_id, since=since, limit=limit)
    finally:
        await db_manager.disconnect()


def main(argv: Optional[Sequence[str]] = None) -> int:
    configure_logging()
    args = parse_args(argv)

    result = asyncio.run(run_backfill(args.company_id, args.since_days, args.limit))

    logger.info(f"Calls analyzed: {result.calls_evaluated}")
    logger.info(f"Alerts created: {result.alerts_created}")
    for alert_type, count in sorted(result.by_type.items()):
        logger.info(f"  {alert_type}: {count}")

    for failure in result.failures:
        logger.error(f"  call {failure.call_id} failed: {failure.error}")

    return 1 if result.failures else 0


if __name__ == "__main__":
    sys.exit(main())
