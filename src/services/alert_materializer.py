"""
Alert Materializer

Turns rule evaluator output into persisted, deduplicated Alert documents.
Deduplication is delegated to the unique (call_id, type) index: an insert
that conflicts is an idempotent no-op, so concurrent evaluations of the
same call cannot produce duplicates.
"""

import asyncio
import datetime as dt
import time
from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase

from src.config import get_settings
from src.models.alert import Alert
from src.models.call_analysis import CallAnalysisRecord
from src.models.rule_configuration import RuleConfiguration
from src.repositories.alerts import AlertRepository
from src.repositories.calls import CallAnalysisRepository
from src.repositories.rule_configurations import RuleConfigurationRepository
from src.services.alert_rules import evaluate_call
from src.utils.observability import logger, log_alert_event, log_batch_summary


class CallNotFoundError(LookupError):
    """Raised when evaluation is requested for a call with no stored analysis."""

    def __init__(self, call_id: str):
        super().__init__(f"Call analysis not found: {call_id}")
        self.call_id = call_id


@dataclass
class BatchFailure:
    """A call whose evaluation failed during a batch run."""
    call_id: str
    error: str


@dataclass
class BatchEvaluationResult:
    """Outcome of evaluating many calls; failures never abort the batch."""
    created: List[Alert] = field(default_factory=list)
    failures: List[BatchFailure] = field(default_factory=list)
    calls_evaluated: int = 0
    configuration: Optional[RuleConfiguration] = None

    @property
    def alerts_created(self) -> int:
        return len(self.created)

    @property
    def by_type(self) -> Dict[str, int]:
        return dict(Counter(str(alert.type) for alert in self.created))


class AlertMaterializer:
    """
    Orchestrates rule evaluation and alert persistence.

    Usage:
        materializer = AlertMaterializer(alert_repo, call_repo, config_repo)

        # Right after the AI pipeline stores a call's analysis
        new_alerts = await materializer.evaluate_call_by_id(call_id)

        # Administrative re-evaluation after settings change
        result = await materializer.backfill_company(company_id)
    """

    def __init__(
        self,
        alert_repo: AlertRepository,
        call_repo: Optional[CallAnalysisRepository] = None,
        config_repo: Optional[RuleConfigurationRepository] = None,
        max_concurrency: Optional[int] = None,
        locale: Optional[str] = None,
    ):
        settings = get_settings()
        self.alert_repo = alert_repo
        self.call_repo = call_repo
        self.config_repo = config_repo
        self.max_concurrency = max_concurrency or settings.alert_batch_max_concurrency
        self.locale = locale or settings.alert_locale

    async def evaluate_and_persist(
        self,
        call: CallAnalysisRecord,
        config: RuleConfiguration,
        created: Optional[List[Alert]] = None
    ) -> List[Alert]:
        """
        Evaluate all rules for one call and persist the alerts not yet recorded.

        Args:
            call: Scored call
            config: Owning company's rule configuration
            created: List that receives each alert as soon as it is stored,
                so a caller keeps the alerts written before a later insert fails

        Returns:
            Newly created alerts only; empty when nothing fired or every
            alert already existed

        Raises:
            pymongo.errors.PyMongoError: If the alert store fails
        """
        if created is None:
            created = []

        for descriptor in evaluate_call(call, config, self.locale):
            alert = Alert.from_descriptor(
                descriptor,
                company_id=call.company_id,
                call_id=call.call_id,
                agent_id=call.agent_id,
            )

            stored = await self.alert_repo.insert_if_absent(alert)
            if stored is None:
                log_alert_event(
                    "alert_duplicate_skipped",
                    company_id=call.company_id,
                    call_id=call.call_id,
                    alert_type=str(descriptor.type),
                )
                continue

            log_alert_event(
                "alert_created",
                company_id=call.company_id,
                call_id=call.call_id,
                alert_type=str(stored.type),
                alert_id=stored.id,
            )
            created.append(stored)

        return created

    async def evaluate_and_persist_batch(
        self,
        calls: Iterable[CallAnalysisRecord],
        config: RuleConfiguration
    ) -> BatchEvaluationResult:
        """
        Evaluate many calls concurrently with per-call failure isolation.

        At most max_concurrency calls are in flight. A call whose
        evaluation raises is recorded in `failures` and the rest continue.
        Alerts a failing call stored before the error stay in `created`.

        Args:
            calls: Calls to evaluate (typically one company's recent calls)
            config: Rule configuration to apply

        Returns:
            BatchEvaluationResult with created alerts and failures
        """
        calls = list(calls)
        started = time.perf_counter()
        semaphore = asyncio.Semaphore(self.max_concurrency)

        async def _evaluate(call: CallAnalysisRecord):
            created: List[Alert] = []
            async with semaphore:
                try:
                    await self.evaluate_and_persist(call, config, created)
                    return created, None
                except Exception as e:
                    logger.bind(call_id=call.call_id, company_id=call.company_id).error(
                        f"Alert evaluation failed for call {call.call_id}: {e}"
                    )
                    return created, BatchFailure(call_id=call.call_id, error=str(e) or type(e).__name__)

        outcomes = await asyncio.gather(*(_evaluate(call) for call in calls))

        result = BatchEvaluationResult(calls_evaluated=len(calls), configuration=config)
        for created, failure in outcomes:
            result.created.extend(created)
            if failure is not None:
                result.failures.append(failure)

        log_batch_summary(
            company_id=config.company_id,
            calls_evaluated=result.calls_evaluated,
            alerts_created=result.alerts_created,
            failures=len(result.failures),
            duration_ms=(time.perf_counter() - started) * 1000,
            by_type=result.by_type,
        )

        return result

    async def evaluate_call_by_id(self, call_id: str) -> List[Alert]:
        """
        Trigger hook for the analysis-completion handler.

        Loads the call and its company's configuration, then evaluates.

        Raises:
            CallNotFoundError: If no analysis is stored for the call
        """
        call_repo, config_repo = self._require_readers()

        call = await call_repo.get_by_call_id(call_id)
        if call is None:
            raise CallNotFoundError(call_id)

        config = await config_repo.get_for_company(call.company_id)
        return await self.evaluate_and_persist(call, config)

    async def backfill_company(
        self,
        company_id: str,
        since: Optional[dt.datetime] = None,
        limit: Optional[int] = None
    ) -> BatchEvaluationResult:
        """
        Re-evaluate a company's calls with its current configuration.

        Existing alerts are kept; only missing ones are created.

        Args:
            company_id: Company to backfill
            since: Only calls analyzed at or after this time
            limit: Maximum number of calls (defaults to settings.backfill_default_limit)
        """
        call_repo, config_repo = self._require_readers()

        config = await config_repo.get_for_company(company_id)
        calls = await call_repo.list_for_company(
            company_id,
            since=since,
            limit=limit or get_settings().backfill_default_limit,
        )

        logger.bind(company_id=company_id, calls=len(calls)).info(
            f"Backfilling alerts for company {company_id}"
        )

        return await self.evaluate_and_persist_batch(calls, config)

    def _require_readers(self) -> tuple[CallAnalysisRepository, RuleConfigurationRepository]:
        if self.call_repo is None or self.config_repo is None:
            raise RuntimeError("AlertMaterializer needs call and configuration repositories for this operation")
        return self.call_repo, self.config_repo


def build_alert_materializer(database: AsyncIOMotorDatabase) -> AlertMaterializer:
    """Wire a materializer with repositories over the given database."""
    return AlertMaterializer(
        alert_repo=AlertRepository(database),
        call_repo=CallAnalysisRepository(database),
        config_repo=RuleConfigurationRepository(database),
    )
