"""
Call Analysis Record
The scored call as written by the external AI pipeline. Read-only input
for the alert engine.
"""
import datetime as dt
import json
from typing import Annotated, Any, FrozenSet, Optional
from pydantic import BeforeValidator, ConfigDict, field_serializer

from src.models.base import MongoBaseModel


def parse_detected_risk_words(value: Any) -> Optional[FrozenSet[str]]:
    """
    Accept the shapes the pipeline has historically written: a list/set of
    terms, a JSON-encoded array, or null. Anything unparsable is None.
    """
    if value is None:
        return None
    if isinstance(value, str):
        try:
            value = json.loads(value)
        except json.JSONDecodeError:
            return None
    if not isinstance(value, (list, tuple, set, frozenset)):
        return None

    return frozenset(
        str(word).strip().lower()
        for word in value
        if word is not None and str(word).strip()
    )


DetectedRiskWords = Annotated[Optional[FrozenSet[str]], BeforeValidator(parse_detected_risk_words)]


class CallAnalysisRecord(MongoBaseModel):
    """
    AI-produced scoring and metadata for one call.

    Out-of-range scores and negative durations are kept as-is; the
    evaluators treat them as undeterminable instead of failing.
    """
    model_config = ConfigDict(frozen=True)

    call_id: str
    company_id: str
    agent_id: Optional[str] = None

    final_score: Optional[float] = None
    duration_seconds: Optional[int] = 0
    risk_words_detected: DetectedRiskWords = None
    next_step_recommendation: Optional[str] = None

    analyzed_at: Optional[dt.datetime] = None

    @field_serializer("risk_words_detected")
    def serialize_risk_words(self, value: Optional[FrozenSet[str]]):
        return sorted(value) if value is not None else None
