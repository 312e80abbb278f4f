import pytest
import datetime as dt
from mongomock_motor import AsyncMongoMockClient

from src.models.call_analysis import CallAnalysisRecord
from src.models.rule_configuration import RuleConfiguration
from src.repositories import ensure_indexes


@pytest.fixture
def all_rules_config():
    """All four rules enabled: score < 5.0, duration > 30 min."""
    return RuleConfiguration(
        company_id="company-1",
        low_score_enabled=True,
        low_score_threshold=5.0,
        risk_words_enabled=True,
        risk_words_list="cancelar,reembolso",
        long_duration_enabled=True,
        long_duration_threshold_minutes=30,
        no_next_step_enabled=True,
    )


@pytest.fixture
def make_call():
    """Factory for a clean call that triggers no rule by default."""
    def _make_call(**overrides) -> CallAnalysisRecord:
        data = {
            "call_id": "call-1",
            "company_id": "company-1",
            "agent_id": "agent-1",
            "final_score": 8.0,
            "duration_seconds": 300,
            "risk_words_detected": None,
            "next_step_recommendation": "Call back on Monday",
            "analyzed_at": dt.datetime.now(dt.UTC),
        }
        data.update(overrides)
        return CallAnalysisRecord(**data)

    return _make_call


@pytest.fixture
async def mongo_db():
    """In-memory Motor-compatible database with production indexes."""
    client = AsyncMongoMockClient()
    db = client["call_alerts_test"]
    await ensure_indexes(db)
    yield db
