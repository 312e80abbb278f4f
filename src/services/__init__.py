"""Services package."""
from src.services.alert_rules import (
    RULE_EVALUATORS,
    evaluate_call,
    evaluate_low_score,
    evaluate_risk_words,
    evaluate_long_duration,
    evaluate_no_next_step,
)
from src.services.alert_materializer import (
    AlertMaterializer,
    BatchEvaluationResult,
    BatchFailure,
    CallNotFoundError,
    build_alert_materializer,
)

__all__ = [
    "RULE_EVALUATORS",
    "evaluate_call",
    "evaluate_low_score",
    "evaluate_risk_words",
    "evaluate_long_duration",
    "evaluate_no_next_step",
    "AlertMaterializer",
    "BatchEvaluationResult",
    "BatchFailure",
    "CallNotFoundError",
    "build_alert_materializer",
]
