"""
Alert Rule Evaluators

Four independent, pure predicates over a scored call and its company's
rule configuration. Each returns an AlertDescriptor when its rule fires
and None otherwise. No I/O happens here.

Usage:
    descriptors = evaluate_call(call, config)
    # -> [AlertDescriptor(type=AlertType.LOW_SCORE, message="..."), ...]
"""
from typing import Callable, List, Optional, Tuple

from src.models.alert import AlertDescriptor, AlertType
from src.models.call_analysis import CallAnalysisRecord
from src.models.rule_configuration import RuleConfiguration
from src.services.alert_messages import render_alert_message

MAX_SCORE = 10.0

RuleEvaluator = Callable[[CallAnalysisRecord, RuleConfiguration, Optional[str]], Optional[AlertDescriptor]]


def evaluate_low_score(
    call: CallAnalysisRecord,
    config: RuleConfiguration,
    locale: Optional[str] = None
) -> Optional[AlertDescriptor]:
    """
    Fires when the final score is strictly below the threshold.

    Unscored calls and scores outside the 0-10 scale never fire.
    """
    if not config.low_score_enabled or config.low_score_threshold is None:
        return None

    score = call.final_score
    if score is None or not 0 <= score <= MAX_SCORE:
        return None

    if score >= config.low_score_threshold:
        return None

    return AlertDescriptor(
        type=AlertType.LOW_SCORE,
        message=render_alert_message(AlertType.LOW_SCORE, locale, score=f"{score:.1f}"),
    )


def evaluate_risk_words(
    call: CallAnalysisRecord,
    config: RuleConfiguration,
    locale: Optional[str] = None
) -> Optional[AlertDescriptor]:
    """
    Fires when the pipeline detected at least one risk word.

    Matching against the company's list happens upstream; only the
    presence of the detected set is checked here.
    """
    if not config.risk_words_enabled:
        return None

    if not call.risk_words_detected:
        return None

    return AlertDescriptor(
        type=AlertType.RISK_WORDS,
        message=render_alert_message(AlertType.RISK_WORDS, locale),
    )


def evaluate_long_duration(
    call: CallAnalysisRecord,
    config: RuleConfiguration,
    locale: Optional[str] = None
) -> Optional[AlertDescriptor]:
    """Fires when the call lasted strictly longer than the threshold."""
    if not config.long_duration_enabled or config.long_duration_threshold_minutes is None:
        return None

    duration = call.duration_seconds
    if duration is None or duration < 0:
        return None

    if duration <= config.long_duration_threshold_minutes * 60:
        return None

    return AlertDescriptor(
        type=AlertType.LONG_DURATION,
        message=render_alert_message(AlertType.LONG_DURATION, locale, minutes=duration // 60),
    )


def evaluate_no_next_step(
    call: CallAnalysisRecord,
    config: RuleConfiguration,
    locale: Optional[str] = None
) -> Optional[AlertDescriptor]:
    """Fires when no next-step recommendation was produced (blank counts as missing)."""
    if not config.no_next_step_enabled:
        return None

    recommendation = call.next_step_recommendation
    if recommendation is not None and recommendation.strip():
        return None

    return AlertDescriptor(
        type=AlertType.NO_NEXT_STEP,
        message=render_alert_message(AlertType.NO_NEXT_STEP, locale),
    )


RULE_EVALUATORS: Tuple[RuleEvaluator, ...] = (
    evaluate_low_score,
    evaluate_risk_words,
    evaluate_long_duration,
    evaluate_no_next_step,
)


def evaluate_call(
    call: CallAnalysisRecord,
    config: RuleConfiguration,
    locale: Optional[str] = None
) -> List[AlertDescriptor]:
    """
    Run every rule against a call.

    Args:
        call: Scored call to inspect
        config: Owning company's rule configuration
        locale: Message language (defaults to settings.alert_locale)

    Returns:
        Zero to four descriptors, one per rule that fired
    """
    descriptors = []
    for evaluator in RULE_EVALUATORS:
        descriptor = evaluator(call, config, locale)
        if descriptor is not None:
            descriptors.append(descriptor)
    return descriptors
