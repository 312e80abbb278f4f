"""
Localized alert messages.

Portuguese is the product's primary language; English is provided for
non-Portuguese tenants and logs.
"""
from typing import Optional

from src.config import get_settings
from src.models.alert import AlertType


ALERT_MESSAGES: dict[str, dict[AlertType, str]] = {
    "pt": {
        AlertType.LOW_SCORE: "Chamada com pontuação baixa: {score}/10. Necessita revisão.",
        AlertType.RISK_WORDS: "Palavras de risco detetadas na chamada.",
        AlertType.LONG_DURATION: "Chamada com duração excessiva: {minutes} minutos.",
        AlertType.NO_NEXT_STEP: "Próximo passo não definido na chamada.",
    },
    "en": {
        AlertType.LOW_SCORE: "Low score: {score}/10. Needs review.",
        AlertType.RISK_WORDS: "Risk words detected in the call.",
        AlertType.LONG_DURATION: "Call exceeded the duration limit: {minutes} minutes.",
        AlertType.NO_NEXT_STEP: "No next step defined for the call.",
    },
}


def resolve_locale(locale: Optional[str] = None) -> str:
    """Return a supported locale, falling back to the configured default."""
    if locale in ALERT_MESSAGES:
        return locale
    return get_settings().alert_locale


def render_alert_message(alert_type: AlertType, locale: Optional[str] = None, **values) -> str:
    """
    Render the message for an alert type.

    Args:
        alert_type: Rule that fired
        locale: "pt" or "en"; unknown values use the configured default
        **values: Placeholders for the template (score, minutes)
    """
    template = ALERT_MESSAGES[resolve_locale(locale)][alert_type]
    return template.format(**values)
