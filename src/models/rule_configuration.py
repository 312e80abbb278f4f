"""
Rule Configuration Models
Per-company enable flags and thresholds for the four alert rules.

A field left as None disables the rule that depends on it. Company-wide
defaults are applied by the configuration repository when no document
exists, never here.
"""
from typing import Annotated, Iterable, List, Optional
from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, field_serializer

from src.models.base import MongoBaseModel


def parse_risk_words(value: str | Iterable[str] | None) -> List[str]:
    """
    Normalize a risk-word list.

    Accepts the comma-separated storage format or any iterable of terms.
    Terms are trimmed, empty entries dropped and duplicates removed
    case-insensitively, keeping the first spelling seen.

    >>> parse_risk_words(" cancelar, Reembolso ,,reembolso")
    ['cancelar', 'Reembolso']
    """
    if value is None:
        return []
    if isinstance(value, str):
        value = value.split(",")

    words: List[str] = []
    seen = set()
    for raw in value:
        word = str(raw).strip()
        key = word.casefold()
        if not word or key in seen:
            continue
        seen.add(key)
        words.append(word)
    return words


RiskWordList = Annotated[List[str], BeforeValidator(parse_risk_words)]


class RuleConfiguration(MongoBaseModel):
    """Alert rule settings for one company."""
    company_id: str

    low_score_enabled: Optional[bool] = None
    low_score_threshold: Optional[float] = Field(None, ge=0, le=10)

    risk_words_enabled: Optional[bool] = None
    risk_words_list: RiskWordList = Field(default_factory=list)

    long_duration_enabled: Optional[bool] = None
    long_duration_threshold_minutes: Optional[int] = Field(None, ge=0)

    no_next_step_enabled: Optional[bool] = None

    @field_serializer("risk_words_list")
    def serialize_risk_words(self, value: List[str]) -> str:
        return ",".join(value)


class RuleConfigurationUpdate(BaseModel):
    """
    Partial update sent by the settings screen.
    Only fields explicitly set are merged into the stored configuration.
    """
    model_config = ConfigDict(extra="forbid")

    low_score_enabled: Optional[bool] = None
    low_score_threshold: Optional[float] = Field(None, ge=0, le=10)
    risk_words_enabled: Optional[bool] = None
    risk_words_list: Optional[RiskWordList] = None
    long_duration_enabled: Optional[bool] = None
    long_duration_threshold_minutes: Optional[int] = Field(None, ge=1, le=120)
    no_next_step_enabled: Optional[bool] = None

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True)
