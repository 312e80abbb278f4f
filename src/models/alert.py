"""
Alert domain models.

An Alert is a materialized notification that one rule fired for one call.
At most one alert of a given type exists per call.
"""
from dataclasses import dataclass
from enum import StrEnum
from typing import List, Optional
from pydantic import BaseModel, Field, computed_field

from src.models.base import MongoBaseModel


class AlertType(StrEnum):
    LOW_SCORE = "low_score"
    RISK_WORDS = "risk_words"
    LONG_DURATION = "long_duration"
    NO_NEXT_STEP = "no_next_step"


@dataclass(frozen=True)
class AlertDescriptor:
    """Evaluator output; the materializer attaches company, call and agent."""
    type: AlertType
    message: str


class Alert(MongoBaseModel):
    company_id: str
    call_id: str
    agent_id: Optional[str] = None
    type: AlertType
    message: str
    is_read: bool = False

    @classmethod
    def from_descriptor(
        cls,
        descriptor: AlertDescriptor,
        company_id: str,
        call_id: str,
        agent_id: Optional[str] = None
    ) -> "Alert":
        return cls(
            company_id=company_id,
            call_id=call_id,
            agent_id=agent_id,
            type=descriptor.type,
            message=descriptor.message,
        )


class AlertFilters(BaseModel):
    """Query options for the alerts list."""
    unread_only: bool = False
    agent_id: Optional[str] = None
    type: Optional[AlertType] = None
    page: int = Field(1, ge=1)
    limit: int = Field(20, ge=1, le=100)

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit


class AlertPage(BaseModel):
    data: List[Alert] = Field(default_factory=list)
    total: int = 0
    page: int = 1
    limit: int = 20

    @computed_field
    @property
    def total_pages(self) -> int:
        return -(-self.total // self.limit) if self.limit else 0
