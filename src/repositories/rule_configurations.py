"""
Rule Configuration Repository
Per-company alert settings with one canonical default policy.
"""
from types import MappingProxyType
from typing import Any, Dict, Mapping
from motor.motor_asyncio import AsyncIOMotorDatabase
import datetime as dt

from .base import BaseRepository
from ..models.rule_configuration import RuleConfiguration, RuleConfigurationUpdate
from ..utils.observability import logger


# The only place default alert settings are defined. Applied whenever a
# company has no stored configuration.
DEFAULT_RULE_CONFIGURATION: Mapping[str, Any] = MappingProxyType({
    "low_score_enabled": True,
    "low_score_threshold": 5.0,
    "risk_words_enabled": True,
    "risk_words_list": (
        "cancelar,cancelamento,reclamacao,reclamar,advogado,processo,tribunal,"
        "insatisfeito,insatisfacao,devolver,devolucao,reembolso,nunca mais,pessimo"
    ),
    "long_duration_enabled": True,
    "long_duration_threshold_minutes": 30,
    "no_next_step_enabled": True,
})

_STORED_FIELDS = tuple(DEFAULT_RULE_CONFIGURATION)


def default_rule_configuration(company_id: str) -> RuleConfiguration:
    """Build the default configuration for a company."""
    return RuleConfiguration(company_id=company_id, **DEFAULT_RULE_CONFIGURATION)


class RuleConfigurationRepository(BaseRepository[RuleConfiguration]):
    """
    Reader/writer for RuleConfiguration.
    A missing document is never an error: readers get the defaults.
    """

    def __init__(self, database: AsyncIOMotorDatabase):
        """Initialize configuration repository with database connection."""
        super().__init__(database, "rule_configurations", RuleConfiguration)

    async def get_for_company(self, company_id: str) -> RuleConfiguration:
        """
        Effective configuration for a company.

        Returns:
            The stored configuration, or the defaults if none exists
        """
        stored = await self.find_one({"company_id": company_id})

        if stored is None:
            logger.debug(f"No rule configuration for company {company_id}, using defaults")
            return default_rule_configuration(company_id)

        return stored

    async def update_for_company(
        self,
        company_id: str,
        update: RuleConfigurationUpdate | Dict[str, Any]
    ) -> RuleConfiguration:
        """
        Merge a partial update into the company's configuration.

        Fields not present in the update keep their stored (or default)
        value. The merged result is validated before being upserted.

        Args:
            company_id: Owning company
            update: Partial settings, validated as RuleConfigurationUpdate

        Returns:
            The configuration as stored after the merge

        Raises:
            pydantic.ValidationError: If the update is out of range
        """
        if not isinstance(update, RuleConfigurationUpdate):
            update = RuleConfigurationUpdate.model_validate(update)

        current = await self.get_for_company(company_id)
        merged = current.model_dump(include=set(_STORED_FIELDS))
        merged.update(update.changes())

        validated = RuleConfiguration(company_id=company_id, **merged)
        fields = validated.model_dump(include=set(_STORED_FIELDS))

        now = dt.datetime.now(dt.UTC)
        await self.collection.update_one(
            {"company_id": company_id},
            {
                "$set": {**fields, "updated_at": now},
                "$setOnInsert": {"created_at": now},
            },
            upsert=True
        )

        logger.bind(company_id=company_id, changed_fields=sorted(update.changes())).info(
            f"Updated rule configuration for company {company_id}"
        )

        return await self.get_for_company(company_id)
