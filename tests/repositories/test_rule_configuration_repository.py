"""
Rule Configuration Repository Tests
Default fallback, partial merges and validation.
"""
import pytest
from pydantic import ValidationError

from src.models.rule_configuration import RuleConfigurationUpdate
from src.repositories.rule_configurations import (
    DEFAULT_RULE_CONFIGURATION,
    RuleConfigurationRepository,
    default_rule_configuration,
)


@pytest.fixture
def config_repo(mongo_db) -> RuleConfigurationRepository:
    return RuleConfigurationRepository(mongo_db)


class TestDefaults:
    """Companies without stored settings get the canonical defaults."""

    def test_default_values(self):
        config = default_rule_configuration("company-1")

        assert config.low_score_enabled is True
        assert config.low_score_threshold == 5.0
        assert config.long_duration_threshold_minutes == 30
        assert config.no_next_step_enabled is True
        assert "cancelar" in config.risk_words_list
        assert "nunca mais" in config.risk_words_list

    def test_defaults_are_read_only(self):
        with pytest.raises(TypeError):
            DEFAULT_RULE_CONFIGURATION["low_score_threshold"] = 1.0

    async def test_missing_document_returns_defaults(self, config_repo: RuleConfigurationRepository, mongo_db):
        config = await config_repo.get_for_company("company-new")

        assert config.company_id == "company-new"
        assert config.low_score_threshold == 5.0
        assert await mongo_db.rule_configurations.count_documents({}) == 0

    async def test_stored_null_field_is_not_defaulted(self, config_repo: RuleConfigurationRepository, mongo_db):
        """A stored document with a null flag keeps that rule disabled."""
        await mongo_db.rule_configurations.insert_one({
            "company_id": "company-1",
            "low_score_enabled": None,
            "low_score_threshold": 5.0,
        })

        config = await config_repo.get_for_company("company-1")

        assert config.low_score_enabled is None
        assert config.no_next_step_enabled is None


class TestUpdateForCompany:
    """Partial updates merged onto stored or default settings."""

    async def test_first_update_merges_onto_defaults(self, config_repo: RuleConfigurationRepository):
        config = await config_repo.update_for_company("company-1", {"low_score_threshold": 7.5})

        assert config.low_score_threshold == 7.5
        assert config.long_duration_threshold_minutes == 30
        assert config.risk_words_enabled is True
        assert config.id is not None

    async def test_update_persists(self, config_repo: RuleConfigurationRepository):
        await config_repo.update_for_company("company-1", {"long_duration_enabled": False})

        config = await config_repo.get_for_company("company-1")

        assert config.long_duration_enabled is False
        assert config.low_score_enabled is True

    async def test_successive_updates_keep_earlier_changes(self, config_repo: RuleConfigurationRepository):
        await config_repo.update_for_company("company-1", {"low_score_threshold": 6.0})
        config = await config_repo.update_for_company(
            "company-1", RuleConfigurationUpdate(long_duration_threshold_minutes=45)
        )

        assert config.low_score_threshold == 6.0
        assert config.long_duration_threshold_minutes == 45

    async def test_risk_words_normalized(self, config_repo: RuleConfigurationRepository, mongo_db):
        config = await config_repo.update_for_company(
            "company-1", {"risk_words_list": " Cancelar, cancelar,processo,, "}
        )

        assert config.risk_words_list == ["Cancelar", "processo"]
        stored = await mongo_db.rule_configurations.find_one({"company_id": "company-1"})
        assert stored["risk_words_list"] == "Cancelar,processo"

    async def test_single_document_per_company(self, config_repo: RuleConfigurationRepository, mongo_db):
        await config_repo.update_for_company("company-1", {"low_score_threshold": 4.0})
        await config_repo.update_for_company("company-1", {"low_score_threshold": 3.0})

        assert await mongo_db.rule_configurations.count_documents({"company_id": "company-1"}) == 1

    async def test_out_of_range_rejected(self, config_repo: RuleConfigurationRepository, mongo_db):
        with pytest.raises(ValidationError):
            await config_repo.update_for_company("company-1", {"long_duration_threshold_minutes": 500})

        assert await mongo_db.rule_configurations.count_documents({}) == 0

    async def test_companies_are_isolated(self, config_repo: RuleConfigurationRepository):
        await config_repo.update_for_company("company-1", {"low_score_enabled": False})

        other = await config_repo.get_for_company("company-2")

        assert other.low_score_enabled is True

    async def test_company_id_with_braces(self, config_repo: RuleConfigurationRepository, mongo_db):
        """Braces in the company id are stored and logged as plain text."""
        config = await config_repo.update_for_company("acme{eu}", {"low_score_threshold": 4.0})

        assert config.company_id == "acme{eu}"
        assert config.low_score_threshold == 4.0
        assert await mongo_db.rule_configurations.count_documents({"company_id": "acme{eu}"}) == 1
