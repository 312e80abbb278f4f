"""
Alert Settings Endpoints

Read and partially update a company's alert rule configuration.
"""
from fastapi import APIRouter, Depends

from src.api.dependencies import get_config_repo
from src.models.rule_configuration import RuleConfigurationUpdate
from src.repositories.rule_configurations import RuleConfigurationRepository

router = APIRouter(prefix="/companies/{company_id}/alert-settings", tags=["Alert Settings"])


@router.get("")
async def get_alert_settings(
    company_id: str,
    config_repo: RuleConfigurationRepository = Depends(get_config_repo)
):
    """
    Effective alert settings for a company.

    Companies that never saved settings get the defaults. The risk-word
    list is returned as a comma-separated string.
    """
    config = await config_repo.get_for_company(company_id)
    return config.model_dump(mode="json", exclude={"id"})


@router.put("")
async def update_alert_settings(
    company_id: str,
    update: RuleConfigurationUpdate,
    config_repo: RuleConfigurationRepository = Depends(get_config_repo)
):
    """
    Merge a partial settings update.

    Validation (422 on failure):
    - low_score_threshold between 0 and 10
    - long_duration_threshold_minutes between 1 and 120
    """
    config = await config_repo.update_for_company(company_id, update)
    return config.model_dump(mode="json", exclude={"id"})
