"""
Repositories Layer
Data persistence and query operations for the alert engine.
"""
from .connection import db_manager, get_database, ensure_indexes, DatabaseManager
from .alerts import AlertRepository
from .calls import CallAnalysisRepository
from .rule_configurations import (
    RuleConfigurationRepository,
    DEFAULT_RULE_CONFIGURATION,
    default_rule_configuration,
)
from .base import BaseRepository

__all__ = [
    "db_manager",
    "get_database",
    "ensure_indexes",
    "DatabaseManager",
    "AlertRepository",
    "CallAnalysisRepository",
    "RuleConfigurationRepository",
    "DEFAULT_RULE_CONFIGURATION",
    "default_rule_configuration",
    "BaseRepository",
]
