"""Configuration module for the report engine."""

from ledger_reports.config.categories import (
    CategoryMetadata,
    CategoryRules,
    load_category_rules,
    parse_category_rules,
)
from ledger_reports.config.logging import configure_logging, report_context
from ledger_reports.config.settings import ReportSettings, get_settings

__all__ = [
    "CategoryMetadata",
    "CategoryRules",
    "ReportSettings",
    "configure_logging",
    "get_settings",
    "load_category_rules",
    "parse_category_rules",
    "report_context",
]
