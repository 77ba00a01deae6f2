"""Ledger Reports - financial report aggregation over bookkeeping transactions."""

__version__ = "0.1.0"

from ledger_reports.classifier import Classifier
from ledger_reports.config import (
    CategoryRules,
    configure_logging,
    get_settings,
    load_category_rules,
)
from ledger_reports.errors import (
    RenderError,
    ReportError,
    StorageError,
    UnsupportedReportTypeError,
)
from ledger_reports.models import Employee, Transaction, TransactionType
from ledger_reports.reports import Report, ReportAssembler, ReportPeriod, ReportType
from ledger_reports.service import (
    RenderedReport,
    ReportRenderer,
    ReportService,
    TransactionStore,
)
from ledger_reports.thresholds import ThresholdAnalyzer

__all__ = [
    # Version
    "__version__",
    # Records
    "Transaction",
    "TransactionType",
    "Employee",
    # Engine
    "Classifier",
    "ThresholdAnalyzer",
    "ReportAssembler",
    "Report",
    "ReportPeriod",
    "ReportType",
    # Service
    "ReportService",
    "TransactionStore",
    "ReportRenderer",
    "RenderedReport",
    # Errors
    "ReportError",
    "UnsupportedReportTypeError",
    "StorageError",
    "RenderError",
    # Config
    "CategoryRules",
    "load_category_rules",
    "get_settings",
    "configure_logging",
]
