"""Report definitions and assembly."""

from ledger_reports.reports.assembler import (
    ReportAssembler,
    as_period,
    coerce_transactions,
    parse_report_type,
)
from ledger_reports.reports.monthly import MonthlySummaryGenerator
from ledger_reports.reports.types import (
    EmployeeSummaryReport,
    ExpenseSummaryReport,
    Form1099SummaryReport,
    MonthlySummaryReport,
    PayeeSummaryReport,
    ProfitLossReport,
    Report,
    ReportPeriod,
    ReportType,
    TaxSummaryReport,
    VendorSummaryReport,
)

__all__ = [
    "EmployeeSummaryReport",
    "ExpenseSummaryReport",
    "Form1099SummaryReport",
    "MonthlySummaryGenerator",
    "MonthlySummaryReport",
    "PayeeSummaryReport",
    "ProfitLossReport",
    "Report",
    "ReportAssembler",
    "ReportPeriod",
    "ReportType",
    "TaxSummaryReport",
    "VendorSummaryReport",
    "as_period",
    "coerce_transactions",
    "parse_report_type",
]
