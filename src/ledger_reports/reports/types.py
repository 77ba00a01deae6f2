"""Report definitions.

Each report kind is a dataclass tagged with a ``ReportType``. Amounts are
kept as Decimal and converted to JSON numbers by ``to_dict()``, which emits
the camelCase shape the UI and the PDF renderer consume.
"""

from dataclasses import dataclass, field
from datetime import UTC, date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, ClassVar

from ledger_reports.aggregator import PartyTotals, zero_quarters
from ledger_reports.config.categories import CategoryMetadata
from ledger_reports.line_grouper import LineGroup
from ledger_reports.models import ZERO, Employee, Transaction
from ledger_reports.resolvers import resolve_category
from ledger_reports.thresholds import LaborPayee, ThresholdFlags


class ReportType(str, Enum):
    """Closed set of report kinds the engine builds."""

    PROFIT_LOSS = "profit_loss"
    EXPENSE_SUMMARY = "expense_summary"
    EMPLOYEE_SUMMARY = "employee_summary"
    TAX_SUMMARY = "tax_summary"
    VENDOR_SUMMARY = "vendor_summary"
    PAYEE_SUMMARY = "payee_ytd"
    MONTHLY_SUMMARY = "monthly_summary"
    FORM_1099_SUMMARY = "1099_summary"

    @property
    def slug(self) -> str:
        """File-name friendly form, e.g. ``profit-loss``."""
        return self.value.replace("_", "-")


def _money(value: Decimal) -> float:
    return float(value)


def _money_map(values: dict[str, Decimal]) -> dict[str, float]:
    return {key: _money(amount) for key, amount in values.items()}


def _iso(tx: Transaction) -> str | None:
    return tx.date.isoformat() if tx.date else None


def _echo(value: Any) -> Any:
    # date objects from Python callers become ISO strings; anything else as given
    if isinstance(value, date):
        return value.isoformat()
    return value


@dataclass(frozen=True)
class ReportPeriod:
    """Requested date range, echoed back as given (date objects as ISO strings)."""

    start_date: Any = None
    end_date: Any = None

    def to_dict(self) -> dict[str, Any]:
        return {"startDate": _echo(self.start_date), "endDate": _echo(self.end_date)}


@dataclass
class Report:
    """Fields shared by every report kind."""

    report_type: ClassVar[ReportType]

    period: ReportPeriod = field(default_factory=ReportPeriod)
    generated_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    def _body(self) -> dict[str, Any]:
        raise NotImplementedError

    def to_dict(self) -> dict[str, Any]:
        """Serialize report to a JSON-ready dictionary."""
        result: dict[str, Any] = {
            "type": self.report_type.value,
            "period": self.period.to_dict(),
        }
        result.update(self._body())
        result["generatedAt"] = self.generated_at.isoformat()
        return result


@dataclass
class CategoryAmount:
    category: str
    amount: Decimal

    def to_dict(self) -> dict[str, Any]:
        return {"category": self.category, "amount": _money(self.amount)}


# =============================================================================
# PROFIT / LOSS
# =============================================================================


@dataclass
class ProfitLossSummary:
    gross_income: Decimal = ZERO
    total_expenses: Decimal = ZERO
    net_income: Decimal = ZERO
    margin: Decimal = ZERO

    def to_dict(self) -> dict[str, Any]:
        return {
            "grossIncome": _money(self.gross_income),
            "totalExpenses": _money(self.total_expenses),
            "netIncome": _money(self.net_income),
            "margin": _money(self.margin),
        }


@dataclass
class ProfitLossReport(Report):
    report_type: ClassVar[ReportType] = ReportType.PROFIT_LOSS

    summary: ProfitLossSummary = field(default_factory=ProfitLossSummary)
    income_breakdown: list[CategoryAmount] = field(default_factory=list)
    expense_breakdown: list[CategoryAmount] = field(default_factory=list)

    def _body(self) -> dict[str, Any]:
        return {
            "summary": self.summary.to_dict(),
            "income": {
                "total": _money(self.summary.gross_income),
                "breakdown": [c.to_dict() for c in self.income_breakdown],
            },
            "expenses": {
                "total": _money(self.summary.total_expenses),
                "breakdown": [c.to_dict() for c in self.expense_breakdown],
            },
        }


# =============================================================================
# EXPENSE SUMMARY
# =============================================================================


@dataclass
class ExpenseCategory:
    category: str
    amount: Decimal
    percentage: Decimal
    transaction_count: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "category": self.category,
            "amount": _money(self.amount),
            "percentage": _money(self.percentage),
            "transactionCount": self.transaction_count,
        }


@dataclass
class ExpenseSummary:
    total_expenses: Decimal = ZERO
    total_transactions: int = 0
    average_transaction: Decimal = ZERO

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalExpenses": _money(self.total_expenses),
            "totalTransactions": self.total_transactions,
            "averageTransaction": _money(self.average_transaction),
        }


@dataclass
class ExpenseSummaryReport(Report):
    report_type: ClassVar[ReportType] = ReportType.EXPENSE_SUMMARY

    summary: ExpenseSummary = field(default_factory=ExpenseSummary)
    categories: list[ExpenseCategory] = field(default_factory=list)
    monthly_trends: dict[str, dict[str, Decimal]] = field(default_factory=dict)

    def _body(self) -> dict[str, Any]:
        return {
            "summary": self.summary.to_dict(),
            "categories": [c.to_dict() for c in self.categories],
            "monthlyTrends": {
                month: _money_map(categories)
                for month, categories in self.monthly_trends.items()
            },
        }


# =============================================================================
# EMPLOYEE SUMMARY
# =============================================================================


@dataclass
class EmployeeCost:
    employee: Employee
    wages: Decimal = ZERO
    benefits: Decimal = ZERO
    expenses: Decimal = ZERO
    total_cost: Decimal = ZERO
    transaction_count: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "employee": self.employee.to_dict(),
            "wages": _money(self.wages),
            "benefits": _money(self.benefits),
            "expenses": _money(self.expenses),
            "totalCost": _money(self.total_cost),
            "transactionCount": self.transaction_count,
        }


@dataclass
class EmployeeSummary:
    total_employees: int = 0
    total_wages: Decimal = ZERO
    total_benefits: Decimal = ZERO
    total_employee_costs: Decimal = ZERO

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalEmployees": self.total_employees,
            "totalWages": _money(self.total_wages),
            "totalBenefits": _money(self.total_benefits),
            "totalEmployeeCosts": _money(self.total_employee_costs),
        }


@dataclass
class EmployeeSummaryReport(Report):
    report_type: ClassVar[ReportType] = ReportType.EMPLOYEE_SUMMARY

    summary: EmployeeSummary = field(default_factory=EmployeeSummary)
    employees: list[EmployeeCost] = field(default_factory=list)

    def _body(self) -> dict[str, Any]:
        return {
            "summary": self.summary.to_dict(),
            "employees": [e.to_dict() for e in self.employees],
        }


# =============================================================================
# TAX SUMMARY
# =============================================================================


@dataclass
class ScheduleCEntry:
    """Working total for one category while building the tax summary."""

    category: str
    metadata: CategoryMetadata
    amount: Decimal = ZERO
    transaction_count: int = 0
    transactions: list[Transaction] = field(default_factory=list)

    def add(self, tx: Transaction) -> None:
        self.amount += tx.magnitude
        self.transaction_count += 1
        self.transactions.append(tx)


@dataclass
class LaborSection:
    line: str
    line_description: str
    note: str
    payees: list[LaborPayee] = field(default_factory=list)

    @property
    def total(self) -> Decimal:
        return sum((p.amount for p in self.payees), ZERO)

    def to_dict(self) -> dict[str, Any]:
        return {
            "line": self.line,
            "lineDescription": self.line_description,
            "total": _money(self.total),
            "payees": [p.to_dict() for p in self.payees],
            "note": self.note,
        }


@dataclass
class SpecialReportingItem:
    category: str
    line: str
    amount: Decimal
    requirement: str | None

    def to_dict(self) -> dict[str, Any]:
        return {
            "category": self.category,
            "line": self.line,
            "amount": _money(self.amount),
            "requirement": self.requirement,
        }


@dataclass
class TaxSummary:
    total_deductible_expenses: Decimal = ZERO
    total_transactions: int = 0
    quarterly_breakdown: dict[str, Decimal] = field(default_factory=zero_quarters)
    total_contractor_payments: Decimal = ZERO
    total_wage_payments: Decimal = ZERO
    contractors_requiring_1099: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalDeductibleExpenses": _money(self.total_deductible_expenses),
            "totalTransactions": self.total_transactions,
            "quarterlyBreakdown": _money_map(self.quarterly_breakdown),
            "totalContractorPayments": _money(self.total_contractor_payments),
            "totalWagePayments": _money(self.total_wage_payments),
            "contractorsRequiring1099": self.contractors_requiring_1099,
        }


@dataclass
class TaxSummaryReport(Report):
    report_type: ClassVar[ReportType] = ReportType.TAX_SUMMARY

    tax_year: int = 0
    summary: TaxSummary = field(default_factory=TaxSummary)
    schedule_c: list[LineGroup] = field(default_factory=list)
    contractors: LaborSection | None = None
    wages: LaborSection | None = None
    special_reporting: list[SpecialReportingItem] = field(default_factory=list)
    # Every configured category, including zero ones; not serialized
    schedule_c_detail: dict[str, ScheduleCEntry] = field(default_factory=dict, repr=False)

    def _body(self) -> dict[str, Any]:
        labor: dict[str, Any] = {}
        if self.contractors is not None:
            labor["contractors"] = self.contractors.to_dict()
        if self.wages is not None:
            labor["wages"] = self.wages.to_dict()
        return {
            "taxYear": self.tax_year,
            "summary": self.summary.to_dict(),
            "scheduleC": [group.to_dict() for group in self.schedule_c],
            "laborPayments": labor,
            "specialReporting": [item.to_dict() for item in self.special_reporting],
        }


# =============================================================================
# VENDOR / PAYEE / 1099
# =============================================================================


def _party_categories(party: PartyTotals) -> list[dict[str, Any]]:
    return [
        {"category": category, "amount": _money(amount)}
        for category, amount in party.categories.items()
    ]


@dataclass
class VendorSummary:
    total_vendor_payments: Decimal = ZERO
    vendor_count: int = 0
    total_transactions: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalVendorPayments": _money(self.total_vendor_payments),
            "vendorCount": self.vendor_count,
            "totalTransactions": self.total_transactions,
        }


@dataclass
class VendorSummaryReport(Report):
    report_type: ClassVar[ReportType] = ReportType.VENDOR_SUMMARY

    summary: VendorSummary = field(default_factory=VendorSummary)
    vendors: list[PartyTotals] = field(default_factory=list)

    @staticmethod
    def _vendor_dict(vendor: PartyTotals) -> dict[str, Any]:
        return {
            "vendorId": vendor.key,
            "vendorName": vendor.name,
            "totalPayments": _money(vendor.total),
            "paymentCount": vendor.count,
            "categories": _party_categories(vendor),
            "transactions": [
                {
                    "date": _iso(tx),
                    "amount": _money(tx.magnitude),
                    "category": resolve_category(tx),
                    "description": tx.description,
                }
                for tx in vendor.items
            ],
        }

    def _body(self) -> dict[str, Any]:
        return {
            "summary": self.summary.to_dict(),
            "vendors": [self._vendor_dict(v) for v in self.vendors],
        }


@dataclass
class PayeeEntry:
    party: PartyTotals
    flags: ThresholdFlags

    def to_dict(self) -> dict[str, Any]:
        party = self.party
        return {
            "payeeId": party.key,
            "payeeName": party.name,
            "isContractor": party.is_contractor,
            "taxId": party.tax_id,
            "totalPayments": _money(party.total),
            "paymentCount": party.count,
            "quarterly": _money_map(party.quarterly),
            "categories": _party_categories(party),
            "transactions": [
                {
                    "date": _iso(tx),
                    "amount": _money(tx.magnitude),
                    "description": tx.description,
                    "category": tx.category,
                }
                for tx in party.items
            ],
            "requires1099": self.flags.requires_1099,
            "approaching1099": self.flags.approaching_1099,
            "missingTaxId": self.flags.missing_tax_id,
        }


@dataclass
class PayeeSummary:
    total_payments: Decimal = ZERO
    payee_count: int = 0
    contractor_count: int = 0
    requiring_1099: int = 0
    approaching_1099: int = 0
    missing_tax_ids: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalPayments": _money(self.total_payments),
            "payeeCount": self.payee_count,
            "contractorCount": self.contractor_count,
            "requiring1099": self.requiring_1099,
            "approaching1099": self.approaching_1099,
            "missingTaxIds": self.missing_tax_ids,
        }


@dataclass
class PayeeSummaryReport(Report):
    report_type: ClassVar[ReportType] = ReportType.PAYEE_SUMMARY

    summary: PayeeSummary = field(default_factory=PayeeSummary)
    payees: list[PayeeEntry] = field(default_factory=list)

    def _body(self) -> dict[str, Any]:
        return {
            "summary": self.summary.to_dict(),
            "payees": [p.to_dict() for p in self.payees],
        }


@dataclass
class Form1099Summary:
    total_contractor_payments: Decimal = ZERO
    contractor_count: int = 0
    requiring_1099_count: int = 0
    approaching_1099_count: int = 0
    missing_tax_id_count: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalContractorPayments": _money(self.total_contractor_payments),
            "contractorCount": self.contractor_count,
            "requiring1099Count": self.requiring_1099_count,
            "approaching1099Count": self.approaching_1099_count,
            "missingTaxIdCount": self.missing_tax_id_count,
        }


@dataclass
class Form1099SummaryReport(Report):
    report_type: ClassVar[ReportType] = ReportType.FORM_1099_SUMMARY

    summary: Form1099Summary = field(default_factory=Form1099Summary)
    requires_1099: list[PartyTotals] = field(default_factory=list)
    approaching_1099: list[PartyTotals] = field(default_factory=list)
    missing_tax_ids: list[PartyTotals] = field(default_factory=list)

    @staticmethod
    def _contractor_dict(party: PartyTotals) -> dict[str, Any]:
        return {
            "payeeId": party.key,
            "payeeName": party.name,
            "taxId": party.tax_id,
            "totalPayments": _money(party.total),
            "paymentCount": party.count,
            "transactions": [
                {
                    "date": _iso(tx),
                    "amount": _money(tx.magnitude),
                    "description": tx.description,
                }
                for tx in party.items
            ],
        }

    def _body(self) -> dict[str, Any]:
        return {
            "summary": self.summary.to_dict(),
            "requires1099": [self._contractor_dict(p) for p in self.requires_1099],
            "approaching1099": [self._contractor_dict(p) for p in self.approaching_1099],
            "missingTaxIds": [
                {
                    "payeeId": p.key,
                    "payeeName": p.name,
                    "totalPayments": _money(p.total),
                }
                for p in self.missing_tax_ids
            ],
        }


# =============================================================================
# MONTHLY SUMMARY
# =============================================================================


@dataclass
class MonthBucket:
    """Income and expense totals for one calendar month."""

    month_key: str
    month_label: str
    year: int | None = None
    month: int | None = None
    income_total: Decimal = ZERO
    income_categories: dict[str, Decimal] = field(default_factory=dict)
    expense_total: Decimal = ZERO
    expense_categories: dict[str, Decimal] = field(default_factory=dict)
    transaction_count: int = 0

    @property
    def net_income(self) -> Decimal:
        return self.income_total - self.expense_total

    def to_dict(self) -> dict[str, Any]:
        return {
            "monthKey": self.month_key,
            "monthLabel": self.month_label,
            "year": self.year,
            "month": self.month,
            "income": {
                "total": _money(self.income_total),
                "categories": _money_map(self.income_categories),
            },
            "expenses": {
                "total": _money(self.expense_total),
                "categories": _money_map(self.expense_categories),
            },
            "netIncome": _money(self.net_income),
            "transactionCount": self.transaction_count,
        }


@dataclass
class MonthlyTotals:
    total_income: Decimal = ZERO
    total_expenses: Decimal = ZERO
    net_income: Decimal = ZERO
    total_transactions: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalIncome": _money(self.total_income),
            "totalExpenses": _money(self.total_expenses),
            "netIncome": _money(self.net_income),
            "totalTransactions": self.total_transactions,
        }


@dataclass
class MonthlySummaryReport(Report):
    report_type: ClassVar[ReportType] = ReportType.MONTHLY_SUMMARY

    summary: MonthlyTotals = field(default_factory=MonthlyTotals)
    months: list[MonthBucket] = field(default_factory=list)
    income_categories: dict[str, Decimal] = field(default_factory=dict)
    expense_categories: dict[str, Decimal] = field(default_factory=dict)

    def _body(self) -> dict[str, Any]:
        return {
            "summary": self.summary.to_dict(),
            "months": [m.to_dict() for m in self.months],
            "incomeCategories": _money_map(self.income_categories),
            "expenseCategories": _money_map(self.expense_categories),
        }
