"""Report assembly: turns a transaction slice into one finished report.

The assembler is a pure function of its inputs. It holds only the injected
category rules and threshold analyzer, never caches a report, and never
mutates the transactions it is given.
"""

from collections.abc import Callable, Iterable, Mapping
from datetime import UTC, datetime
from typing import Any

import structlog

from ledger_reports.aggregator import (
    aggregate_parties,
    category_totals,
    labelled_quarter_totals,
    monthly_trends,
    percentage,
    sum_amounts,
)
from ledger_reports.classifier import Classifier
from ledger_reports.config.categories import (
    CONTRACT_LABOR,
    EMPLOYEE_COSTS_GROUP,
    INCOME_GROUP,
    WAGES,
    WAGES_GROUP,
    CategoryRules,
)
from ledger_reports.dates import normalize_date
from ledger_reports.errors import UnsupportedReportTypeError
from ledger_reports.line_grouper import LineCategory, group_and_sort
from ledger_reports.models import ZERO, Employee, Transaction
from ledger_reports.reports.monthly import MonthlySummaryGenerator
from ledger_reports.reports.types import (
    CategoryAmount,
    EmployeeCost,
    EmployeeSummary,
    EmployeeSummaryReport,
    ExpenseCategory,
    ExpenseSummary,
    ExpenseSummaryReport,
    Form1099Summary,
    Form1099SummaryReport,
    LaborSection,
    MonthlySummaryReport,
    PayeeEntry,
    PayeeSummary,
    PayeeSummaryReport,
    ProfitLossReport,
    ProfitLossSummary,
    Report,
    ReportPeriod,
    ReportType,
    ScheduleCEntry,
    SpecialReportingItem,
    TaxSummary,
    TaxSummaryReport,
    VendorSummary,
    VendorSummaryReport,
)
from ledger_reports.resolvers import (
    UNKNOWN_CONTRACTOR,
    has_payee_identity,
    resolve_category,
    resolve_payee_key,
    resolve_payee_name,
    resolve_tax_id,
    resolve_vendor_key,
    resolve_vendor_name,
)
from ledger_reports.thresholds import ThresholdAnalyzer

logger = structlog.get_logger(__name__)

TransactionsInput = Iterable[Transaction | Mapping[str, Any]] | Mapping[str, Any] | None
PeriodInput = ReportPeriod | Mapping[str, Any] | tuple[Any, Any] | None


def coerce_transactions(raw: Any) -> list[Transaction]:
    """Turn whatever storage returned into Transaction records.

    Accepts an iterable of documents or a ``{"transactions": [...]}`` envelope.
    Anything else is treated as an empty ledger, and rows that are not
    mappings are skipped; both are logged rather than raised.
    """
    if raw is None:
        return []
    if isinstance(raw, Mapping):
        raw = raw.get("transactions")
    if isinstance(raw, (str, bytes)) or not isinstance(raw, Iterable):
        logger.warning("transactions_not_a_list", received=type(raw).__name__)
        return []

    records: list[Transaction] = []
    for index, row in enumerate(raw):
        if isinstance(row, Transaction):
            records.append(row)
        elif isinstance(row, Mapping):
            records.append(Transaction.from_dict(dict(row)))
        else:
            logger.warning(
                "transaction_row_skipped", index=index, received=type(row).__name__
            )
    return records


def parse_report_type(value: ReportType | str) -> ReportType:
    """Resolve a report type name.

    Raises:
        UnsupportedReportTypeError: If ``value`` names no ReportType.
    """
    try:
        return ReportType(value)
    except ValueError as exc:
        raise UnsupportedReportTypeError(
            f"Unsupported report type: {value!r}",
            details={"supported": [t.value for t in ReportType]},
        ) from exc


def as_period(value: PeriodInput) -> ReportPeriod:
    if value is None:
        return ReportPeriod()
    if isinstance(value, ReportPeriod):
        return value
    if isinstance(value, Mapping):
        return ReportPeriod(
            start_date=value.get("startDate", value.get("start_date")),
            end_date=value.get("endDate", value.get("end_date")),
        )
    start_date, end_date = value
    return ReportPeriod(start_date=start_date, end_date=end_date)


class ReportAssembler:
    """Builds every report kind from a transaction slice."""

    def __init__(
        self,
        rules: CategoryRules,
        analyzer: ThresholdAnalyzer | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        self._rules = rules
        self._classifier = Classifier(rules)
        self._analyzer = analyzer or ThresholdAnalyzer()
        self._monthly = MonthlySummaryGenerator(rules)
        self._clock = clock or (lambda: datetime.now(UTC))
        self._logger = logger.bind(component="report_assembler")

    @property
    def rules(self) -> CategoryRules:
        return self._rules

    # =========================================================================
    # DISPATCH
    # =========================================================================

    def assemble(
        self,
        report_type: ReportType | str,
        transactions: TransactionsInput,
        period: PeriodInput = None,
        *,
        employees: Iterable[Employee | Mapping[str, Any]] | None = None,
        tax_year: int | None = None,
    ) -> Report:
        """Build the requested report kind.

        Raises:
            UnsupportedReportTypeError: If ``report_type`` is not a ReportType.
        """
        kind = parse_report_type(report_type)
        builders: dict[ReportType, Callable[[], Report]] = {
            ReportType.PROFIT_LOSS: lambda: self.profit_loss(transactions, period),
            ReportType.EXPENSE_SUMMARY: lambda: self.expense_summary(transactions, period),
            ReportType.EMPLOYEE_SUMMARY: lambda: self.employee_summary(
                transactions, period, employees or []
            ),
            ReportType.TAX_SUMMARY: lambda: self.tax_summary(
                transactions, period, tax_year=tax_year
            ),
            ReportType.VENDOR_SUMMARY: lambda: self.vendor_summary(transactions, period),
            ReportType.PAYEE_SUMMARY: lambda: self.payee_summary(transactions, period),
            ReportType.MONTHLY_SUMMARY: lambda: self.monthly_summary(transactions, period),
            ReportType.FORM_1099_SUMMARY: lambda: self.form_1099_summary(
                transactions, period
            ),
        }
        builder = builders.get(kind)
        if builder is None:
            raise UnsupportedReportTypeError(f"No builder for report type {kind.value!r}")

        report = builder()
        self._logger.info(
            "report_generated",
            report_type=kind.value,
            start_date=str(report.period.start_date),
            end_date=str(report.period.end_date),
        )
        return report

    # =========================================================================
    # PROFIT / LOSS
    # =========================================================================

    def profit_loss(
        self, transactions: TransactionsInput, period: PeriodInput = None
    ) -> ProfitLossReport:
        records = coerce_transactions(transactions)
        income = [tx for tx in records if tx.is_income]
        expenses = [tx for tx in records if tx.is_expense]

        total_income = sum_amounts(tx.magnitude for tx in income)
        total_expenses = sum_amounts(tx.magnitude for tx in expenses)
        net_income = total_income - total_expenses
        margin = net_income / total_income * 100 if total_income > 0 else ZERO

        income_breakdown = [
            CategoryAmount(category, bucket.total)
            for category, bucket in category_totals(income).items()
            if self._rules.in_group(category, INCOME_GROUP)
        ]
        expense_breakdown = sorted(
            (
                CategoryAmount(category, bucket.total)
                for category, bucket in category_totals(expenses).items()
                if not self._rules.in_group(category, INCOME_GROUP)
            ),
            key=lambda c: c.amount,
            reverse=True,
        )

        return ProfitLossReport(
            period=as_period(period),
            generated_at=self._clock(),
            summary=ProfitLossSummary(
                gross_income=total_income,
                total_expenses=total_expenses,
                net_income=net_income,
                margin=margin,
            ),
            income_breakdown=income_breakdown,
            expense_breakdown=expense_breakdown,
        )

    # =========================================================================
    # EXPENSE SUMMARY
    # =========================================================================

    def expense_summary(
        self, transactions: TransactionsInput, period: PeriodInput = None
    ) -> ExpenseSummaryReport:
        expenses = [tx for tx in coerce_transactions(transactions) if tx.is_expense]
        buckets = category_totals(expenses)
        grand_total = sum_amounts(b.total for b in buckets.values())

        categories = sorted(
            (
                ExpenseCategory(
                    category=category,
                    amount=bucket.total,
                    percentage=percentage(bucket.total, grand_total),
                    transaction_count=bucket.count,
                )
                for category, bucket in buckets.items()
            ),
            key=lambda c: c.amount,
            reverse=True,
        )
        average = grand_total / len(expenses) if expenses else ZERO

        return ExpenseSummaryReport(
            period=as_period(period),
            generated_at=self._clock(),
            summary=ExpenseSummary(
                total_expenses=grand_total,
                total_transactions=len(expenses),
                average_transaction=average,
            ),
            categories=categories,
            monthly_trends=monthly_trends(expenses),
        )

    # =========================================================================
    # EMPLOYEE SUMMARY
    # =========================================================================

    def employee_summary(
        self,
        transactions: TransactionsInput,
        period: PeriodInput = None,
        employees: Iterable[Employee | Mapping[str, Any]] = (),
    ) -> EmployeeSummaryReport:
        staff = [
            e if isinstance(e, Employee) else Employee.from_dict(dict(e)) for e in employees
        ]
        costs = {employee.id: EmployeeCost(employee=employee) for employee in staff}

        related = [
            tx
            for tx in coerce_transactions(transactions)
            if tx.employee_id or self._rules.in_group(tx.category, EMPLOYEE_COSTS_GROUP)
        ]
        for tx in related:
            # Costs are attributed only through an explicit employee link
            cost = costs.get(tx.employee_id) if tx.employee_id else None
            if cost is None:
                continue
            amount = tx.magnitude
            if self._rules.in_group(tx.category, WAGES_GROUP):
                cost.wages += amount
            elif self._rules.in_group(tx.category, EMPLOYEE_COSTS_GROUP):
                cost.benefits += amount
            else:
                cost.expenses += amount
            cost.total_cost += amount
            cost.transaction_count += 1

        all_costs = list(costs.values())
        return EmployeeSummaryReport(
            period=as_period(period),
            generated_at=self._clock(),
            summary=EmployeeSummary(
                total_employees=len(staff),
                total_wages=sum_amounts(c.wages for c in all_costs),
                total_benefits=sum_amounts(c.benefits for c in all_costs),
                total_employee_costs=sum_amounts(c.total_cost for c in all_costs),
            ),
            employees=[c for c in all_costs if c.total_cost > 0],
        )

    # =========================================================================
    # TAX SUMMARY
    # =========================================================================

    def schedule_c(self, deductible: Iterable[Transaction]) -> dict[str, ScheduleCEntry]:
        """Per-category Schedule C totals, one entry for every configured category.

        Deductible rows in categories missing from the table (possible through
        an explicit override) get an entry with default metadata so the
        category totals still add up to the deductible total.
        """
        schedule = {
            name: ScheduleCEntry(category=name, metadata=self._rules.lookup(name))
            for name in self._rules.categories
        }
        for tx in deductible:
            category = resolve_category(tx)
            entry = schedule.get(category)
            if entry is None:
                entry = schedule[category] = ScheduleCEntry(
                    category=category, metadata=self._rules.lookup(category)
                )
            entry.add(tx)
        return schedule

    def _tax_year(self, period: ReportPeriod, tax_year: int | None) -> int:
        if tax_year:
            return int(tax_year)
        start = normalize_date(period.start_date)
        if start is not None:
            return start.year
        return self._clock().year

    def tax_summary(
        self,
        transactions: TransactionsInput,
        period: PeriodInput = None,
        tax_year: int | None = None,
    ) -> TaxSummaryReport:
        report_period = as_period(period)
        deductible = self._classifier.deductible_expenses(coerce_transactions(transactions))
        schedule = self.schedule_c(deductible)

        contract_labor = schedule.get(CONTRACT_LABOR)
        contract_line = self._rules.lookup(CONTRACT_LABOR).line
        contractors = LaborSection(
            line=contract_line,
            line_description=CONTRACT_LABOR,
            note=(
                "Must issue Form 1099-NEC for payments "
                f"≥ ${self._analyzer.threshold:,.0f}"
            ),
            payees=self._analyzer.contractor_payees(
                contract_labor.transactions if contract_labor else [], contract_line
            ),
        )

        wage_entry = schedule.get(WAGES)
        wage_line = self._rules.lookup(WAGES).line
        wages = LaborSection(
            line=wage_line,
            line_description=WAGES,
            note="Must issue Form W-2 for all employees",
            payees=self._analyzer.wage_payees(
                wage_entry.transactions if wage_entry else [], wage_line
            ),
        )

        active = [entry for entry in schedule.values() if entry.amount > 0]
        line_groups = group_and_sort(
            LineCategory(
                category=entry.category,
                amount=entry.amount,
                transaction_count=entry.transaction_count,
                line=entry.metadata.line,
                description=entry.metadata.description,
                special_reporting=entry.metadata.special_reporting,
                special_form=entry.metadata.special_form,
            )
            for entry in active
        )
        special = [
            SpecialReportingItem(
                category=entry.category,
                line=entry.metadata.line,
                amount=entry.amount,
                requirement=entry.metadata.special_form,
            )
            for entry in active
            if entry.metadata.special_reporting
        ]

        return TaxSummaryReport(
            period=report_period,
            generated_at=self._clock(),
            tax_year=self._tax_year(report_period, tax_year),
            summary=TaxSummary(
                total_deductible_expenses=sum_amounts(tx.magnitude for tx in deductible),
                total_transactions=len(deductible),
                quarterly_breakdown=labelled_quarter_totals(deductible),
                total_contractor_payments=contractors.total,
                total_wage_payments=wages.total,
                contractors_requiring_1099=sum(
                    1 for p in contractors.payees if p.requires_1099
                ),
            ),
            schedule_c=line_groups,
            contractors=contractors,
            wages=wages,
            special_reporting=special,
            schedule_c_detail=schedule,
        )

    # =========================================================================
    # VENDOR / PAYEE / 1099
    # =========================================================================

    def vendor_summary(
        self, transactions: TransactionsInput, period: PeriodInput = None
    ) -> VendorSummaryReport:
        outflows = [tx for tx in coerce_transactions(transactions) if tx.is_outflow]
        vendors = aggregate_parties(outflows, resolve_vendor_key, resolve_vendor_name)
        ordered = sorted(vendors.values(), key=lambda v: v.total, reverse=True)

        return VendorSummaryReport(
            period=as_period(period),
            generated_at=self._clock(),
            summary=VendorSummary(
                total_vendor_payments=sum_amounts(v.total for v in ordered),
                vendor_count=len(ordered),
                total_transactions=len(outflows),
            ),
            vendors=ordered,
        )

    def payee_summary(
        self, transactions: TransactionsInput, period: PeriodInput = None
    ) -> PayeeSummaryReport:
        payments = [
            tx
            for tx in coerce_transactions(transactions)
            if tx.is_outflow and has_payee_identity(tx)
        ]
        payees = aggregate_parties(
            payments, resolve_payee_key, resolve_payee_name, resolve_tax_id
        )
        entries = [
            PayeeEntry(party=party, flags=self._analyzer.flags(party))
            for party in sorted(payees.values(), key=lambda p: p.total, reverse=True)
        ]

        return PayeeSummaryReport(
            period=as_period(period),
            generated_at=self._clock(),
            summary=PayeeSummary(
                total_payments=sum_amounts(e.party.total for e in entries),
                payee_count=len(entries),
                contractor_count=sum(1 for e in entries if e.party.is_contractor),
                requiring_1099=sum(1 for e in entries if e.flags.requires_1099),
                approaching_1099=sum(1 for e in entries if e.flags.approaching_1099),
                missing_tax_ids=sum(1 for e in entries if e.flags.missing_tax_id),
            ),
            payees=entries,
        )

    def form_1099_summary(
        self, transactions: TransactionsInput, period: PeriodInput = None
    ) -> Form1099SummaryReport:
        payments = [
            tx
            for tx in coerce_transactions(transactions)
            if tx.is_contractor_payment and tx.is_outflow
        ]
        contractors = aggregate_parties(
            payments,
            resolve_payee_key,
            lambda tx: resolve_payee_name(tx, UNKNOWN_CONTRACTOR),
            resolve_tax_id,
        )
        result = self._analyzer.classify(contractors.values())

        return Form1099SummaryReport(
            period=as_period(period),
            generated_at=self._clock(),
            summary=Form1099Summary(
                total_contractor_payments=sum_amounts(
                    c.total for c in contractors.values()
                ),
                contractor_count=len(contractors),
                requiring_1099_count=len(result.requires_1099),
                approaching_1099_count=len(result.approaching_1099),
                missing_tax_id_count=len(result.missing_tax_ids),
            ),
            requires_1099=result.requires_1099,
            approaching_1099=result.approaching_1099,
            missing_tax_ids=result.missing_tax_ids,
        )

    # =========================================================================
    # MONTHLY SUMMARY
    # =========================================================================

    def monthly_summary(
        self, transactions: TransactionsInput, period: PeriodInput = None
    ) -> MonthlySummaryReport:
        report = self._monthly.generate(coerce_transactions(transactions), as_period(period))
        report.generated_at = self._clock()
        return report
