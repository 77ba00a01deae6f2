"""Monthly income/expense summary."""

from collections.abc import Iterable
from decimal import Decimal

import structlog

from ledger_reports.aggregator import aggregate_by, sum_amounts
from ledger_reports.config.categories import INCOME_GROUP, CategoryRules
from ledger_reports.dates import UNKNOWN_MONTH, month_key, month_label
from ledger_reports.models import Transaction
from ledger_reports.reports.types import (
    MonthBucket,
    MonthlySummaryReport,
    MonthlyTotals,
    ReportPeriod,
)
from ledger_reports.resolvers import resolve_category

logger = structlog.get_logger(__name__)


def _month_order(key: str) -> tuple[bool, str]:
    return (key == UNKNOWN_MONTH, key)


class MonthlySummaryGenerator:
    """Buckets transactions by calendar month into income and expenses.

    A row is income when its type is income or its category is in the income
    group; everything else, transfers included, is counted as an expense.
    Undated rows are collected in a trailing ``"unknown"`` month.
    """

    def __init__(self, rules: CategoryRules):
        self._rules = rules
        self._logger = logger.bind(component="monthly_summary")

    def is_income(self, tx: Transaction) -> bool:
        return tx.is_income or self._rules.in_group(resolve_category(tx), INCOME_GROUP)

    def generate(
        self, transactions: list[Transaction], period: ReportPeriod
    ) -> MonthlySummaryReport:
        months = self.bucket_by_month(transactions)
        report = MonthlySummaryReport(
            period=period,
            summary=self.calculate_totals(months),
            months=months,
            income_categories=self.category_totals(transactions, income=True),
            expense_categories=self.category_totals(transactions, income=False),
        )
        self._logger.debug(
            "monthly_summary_built",
            months=len(months),
            transactions=report.summary.total_transactions,
        )
        return report

    def bucket_by_month(self, transactions: Iterable[Transaction]) -> list[MonthBucket]:
        buckets = aggregate_by(
            transactions, lambda tx: month_key(tx.date), keep_items=True
        )

        months: list[MonthBucket] = []
        for key in sorted(buckets, key=_month_order):
            items = buckets[key].items
            first_date = items[0].date
            month = MonthBucket(
                month_key=key,
                month_label=month_label(first_date),
                year=first_date.year if first_date else None,
                month=first_date.month if first_date else None,
            )
            for tx in items:
                amount = tx.magnitude
                category = resolve_category(tx)
                if self.is_income(tx):
                    month.income_total += amount
                    month.income_categories[category] = (
                        month.income_categories.get(category, Decimal("0")) + amount
                    )
                else:
                    month.expense_total += amount
                    month.expense_categories[category] = (
                        month.expense_categories.get(category, Decimal("0")) + amount
                    )
                month.transaction_count += 1
            months.append(month)
        return months

    @staticmethod
    def calculate_totals(months: list[MonthBucket]) -> MonthlyTotals:
        return MonthlyTotals(
            total_income=sum_amounts(m.income_total for m in months),
            total_expenses=sum_amounts(m.expense_total for m in months),
            net_income=sum_amounts(m.net_income for m in months),
            total_transactions=sum(m.transaction_count for m in months),
        )

    def category_totals(
        self, transactions: Iterable[Transaction], income: bool
    ) -> dict[str, Decimal]:
        """Category -> amount for one side of the ledger, largest first."""
        selected = [tx for tx in transactions if self.is_income(tx) == income]
        buckets = aggregate_by(selected, resolve_category)
        ranked = sorted(buckets.items(), key=lambda item: item[1].total, reverse=True)
        return {category: bucket.total for category, bucket in ranked}
