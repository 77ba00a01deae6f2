"""Per-transaction deductibility decisions."""

from ledger_reports.config.categories import PERSONAL_GROUP, CategoryRules
from ledger_reports.models import Transaction


class Classifier:
    """Decides whether a transaction is a deductible business expense."""

    def __init__(self, rules: CategoryRules):
        self._rules = rules

    def is_deductible(self, tx: Transaction) -> bool:
        """Explicit per-transaction override wins over the category default."""
        if tx.is_tax_deductible is not None:
            return tx.is_tax_deductible
        return self._rules.lookup(tx.category).tax_deductible

    def is_personal(self, tx: Transaction) -> bool:
        return self._rules.in_group(tx.category, PERSONAL_GROUP)

    def counts_toward_tax_summary(self, tx: Transaction) -> bool:
        return self.is_deductible(tx) and tx.is_expense and not self.is_personal(tx)

    def deductible_expenses(self, transactions: list[Transaction]) -> list[Transaction]:
        return [tx for tx in transactions if self.counts_toward_tax_summary(tx)]
