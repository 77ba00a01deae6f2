"""Grouping of transactions into running totals.

Everything here is keyed by insertion order (plain dicts), so the first
transaction seen for a key decides where that key sits in any later stable
sort.
"""

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from decimal import Decimal

from ledger_reports.dates import QUARTERS, month_key, quarter_for_date, quarter_label
from ledger_reports.models import ZERO, Transaction
from ledger_reports.resolvers import resolve_category

KeyFn = Callable[[Transaction], str | None]
AmountFn = Callable[[Transaction], Decimal]


def absolute_amount(tx: Transaction) -> Decimal:
    return tx.magnitude


def zero_quarters() -> dict[str, Decimal]:
    return {quarter: ZERO for quarter in QUARTERS}


def sum_amounts(values: Iterable[Decimal]) -> Decimal:
    return sum(values, ZERO)


def percentage(amount: Decimal, total: Decimal) -> Decimal:
    """Share of total as a percentage; 0 when the total is 0."""
    if not total:
        return ZERO
    return amount / total * 100


@dataclass
class Bucket:
    """Running total for one key."""

    total: Decimal = ZERO
    count: int = 0
    items: list[Transaction] = field(default_factory=list)

    def add(self, tx: Transaction, amount: Decimal, keep_item: bool = False) -> None:
        self.total += amount
        self.count += 1
        if keep_item:
            self.items.append(tx)


def aggregate_by(
    transactions: Iterable[Transaction],
    key_fn: KeyFn,
    amount_fn: AmountFn = absolute_amount,
    keep_items: bool = False,
) -> dict[str, Bucket]:
    """Group transactions by ``key_fn``; a None key drops the transaction."""
    buckets: dict[str, Bucket] = {}
    for tx in transactions:
        key = key_fn(tx)
        if key is None:
            continue
        bucket = buckets.get(key)
        if bucket is None:
            bucket = buckets[key] = Bucket()
        bucket.add(tx, amount_fn(tx), keep_items)
    return buckets


def category_totals(
    transactions: Iterable[Transaction], keep_items: bool = False
) -> dict[str, Bucket]:
    return aggregate_by(transactions, resolve_category, keep_items=keep_items)


def monthly_trends(transactions: Iterable[Transaction]) -> dict[str, dict[str, Decimal]]:
    """month (``YYYY-MM`` or ``"unknown"``) -> category -> amount."""
    trends: dict[str, dict[str, Decimal]] = {}
    for tx in transactions:
        month = trends.setdefault(month_key(tx.date), {})
        category = resolve_category(tx)
        month[category] = month.get(category, ZERO) + tx.magnitude
    return trends


def labelled_quarter_totals(transactions: Iterable[Transaction]) -> dict[str, Decimal]:
    """Quarter totals from the precomputed ``quarterly_period`` label.

    Used by the tax summary. Rows without a valid Q1-Q4 label are left out
    entirely rather than guessed from their date.
    """
    breakdown = zero_quarters()
    buckets = aggregate_by(transactions, lambda tx: quarter_label(tx.quarterly_period))
    for quarter, bucket in buckets.items():
        breakdown[quarter] = bucket.total
    return breakdown


@dataclass
class PartyTotals:
    """Totals for one payee or vendor.

    ``quarterly`` is derived from each transaction's calendar date, unlike the
    label-based tax summary quarters. Whether the two should agree is an open
    product question; both are kept as they are.
    """

    key: str
    name: str
    tax_id: str = ""
    is_contractor: bool = False
    total: Decimal = ZERO
    count: int = 0
    categories: dict[str, Decimal] = field(default_factory=dict)
    quarterly: dict[str, Decimal] = field(default_factory=zero_quarters)
    items: list[Transaction] = field(default_factory=list)

    def add(self, tx: Transaction) -> None:
        amount = tx.magnitude
        self.total += amount
        self.count += 1

        category = resolve_category(tx)
        self.categories[category] = self.categories.get(category, ZERO) + amount

        # Undated rows still count toward the total but land in no quarter
        quarter = quarter_for_date(tx.date)
        if quarter is not None:
            self.quarterly[quarter] += amount

        self.items.append(tx)


def aggregate_parties(
    transactions: Iterable[Transaction],
    key_fn: Callable[[Transaction], str],
    name_fn: Callable[[Transaction], str],
    tax_id_fn: Callable[[Transaction], str] | None = None,
) -> dict[str, PartyTotals]:
    """Group transactions per payee/vendor; identity fields come from the first row seen."""
    parties: dict[str, PartyTotals] = {}
    for tx in transactions:
        key = key_fn(tx)
        party = parties.get(key)
        if party is None:
            party = parties[key] = PartyTotals(
                key=key,
                name=name_fn(tx),
                tax_id=tax_id_fn(tx) if tax_id_fn else "",
                is_contractor=tx.is_contractor_payment,
            )
        party.add(tx)
    return parties
