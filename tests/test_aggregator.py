"""Tests for grouping transactions into totals."""

from decimal import Decimal

from ledger_reports.aggregator import (
    aggregate_by,
    aggregate_parties,
    category_totals,
    labelled_quarter_totals,
    monthly_trends,
    percentage,
)
from ledger_reports.resolvers import resolve_payee, resolve_payee_key, resolve_payee_name


class TestAggregateBy:
    def test_totals_use_magnitude(self, make_tx):
        txs = [
            make_tx(category="Travel", amount=-100),
            make_tx(category="Travel", amount=40),
            make_tx(category="Meals and Entertainment", amount="-12.50"),
        ]

        buckets = category_totals(txs)

        assert buckets["Travel"].total == Decimal("140")
        assert buckets["Travel"].count == 2
        assert buckets["Meals and Entertainment"].total == Decimal("12.50")

    def test_conservation(self, make_tx):
        txs = [make_tx(category=c, amount=a) for c, a in [("A", -1), ("B", 2), (None, -3)]]

        buckets = category_totals(txs)

        assert sum(b.total for b in buckets.values()) == Decimal("6")
        assert buckets["Uncategorized"].total == Decimal("3")

    def test_none_key_drops_row(self, make_tx):
        buckets = aggregate_by([make_tx(amount=5)], lambda tx: None)

        assert buckets == {}

    def test_keep_items(self, make_tx):
        tx = make_tx(payee="Acme", amount=5)

        buckets = aggregate_by([tx], resolve_payee, keep_items=True)

        assert buckets["Acme"].items == [tx]

    def test_unknown_payee_single_bucket(self, make_tx):
        txs = [
            make_tx(payee=None, amount=-10),
            make_tx(amount=-20),
            make_tx(payee="", amount=-30),
        ]

        buckets = aggregate_by(txs, resolve_payee)

        assert list(buckets) == ["Unknown"]
        assert buckets["Unknown"].total == Decimal("60")


class TestDerivedTotals:
    def test_percentage_of_zero_total(self):
        assert percentage(Decimal("5"), Decimal("0")) == Decimal("0")
        assert percentage(Decimal("25"), Decimal("100")) == Decimal("25")

    def test_monthly_trends_with_unknown_month(self, make_tx):
        txs = [
            make_tx(date="2025-01-05", category="Travel", amount=-10),
            make_tx(date="2025-01-20", category="Travel", amount=-5),
            make_tx(date=None, category="Utilities", amount=-7),
        ]

        trends = monthly_trends(txs)

        assert trends == {
            "2025-01": {"Travel": Decimal("15")},
            "unknown": {"Utilities": Decimal("7")},
        }

    def test_monthly_trends_use_month_as_written(self, make_tx):
        txs = [make_tx(date="2025-01-31T20:00:00-05:00", category="Travel", amount=-10)]

        assert list(monthly_trends(txs)) == ["2025-01"]

    def test_labelled_quarters_skip_missing_labels(self, make_tx):
        txs = [
            make_tx(quarterlyPeriod="Q1", amount=-100),
            make_tx(quarterlyPeriod="Q3", amount=-50),
            make_tx(date="2025-02-01", amount=-25),
        ]

        quarters = labelled_quarter_totals(txs)

        assert quarters == {
            "Q1": Decimal("100"),
            "Q2": Decimal("0"),
            "Q3": Decimal("50"),
            "Q4": Decimal("0"),
        }


class TestAggregateParties:
    def test_identity_from_first_row(self, make_tx):
        txs = [
            make_tx(payeeId="p1", payee="Acme", payeeTaxId="", isContractorPayment=True, amount=-100),
            make_tx(payeeId="p1", payee="Acme Corp", payeeTaxId="12-3", amount=-50),
        ]

        parties = aggregate_parties(txs, resolve_payee_key, resolve_payee_name)

        party = parties["p1"]
        assert party.name == "Acme"
        assert party.is_contractor is True
        assert party.total == Decimal("150")
        assert party.count == 2

    def test_date_quarters_and_categories(self, make_tx):
        txs = [
            make_tx(payee="Acme", date="2025-02-10", category="Contract Labor", amount=-100),
            make_tx(payee="Acme", date="2025-11-10", category="Supplies (Not Inventory)", amount=-40),
            make_tx(payee="Acme", category="Contract Labor", amount=-60),
        ]

        party = aggregate_parties(txs, resolve_payee_key, resolve_payee_name)["Acme"]

        assert party.quarterly["Q1"] == Decimal("100")
        assert party.quarterly["Q4"] == Decimal("40")
        assert sum(party.quarterly.values()) == Decimal("140")
        assert party.total == Decimal("200")
        assert party.categories == {
            "Contract Labor": Decimal("160"),
            "Supplies (Not Inventory)": Decimal("40"),
        }
