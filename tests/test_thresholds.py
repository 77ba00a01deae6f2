"""Tests for 1099-NEC threshold analysis."""

from decimal import Decimal

from ledger_reports.aggregator import PartyTotals
from ledger_reports.config.settings import ReportSettings
from ledger_reports.thresholds import ThresholdAnalyzer


def _party(key: str, total: str, tax_id: str = "", is_contractor: bool = True) -> PartyTotals:
    return PartyTotals(
        key=key,
        name=key,
        tax_id=tax_id,
        is_contractor=is_contractor,
        total=Decimal(total),
    )


class TestBoundaries:
    def test_exactly_600_requires_1099(self, analyzer):
        flags = analyzer.flags(_party("a", "600.00"))

        assert flags.requires_1099 is True
        assert flags.approaching_1099 is False

    def test_just_under_600_is_approaching(self, analyzer):
        flags = analyzer.flags(_party("a", "599.99"))

        assert flags.requires_1099 is False
        assert flags.approaching_1099 is True

    def test_500_is_inclusive_lower_bound(self, analyzer):
        assert analyzer.flags(_party("a", "500.00")).approaching_1099 is True
        assert analyzer.flags(_party("a", "499.99")).approaching_1099 is False

    def test_missing_tax_id_only_when_required(self, analyzer):
        assert analyzer.flags(_party("a", "700")).missing_tax_id is True
        assert analyzer.flags(_party("a", "700", tax_id="12-3")).missing_tax_id is False
        assert analyzer.flags(_party("a", "550")).missing_tax_id is False

    def test_non_contractors_are_never_flagged(self, analyzer):
        flags = analyzer.flags(_party("a", "5000", is_contractor=False))

        assert not (flags.requires_1099 or flags.approaching_1099 or flags.missing_tax_id)


class TestClassify:
    def test_lists_sorted_descending(self, analyzer):
        result = analyzer.classify(
            [_party("small", "650"), _party("big", "900", tax_id="1"), _party("near", "510")]
        )

        assert [p.key for p in result.requires_1099] == ["big", "small"]
        assert [p.key for p in result.approaching_1099] == ["near"]
        assert [p.key for p in result.missing_tax_ids] == ["small"]

    def test_ties_keep_input_order(self, analyzer):
        result = analyzer.classify([_party("first", "700"), _party("second", "700")])

        assert [p.key for p in result.requires_1099] == ["first", "second"]

    def test_configured_threshold(self):
        analyzer = ThresholdAnalyzer(Decimal("1000"), Decimal("800"))

        assert not analyzer.meets_threshold(Decimal("999.99"))
        assert analyzer.is_approaching(Decimal("800"))

    def test_from_settings(self):
        settings = ReportSettings(FORM_1099_THRESHOLD="2000", FORM_1099_WARNING_FLOOR="1500")

        analyzer = ThresholdAnalyzer.from_settings(settings)

        assert analyzer.threshold == Decimal("2000")
        assert analyzer.warning_floor == Decimal("1500")


class TestLaborPayees:
    def test_contractor_payees(self, analyzer, make_tx):
        txs = [
            make_tx(payee="Acme", amount=-700),
            make_tx(payee="Bolt", amount=-200),
            make_tx(payee="Acme", amount=-100),
        ]

        payees = analyzer.contractor_payees(txs, "11")

        assert [p.to_dict() for p in payees] == [
            {"payee": "Acme", "amount": 800.0, "transactionCount": 2, "requires1099": True, "line": "11"},
            {"payee": "Bolt", "amount": 200.0, "transactionCount": 1, "requires1099": False, "line": "11"},
        ]

    def test_wage_payees_always_need_w2(self, analyzer, make_tx):
        payees = analyzer.wage_payees([make_tx(payee="Dana", amount=-50)], "26")

        assert payees[0].to_dict() == {
            "payee": "Dana",
            "amount": 50.0,
            "transactionCount": 1,
            "requiresW2": True,
            "line": "26",
        }
