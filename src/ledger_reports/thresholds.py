"""IRS 1099-NEC threshold checks and W-2 wage payee lists."""

from collections.abc import Iterable
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any

from ledger_reports.aggregator import PartyTotals, aggregate_by
from ledger_reports.config.settings import ReportSettings
from ledger_reports.models import Transaction
from ledger_reports.resolvers import resolve_payee

DEFAULT_1099_THRESHOLD = Decimal("600")
DEFAULT_1099_WARNING_FLOOR = Decimal("500")


@dataclass(frozen=True)
class ThresholdFlags:
    """1099 status of a single payee."""

    requires_1099: bool = False
    approaching_1099: bool = False
    missing_tax_id: bool = False


@dataclass
class ThresholdResult:
    """Payees split by 1099 status, each list largest total first."""

    requires_1099: list[PartyTotals] = field(default_factory=list)
    approaching_1099: list[PartyTotals] = field(default_factory=list)
    missing_tax_ids: list[PartyTotals] = field(default_factory=list)


@dataclass
class LaborPayee:
    """A payee line in the tax summary's labor section."""

    payee: str
    amount: Decimal
    transaction_count: int
    line: str
    requires_1099: bool | None = None
    requires_w2: bool | None = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "payee": self.payee,
            "amount": float(self.amount),
            "transactionCount": self.transaction_count,
        }
        if self.requires_1099 is not None:
            result["requires1099"] = self.requires_1099
        if self.requires_w2 is not None:
            result["requiresW2"] = self.requires_w2
        result["line"] = self.line
        return result


def _by_total_desc(parties: Iterable[PartyTotals]) -> list[PartyTotals]:
    # sorted() is stable with reverse=True, so ties keep first-seen order
    return sorted(parties, key=lambda p: p.total, reverse=True)


class ThresholdAnalyzer:
    """Applies the 1099-NEC reporting threshold to payee totals.

    A contractor paid at least ``threshold`` requires a 1099-NEC. One paid at
    least ``warning_floor`` but under ``threshold`` is approaching it. Wage
    payees always get a W-2 and are never threshold tested.
    """

    def __init__(
        self,
        threshold: Decimal = DEFAULT_1099_THRESHOLD,
        warning_floor: Decimal = DEFAULT_1099_WARNING_FLOOR,
    ):
        self.threshold = threshold
        self.warning_floor = warning_floor

    @classmethod
    def from_settings(cls, settings: ReportSettings) -> "ThresholdAnalyzer":
        return cls(settings.form_1099_threshold, settings.form_1099_warning_floor)

    def meets_threshold(self, amount: Decimal) -> bool:
        return amount >= self.threshold

    def is_approaching(self, amount: Decimal) -> bool:
        return self.warning_floor <= amount < self.threshold

    def flags(self, party: PartyTotals) -> ThresholdFlags:
        if not party.is_contractor:
            return ThresholdFlags()
        requires = self.meets_threshold(party.total)
        return ThresholdFlags(
            requires_1099=requires,
            approaching_1099=self.is_approaching(party.total),
            missing_tax_id=requires and not party.tax_id.strip(),
        )

    def classify(self, parties: Iterable[PartyTotals]) -> ThresholdResult:
        ordered = _by_total_desc(parties)
        result = ThresholdResult()
        for party in ordered:
            flags = self.flags(party)
            if flags.requires_1099:
                result.requires_1099.append(party)
            if flags.approaching_1099:
                result.approaching_1099.append(party)
            if flags.missing_tax_id:
                result.missing_tax_ids.append(party)
        return result

    def contractor_payees(
        self, transactions: Iterable[Transaction], line: str
    ) -> list[LaborPayee]:
        """Contract labor grouped by payee, flagged when a 1099-NEC is due."""
        payees = [
            LaborPayee(
                payee=payee,
                amount=bucket.total,
                transaction_count=bucket.count,
                line=line,
                requires_1099=self.meets_threshold(bucket.total),
            )
            for payee, bucket in aggregate_by(transactions, resolve_payee).items()
        ]
        return sorted(payees, key=lambda p: p.amount, reverse=True)

    def wage_payees(
        self, transactions: Iterable[Transaction], line: str
    ) -> list[LaborPayee]:
        """Wages grouped by payee; every wage payee requires a W-2."""
        payees = [
            LaborPayee(
                payee=payee,
                amount=bucket.total,
                transaction_count=bucket.count,
                line=line,
                requires_w2=True,
            )
            for payee, bucket in aggregate_by(transactions, resolve_payee).items()
        ]
        return sorted(payees, key=lambda p: p.amount, reverse=True)
