"""Ledger records consumed by the report engine.

Storage adapters hand back loosely shaped documents (camelCase keys, optional
fields, several date representations). ``Transaction.from_dict`` turns each
one into an explicit record; it never raises on a malformed row.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any

from ledger_reports.dates import normalize_date

ZERO = Decimal("0")


class TransactionType(str, Enum):
    """Ledger transaction kinds."""

    INCOME = "income"
    EXPENSE = "expense"
    TRANSFER = "transfer"
    ADJUSTMENT = "adjustment"


def to_decimal(value: Any) -> Decimal:
    """Coerce a stored amount to Decimal; anything unusable becomes 0."""
    if value is None or isinstance(value, bool):
        return ZERO
    if isinstance(value, Decimal):
        return value if value.is_finite() else ZERO
    if isinstance(value, float):
        value = repr(value)
    try:
        result = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return ZERO
    return result if result.is_finite() else ZERO


def _optional_str(value: Any) -> str | None:
    if value is None:
        return None
    return str(value)


def _optional_bool(value: Any) -> bool | None:
    if value is None:
        return None
    return bool(value)


@dataclass(frozen=True)
class Transaction:
    """A single ledger entry. Amount sign is not trusted; use ``magnitude``."""

    id: str | None = None
    date: date | None = None
    amount: Decimal = ZERO
    type: str = ""
    category: str | None = None
    description: str | None = None
    payee: str | None = None
    payee_id: str | None = None
    payee_name: str | None = None
    payee_tax_id: str | None = None
    vendor_id: str | None = None
    vendor_name: str | None = None
    company_id: str | None = None
    quarterly_period: str | None = None
    is_tax_deductible: bool | None = None
    is_contractor_payment: bool = False
    employee_id: str | None = None

    @property
    def magnitude(self) -> Decimal:
        return abs(self.amount)

    @property
    def is_income(self) -> bool:
        return self.type == TransactionType.INCOME.value

    @property
    def is_expense(self) -> bool:
        return self.type == TransactionType.EXPENSE.value

    @property
    def is_outflow(self) -> bool:
        """Money leaving the business: an expense, or a negative non-income row."""
        if self.is_expense:
            return True
        return not self.is_income and self.amount < 0

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Transaction":
        """Build a transaction from a storage document (camelCase keys)."""
        raw_type = data.get("type")
        if isinstance(raw_type, TransactionType):
            raw_type = raw_type.value
        return cls(
            id=_optional_str(data.get("id")),
            date=normalize_date(data.get("date")),
            amount=to_decimal(data.get("amount")),
            type=str(raw_type or "").strip().lower(),
            category=_optional_str(data.get("category")),
            description=_optional_str(data.get("description")),
            payee=_optional_str(data.get("payee")),
            payee_id=_optional_str(data.get("payeeId")),
            payee_name=_optional_str(data.get("payeeName")),
            payee_tax_id=_optional_str(data.get("payeeTaxId")),
            vendor_id=_optional_str(data.get("vendorId")),
            vendor_name=_optional_str(data.get("vendorName")),
            company_id=_optional_str(data.get("companyId")),
            quarterly_period=_optional_str(data.get("quarterlyPeriod")),
            is_tax_deductible=_optional_bool(data.get("isTaxDeductible")),
            is_contractor_payment=data.get("isContractorPayment") is True,
            employee_id=_optional_str(data.get("employeeId")),
        )


@dataclass(frozen=True)
class Employee:
    """An employee profile; only ``id`` matters to the engine."""

    id: str
    name: str = ""
    profile: dict[str, Any] = field(default_factory=dict, hash=False, compare=False)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Employee":
        profile = {k: v for k, v in data.items() if k not in ("id", "name")}
        return cls(id=str(data.get("id")), name=str(data.get("name") or ""), profile=profile)

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name, **self.profile}
