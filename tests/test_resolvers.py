"""Tests for transaction records and field resolvers."""

from datetime import date
from decimal import Decimal

from ledger_reports.models import Employee, Transaction
from ledger_reports.resolvers import (
    first_present,
    has_payee_identity,
    resolve_category,
    resolve_payee,
    resolve_payee_key,
    resolve_payee_name,
    resolve_tax_id,
    resolve_vendor_key,
    resolve_vendor_name,
)


def _tx(**fields) -> Transaction:
    return Transaction.from_dict({"type": "expense", **fields})


class TestTransactionFromDict:
    def test_reads_camel_case_fields(self):
        tx = Transaction.from_dict(
            {
                "id": 7,
                "date": "2025-02-03",
                "amount": "-700.50",
                "type": "Expense",
                "category": "Contract Labor",
                "payeeId": "p-1",
                "payeeTaxId": "12-3456789",
                "isContractorPayment": True,
                "isTaxDeductible": False,
                "quarterlyPeriod": "Q1",
            }
        )

        assert tx.id == "7"
        assert tx.date == date(2025, 2, 3)
        assert tx.amount == Decimal("-700.50")
        assert tx.magnitude == Decimal("700.50")
        assert tx.type == "expense"
        assert tx.payee_id == "p-1"
        assert tx.payee_tax_id == "12-3456789"
        assert tx.is_contractor_payment is True
        assert tx.is_tax_deductible is False
        assert tx.quarterly_period == "Q1"

    def test_missing_fields_default(self):
        tx = Transaction.from_dict({})

        assert tx.amount == Decimal("0")
        assert tx.date is None
        assert tx.type == ""
        assert tx.is_tax_deductible is None
        assert tx.is_contractor_payment is False

    def test_bad_amount_is_zero(self):
        assert Transaction.from_dict({"amount": "abc"}).amount == Decimal("0")
        assert Transaction.from_dict({"amount": float("nan")}).amount == Decimal("0")

    def test_outflow(self):
        assert _tx(type="expense", amount=50).is_outflow
        assert _tx(type="transfer", amount=-50).is_outflow
        assert not _tx(type="transfer", amount=50).is_outflow
        assert not _tx(type="income", amount=-50).is_outflow

    def test_employee_round_trip_keeps_profile(self):
        employee = Employee.from_dict({"id": "e1", "name": "Dana", "title": "Baker"})

        assert employee.to_dict() == {"id": "e1", "name": "Dana", "title": "Baker"}


class TestResolvers:
    def test_first_present_skips_blank(self):
        assert first_present(None, "  ", "x") == "x"
        assert first_present(None, "") is None

    def test_category(self):
        assert resolve_category(_tx(category="Travel")) == "Travel"
        assert resolve_category(_tx()) == "Uncategorized"
        assert resolve_category(_tx(category="")) == "Uncategorized"

    def test_payee(self):
        assert resolve_payee(_tx(payee="Acme")) == "Acme"
        assert resolve_payee(_tx(payee=None)) == "Unknown"
        assert resolve_payee(_tx(payee="")) == "Unknown"

    def test_payee_key_prefers_id(self):
        assert resolve_payee_key(_tx(payeeId="p-1", payee="Acme")) == "p-1"
        assert resolve_payee_key(_tx(payee="Acme")) == "Acme"
        assert resolve_payee_key(_tx()) == "Unknown"

    def test_payee_name(self):
        assert resolve_payee_name(_tx(payeeName="Acme Inc", payee="Acme")) == "Acme Inc"
        assert resolve_payee_name(_tx(payee="Acme")) == "Acme"
        assert resolve_payee_name(_tx(), "Unknown Contractor") == "Unknown Contractor"

    def test_payee_identity(self):
        assert has_payee_identity(_tx(payeeId="p-1"))
        assert not has_payee_identity(_tx(payeeName="Only A Name"))

    def test_tax_id(self):
        assert resolve_tax_id(_tx(payeeTaxId="99")) == "99"
        assert resolve_tax_id(_tx()) == ""

    def test_vendor_key_falls_back_to_description_prefix(self):
        description = "Monthly subscription to the design tool suite"
        tx = _tx(description=description)

        assert resolve_vendor_key(tx) == description[:30]
        assert resolve_vendor_name(tx) == description[:30]

    def test_vendor_defaults(self):
        tx = _tx()

        assert resolve_vendor_key(tx) == "Unknown"
        assert resolve_vendor_name(tx) == "Unknown Vendor"

    def test_vendor_prefers_id_and_name(self):
        tx = _tx(vendorId="v-1", vendorName="Vendor One", payee="V1")

        assert resolve_vendor_key(tx) == "v-1"
        assert resolve_vendor_name(tx) == "Vendor One"
