"""Pytest configuration and fixtures."""

import os
from datetime import UTC, datetime
from decimal import Decimal
from typing import Any
from unittest.mock import AsyncMock

import pytest

# Set test environment variables before importing settings
os.environ.setdefault("FORM_1099_THRESHOLD", "600")
os.environ.setdefault("FORM_1099_WARNING_FLOOR", "500")
os.environ.setdefault("LOG_LEVEL", "DEBUG")

from ledger_reports.config.categories import CategoryRules, load_category_rules  # noqa: E402
from ledger_reports.models import Transaction  # noqa: E402
from ledger_reports.reports.assembler import ReportAssembler  # noqa: E402
from ledger_reports.thresholds import ThresholdAnalyzer  # noqa: E402

FIXED_NOW = datetime(2025, 6, 30, 12, 0, tzinfo=UTC)


def build_tx(**fields: Any) -> Transaction:
    """Build a Transaction from camelCase storage fields, defaulting to an expense."""
    data: dict[str, Any] = {"type": "expense", "amount": "0"}
    data.update(fields)
    return Transaction.from_dict(data)


@pytest.fixture
def rules() -> CategoryRules:
    """The packaged Schedule C category table."""
    return load_category_rules()


@pytest.fixture
def analyzer() -> ThresholdAnalyzer:
    return ThresholdAnalyzer(Decimal("600"), Decimal("500"))


@pytest.fixture
def assembler(rules, analyzer) -> ReportAssembler:
    """Assembler with a frozen clock so reports compare equal."""
    return ReportAssembler(rules, analyzer, clock=lambda: FIXED_NOW)


@pytest.fixture
def make_tx():
    return build_tx


@pytest.fixture
def sample_ledger() -> list[dict[str, Any]]:
    """A small year of storage documents for one business."""
    return [
        {
            "id": "t1",
            "date": "2025-01-15",
            "amount": 5000,
            "type": "income",
            "category": "Gross Receipts or Sales",
            "payee": "Client A",
            "quarterlyPeriod": "Q1",
        },
        {
            "id": "t2",
            "date": "2025-01-20",
            "amount": -1200,
            "type": "expense",
            "category": "Advertising",
            "payee": "Ad Co",
            "vendorId": "v-ad",
            "vendorName": "Ad Co LLC",
            "quarterlyPeriod": "Q1",
        },
        {
            "id": "t3",
            "date": "2025-02-03",
            "amount": -700,
            "type": "expense",
            "category": "Contract Labor",
            "payee": "Acme",
            "payeeId": "p-acme",
            "isContractorPayment": True,
            "quarterlyPeriod": "Q1",
        },
        {
            "id": "t4",
            "date": "2025-04-10",
            "amount": -300,
            "type": "expense",
            "category": "Office Expenses",
            "payee": "Paper Inc",
            "quarterlyPeriod": "Q2",
        },
        {
            "id": "t5",
            "date": "2025-04-12",
            "amount": -250,
            "type": "expense",
            "category": "Personal Expense",
            "payee": "Grocer",
            "quarterlyPeriod": "Q2",
        },
        {
            "id": "t6",
            "date": "2025-05-01",
            "amount": 1500,
            "type": "income",
            "category": "Other Income",
            "payee": "Client B",
            "quarterlyPeriod": "Q2",
        },
    ]


@pytest.fixture
def mock_store():
    """Create a mock transaction store."""
    store = AsyncMock()
    store.get_transactions = AsyncMock(return_value={"transactions": [], "total": 0})
    store.get_employees = AsyncMock(return_value=[])
    return store
