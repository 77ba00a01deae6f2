"""Grouping of Schedule C categories by line number."""

import re
from collections.abc import Iterable
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any

# Lines without a leading number ("N/A") sort after every numbered line
NON_NUMERIC_LINE = 999.0

_LEADING_NUMBER = re.compile(r"\s*([+-]?(?:\d+\.?\d*|\.\d+))")


@dataclass
class LineCategory:
    """One category's contribution to a Schedule C line."""

    category: str
    amount: Decimal
    transaction_count: int
    line: str
    description: str = ""
    special_reporting: bool = False
    special_form: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "category": self.category,
            "amount": float(self.amount),
            "transactionCount": self.transaction_count,
            "line": self.line,
            "description": self.description,
            "specialReporting": self.special_reporting,
            "specialForm": self.special_form,
        }


@dataclass
class LineGroup:
    line: str
    categories: list[LineCategory] = field(default_factory=list)

    @property
    def total(self) -> Decimal:
        return sum((c.amount for c in self.categories), Decimal("0"))

    def to_dict(self) -> dict[str, Any]:
        return {
            "line": self.line,
            "categories": [c.to_dict() for c in self.categories],
        }


def line_number(line: str) -> float:
    """Leading numeric value of a line label: "20b" -> 20.0, "N/A" -> 999."""
    match = _LEADING_NUMBER.match(line)
    if match is None:
        return NON_NUMERIC_LINE
    value = float(match.group(1))
    return value if value else NON_NUMERIC_LINE


def line_sort_key(line: str) -> tuple[float, str]:
    return (line_number(line), line)


def group_and_sort(categories: Iterable[LineCategory]) -> list[LineGroup]:
    """Group non-zero categories by line.

    Lines are ordered by their leading number, then by label. Categories
    within a line are ordered largest amount first, ties in input order.
    """
    groups: dict[str, LineGroup] = {}
    for entry in categories:
        if entry.amount <= 0:
            continue
        group = groups.get(entry.line)
        if group is None:
            group = groups[entry.line] = LineGroup(line=entry.line)
        group.categories.append(entry)

    ordered = []
    for line in sorted(groups, key=line_sort_key):
        group = groups[line]
        group.categories.sort(key=lambda c: c.amount, reverse=True)
        ordered.append(group)
    return ordered
