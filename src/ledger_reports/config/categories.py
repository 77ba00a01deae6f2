"""Schedule C category rules loaded from YAML."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Any

import yaml  # type: ignore[import-untyped]

DEFAULT_RULES_PATH = Path(__file__).resolve().parent / "categories.yaml"

# Category names the engine refers to directly
CONTRACT_LABOR = "Contract Labor"
WAGES = "Wages (Less Employment Credits)"
UNCATEGORIZED = "Uncategorized"

# Group names
INCOME_GROUP = "income"
PERSONAL_GROUP = "personal"
EMPLOYEE_COSTS_GROUP = "employee_costs"
WAGES_GROUP = "wages"


@dataclass(frozen=True)
class CategoryMetadata:
    """Schedule C placement and tax treatment of a category."""

    line: str = "N/A"
    description: str = ""
    tax_deductible: bool = False
    special_reporting: bool = False
    special_form: str | None = None


UNKNOWN_CATEGORY = CategoryMetadata()


class CategoryRules:
    """Immutable category table plus named category groups.

    Built once and handed to each component, so tests can swap in an
    alternate table without touching module state.
    """

    def __init__(
        self,
        metadata: Mapping[str, CategoryMetadata],
        groups: Mapping[str, frozenset[str]] | None = None,
    ):
        self._metadata = MappingProxyType(dict(metadata))
        self._groups = MappingProxyType(dict(groups or {}))

    def lookup(self, category: str | None) -> CategoryMetadata:
        """Return metadata for a category, or the unknown-category default."""
        if category is None:
            return UNKNOWN_CATEGORY
        return self._metadata.get(category, UNKNOWN_CATEGORY)

    def group(self, name: str) -> frozenset[str]:
        return self._groups.get(name, frozenset())

    def in_group(self, category: str | None, group: str) -> bool:
        return category is not None and category in self.group(group)

    @property
    def categories(self) -> tuple[str, ...]:
        """Category names in configuration order."""
        return tuple(self._metadata)

    def __contains__(self, category: object) -> bool:
        return category in self._metadata

    def __iter__(self) -> Iterator[str]:
        return iter(self._metadata)

    def __len__(self) -> int:
        return len(self._metadata)


def _parse_metadata(source: str, name: str, raw: Any) -> CategoryMetadata:
    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ValueError(f"{source}: category {name!r} must be a mapping")

    line = raw.get("line", "N/A")
    if line is None or isinstance(line, bool):
        raise ValueError(f"{source}: category {name!r} has invalid line {line!r}")

    special_form = raw.get("special_form")
    return CategoryMetadata(
        line=str(line),
        description=str(raw.get("description") or ""),
        tax_deductible=bool(raw.get("tax_deductible", False)),
        special_reporting=bool(raw.get("special_reporting", False)),
        special_form=str(special_form) if special_form else None,
    )


def parse_category_rules(data: Any, source: str = "<memory>") -> CategoryRules:
    """Build CategoryRules from a parsed YAML document.

    Raises:
        ValueError: If the document does not have the expected shape.
    """
    data = data or {}
    if not isinstance(data, dict):
        raise ValueError(f"{source}: category rules must be a mapping")

    raw_categories = data.get("categories") or {}
    if not isinstance(raw_categories, dict):
        raise ValueError(f"{source}: categories must be a mapping")

    metadata = {
        str(name): _parse_metadata(source, str(name), raw)
        for name, raw in raw_categories.items()
    }

    raw_groups = data.get("groups") or {}
    if not isinstance(raw_groups, dict):
        raise ValueError(f"{source}: groups must be a mapping")

    groups: dict[str, frozenset[str]] = {}
    for group_name, members in raw_groups.items():
        if not isinstance(members, list):
            raise ValueError(f"{source}: group {group_name!r} must be a list")
        groups[str(group_name)] = frozenset(str(m) for m in members)

    return CategoryRules(metadata, groups)


def load_category_rules_file(path: Path) -> CategoryRules:
    """Load a category rules table from a YAML file."""
    raw = path.read_text(encoding="utf-8")
    return parse_category_rules(yaml.safe_load(raw), source=path.name)


@lru_cache
def load_category_rules(path: Path | None = None) -> CategoryRules:
    """Load (once) the category rules, defaulting to the packaged table."""
    return load_category_rules_file(path or DEFAULT_RULES_PATH)
