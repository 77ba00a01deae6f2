"""Named default resolution for optional transaction fields.

Each resolver documents its precedence once; blank strings count as absent.
"""

from ledger_reports.config.categories import UNCATEGORIZED
from ledger_reports.models import Transaction

UNKNOWN = "Unknown"
UNKNOWN_VENDOR = "Unknown Vendor"
UNKNOWN_CONTRACTOR = "Unknown Contractor"

VENDOR_DESCRIPTION_CHARS = 30


def first_present(*values: str | None) -> str | None:
    """First value that is not None and not blank."""
    for value in values:
        if value is not None and value.strip():
            return value
    return None


def _description_prefix(tx: Transaction) -> str | None:
    if tx.description is None:
        return None
    return tx.description[:VENDOR_DESCRIPTION_CHARS]


def resolve_category(tx: Transaction) -> str:
    """category -> "Uncategorized"."""
    return first_present(tx.category) or UNCATEGORIZED


def resolve_payee(tx: Transaction) -> str:
    """payee -> "Unknown"."""
    return first_present(tx.payee) or UNKNOWN


def resolve_payee_key(tx: Transaction) -> str:
    """payee_id -> payee -> "Unknown"."""
    return first_present(tx.payee_id, tx.payee) or UNKNOWN


def resolve_payee_name(tx: Transaction, fallback: str = UNKNOWN) -> str:
    """payee_name -> payee -> fallback."""
    return first_present(tx.payee_name, tx.payee) or fallback


def has_payee_identity(tx: Transaction) -> bool:
    return first_present(tx.payee_id, tx.payee) is not None


def resolve_tax_id(tx: Transaction) -> str:
    """payee_tax_id -> ""."""
    return first_present(tx.payee_tax_id) or ""


def resolve_vendor_key(tx: Transaction) -> str:
    """vendor_id -> payee -> first 30 chars of description -> "Unknown"."""
    return first_present(tx.vendor_id, tx.payee, _description_prefix(tx)) or UNKNOWN


def resolve_vendor_name(tx: Transaction) -> str:
    """vendor_name -> payee -> first 30 chars of description -> "Unknown Vendor"."""
    return (
        first_present(tx.vendor_name, tx.payee, _description_prefix(tx))
        or UNKNOWN_VENDOR
    )
