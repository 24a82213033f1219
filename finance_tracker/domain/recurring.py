"""Recurring-field policy shared by income and expense records

A transaction carries recurringFrequency and startDate if and only if
isRecurring is true. Validation runs before anything is persisted, so a
rejected request never leaves a partial record behind.
"""

from datetime import date
from enum import Enum
from typing import Any, Dict, Mapping

from finance_tracker.domain.exceptions import BadRequest
from finance_tracker.domain.models import TransactionKind

AMOUNT_MESSAGE = "Amount must be greater than 0"


def _wire_name(field: str) -> str:
    head, *rest = field.split("_")
    return head + "".join(part.title() for part in rest)


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _plain(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value


def updatable_fields(kind: TransactionKind) -> tuple:
    """Attributes a client may set on a record of this kind (never the owner)"""
    return (
        "amount",
        kind.date_field,
        "description",
        "category",
        kind.counterparty_field,
        "is_recurring",
        "recurring_frequency",
        "start_date",
    )


def check_amount(amount: Any) -> None:
    if amount is None or amount <= 0:
        raise BadRequest(AMOUNT_MESSAGE)


def check_recurring_fields(kind: TransactionKind, frequency: Any, start_date: Any) -> None:
    """Frequency is checked first and short-circuits the start date check"""
    if _is_blank(frequency):
        raise BadRequest(f"Recurring frequency is required for recurring {kind.name}")
    if start_date is None:
        raise BadRequest(f"Start date is required for recurring {kind.name}")


def validate_new_transaction(kind: TransactionKind, data: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Validate a create payload and return the normalized record fields.

    Order:
    1. amount, description, category and the counterparty field are present
    2. amount > 0
    3. recurring records have a frequency, then a start date

    Raises:
        BadRequest: On the first rule violated
    """
    required = ["amount", "description", "category", kind.counterparty_field]
    missing = [field for field in required if _is_blank(data.get(field))]
    if missing:
        raise BadRequest("Missing required fields: " + ", ".join(_wire_name(f) for f in missing))

    check_amount(data["amount"])

    is_recurring = bool(data.get("is_recurring") or False)
    if is_recurring:
        check_recurring_fields(kind, data.get("recurring_frequency"), data.get("start_date"))

    return {
        "amount": data["amount"],
        kind.date_field: data.get(kind.date_field) or date.today(),
        "description": data["description"],
        "category": _plain(data["category"]),
        kind.counterparty_field: data[kind.counterparty_field],
        "is_recurring": is_recurring,
        "recurring_frequency": _plain(data.get("recurring_frequency")) if is_recurring else None,
        "start_date": data.get("start_date") if is_recurring else None,
    }


def apply_transaction_update(
    kind: TransactionKind,
    current: Mapping[str, Any],
    changes: Mapping[str, Any],
) -> Dict[str, Any]:
    """
    Merge a partial update over the current record and return the new field values.

    Keys absent from changes keep their current value; keys present overwrite,
    even with falsy values. When the merged record is not recurring, its
    frequency and start date are cleared whatever the payload supplied.

    Raises:
        BadRequest: Non-positive amount, null on a non-nullable field,
            or a recurring record missing its frequency or start date
    """
    if "amount" in changes:
        check_amount(changes["amount"])

    for field in ("category", kind.date_field, "is_recurring"):
        if field in changes and changes[field] is None:
            raise BadRequest(f"{_wire_name(field)} cannot be null")

    fields = updatable_fields(kind)
    merged = {field: current.get(field) for field in fields}
    merged.update({field: _plain(value) for field, value in changes.items() if field in fields})

    if merged["is_recurring"]:
        check_recurring_fields(kind, merged["recurring_frequency"], merged["start_date"])
    else:
        merged["recurring_frequency"] = None
        merged["start_date"] = None

    return merged
