"""Per-record ownership authorization"""

from typing import Any, Optional

from finance_tracker.domain.exceptions import Forbidden, NotFound
from finance_tracker.domain.models import Identity, TransactionKind


def ensure_owner(record: Optional[Any], identity: Identity, kind: TransactionKind, action: str) -> Any:
    """
    Return record if identity owns it.

    Ids are compared as strings since the stored owner may be a UUID
    while the identity carries its string form.

    Raises:
        NotFound: record is None
        Forbidden: record belongs to another user
    """
    if record is None:
        raise NotFound(f"{kind.label} not found")

    if str(record.user_id) != str(identity.id):
        raise Forbidden(f"Not authorized to {action} this {kind.name}")

    return record
