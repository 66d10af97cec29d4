from __future__ import annotations

from enum import Enum

from gstportal.errors import StatusTransitionError


class InvoiceStatus(str, Enum):
    DRAFT = "draft"
    SENT = "sent"
    PAID = "paid"
    OVERDUE = "overdue"


class EstimateStatus(str, Enum):
    DRAFT = "draft"
    SENT = "sent"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    EXPIRED = "expired"


# Only consulted when a caller asks for strict transitions.
STRICT_INVOICE_TRANSITIONS: dict[InvoiceStatus, set[InvoiceStatus]] = {
    InvoiceStatus.DRAFT: {InvoiceStatus.SENT},
    InvoiceStatus.SENT: {InvoiceStatus.PAID, InvoiceStatus.OVERDUE},
    InvoiceStatus.OVERDUE: {InvoiceStatus.PAID},
    InvoiceStatus.PAID: set(),
}

STRICT_ESTIMATE_TRANSITIONS: dict[EstimateStatus, set[EstimateStatus]] = {
    EstimateStatus.DRAFT: {EstimateStatus.SENT},
    EstimateStatus.SENT: {EstimateStatus.ACCEPTED, EstimateStatus.REJECTED, EstimateStatus.EXPIRED},
    EstimateStatus.ACCEPTED: set(),
    EstimateStatus.REJECTED: set(),
    EstimateStatus.EXPIRED: set(),
}

STATUS_LABELS = {
    "draft": "Draft",
    "sent": "Sent",
    "paid": "Paid",
    "overdue": "Overdue",
    "accepted": "Accepted",
    "rejected": "Rejected",
    "expired": "Expired",
}


def coerce_status(enum_cls: type[Enum], value: str | Enum) -> Enum:
    raw = value.value if isinstance(value, Enum) else str(value or "").strip().lower()
    try:
        return enum_cls(raw)
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        raise StatusTransitionError(f"Unknown status '{raw}'. Expected one of: {allowed}") from None


def check_transition(
    enum_cls: type[Enum],
    current: str | Enum,
    target: str | Enum,
    *,
    strict: bool = False,
) -> Enum:
    """Validate ``current -> target`` and return the target as enum member.

    Without ``strict`` every status in the vocabulary is reachable from every
    other one.
    """
    target_status = coerce_status(enum_cls, target)
    if not strict:
        return target_status

    current_status = coerce_status(enum_cls, current)
    if current_status == target_status:
        return target_status

    table = STRICT_INVOICE_TRANSITIONS if enum_cls is InvoiceStatus else STRICT_ESTIMATE_TRANSITIONS
    if target_status not in table.get(current_status, set()):
        raise StatusTransitionError(
            f"Cannot change status from '{current_status.value}' to '{target_status.value}'"
        )
    return target_status


def format_status(status: str | Enum) -> str:
    raw = status.value if isinstance(status, Enum) else str(status or "")
    return STATUS_LABELS.get(raw, raw)
