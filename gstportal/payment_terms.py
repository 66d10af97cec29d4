from __future__ import annotations

from datetime import date, timedelta
from enum import Enum


class PaymentTerms(str, Enum):
    NET_15 = "net_15"
    NET_30 = "net_30"
    CUSTOM = "custom"


_TERM_DAYS = {
    PaymentTerms.NET_15: 15,
    PaymentTerms.NET_30: 30,
}

DEFAULT_ESTIMATE_VALIDITY_DAYS = 30


def calculate_due_date(invoice_date: str | date | None, terms: str | PaymentTerms, current_due: str = "") -> str:
    """Due date as ISO string; custom terms keep whatever the user entered."""
    if not invoice_date:
        return ""
    try:
        term = PaymentTerms(terms)
    except ValueError:
        term = PaymentTerms.CUSTOM
    if term is PaymentTerms.CUSTOM:
        return current_due or ""

    try:
        start = invoice_date if isinstance(invoice_date, date) else date.fromisoformat(str(invoice_date)[:10])
    except ValueError:
        return current_due or ""
    return (start + timedelta(days=_TERM_DAYS[term])).isoformat()
