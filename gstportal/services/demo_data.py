from __future__ import annotations

import logging
from datetime import date, timedelta

from gstportal.data import get_session, store_errors
from gstportal.document_numbering import increment_document_number
from gstportal.payment_terms import DEFAULT_ESTIMATE_VALIDITY_DAYS
from gstportal.services.documents import DocumentKind, add_document, latest_document_number

logger = logging.getLogger(__name__)


def _items(rows: list[tuple[float, float, bool]], description: str) -> list[dict]:
    return [
        {"description": description, "quantity": qty, "unit_price": price, "gst": gst}
        for qty, price, gst in rows
    ]


def seed_demo_data(today: date | None = None) -> dict[str, list[str]]:
    """Insert two sample invoices and one sample estimate; returns the numbers used.

    All three are written in one transaction, so a failure leaves nothing behind.
    """
    today = today or date.today()

    inv1 = increment_document_number(DocumentKind.INVOICE.prefix, latest_document_number(DocumentKind.INVOICE))
    inv2 = increment_document_number(DocumentKind.INVOICE.prefix, inv1)
    est1 = increment_document_number(DocumentKind.ESTIMATE.prefix, latest_document_number(DocumentKind.ESTIMATE))

    samples = [
        (
            DocumentKind.INVOICE,
            {
                "number": inv1,
                "date": today.isoformat(),
                "client_name": "Acme Pty Ltd",
                "client_address": "123 Example St, Sydney NSW",
                "due_date": (today + timedelta(days=7)).isoformat(),
                "line_items": _items([(5, 120, True), (2, 80, False)], "Service Item"),
                "status": "sent",
            },
        ),
        (
            DocumentKind.INVOICE,
            {
                "number": inv2,
                "date": today.isoformat(),
                "client_name": "Globex Corporation",
                "client_address": "456 Market Rd, Melbourne VIC",
                "due_date": (today + timedelta(days=14)).isoformat(),
                "line_items": _items([(10, 60, True)], "Consulting Hours"),
                "status": "draft",
            },
        ),
        (
            DocumentKind.ESTIMATE,
            {
                "number": est1,
                "date": today.isoformat(),
                "client_name": "Initech",
                "client_address": "789 Industrial Ave, Brisbane QLD",
                "due_date": (today + timedelta(days=DEFAULT_ESTIMATE_VALIDITY_DAYS)).isoformat(),
                "line_items": _items([(3, 200, True), (1, 500, True)], "Project Scope"),
                "status": "sent",
            },
        ),
    ]

    with store_errors("seed demo data"):
        with get_session() as session:
            for kind, payload in samples:
                add_document(session, kind, payload)
            session.commit()
    logger.info("Seeded demo data: %s, %s, %s", inv1, inv2, est1)
    return {"invoices": [inv1, inv2], "estimates": [est1]}
