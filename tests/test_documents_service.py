from __future__ import annotations

import logging

import pytest

from gstportal.data import Invoice, get_session
from gstportal.errors import DocumentValidationError, NotFoundError, StatusTransitionError
from gstportal.payment_terms import PaymentTerms
from gstportal.services.clients import create_client, update_client
from gstportal.services.documents import (
    LINE_ITEMS_MESSAGE,
    REQUIRED_FIELDS_MESSAGE,
    DocumentKind,
    apply_client_snapshot,
    check_document_consistency,
    create_document,
    dashboard_summary,
    delete_document,
    document_pdf_filename,
    get_document,
    latest_document_number,
    list_documents,
    set_document_status,
    suggest_next_number,
    update_document,
)
from gstportal.services.reports import generate_quarter_report
from gstportal.statuses import EstimateStatus, InvoiceStatus


def _invoice_payload(line_items, **overrides) -> dict:
    payload = {
        "number": "INV-0001",
        "date": "2024-01-15",
        "client_name": "Acme Pty Ltd",
        "client_address": "1 Test St",
        "due_date": "2024-02-14",
        "line_items": line_items,
    }
    payload.update(overrides)
    return payload


def test_create_invoice_recomputes_totals(store, line_items) -> None:
    invoice = create_document(DocumentKind.INVOICE, _invoice_payload(line_items))

    assert invoice.id is not None
    assert invoice.invoice_number == "INV-0001"
    assert invoice.status == InvoiceStatus.DRAFT
    assert invoice.subtotal == pytest.approx(250.0)
    assert invoice.gst == pytest.approx(20.0)
    assert invoice.total == pytest.approx(270.0)
    assert [item["total"] for item in invoice.line_items] == pytest.approx([220.0, 50.0])
    assert all(item["id"] for item in invoice.line_items)


def test_client_supplied_totals_are_ignored(store, caplog) -> None:
    items = [{"quantity": 1, "unit_price": 100, "gst": True, "total": 5}]
    with caplog.at_level(logging.WARNING, logger="gstportal.services.documents"):
        invoice = create_document(DocumentKind.INVOICE, _invoice_payload(items, total=1, subtotal=1))
    assert "Replacing submitted invoice totals" in caplog.text
    assert invoice.total == pytest.approx(110.0)
    assert invoice.line_items[0]["total"] == pytest.approx(110.0)


@pytest.mark.parametrize("missing", ["number", "date", "client_name", "due_date"])
def test_missing_required_field(store, line_items, missing) -> None:
    with pytest.raises(DocumentValidationError, match="required fields"):
        create_document(DocumentKind.INVOICE, _invoice_payload(line_items, **{missing: "  "}))
    assert list_documents(DocumentKind.INVOICE) == []


def test_at_least_one_line_item(store) -> None:
    with pytest.raises(DocumentValidationError) as excinfo:
        create_document(DocumentKind.INVOICE, _invoice_payload([]))
    assert str(excinfo.value) == LINE_ITEMS_MESSAGE


def test_required_message_text(store) -> None:
    with pytest.raises(DocumentValidationError) as excinfo:
        create_document(DocumentKind.ESTIMATE, {"line_items": [{"quantity": 1}]})
    assert str(excinfo.value) == REQUIRED_FIELDS_MESSAGE


def test_negative_quantity_is_rejected(store) -> None:
    with pytest.raises(DocumentValidationError):
        create_document(DocumentKind.INVOICE, _invoice_payload([{"quantity": -1, "unit_price": 10}]))


@pytest.mark.parametrize(
    "overrides",
    [
        {"date": "15/01/2024"},
        {"due_date": "not a date"},
        {"date": "2024-02-30"},
    ],
)
def test_malformed_dates_are_rejected(store, line_items, overrides) -> None:
    with pytest.raises(DocumentValidationError, match="Invalid"):
        create_document(DocumentKind.INVOICE, _invoice_payload(line_items, status="sent", **overrides))
    assert list_documents(DocumentKind.INVOICE) == []


def test_dates_are_stored_as_iso_and_reported(store, line_items) -> None:
    invoice = create_document(
        DocumentKind.INVOICE,
        _invoice_payload(line_items, date="2024-01-15T10:30:00", due_date=" 2024-02-14 ", status="sent"),
    )
    assert invoice.date == "2024-01-15"
    assert invoice.due_date == "2024-02-14"

    report = generate_quarter_report("Q1-2024")
    assert report.invoice_count == 1
    assert report.total_sales == pytest.approx(invoice.subtotal)


def test_payment_terms_derive_due_date(store, line_items) -> None:
    invoice = create_document(
        DocumentKind.INVOICE,
        _invoice_payload(line_items, due_date="", payment_terms="net_15"),
    )
    assert invoice.due_date == "2024-01-30"
    assert invoice.payment_terms == PaymentTerms.NET_15


def test_unknown_payment_terms(store, line_items) -> None:
    with pytest.raises(DocumentValidationError):
        create_document(DocumentKind.INVOICE, _invoice_payload(line_items, payment_terms="net_90"))


def test_estimate_uses_expiry_date(store, line_items) -> None:
    estimate = create_document(
        DocumentKind.ESTIMATE,
        _invoice_payload(line_items, number="EST-0001", due_date="2024-02-15", status="sent"),
    )
    assert estimate.estimate_number == "EST-0001"
    assert estimate.expiry_date == "2024-02-15"
    assert estimate.status == EstimateStatus.SENT


def test_invalid_status_for_kind(store, line_items) -> None:
    with pytest.raises(StatusTransitionError):
        create_document(DocumentKind.INVOICE, _invoice_payload(line_items, status="accepted"))


def test_suggest_next_number(store, line_items) -> None:
    assert suggest_next_number(DocumentKind.INVOICE) == "INV-0001"
    for number in ("INV-0001", "INV-0007", "Custom-42", "INV-0003"):
        create_document(DocumentKind.INVOICE, _invoice_payload(line_items, number=number))
    assert suggest_next_number(DocumentKind.INVOICE) == "INV-0008"
    assert suggest_next_number(DocumentKind.ESTIMATE) == "EST-0001"
    assert latest_document_number(DocumentKind.INVOICE) == "INV-0003"


def test_update_document_recomputes(store, line_items) -> None:
    invoice = create_document(DocumentKind.INVOICE, _invoice_payload(line_items))
    updated = update_document(
        DocumentKind.INVOICE,
        invoice.id,
        _invoice_payload([{"description": "Only", "quantity": 3, "unit_price": 10, "gst": False}]),
    )
    assert updated.id == invoice.id
    assert updated.total == pytest.approx(30.0)
    assert updated.gst == 0.0
    assert len(get_document(DocumentKind.INVOICE, invoice.id).line_items) == 1


def test_update_missing_document(store, line_items) -> None:
    with pytest.raises(NotFoundError):
        update_document(DocumentKind.INVOICE, 999, _invoice_payload(line_items))


def test_status_changes_are_permissive_by_default(store, line_items) -> None:
    invoice = create_document(DocumentKind.INVOICE, _invoice_payload(line_items))
    paid = set_document_status(DocumentKind.INVOICE, invoice.id, "paid")
    assert paid.status == InvoiceStatus.PAID
    back = set_document_status(DocumentKind.INVOICE, invoice.id, InvoiceStatus.DRAFT)
    assert back.status == InvoiceStatus.DRAFT


def test_strict_status_changes(store, line_items) -> None:
    invoice = create_document(DocumentKind.INVOICE, _invoice_payload(line_items))
    with pytest.raises(StatusTransitionError):
        set_document_status(DocumentKind.INVOICE, invoice.id, "paid", strict=True)
    assert get_document(DocumentKind.INVOICE, invoice.id).status == InvoiceStatus.DRAFT
    sent = set_document_status(DocumentKind.INVOICE, invoice.id, "sent", strict=True)
    assert sent.status == InvoiceStatus.SENT


def test_delete_document(store, line_items) -> None:
    invoice = create_document(DocumentKind.INVOICE, _invoice_payload(line_items))
    delete_document(DocumentKind.INVOICE, invoice.id)
    with pytest.raises(NotFoundError):
        get_document(DocumentKind.INVOICE, invoice.id)
    with pytest.raises(NotFoundError):
        delete_document(DocumentKind.INVOICE, invoice.id)


def test_list_documents_newest_first(store, line_items) -> None:
    create_document(DocumentKind.INVOICE, _invoice_payload(line_items, number="INV-0001"))
    create_document(DocumentKind.INVOICE, _invoice_payload(line_items, number="INV-0002"))
    assert [doc.number for doc in list_documents(DocumentKind.INVOICE)] == ["INV-0002", "INV-0001"]


def test_consistency_check_flags_tampered_totals(store, line_items) -> None:
    invoice = create_document(DocumentKind.INVOICE, _invoice_payload(line_items))
    assert check_document_consistency(DocumentKind.INVOICE, invoice.id) == []

    with get_session() as session:
        row = session.get(Invoice, invoice.id)
        row.total = 999.0
        session.add(row)
        session.commit()

    problems = check_document_consistency(DocumentKind.INVOICE, invoice.id)
    assert problems == ["total: 999.00 != 270.00"]


def test_client_snapshot_is_copied_by_value(store, line_items) -> None:
    client = create_client({"name": "Globex", "address": "2 Market Rd"})
    payload = apply_client_snapshot(_invoice_payload(line_items), client)
    invoice = create_document(DocumentKind.INVOICE, payload)
    assert (invoice.client_name, invoice.client_address) == ("Globex", "2 Market Rd")

    update_client(client.id, {"name": "Globex Corporation", "address": "3 New Rd"})
    stored = get_document(DocumentKind.INVOICE, invoice.id)
    assert (stored.client_name, stored.client_address) == ("Globex", "2 Market Rd")


def test_snapshot_without_client_keeps_payload() -> None:
    payload = {"client_name": "Walk-in"}
    assert apply_client_snapshot(payload, None) == payload


def test_pdf_filename_uses_number(store, line_items) -> None:
    invoice = create_document(DocumentKind.INVOICE, _invoice_payload(line_items))
    assert document_pdf_filename(DocumentKind.INVOICE, invoice) == "Invoice-INV-0001.pdf"


def test_dashboard_summary(store, line_items) -> None:
    create_document(DocumentKind.INVOICE, _invoice_payload(line_items, number="INV-0001", status="draft"))
    create_document(DocumentKind.INVOICE, _invoice_payload(line_items, number="INV-0002", status="sent"))
    create_document(DocumentKind.INVOICE, _invoice_payload(line_items, number="INV-0003", status="paid"))
    create_document(DocumentKind.ESTIMATE, _invoice_payload(line_items, number="EST-0001"))

    summary = dashboard_summary()
    assert len(summary.recent_invoices) == 3
    assert summary.pending_invoices == 2
    assert summary.invoice_amount == pytest.approx(810.0)
    assert summary.estimate_amount == pytest.approx(270.0)
