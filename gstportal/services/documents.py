from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Mapping

from pydantic import ValidationError
from sqlmodel import Session, select

from gstportal.data import Client, Estimate, Invoice, get_session, store_errors
from gstportal.document_numbering import (
    ESTIMATE_PREFIX,
    INVOICE_PREFIX,
    build_pdf_filename,
    next_document_number,
)
from gstportal.errors import DocumentValidationError, NotFoundError
from gstportal.gst_calculations import calculate_document_totals, verify_document_totals
from gstportal.models import DocumentInput
from gstportal.payment_terms import PaymentTerms, calculate_due_date
from gstportal.statuses import EstimateStatus, InvoiceStatus, check_transition, coerce_status

logger = logging.getLogger(__name__)

REQUIRED_FIELDS_MESSAGE = "Please fill in all required fields (dates, client, number)"
LINE_ITEMS_MESSAGE = "Please add at least one line item"


class DocumentKind(str, Enum):
    INVOICE = "invoice"
    ESTIMATE = "estimate"

    @property
    def model(self) -> type[Invoice] | type[Estimate]:
        return Invoice if self is DocumentKind.INVOICE else Estimate

    @property
    def label(self) -> str:
        return "Invoice" if self is DocumentKind.INVOICE else "Estimate"

    @property
    def prefix(self) -> str:
        return INVOICE_PREFIX if self is DocumentKind.INVOICE else ESTIMATE_PREFIX

    @property
    def number_field(self) -> str:
        return f"{self.value}_number"

    @property
    def due_field(self) -> str:
        return "due_date" if self is DocumentKind.INVOICE else "expiry_date"

    @property
    def status_enum(self) -> type[InvoiceStatus] | type[EstimateStatus]:
        return InvoiceStatus if self is DocumentKind.INVOICE else EstimateStatus


def _now_iso() -> str:
    return datetime.now().isoformat(timespec="seconds")


def _coerce_input(payload: DocumentInput | Mapping[str, Any]) -> DocumentInput:
    if isinstance(payload, DocumentInput):
        return payload
    try:
        return DocumentInput.model_validate(dict(payload))
    except ValidationError as exc:
        first = exc.errors()[0] if exc.errors() else {}
        location = ".".join(str(part) for part in first.get("loc", ()))
        message = first.get("msg", "invalid value")
        raise DocumentValidationError(f"Invalid {location or 'document'}: {message}") from exc


def validate_document_input(kind: DocumentKind, payload: DocumentInput | Mapping[str, Any]) -> DocumentInput:
    data = _coerce_input(payload)
    if not data.number or not data.client_name or not data.date or not data.due_date:
        raise DocumentValidationError(REQUIRED_FIELDS_MESSAGE)
    if not data.line_items:
        raise DocumentValidationError(LINE_ITEMS_MESSAGE)
    if data.status:
        coerce_status(kind.status_enum, data.status)
    return data


def _log_client_total_drift(kind: DocumentKind, payload: DocumentInput | Mapping[str, Any]) -> None:
    if not isinstance(payload, Mapping) or "total" not in payload:
        return
    problems = verify_document_totals(payload)
    if problems:
        logger.warning("Replacing submitted %s totals: %s", kind.value, "; ".join(problems))


def _prepare_payload(kind: DocumentKind, payload: DocumentInput | Mapping[str, Any]) -> dict[str, Any]:
    data = _coerce_input(payload)
    # Net terms derive the due date before the required-field check.
    if kind is DocumentKind.INVOICE and data.payment_terms and not data.due_date:
        data = data.model_copy(update={"due_date": calculate_due_date(data.date, data.payment_terms)})
    data = validate_document_input(kind, data)

    _log_client_total_drift(kind, payload)
    items = [item.to_record() for item in data.line_items]
    totals = calculate_document_totals(items)
    values: dict[str, Any] = {
        kind.number_field: data.number,
        "date": data.date,
        "client_name": data.client_name,
        "client_address": data.client_address,
        kind.due_field: data.due_date,
        "line_items": items,
        "subtotal": totals.subtotal,
        "gst": totals.tax,
        "total": totals.total,
    }
    if data.status:
        values["status"] = coerce_status(kind.status_enum, data.status)
    if kind is DocumentKind.INVOICE and data.payment_terms:
        try:
            values["payment_terms"] = PaymentTerms(data.payment_terms)
        except ValueError:
            raise DocumentValidationError(f"Unknown payment terms '{data.payment_terms}'") from None
    return values


def apply_client_snapshot(payload: Mapping[str, Any], client: Client | None) -> dict[str, Any]:
    """Copy the client's name and address into the payload by value."""
    result = dict(payload)
    if client is not None:
        result["client_name"] = client.name
        result["client_address"] = client.address or ""
    return result


def list_documents(kind: DocumentKind) -> list[Invoice | Estimate]:
    model = kind.model
    with store_errors(f"load {kind.value}s"):
        with get_session() as session:
            return list(
                session.exec(select(model).order_by(model.created_at.desc(), model.id.desc())).all()
            )


def get_document(kind: DocumentKind, document_id: int) -> Invoice | Estimate:
    with store_errors(f"load {kind.value}"):
        with get_session() as session:
            document = session.get(kind.model, int(document_id))
    if document is None:
        raise NotFoundError(f"{kind.label} {document_id} not found")
    return document


def suggest_next_number(kind: DocumentKind) -> str:
    column = getattr(kind.model, kind.number_field)
    with store_errors(f"generate {kind.value} number"):
        with get_session() as session:
            existing = session.exec(select(column)).all()
    return next_document_number(existing, kind.prefix)


def latest_document_number(kind: DocumentKind) -> str | None:
    model = kind.model
    with store_errors(f"load latest {kind.value} number"):
        with get_session() as session:
            latest = session.exec(
                select(model).order_by(model.created_at.desc(), model.id.desc()).limit(1)
            ).first()
    return getattr(latest, kind.number_field) if latest else None


def add_document(session: Session, kind: DocumentKind, payload: DocumentInput | Mapping[str, Any]) -> Invoice | Estimate:
    """Validate ``payload`` and stage the new document on ``session`` without committing."""
    document = kind.model(**_prepare_payload(kind, payload))
    session.add(document)
    return document


def create_document(kind: DocumentKind, payload: DocumentInput | Mapping[str, Any]) -> Invoice | Estimate:
    with store_errors(f"create {kind.value}"):
        with get_session() as session:
            document = add_document(session, kind, payload)
            session.commit()
            session.refresh(document)
    logger.info("Created %s %s (id=%s)", kind.value, getattr(document, kind.number_field), document.id)
    return document


def update_document(
    kind: DocumentKind,
    document_id: int,
    payload: DocumentInput | Mapping[str, Any],
) -> Invoice | Estimate:
    values = _prepare_payload(kind, payload)
    with store_errors(f"update {kind.value}"):
        with get_session() as session:
            document = session.get(kind.model, int(document_id))
            if document is None:
                raise NotFoundError(f"{kind.label} {document_id} not found")
            for key, value in values.items():
                setattr(document, key, value)
            document.updated_at = _now_iso()
            session.add(document)
            session.commit()
            session.refresh(document)
    logger.info("Updated %s %s (id=%s)", kind.value, getattr(document, kind.number_field), document.id)
    return document


def set_document_status(
    kind: DocumentKind,
    document_id: int,
    status: str | Enum,
    *,
    strict: bool = False,
) -> Invoice | Estimate:
    with store_errors(f"change {kind.value} status"):
        with get_session() as session:
            document = session.get(kind.model, int(document_id))
            if document is None:
                raise NotFoundError(f"{kind.label} {document_id} not found")
            previous = document.status
            document.status = check_transition(kind.status_enum, previous, status, strict=strict)
            document.updated_at = _now_iso()
            session.add(document)
            session.commit()
            session.refresh(document)
    logger.info("%s id=%s status %s -> %s", kind.label, document_id, previous, document.status)
    return document


def delete_document(kind: DocumentKind, document_id: int) -> None:
    with store_errors(f"delete {kind.value}"):
        with get_session() as session:
            document = session.get(kind.model, int(document_id))
            if document is None:
                raise NotFoundError(f"{kind.label} {document_id} not found")
            session.delete(document)
            session.commit()
    logger.info("Deleted %s id=%s", kind.value, document_id)


def check_document_consistency(kind: DocumentKind, document_id: int) -> list[str]:
    problems = verify_document_totals(get_document(kind, document_id))
    if problems:
        logger.warning("%s id=%s has inconsistent totals: %s", kind.label, document_id, "; ".join(problems))
    return problems


def document_pdf_filename(kind: DocumentKind, document: Invoice | Estimate) -> str:
    return build_pdf_filename(kind.label, getattr(document, kind.number_field))


@dataclass
class DashboardSummary:
    recent_invoices: list[Invoice] = field(default_factory=list)
    recent_estimates: list[Estimate] = field(default_factory=list)
    invoice_amount: float = 0.0
    estimate_amount: float = 0.0
    pending_invoices: int = 0


def dashboard_summary(limit: int = 5) -> DashboardSummary:
    invoices = list_documents(DocumentKind.INVOICE)[:limit]
    estimates = list_documents(DocumentKind.ESTIMATE)[:limit]
    return DashboardSummary(
        recent_invoices=invoices,
        recent_estimates=estimates,
        invoice_amount=sum(inv.total for inv in invoices),
        estimate_amount=sum(est.total for est in estimates),
        pending_invoices=sum(1 for inv in invoices if inv.status in (InvoiceStatus.SENT, InvoiceStatus.DRAFT)),
    )
