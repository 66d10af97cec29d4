# gstportal/services/document_pdf.py
from __future__ import annotations

from dataclasses import dataclass
from io import BytesIO
from typing import Any

from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.pdfbase.pdfmetrics import stringWidth
from reportlab.pdfgen.canvas import Canvas

from gstportal.gst_calculations import calculate_document_totals, format_currency, line_total
from gstportal.services.company_settings import notes_for
from gstportal.statuses import format_status


def _safe_str(x: Any) -> str:
    return (str(x) if x is not None else "").strip()


def _wrap_text(text: str, font: str, size: int, max_width: float) -> list[str]:
    text = _safe_str(text)
    if not text:
        return [""]
    words = text.replace("\n", " ").split()
    lines: list[str] = []
    cur = ""
    for w in words:
        cand = (cur + " " + w).strip() if cur else w
        if stringWidth(cand, font, size) <= max_width:
            cur = cand
        else:
            if cur:
                lines.append(cur)
            cur = w
    if cur:
        lines.append(cur)
    return lines or [""]


def _wrap_paragraphs(text: str, font: str, size: int, max_width: float) -> list[str]:
    lines: list[str] = []
    for paragraph in _safe_str(text).splitlines():
        lines.extend(_wrap_text(paragraph, font, size, max_width))
    return lines


def _get(obj: Any, *names: str, default: Any = "") -> Any:
    if obj is None:
        return default
    if isinstance(obj, dict):
        for n in names:
            if n in obj and obj[n] not in (None, ""):
                return obj[n]
        return default
    for n in names:
        if hasattr(obj, n):
            v = getattr(obj, n)
            if v not in (None, ""):
                return v
    return default


def _safe_float(value: Any, default: float = 0.0) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


@dataclass
class _PdfLine:
    description: str
    quantity: float
    unit_price: float
    gst: bool

    @property
    def total(self) -> float:
        return line_total(self.quantity, self.unit_price, self.gst)


def render_document_pdf(document: Any, kind: str = "invoice", settings: Any = None) -> bytes:
    """Render an invoice or estimate (model, dict or namespace) to PDF bytes.

    Line and document totals are recomputed from the line items so the PDF
    always agrees with the arithmetic used on screen.
    """
    is_invoice = kind == "invoice"
    title = "TAX INVOICE" if is_invoice else "ESTIMATE"
    number = _safe_str(_get(document, "invoice_number" if is_invoice else "estimate_number", "number"))
    doc_date = _safe_str(_get(document, "date"))
    due_label = "Due Date" if is_invoice else "Valid Until"
    due_date = _safe_str(_get(document, "due_date" if is_invoice else "expiry_date", "due_or_expiry_date"))
    status = _get(document, "status", default="")

    items: list[_PdfLine] = [
        _PdfLine(
            description=_safe_str(_get(it, "description")),
            quantity=_safe_float(_get(it, "quantity", default=0)),
            unit_price=_safe_float(_get(it, "unit_price", default=0)),
            gst=bool(_get(it, "gst", default=False)),
        )
        for it in (_get(document, "line_items", default=None) or [])
    ]
    totals = calculate_document_totals(
        [{"quantity": i.quantity, "unit_price": i.unit_price, "gst": i.gst} for i in items]
    )

    buf = BytesIO()
    c = Canvas(buf, pagesize=A4)
    c.setTitle(f"{title.title()} {number}".strip())
    w, h = A4

    margin_x = 18 * mm
    top = h - 18 * mm
    bottom = 18 * mm

    font = "Helvetica"
    font_b = "Helvetica-Bold"

    def text(x, y, s, size=10, bold=False):
        c.setFont(font_b if bold else font, size)
        c.drawString(x, y, _safe_str(s))

    def text_r(x_right, y, s, size=10, bold=False):
        c.setFont(font_b if bold else font, size)
        c.drawRightString(x_right, y, _safe_str(s))

    # Issuer block (left)
    company_name = _safe_str(_get(settings, "company_name"))
    abn = _safe_str(_get(settings, "abn"))
    company_address = _safe_str(_get(settings, "address"))
    company_email = _safe_str(_get(settings, "email"))
    company_phone = _safe_str(_get(settings, "phone"))

    y = top
    text(margin_x, y, company_name or "Your Business", size=16, bold=True)
    y -= 14
    if abn:
        text(margin_x, y, f"ABN: {abn}", size=9)
        y -= 11
    for ln in company_address.splitlines():
        if ln.strip():
            text(margin_x, y, ln.strip(), size=9)
            y -= 11
    if company_email:
        text(margin_x, y, company_email, size=9)
        y -= 11
    if company_phone:
        text(margin_x, y, company_phone, size=9)
        y -= 11

    # Title + meta (right)
    meta_x = w - margin_x
    text_r(meta_x, top, title, size=20, bold=True)
    meta_y = top - 22
    for label, value in (
        ("Number", number or "-"),
        ("Date", doc_date or "-"),
        (due_label, due_date or "-"),
        ("Status", format_status(status) if status else "-"),
    ):
        text_r(meta_x - 70, meta_y, label, size=9, bold=True)
        text_r(meta_x, meta_y, value, size=9)
        meta_y -= 12

    # Bill to
    y = min(y, meta_y) - 16
    text(margin_x, y, "Bill To" if is_invoice else "Prepared For", size=10, bold=True)
    y -= 12
    client_name = _safe_str(_get(document, "client_name"))
    client_lines = [client_name] + [ln.strip() for ln in _safe_str(_get(document, "client_address")).splitlines()]
    client_lines = [ln for ln in client_lines if ln] or ["(No client)"]
    for ln in client_lines:
        text(margin_x, y, ln, size=10)
        y -= 11

    y -= 12

    # Table
    table_x = margin_x
    table_w = w - 2 * margin_x
    col_desc = table_w * 0.46
    col_qty = table_w * 0.10
    col_price = table_w * 0.16
    col_gst = table_w * 0.10
    x_qty_r = table_x + col_desc + col_qty - 6
    x_price_r = x_qty_r + col_price
    x_gst_c = x_price_r + col_gst / 2 + 3
    x_total_r = table_x + table_w - 6

    row_h_min = 16
    line_h = 11

    def table_header(y0: float) -> float:
        c.setFont(font_b, 9)
        c.setLineWidth(0.5)
        c.setFillColorRGB(0.93, 0.95, 0.97)
        c.rect(table_x, y0 - 14, table_w, 14, stroke=1, fill=1)
        c.setFillColorRGB(0, 0, 0)
        c.drawString(table_x + 6, y0 - 11, "Description")
        c.drawRightString(x_qty_r, y0 - 11, "Qty")
        c.drawRightString(x_price_r, y0 - 11, "Unit Price")
        c.drawCentredString(x_gst_c, y0 - 11, "GST")
        c.drawRightString(x_total_r, y0 - 11, "Amount")
        return y0 - 16

    y = table_header(y)
    c.setFont(font, 9)

    for it in items:
        desc_lines = _wrap_text(it.description, font, 9, col_desc - 12)
        needed_h = max(row_h_min, 8 + len(desc_lines) * line_h)

        if y - needed_h < bottom + 60:
            c.showPage()
            y = table_header(top)
            c.setFont(font, 9)

        c.rect(table_x, y - needed_h, table_w, needed_h, stroke=1, fill=0)

        ty = y - 12
        for ln in desc_lines:
            c.drawString(table_x + 6, ty, ln)
            ty -= line_h

        c.drawRightString(x_qty_r, y - 12, f"{it.quantity:g}")
        c.drawRightString(x_price_r, y - 12, format_currency(it.unit_price))
        c.drawCentredString(x_gst_c, y - 12, "Yes" if it.gst else "-")
        c.drawRightString(x_total_r, y - 12, format_currency(it.total))

        y -= needed_h

    # Totals
    y -= 14
    if y < bottom + 110:
        c.showPage()
        y = top

    label_x = x_total_r - 90
    for label, value, bold in (
        ("Subtotal", totals.subtotal, False),
        ("GST (10%)", totals.tax, False),
        ("Total (AUD)", totals.total, True),
    ):
        size = 11 if bold else 10
        text_r(label_x, y, label, size=size, bold=True)
        text_r(x_total_r, y, format_currency(value), size=size, bold=bold)
        y -= 16

    y -= 8

    # Payment details (invoices only)
    if is_invoice:
        bsb = _safe_str(_get(settings, "bank_bsb"))
        account = _safe_str(_get(settings, "bank_account"))
        account_name = _safe_str(_get(settings, "bank_account_name"))
        bank_lines = []
        if account_name:
            bank_lines.append(f"Account Name: {account_name}")
        if bsb:
            bank_lines.append(f"BSB: {bsb}")
        if account:
            bank_lines.append(f"Account: {account}")
        if bank_lines:
            text(margin_x, y, "Payment Details", size=10, bold=True)
            y -= 12
            for ln in bank_lines:
                text(margin_x, y, ln, size=9)
                y -= 11
            y -= 8

    # Notes
    notes = notes_for(settings, kind) if settings is not None else ""
    if notes:
        note_lines = _wrap_paragraphs(notes, font, 9, w - 2 * margin_x)
        if y - 12 - len(note_lines) * 11 < bottom:
            c.showPage()
            y = top
        text(margin_x, y, "Notes", size=10, bold=True)
        y -= 12
        c.setFont(font, 9)
        for ln in note_lines:
            c.drawString(margin_x, y, ln)
            y -= 11

    c.setFont(font, 7)
    c.setFillColorRGB(0.45, 0.45, 0.45)
    footer = " - ".join(p for p in [company_name, f"ABN {abn}" if abn else ""] if p)
    if footer:
        c.drawCentredString(w / 2, bottom - 6, footer)

    c.save()
    return buf.getvalue()
