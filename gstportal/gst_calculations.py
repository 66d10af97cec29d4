from __future__ import annotations

from dataclasses import dataclass
from html import escape
from typing import Any, Iterable, Mapping


GST_RATE = 0.1
GST_MULTIPLIER = 1 + GST_RATE


@dataclass(frozen=True)
class DocumentTotals:
    subtotal: float
    tax: float
    total: float

    def as_dict(self) -> dict[str, float]:
        return {"subtotal": self.subtotal, "gst": self.tax, "total": self.total}


def _get(item: Any, name: str, default: Any = None) -> Any:
    if isinstance(item, Mapping):
        return item.get(name, default)
    return getattr(item, name, default)


def _to_float(value: Any) -> float:
    if value is None or value == "":
        return 0.0
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def _line_net(item: Any) -> float:
    return _to_float(_get(item, "quantity")) * _to_float(_get(item, "unit_price"))


def line_total(quantity: Any, unit_price: Any, gst: bool) -> float:
    net = _to_float(quantity) * _to_float(unit_price)
    return net * GST_MULTIPLIER if gst else net


def calculate_document_totals(items: Iterable[Any] | None) -> DocumentTotals:
    subtotal = 0.0
    tax = 0.0

    for item in items or []:
        net = _line_net(item)
        subtotal += net
        if _get(item, "gst", False):
            tax += net * GST_RATE

    return DocumentTotals(subtotal=subtotal, tax=tax, total=subtotal + tax)


def recompute_line_items(items: Iterable[Any] | None) -> list[dict[str, Any]]:
    """Return plain-dict copies of ``items`` with each ``total`` recomputed."""
    result: list[dict[str, Any]] = []
    for item in items or []:
        row = dict(item) if isinstance(item, Mapping) else {
            "id": _get(item, "id"),
            "description": _get(item, "description", ""),
            "quantity": _get(item, "quantity", 0),
            "unit_price": _get(item, "unit_price", 0),
            "gst": _get(item, "gst", False),
        }
        row["gst"] = bool(row.get("gst", False))
        row["total"] = line_total(row.get("quantity"), row.get("unit_price"), row["gst"])
        result.append(row)
    return result


def verify_document_totals(document: Any, tolerance: float = 0.005) -> list[str]:
    """Re-derive line and document totals and describe every stored value that drifted.

    An empty list means the stored figures agree with the line items.
    """
    problems: list[str] = []
    items = _get(document, "line_items") or []

    for index, item in enumerate(items, start=1):
        expected = line_total(_get(item, "quantity"), _get(item, "unit_price"), bool(_get(item, "gst", False)))
        stored = _to_float(_get(item, "total"))
        if abs(stored - expected) > tolerance:
            problems.append(f"line {index}: total {stored:.2f} != {expected:.2f}")

    totals = calculate_document_totals(items)
    stored_tax = _get(document, "gst")
    if stored_tax is None or isinstance(stored_tax, bool):
        stored_tax = _get(document, "tax")
    for label, stored, expected in (
        ("subtotal", _get(document, "subtotal"), totals.subtotal),
        ("gst", stored_tax, totals.tax),
        ("total", _get(document, "total"), totals.total),
    ):
        stored_value = _to_float(stored)
        if abs(stored_value - expected) > tolerance:
            problems.append(f"{label}: {stored_value:.2f} != {expected:.2f}")

    return problems


def format_currency(amount: Any) -> str:
    value = _to_float(amount)
    if value < 0:
        return f"-${abs(value):,.2f}"
    return f"${value:,.2f}"


def build_totals_preview_html(document_number: str, document_date: str, totals: DocumentTotals) -> str:
    number = escape((document_number or "").strip())
    date = escape((document_date or "").strip())

    return (
        "<div class='document-preview'>"
        f"<div class='document-meta'>{number}</div>"
        f"<div class='document-date'>{date}</div>"
        "<div class='document-totals'>"
        f"<span class='subtotal'>Subtotal: {format_currency(totals.subtotal)}</span>"
        f"<span class='gst'>GST: {format_currency(totals.tax)}</span>"
        f"<span class='total'>Total: {format_currency(totals.total)}</span>"
        "</div>"
        "</div>"
    )
