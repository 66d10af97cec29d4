from __future__ import annotations

import calendar
import logging
import re
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Iterable, Mapping

logger = logging.getLogger(__name__)

REPORTABLE_STATUSES = ("sent", "paid")

_QUARTER_LABEL = re.compile(r"^Q([1-4])-(\d{4})$")


@dataclass
class BasReport:
    start: date | None
    end: date | None
    total_sales: float = 0.0
    gst_on_sales: float = 0.0
    # Purchases are not tracked, so 1B is always zero.
    gst_on_purchases: float = 0.0
    invoice_count: int = 0
    invoices: list[Any] = field(default_factory=list)

    @property
    def gst_payable(self) -> float:
        return self.gst_on_sales - self.gst_on_purchases

    def as_dict(self) -> dict[str, Any]:
        return {
            "start": self.start.isoformat() if self.start else "",
            "end": self.end.isoformat() if self.end else "",
            "totalSales": self.total_sales,
            "gstOnSales": self.gst_on_sales,
            "gstPayable": self.gst_payable,
            "invoiceCount": self.invoice_count,
        }


def parse_quarter(label: str) -> tuple[date, date]:
    """Return the first and last day of a ``Q<n>-<year>`` calendar quarter."""
    match = _QUARTER_LABEL.match((label or "").strip().upper())
    if not match:
        raise ValueError(f"Invalid quarter label: {label!r}")
    quarter, year = int(match.group(1)), int(match.group(2))
    start_month = (quarter - 1) * 3 + 1
    end_month = start_month + 2
    last_day = calendar.monthrange(year, end_month)[1]
    return date(year, start_month, 1), date(year, end_month, last_day)


def quarter_label_for(day: date) -> str:
    return f"Q{(day.month - 1) // 3 + 1}-{day.year}"


def list_quarter_labels(today: date, years_back: int = 5) -> list[str]:
    return [
        f"Q{quarter}-{year}"
        for year in range(today.year, today.year - years_back - 1, -1)
        for quarter in range(4, 0, -1)
    ]


def to_date(value: Any) -> date | None:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value).strip()[:10])
    except ValueError:
        return None


def _get(document: Any, name: str, default: Any = None) -> Any:
    if isinstance(document, Mapping):
        return document.get(name, default)
    return getattr(document, name, default)


def _status_value(document: Any) -> str:
    status = _get(document, "status", "")
    return str(getattr(status, "value", status) or "").lower()


def _tax_value(document: Any) -> float:
    value = _get(document, "gst")
    if value is None or isinstance(value, bool):
        value = _get(document, "tax", 0.0)
    return float(value or 0.0)


def select_reportable(
    documents: Iterable[Any],
    start: date | str | None,
    end: date | str | None,
    statuses: Iterable[str] = REPORTABLE_STATUSES,
) -> list[Any]:
    start_day = to_date(start)
    end_day = to_date(end)
    if start_day is None or end_day is None or start_day > end_day:
        return []

    allowed = {str(getattr(s, "value", s)).lower() for s in statuses}
    selected: list[tuple[date, Any]] = []
    for document in documents or []:
        doc_day = to_date(_get(document, "date"))
        if doc_day is None or not (start_day <= doc_day <= end_day):
            continue
        if _status_value(document) not in allowed:
            continue
        selected.append((doc_day, document))

    selected.sort(key=lambda pair: pair[0])
    return [document for _, document in selected]


def build_bas_report(
    documents: Iterable[Any],
    start: date | str | None,
    end: date | str | None,
    statuses: Iterable[str] = REPORTABLE_STATUSES,
) -> BasReport:
    selected = select_reportable(documents, start, end, statuses)
    report = BasReport(start=to_date(start), end=to_date(end), invoices=selected)
    for document in selected:
        report.total_sales += float(_get(document, "subtotal", 0.0) or 0.0)
        report.gst_on_sales += _tax_value(document)
    report.invoice_count = len(selected)
    logger.debug(
        "BAS report %s..%s: %d documents, sales %.2f, gst %.2f",
        report.start,
        report.end,
        report.invoice_count,
        report.total_sales,
        report.gst_on_sales,
    )
    return report
