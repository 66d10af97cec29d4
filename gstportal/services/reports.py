from __future__ import annotations

import io
import logging
from datetime import date

import pandas as pd
from sqlmodel import select

from gstportal.bas_report import BasReport, build_bas_report, parse_quarter, to_date
from gstportal.data import Invoice, get_session, store_errors
from gstportal.statuses import InvoiceStatus

logger = logging.getLogger(__name__)

REPORT_STATUSES = (InvoiceStatus.SENT, InvoiceStatus.PAID)


def generate_bas_report(start: date | str | None, end: date | str | None) -> BasReport:
    start_day = to_date(start)
    end_day = to_date(end)
    if start_day is None or end_day is None or start_day > end_day:
        return BasReport(start=start_day, end=end_day)

    with store_errors("generate BAS report"):
        with get_session() as session:
            invoices = session.exec(
                select(Invoice)
                .where(
                    Invoice.date >= start_day.isoformat(),
                    Invoice.date <= end_day.isoformat(),
                    Invoice.status.in_(REPORT_STATUSES),
                )
                .order_by(Invoice.date)
            ).all()

    report = build_bas_report(invoices, start_day, end_day, statuses=[s.value for s in REPORT_STATUSES])
    logger.info(
        "BAS report %s..%s: %d invoices, GST payable %.2f",
        start_day,
        end_day,
        report.invoice_count,
        report.gst_payable,
    )
    return report


def generate_quarter_report(label: str) -> BasReport:
    start, end = parse_quarter(label)
    return generate_bas_report(start, end)


def export_bas_report_csv(report: BasReport) -> bytes:
    rows = [
        {
            "Invoice Number": inv.invoice_number,
            "Date": inv.date,
            "Client": inv.client_name,
            "Subtotal": round(float(inv.subtotal or 0.0), 2),
            "GST": round(float(inv.gst or 0.0), 2),
            "Total": round(float(inv.total or 0.0), 2),
            "Status": getattr(inv.status, "value", inv.status),
        }
        for inv in report.invoices
    ]
    frame = pd.DataFrame(
        rows,
        columns=["Invoice Number", "Date", "Client", "Subtotal", "GST", "Total", "Status"],
    )
    totals = pd.DataFrame(
        [
            {
                "Invoice Number": "TOTAL",
                "Subtotal": round(report.total_sales, 2),
                "GST": round(report.gst_on_sales, 2),
                "Total": round(report.total_sales + report.gst_on_sales, 2),
            }
        ]
    )
    frame = pd.concat([frame, totals], ignore_index=True)
    buffer = io.StringIO()
    frame.to_csv(buffer, index=False)
    return buffer.getvalue().encode("utf-8")
