from __future__ import annotations

from ._shared import *
from gstportal.bas_report import list_quarter_labels, parse_quarter, quarter_label_for
from gstportal.services.reports import export_bas_report_csv, generate_bas_report


def render_bas() -> None:
    today = date.today()
    current = quarter_label_for(today)
    start, end = parse_quarter(current)
    state = {"start": start.isoformat(), "end": end.isoformat(), "report": None}

    def on_quarter(e) -> None:
        if not e.value:
            return
        q_start, q_end = parse_quarter(e.value)
        start_input.value = q_start.isoformat()
        end_input.value = q_end.isoformat()
        run()

    def run() -> None:
        state["start"] = start_input.value
        state["end"] = end_input.value
        results.refresh()

    def download() -> None:
        report = state["report"]
        if report is None:
            ui.notify("Generate a report first", color="red")
            return
        ui.download.content(
            export_bas_report_csv(report),
            filename=f"BAS-{state['start']}-{state['end']}.csv",
            media_type="text/csv",
        )

    with ui.row().classes("w-full items-center justify-between mb-2 flex-col sm:flex-row gap-3"):
        ui.label("BAS / GST report").classes(STYLE_PAGE_TITLE)
        gp_btn_secondary("Export CSV", icon="download", on_click=download)

    with gp_card():
        with ui.row().classes("w-full items-end gap-4 flex-wrap"):
            ui.select(list_quarter_labels(today), value=current, label="Quarter", on_change=on_quarter).props(
                "outlined dense"
            ).classes("w-40")
            start_input = ui.input("From", value=state["start"]).props("outlined dense type=date").classes("w-44")
            end_input = ui.input("To", value=state["end"]).props("outlined dense type=date").classes("w-44")
            gp_btn_primary("Generate", icon="calculate", on_click=run)
        ui.label("Only sent and paid invoices dated inside the period are included.").classes(STYLE_TEXT_HINT)

    @ui.refreshable
    def results() -> None:
        try:
            report = generate_bas_report(state["start"], state["end"])
        except PortalError as exc:
            notify_error(exc)
            return
        state["report"] = report
        if report.start is None or report.end is None or report.start > report.end:
            ui.label("Choose a valid date range.").classes(STYLE_TEXT_MUTED)

        with ui.grid().classes("w-full grid-cols-1 md:grid-cols-3 gap-4"):
            kpi_card("G1 Total sales", report.total_sales, "point_of_sale", "Excluding GST")
            kpi_card("1A GST on sales", report.gst_on_sales, "account_balance", "Collected on invoices")
            kpi_card("GST payable", report.gst_payable, "payments", "1A minus 1B (purchases not tracked)")

        with gp_card(pad="p-0", classes="overflow-hidden"):
            with ui.row().classes(STYLE_TABLE_HEADER):
                ui.label("Invoice").classes("w-32")
                ui.label("Date").classes("w-28")
                ui.label("Client").classes("flex-1")
                ui.label("Subtotal").classes("w-28 text-right")
                ui.label("GST").classes("w-24 text-right")
                ui.label("Status").classes("w-24 text-center")
            if not report.invoices:
                with ui.row().classes(STYLE_TABLE_ROW):
                    ui.label("No invoices in this period").classes(STYLE_TEXT_MUTED)
                return
            for inv in report.invoices:
                with ui.row().classes(STYLE_TABLE_ROW):
                    ui.label(inv.invoice_number).classes("w-32 font-medium text-slate-900")
                    ui.label(inv.date).classes("w-28 text-slate-600")
                    ui.label(inv.client_name).classes("flex-1")
                    ui.label(format_currency(inv.subtotal)).classes(f"w-28 text-right {C_NUMERIC}")
                    ui.label(format_currency(inv.gst)).classes(f"w-24 text-right {C_NUMERIC}")
                    with ui.element("div").classes("w-24 flex justify-center"):
                        status_badge(inv.status)

    results()
