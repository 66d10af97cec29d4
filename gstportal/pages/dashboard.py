from __future__ import annotations

from ._shared import *
from gstportal.services.demo_data import seed_demo_data
from gstportal.services.documents import dashboard_summary


def _recent_list(title: str, kind: DocumentKind, documents: list) -> None:
    with gp_card(pad="p-0", classes="overflow-hidden"):
        with ui.row().classes("w-full items-center justify-between px-4 py-3"):
            ui.label(title).classes(STYLE_SECTION_TITLE)
            ui.button("View all", on_click=lambda: set_page(f"{kind.value}s")).props("flat no-caps dense").classes(
                "text-slate-500"
            )
        with ui.row().classes(STYLE_TABLE_HEADER):
            ui.label("Number").classes("w-32")
            ui.label("Client").classes("flex-1")
            ui.label("Date").classes("w-28")
            ui.label("Total").classes("w-28 text-right")
            ui.label("Status").classes("w-24 text-center")
        if not documents:
            with ui.row().classes(STYLE_TABLE_ROW):
                ui.label(f"No {kind.value}s yet").classes(STYLE_TEXT_MUTED)
            return
        for doc in documents:
            with ui.row().classes(STYLE_TABLE_ROW + " cursor-pointer hover:bg-slate-50").on(
                "click",
                lambda _, x=int(doc.id): set_page("document_edit", doc_kind=kind.value, doc_id=x),
            ):
                ui.label(doc.number).classes("w-32 font-medium text-slate-900")
                ui.label(doc.client_name).classes("flex-1")
                ui.label(doc.date).classes("w-28 text-slate-600")
                ui.label(format_currency(doc.total)).classes(f"w-28 text-right {C_NUMERIC}")
                with ui.element("div").classes("w-24 flex justify-center"):
                    status_badge(doc.status)


def render_dashboard() -> None:
    try:
        summary = dashboard_summary()
    except PortalError as exc:
        notify_error(exc)
        return

    def handle_seed() -> None:
        try:
            numbers = seed_demo_data()
        except PortalError as exc:
            notify_error(exc)
            return
        ui.notify(f"Demo data added: {', '.join(numbers['invoices'] + numbers['estimates'])}", color="green")
        set_page("dashboard")

    with ui.row().classes("w-full items-center justify-between mb-2 flex-col sm:flex-row gap-3"):
        ui.label("Dashboard").classes(STYLE_PAGE_TITLE)
        with ui.row().classes("gap-2"):
            gp_btn_secondary("Load demo data", icon="science", on_click=handle_seed)
            gp_btn_primary(
                "New invoice",
                icon="add",
                on_click=lambda: set_page("document_edit", doc_kind="invoice", doc_id=None),
            )

    with ui.grid().classes("w-full grid-cols-1 md:grid-cols-3 gap-4"):
        kpi_card("Recent invoices", summary.invoice_amount, "receipt_long", "Sum of the latest invoices")
        kpi_card("Recent estimates", summary.estimate_amount, "request_quote", "Sum of the latest estimates")
        kpi_card(
            "Pending invoices",
            None,
            "schedule",
            "Draft or sent, not yet paid",
            value=str(summary.pending_invoices),
        )

    _recent_list("Recent invoices", DocumentKind.INVOICE, summary.recent_invoices)
    _recent_list("Recent estimates", DocumentKind.ESTIMATE, summary.recent_estimates)
