from __future__ import annotations

from datetime import timedelta
from typing import Any, Callable

from ._shared import *
from gstportal.gst_calculations import build_totals_preview_html, calculate_document_totals, recompute_line_items
from gstportal.models import LineItemInput
from gstportal.payment_terms import DEFAULT_ESTIMATE_VALIDITY_DAYS, PaymentTerms, calculate_due_date
from gstportal.services.clients import list_clients
from gstportal.services.documents import (
    apply_client_snapshot,
    create_document,
    get_document,
    suggest_next_number,
    update_document,
)
from gstportal.statuses import format_status

_TERM_LABELS = {
    PaymentTerms.NET_15.value: "Net 15",
    PaymentTerms.NET_30.value: "Net 30",
    PaymentTerms.CUSTOM.value: "Custom",
}


def _blank_item() -> dict[str, Any]:
    return LineItemInput(quantity=1, gst=True).model_dump()


def _date_input(label: str, value: str, on_change: Callable | None = None) -> ui.input:
    field = ui.input(label, value=value, on_change=on_change).props("outlined dense").classes(STYLE_INPUT)
    with field:
        with ui.menu().props("no-parent-event") as menu:
            ui.date().bind_value(field).props('mask="YYYY-MM-DD"')
            with ui.row().classes("justify-end"):
                ui.button("OK", on_click=menu.close).props("flat")
    with field.add_slot("append"):
        ui.icon("event").on("click", menu.open).classes("cursor-pointer")
    return field


def render_document_editor(kind: DocumentKind, document_id: int | None = None) -> None:
    is_invoice = kind is DocumentKind.INVOICE
    existing = None
    if document_id is not None:
        try:
            existing = get_document(kind, int(document_id))
        except PortalError as exc:
            notify_error(exc)
            return

    try:
        clients = list_clients()
        suggested = existing.number if existing else suggest_next_number(kind)
    except PortalError as exc:
        notify_error(exc)
        return
    clients_by_id = {int(c.id): c for c in clients}

    if existing:
        items: list[dict[str, Any]] = [dict(item) for item in (existing.line_items or [])]
        start_date = existing.date
        start_due = existing.due_or_expiry_date
        start_terms = getattr(existing, "payment_terms", PaymentTerms.CUSTOM)
        start_status = getattr(existing.status, "value", existing.status)
    else:
        items = [_blank_item()]
        start_date = today_iso()
        if is_invoice:
            start_terms = PaymentTerms.NET_30
            start_due = calculate_due_date(start_date, start_terms)
        else:
            start_terms = PaymentTerms.CUSTOM
            start_due = (date.today() + timedelta(days=DEFAULT_ESTIMATE_VALIDITY_DAYS)).isoformat()
        start_status = "draft"

    amount_labels: dict[str, ui.label] = {}

    def refresh_totals(_=None) -> None:
        totals_preview.refresh()
        for row in recompute_line_items(items):
            label = amount_labels.get(row["id"])
            if label is not None:
                label.text = format_currency(row["total"])

    def refresh_due_date(_=None) -> None:
        if terms_select is None:
            return
        due_input.value = calculate_due_date(date_input.value, terms_select.value, due_input.value or "")

    def on_date_change(e) -> None:
        refresh_due_date()
        totals_preview.refresh()

    def on_client_picked(e) -> None:
        client = clients_by_id.get(e.value) if e.value is not None else None
        if client is None:
            return
        snapshot = apply_client_snapshot({}, client)
        client_name_input.value = snapshot["client_name"]
        client_address_input.value = snapshot["client_address"]

    title = f"Edit {kind.value} {existing.number}" if existing else f"New {kind.value}"
    with ui.row().classes("w-full items-center justify-between mb-2"):
        ui.label(title).classes(STYLE_PAGE_TITLE)
        gp_btn_secondary("Back", icon="arrow_back", on_click=lambda: set_page(f"{kind.value}s"))

    with ui.row().classes("w-full gap-6 items-start flex-col md:flex-row md:flex-nowrap"):
        with ui.column().classes("w-full md:w-[38%] gap-4"):
            with gp_card():
                ui.label("Details").classes(STYLE_SECTION_TITLE)
                number_input = ui.input(
                    f"{kind.label} number", value=suggested, on_change=lambda _: totals_preview.refresh()
                ).props("outlined dense").classes(STYLE_INPUT)
                date_input = _date_input("Date", start_date, on_change=on_date_change)
                terms_select = None
                if is_invoice:
                    terms_select = ui.select(
                        _TERM_LABELS,
                        value=getattr(start_terms, "value", start_terms),
                        label="Payment terms",
                        on_change=refresh_due_date,
                    ).props("outlined dense").classes(STYLE_INPUT)
                due_input = _date_input("Due date" if is_invoice else "Valid until", start_due)
                status_select = ui.select(
                    {s.value: format_status(s) for s in kind.status_enum},
                    value=start_status,
                    label="Status",
                ).props("outlined dense").classes(STYLE_INPUT)

            with gp_card():
                ui.label("Client").classes(STYLE_SECTION_TITLE)
                ui.select(
                    {cid: c.name for cid, c in clients_by_id.items()},
                    label="Pick a saved client",
                    with_input=True,
                    clearable=True,
                    on_change=on_client_picked,
                ).props("outlined dense").classes(STYLE_INPUT)
                client_name_input = ui.input(
                    "Client name", value=existing.client_name if existing else ""
                ).props("outlined dense").classes(STYLE_INPUT)
                client_address_input = ui.textarea(
                    "Client address", value=existing.client_address if existing else ""
                ).props("outlined dense autogrow").classes(STYLE_INPUT)
                if not clients_by_id:
                    ui.label("No saved clients yet. Enter the details by hand.").classes(STYLE_TEXT_HINT)

        with ui.column().classes("w-full md:flex-1 gap-4"):
            with gp_card():
                with ui.row().classes("w-full items-center justify-between"):
                    ui.label("Line items").classes(STYLE_SECTION_TITLE)

                    def add_item() -> None:
                        items.append(_blank_item())
                        line_items.refresh()
                        refresh_totals()

                    gp_btn_secondary("Add item", icon="add", on_click=add_item)

                @ui.refreshable
                def line_items() -> None:
                    amount_labels.clear()
                    with ui.row().classes(STYLE_TABLE_HEADER + " no-wrap"):
                        ui.label("Description").classes("flex-1")
                        ui.label("Qty").classes("w-20")
                        ui.label("Unit price").classes("w-28")
                        ui.label("GST").classes("w-14")
                        ui.label("Amount").classes("w-28 text-right")
                        ui.label("").classes("w-10")
                    for item, computed in zip(items, recompute_line_items(items)):

                        def set_field(e, it=item, key: str = "description") -> None:
                            it[key] = e.value if key in ("description", "gst") else float(e.value or 0)
                            if key != "description":
                                refresh_totals()

                        def remove(it=item) -> None:
                            items.remove(it)
                            line_items.refresh()
                            refresh_totals()

                        with ui.row().classes(STYLE_TABLE_ROW + " no-wrap items-center"):
                            ui.input(
                                value=item.get("description", ""),
                                on_change=lambda e, it=item: set_field(e, it, "description"),
                            ).props("dense borderless").classes("flex-1")
                            ui.number(
                                value=item.get("quantity", 0),
                                min=0,
                                step=1,
                                on_change=lambda e, it=item: set_field(e, it, "quantity"),
                            ).props("dense borderless").classes("w-20")
                            ui.number(
                                value=item.get("unit_price", 0),
                                step=0.01,
                                on_change=lambda e, it=item: set_field(e, it, "unit_price"),
                            ).props("dense borderless").classes("w-28")
                            with ui.element("div").classes("w-14"):
                                ui.checkbox(
                                    value=bool(item.get("gst")),
                                    on_change=lambda e, it=item: set_field(e, it, "gst"),
                                )
                            amount_labels[item["id"]] = ui.label(format_currency(computed["total"])).classes(
                                f"w-28 text-right {C_NUMERIC}"
                            )
                            ui.button(icon="close", on_click=remove).props("flat dense round").classes("w-10")

                line_items()

            with gp_card():
                ui.label("Totals").classes(STYLE_SECTION_TITLE)

                @ui.refreshable
                def totals_preview() -> None:
                    totals = calculate_document_totals(items)
                    ui.html(
                        build_totals_preview_html(number_input.value or "", date_input.value or "", totals),
                        sanitize=False,
                    ).classes(f"w-full {C_NUMERIC}")

                totals_preview()

            with ui.row().classes("w-full justify-end gap-2"):
                gp_btn_secondary("Cancel", on_click=lambda: set_page(f"{kind.value}s"))

                def save() -> None:
                    payload = {
                        "number": number_input.value,
                        "date": date_input.value,
                        "client_name": client_name_input.value,
                        "client_address": client_address_input.value,
                        "due_date": due_input.value,
                        "line_items": items,
                        "status": status_select.value,
                    }
                    if terms_select is not None:
                        payload["payment_terms"] = terms_select.value
                    try:
                        if existing:
                            saved = update_document(kind, int(existing.id), payload)
                        else:
                            saved = create_document(kind, payload)
                    except PortalError as exc:
                        notify_error(exc)
                        return
                    ui.notify(f"{kind.label} {saved.number} saved", color="green")
                    set_page(f"{kind.value}s")

                gp_btn_primary(f"Save {kind.value}", icon="save", on_click=save)
