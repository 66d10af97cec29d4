from __future__ import annotations

from ._shared import *
from gstportal.services.documents import (
    check_document_consistency,
    delete_document,
    list_documents,
    set_document_status,
)
from gstportal.statuses import format_status


def render_documents(kind: DocumentKind) -> None:
    status_options = {status.value: format_status(status) for status in kind.status_enum}

    with ui.row().classes("w-full items-center justify-between mb-4 flex-col sm:flex-row gap-3"):
        ui.label(f"{kind.label}s").classes(STYLE_PAGE_TITLE)
        gp_btn_primary(
            f"New {kind.value}",
            icon="add",
            on_click=lambda: set_page("document_edit", doc_kind=kind.value, doc_id=None),
        )

    @ui.refreshable
    def table() -> None:
        try:
            documents = list_documents(kind)
        except PortalError as exc:
            notify_error(exc)
            return

        with gp_card(pad="p-0", classes="overflow-hidden"):
            with ui.row().classes(STYLE_TABLE_HEADER):
                ui.label("Number").classes("w-32")
                ui.label("Client").classes("flex-1")
                ui.label("Date").classes("w-28")
                ui.label("Due" if kind is DocumentKind.INVOICE else "Valid until").classes("w-28")
                ui.label("Total").classes("w-28 text-right")
                ui.label("Status").classes("w-36")
                ui.label("").classes("w-36")

            if not documents:
                with ui.row().classes(STYLE_TABLE_ROW):
                    ui.label(f"No {kind.value}s yet").classes(STYLE_TEXT_MUTED)
                return

            for doc in documents:
                doc_id = int(doc.id)

                def change_status(e, x: int = doc_id) -> None:
                    try:
                        set_document_status(kind, x, e.value)
                    except PortalError as exc:
                        notify_error(exc)
                    table.refresh()

                def remove(x: int = doc_id, number: str = doc.number) -> None:
                    def _do_delete() -> None:
                        try:
                            delete_document(kind, x)
                        except PortalError as exc:
                            notify_error(exc)
                            return
                        ui.notify(f"{kind.label} {number} deleted", color="green")
                        table.refresh()

                    confirm_dialog(
                        f"Delete {kind.value}?",
                        f"{kind.label} {number} will be removed permanently.",
                        _do_delete,
                    ).open()

                def verify(x: int = doc_id) -> None:
                    try:
                        problems = check_document_consistency(kind, x)
                    except PortalError as exc:
                        notify_error(exc)
                        return
                    if problems:
                        ui.notify("Stored totals differ: " + "; ".join(problems), color="orange", multi_line=True)
                    else:
                        ui.notify("Totals are consistent", color="green")

                with ui.row().classes(STYLE_TABLE_ROW + " items-center"):
                    ui.label(doc.number).classes("w-32 font-medium text-slate-900 cursor-pointer hover:underline").on(
                        "click",
                        lambda _, x=doc_id: set_page("document_edit", doc_kind=kind.value, doc_id=x),
                    )
                    ui.label(doc.client_name).classes("flex-1")
                    ui.label(doc.date).classes("w-28 text-slate-600")
                    ui.label(doc.due_or_expiry_date or "-").classes("w-28 text-slate-600")
                    ui.label(format_currency(doc.total)).classes(f"w-28 text-right {C_NUMERIC}")
                    ui.select(
                        status_options,
                        value=getattr(doc.status, "value", doc.status),
                        on_change=change_status,
                    ).props("dense outlined").classes("w-36")
                    with ui.row().classes("w-36 gap-0 justify-end"):
                        ui.button(
                            icon="picture_as_pdf",
                            on_click=lambda x=doc_id: ui.download.from_url(f"/api/{kind.value}/{x}/pdf"),
                        ).props("flat dense round").tooltip("Download PDF")
                        ui.button(icon="fact_check", on_click=verify).props("flat dense round").tooltip(
                            "Check totals"
                        )
                        ui.button(icon="delete", on_click=remove).props("flat dense round color=negative").tooltip(
                            "Delete"
                        )

    table()
