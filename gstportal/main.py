from __future__ import annotations

import logging

from fastapi import HTTPException, Response
from nicegui import app, ui

from gstportal.config import AppConfig
from gstportal.data import configure_engine
from gstportal.errors import NotFoundError, StoreError
from gstportal.logging_setup import setup_logging
from gstportal.pages import (
    render_bas,
    render_clients,
    render_dashboard,
    render_document_editor,
    render_documents,
    render_settings,
)
from gstportal.pages._shared import AUTH_USER_KEY, clear_auth_session, current_auth, require_auth, set_page
from gstportal.services.company_settings import get_company_settings
from gstportal.services.document_pdf import render_document_pdf
from gstportal.services.documents import DocumentKind, document_pdf_filename, get_document
from gstportal.styles import APP_CSS, STYLE_BG, STYLE_CONTAINER, STYLE_NAV_ITEM, STYLE_NAV_ITEM_ACTIVE

logger = logging.getLogger(__name__)

config = AppConfig.from_env()
setup_logging(config.log_dir, config.debug)
configure_engine(config.database_url)


@app.get("/api/{kind}/{document_id}/pdf")
def document_pdf(kind: str, document_id: int):
    if not app.storage.user.get(AUTH_USER_KEY) or not current_auth().is_authenticated:
        raise HTTPException(status_code=401, detail="Unauthorized")
    try:
        doc_kind = DocumentKind(kind)
    except ValueError:
        raise HTTPException(status_code=404, detail="Unknown document type") from None

    try:
        document = get_document(doc_kind, document_id)
        settings = get_company_settings()
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except StoreError as exc:
        raise HTTPException(status_code=500, detail=exc.user_message) from exc

    pdf_bytes = render_document_pdf(document, kind=doc_kind.value, settings=settings)
    filename = document_pdf_filename(doc_kind, document)
    logger.info("Rendered PDF %s", filename)
    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


def layout_wrapper(content_func):
    # App shell with left sidebar
    ui.add_head_html(APP_CSS)
    with ui.element("div").classes(STYLE_BG + " w-full"):
        with ui.row().classes("w-full min-h-screen no-wrap"):
            with ui.column().classes(
                "w-[240px] bg-white border-r border-slate-200 p-4 gap-6 sticky top-0 h-screen overflow-y-auto"
            ):
                with ui.row().classes("items-center gap-2 px-2"):
                    ui.label("GST Portal").classes("text-lg font-bold text-slate-900")
                ui.separator().classes("opacity-60")

                def nav_section(title: str, items: list[tuple[str, str]]):
                    ui.label(title).classes(
                        "text-xs font-semibold text-slate-400 uppercase tracking-wider px-2 mt-1"
                    )
                    with ui.column().classes("gap-1 mt-1 w-full"):
                        for label, target in items:
                            active = app.storage.user.get("page", "dashboard") == target
                            cls = STYLE_NAV_ITEM_ACTIVE if active else STYLE_NAV_ITEM
                            ui.button(
                                label,
                                on_click=lambda t=target: set_page(t),
                            ).props("flat").classes(f"w-full justify-start normal-case {cls}")

                nav_section("Workspace", [("Dashboard", "dashboard")])
                nav_section("Billing", [("Invoices", "invoices"), ("Estimates", "estimates")])
                nav_section("Tax", [("BAS report", "bas")])
                nav_section("CRM", [("Clients", "clients")])
                nav_section("Settings", [("Business settings", "settings")])

            with ui.column().classes("flex-1 w-full"):
                with ui.row().classes("w-full justify-end items-center px-6 py-4 gap-3"):
                    identity = current_auth().identity
                    if identity is not None:
                        ui.label(identity.username).classes("text-sm text-slate-500")

                    def handle_logout() -> None:
                        clear_auth_session()
                        ui.navigate.to("/login")

                    ui.button("Logout", on_click=handle_logout).props("flat").classes(
                        "text-slate-500 hover:text-slate-900"
                    )
                content_func()


@ui.page("/")
def index():
    if not require_auth():
        return

    page = app.storage.user.get("page", "dashboard")

    def content():
        with ui.column().classes(STYLE_CONTAINER):
            if page == "invoices":
                render_documents(DocumentKind.INVOICE)
            elif page == "estimates":
                render_documents(DocumentKind.ESTIMATE)
            elif page == "document_edit":
                kind = DocumentKind(app.storage.user.get("doc_kind", "invoice"))
                render_document_editor(kind, app.storage.user.get("doc_id"))
            elif page == "clients":
                render_clients()
            elif page == "bas":
                render_bas()
            elif page == "settings":
                render_settings()
            else:
                render_dashboard()

    layout_wrapper(content)


def main() -> None:
    if not config.storage_secret:
        logger.warning("GP_STORAGE_SECRET is not set; sessions use an insecure development secret")
    ui.run(
        title="GST Portal",
        host=config.host,
        port=config.port,
        storage_secret=config.storage_secret or "gst-portal-dev-secret",
        reload=False,
        favicon="🧾",
    )


if __name__ in {"__main__", "__mp_main__"}:
    main()
