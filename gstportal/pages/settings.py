from __future__ import annotations

from ._shared import *
from gstportal.services.company_settings import get_company_settings, save_company_settings

_BUSINESS_FIELDS = (
    ("company_name", "Business name"),
    ("abn", "ABN"),
    ("email", "Email"),
    ("phone", "Phone"),
)
_BANK_FIELDS = (
    ("bank_account_name", "Account name"),
    ("bank_bsb", "BSB"),
    ("bank_account", "Account number"),
)
_NOTE_FIELDS = (
    ("notes", "Default notes"),
    ("invoice_notes", "Invoice notes"),
    ("estimate_notes", "Estimate notes"),
)


def render_settings() -> None:
    try:
        settings = get_company_settings()
    except PortalError as exc:
        notify_error(exc)
        return

    inputs: dict[str, ui.input] = {}

    def value_of(key: str) -> str:
        return getattr(settings, key, "") if settings is not None else ""

    ui.label("Settings").classes(STYLE_PAGE_TITLE)

    with gp_card():
        ui.label("Business").classes(STYLE_SECTION_TITLE)
        with ui.grid().classes("w-full grid-cols-1 md:grid-cols-2 gap-3"):
            for key, label in _BUSINESS_FIELDS:
                inputs[key] = ui.input(label, value=value_of(key)).props("outlined dense").classes(STYLE_INPUT)
        inputs["address"] = ui.textarea("Address", value=value_of("address")).props("outlined dense autogrow").classes(
            STYLE_INPUT
        )

    with gp_card():
        ui.label("Payment details").classes(STYLE_SECTION_TITLE)
        ui.label("Printed on invoice PDFs.").classes(STYLE_TEXT_HINT)
        with ui.grid().classes("w-full grid-cols-1 md:grid-cols-3 gap-3"):
            for key, label in _BANK_FIELDS:
                inputs[key] = ui.input(label, value=value_of(key)).props("outlined dense").classes(STYLE_INPUT)

    with gp_card():
        ui.label("Notes").classes(STYLE_SECTION_TITLE)
        ui.label("Invoice and estimate notes override the default notes when set.").classes(STYLE_TEXT_HINT)
        for key, label in _NOTE_FIELDS:
            inputs[key] = ui.textarea(label, value=value_of(key)).props("outlined dense autogrow").classes(STYLE_INPUT)

    def save() -> None:
        try:
            save_company_settings({key: field.value or "" for key, field in inputs.items()})
        except PortalError as exc:
            notify_error(exc)
            return
        ui.notify("Settings saved", color="green")

    with ui.row().classes("w-full justify-end"):
        gp_btn_primary("Save settings", icon="save", on_click=save)
