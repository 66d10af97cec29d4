from __future__ import annotations

from contextlib import contextmanager
from typing import Callable

from nicegui import ui

from gstportal.gst_calculations import format_currency
from gstportal.statuses import format_status
from gstportal.styles import (
    C_NUMERIC,
    STYLE_BADGE_BLUE,
    STYLE_BADGE_GRAY,
    STYLE_BADGE_GREEN,
    STYLE_BADGE_RED,
    STYLE_BADGE_YELLOW,
    STYLE_BTN_DANGER,
    STYLE_BTN_PRIMARY,
    STYLE_BTN_SECONDARY,
    STYLE_CARD,
    STYLE_CARD_HOVER,
    STYLE_SECTION_TITLE,
    STYLE_TEXT_MUTED,
)

_BADGES = {
    "draft": STYLE_BADGE_GRAY,
    "sent": STYLE_BADGE_BLUE,
    "paid": STYLE_BADGE_GREEN,
    "accepted": STYLE_BADGE_GREEN,
    "overdue": STYLE_BADGE_RED,
    "rejected": STYLE_BADGE_RED,
    "expired": STYLE_BADGE_YELLOW,
}


def status_badge(status) -> ui.label:
    raw = getattr(status, "value", status) or ""
    return ui.label(format_status(raw)).classes(_BADGES.get(raw, STYLE_BADGE_GRAY))


def gp_btn_primary(text: str, on_click: Callable | None = None, icon: str | None = None) -> ui.button:
    return ui.button(text, icon=icon, on_click=on_click).props("flat no-caps").classes(STYLE_BTN_PRIMARY)


def gp_btn_secondary(text: str, on_click: Callable | None = None, icon: str | None = None) -> ui.button:
    return ui.button(text, icon=icon, on_click=on_click).props("flat no-caps").classes(STYLE_BTN_SECONDARY)


def gp_btn_danger(text: str, on_click: Callable | None = None, icon: str | None = None) -> ui.button:
    return ui.button(text, icon=icon, on_click=on_click).props("flat no-caps").classes(STYLE_BTN_DANGER)


@contextmanager
def gp_card(pad: str = "p-5", classes: str = ""):
    with ui.card().classes(f"{STYLE_CARD} {pad} w-full {classes}".strip()) as card:
        yield card


def kpi_card(label: str, amount: float | None, icon: str, caption: str = "", value: str | None = None) -> None:
    with ui.card().classes(f"{STYLE_CARD} {STYLE_CARD_HOVER} p-5 min-h-[120px] flex flex-col justify-between"):
        with ui.row().classes("items-center gap-2"):
            ui.icon(icon).classes("text-base text-slate-500")
            ui.label(label).classes("text-xs font-bold text-slate-400 uppercase tracking-wider")
        shown = value if value is not None else format_currency(amount)
        ui.label(shown).classes(f"text-2xl font-bold text-slate-800 {C_NUMERIC}")
        if caption:
            ui.label(caption).classes("text-xs text-slate-500")


def confirm_dialog(title: str, message: str, on_confirm: Callable[[], None]) -> ui.dialog:
    with ui.dialog() as dialog:
        with gp_card(classes="max-w-[92vw]"):
            ui.label(title).classes(STYLE_SECTION_TITLE)
            ui.label(message).classes(STYLE_TEXT_MUTED)
            with ui.row().classes("justify-end gap-2 mt-3 w-full"):
                gp_btn_secondary("Cancel", on_click=dialog.close)

                def _confirm() -> None:
                    dialog.close()
                    on_confirm()

                gp_btn_danger("Delete", on_click=_confirm)
    return dialog
