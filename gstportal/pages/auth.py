from __future__ import annotations

from contextlib import contextmanager

from ._shared import *

ERROR_TEXT = "text-sm text-rose-600"
TITLE_TEXT = "text-2xl font-semibold text-slate-900 text-center"
SUBTITLE_TEXT = "text-sm text-slate-500 text-center"
PRIMARY_BUTTON = "w-full bg-slate-900 text-white rounded-lg hover:bg-slate-800"
CARD_CLASSES = "w-full max-w-[400px] bg-white rounded-xl shadow-lg border border-slate-200 p-6"
BG_CLASSES = "min-h-screen w-full bg-slate-50 flex items-center justify-center px-4"


@contextmanager
def auth_layout(title: str, subtitle: str):
    with ui.element("div").classes(BG_CLASSES):
        with ui.column().classes("w-full items-center gap-6"):
            ui.label("GST Portal").classes("text-lg font-semibold text-slate-900")
            with ui.column().classes(f"{CARD_CLASSES} gap-4"):
                ui.label(title).classes(TITLE_TEXT)
                if subtitle:
                    ui.label(subtitle).classes(SUBTITLE_TEXT)
                with ui.column().classes("w-full gap-4") as card:
                    yield card


def _error_label() -> ui.label:
    label = ui.label("").classes(ERROR_TEXT)
    label.set_visibility(False)
    return label


def _set_error(label: ui.label, message: str) -> None:
    label.text = message
    label.set_visibility(bool(message))


@ui.page("/login")
def login_page():
    if current_auth().is_authenticated:
        ui.navigate.to("/")
        return

    with auth_layout("Welcome back", "Sign in to manage invoices and BAS"):
        username_input = ui.input("Username").props("outlined dense").classes(STYLE_INPUT)
        password_input = ui.input("Password").props("outlined dense type=password").classes(STYLE_INPUT)
        status_error = _error_label()

        def handle_login() -> None:
            _set_error(status_error, "")
            username = (username_input.value or "").strip()
            password = password_input.value or ""
            if not username or not password:
                _set_error(status_error, "Username and password are required")
                return
            auth = current_auth()
            try:
                identity = auth.login(username, password)
            except AuthenticationError as exc:
                _set_error(status_error, str(exc))
                return
            app.storage.user[AUTH_USER_KEY] = identity.username
            app.storage.user["page"] = "dashboard"
            ui.navigate.to("/")

        password_input.on("keydown.enter", lambda _: handle_login())
        ui.button("Log in", on_click=handle_login).classes(PRIMARY_BUTTON)
