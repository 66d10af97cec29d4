from __future__ import annotations

import logging
from datetime import date, datetime

from nicegui import app, ui

from gstportal.config import AppConfig
from gstportal.errors import AuthenticationError, NotFoundError, PortalError
from gstportal.gst_calculations import format_currency
from gstportal.services.auth import AuthContext, EnvCredentialVerifier
from gstportal.services.documents import DocumentKind
from gstportal.styles import (
    C_NUMERIC,
    STYLE_CONTAINER,
    STYLE_INPUT,
    STYLE_PAGE_TITLE,
    STYLE_SECTION_TITLE,
    STYLE_TABLE_HEADER,
    STYLE_TABLE_ROW,
    STYLE_TEXT_HINT,
    STYLE_TEXT_MUTED,
)
from gstportal.ui_components import (
    confirm_dialog,
    gp_btn_danger,
    gp_btn_primary,
    gp_btn_secondary,
    gp_card,
    kpi_card,
    status_badge,
)

logger = logging.getLogger(__name__)

AUTH_USER_KEY = "auth_user"


def set_page(name: str, **state) -> None:
    """Switch the single-page shell to ``name`` and keep extra page state."""
    for key, value in state.items():
        app.storage.user[key] = value
    app.storage.user["page"] = name
    ui.navigate.to("/")


def current_auth() -> AuthContext:
    return AuthContext.restore(
        EnvCredentialVerifier.from_config(AppConfig.from_env()),
        app.storage.user.get(AUTH_USER_KEY),
    )


def require_auth() -> bool:
    auth = current_auth()
    if auth.is_authenticated:
        return True
    app.storage.user.pop(AUTH_USER_KEY, None)
    ui.navigate.to("/login")
    return False


def clear_auth_session() -> None:
    current_auth().logout()
    app.storage.user.pop(AUTH_USER_KEY, None)


def notify_error(exc: Exception) -> None:
    if not isinstance(exc, PortalError):
        logger.exception("Unexpected UI error")
    message = getattr(exc, "user_message", None) or str(exc) or "Something went wrong"
    ui.notify(message, color="red")


def today_iso() -> str:
    return date.today().isoformat()


__all__ = [
    "AUTH_USER_KEY",
    "AuthenticationError",
    "C_NUMERIC",
    "DocumentKind",
    "NotFoundError",
    "PortalError",
    "STYLE_CONTAINER",
    "STYLE_INPUT",
    "STYLE_PAGE_TITLE",
    "STYLE_SECTION_TITLE",
    "STYLE_TABLE_HEADER",
    "STYLE_TABLE_ROW",
    "STYLE_TEXT_HINT",
    "STYLE_TEXT_MUTED",
    "app",
    "clear_auth_session",
    "confirm_dialog",
    "current_auth",
    "date",
    "datetime",
    "format_currency",
    "gp_btn_danger",
    "gp_btn_primary",
    "gp_btn_secondary",
    "gp_card",
    "kpi_card",
    "logger",
    "notify_error",
    "require_auth",
    "set_page",
    "status_badge",
    "today_iso",
    "ui",
]
