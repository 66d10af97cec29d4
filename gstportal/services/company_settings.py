from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Mapping

from sqlmodel import select

from gstportal.data import CompanySettings, get_session, store_errors
from gstportal.models import CompanySettingsInput

logger = logging.getLogger(__name__)


ALLOWED_SETTINGS_FIELDS = {
    "company_name",
    "abn",
    "address",
    "phone",
    "email",
    "bank_bsb",
    "bank_account",
    "bank_account_name",
    "notes",
    "invoice_notes",
    "estimate_notes",
}
_FREE_TEXT_FIELDS = {"notes", "invoice_notes", "estimate_notes"}


def _load_singleton(session) -> CompanySettings | None:
    return session.exec(select(CompanySettings).order_by(CompanySettings.id)).first()


def get_company_settings() -> CompanySettings | None:
    with store_errors("load company settings"):
        with get_session() as session:
            return _load_singleton(session)


def save_company_settings(patch: CompanySettingsInput | Mapping[str, Any]) -> CompanySettings:
    """Insert the settings row on first save, update it afterwards."""
    if isinstance(patch, CompanySettingsInput):
        values = patch.model_dump(exclude_none=True)
    else:
        values = CompanySettingsInput.model_validate(dict(patch)).model_dump(exclude_none=True)

    with store_errors("save company settings"):
        with get_session() as session:
            settings = _load_singleton(session)
            if settings is None:
                settings = CompanySettings()
            for key, value in values.items():
                if key not in ALLOWED_SETTINGS_FIELDS:
                    continue
                # Free-text notes keep their line breaks and indentation.
                setattr(settings, key, value if key in _FREE_TEXT_FIELDS else value.strip())
            settings.updated_at = datetime.now().isoformat(timespec="seconds")
            session.add(settings)
            session.commit()
            session.refresh(settings)
    logger.info("Company settings saved (id=%s)", settings.id)
    return settings


def _setting(settings: Any, name: str) -> str:
    if isinstance(settings, Mapping):
        value = settings.get(name)
    else:
        value = getattr(settings, name, None)
    return str(value or "")


def notes_for(settings: CompanySettings | Mapping[str, Any] | None, kind_value: str) -> str:
    """Footer notes for the given document type, falling back to the general notes."""
    if settings is None:
        return ""
    specific = _setting(settings, "invoice_notes" if kind_value == "invoice" else "estimate_notes")
    return (specific.strip() or _setting(settings, "notes")).strip()
