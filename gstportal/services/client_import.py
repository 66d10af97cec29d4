from __future__ import annotations

import io
import logging

import pandas as pd

from gstportal.data import Client, get_session, store_errors
from gstportal.services.clients import find_client_by_name

logger = logging.getLogger(__name__)

_EXCEL_SIGNATURES = (b"PK\x03\x04", b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1")

# Header aliases accepted per client field, matched case-insensitively.
COLUMN_ALIASES = {
    "name": ("name", "client", "client name", "company", "business name"),
    "address": ("address", "street address", "billing address"),
    "email": ("email", "e-mail", "email address"),
    "phone": ("phone", "phone number", "mobile"),
    "abn": ("abn",),
    "notes": ("notes", "comments"),
}


def load_client_dataframe(content: bytes, filename: str = "") -> tuple[pd.DataFrame | None, str]:
    name = (filename or "").lower()
    if name.endswith((".xls", ".xlsx")) or content[:8].startswith(_EXCEL_SIGNATURES):
        reader = pd.read_excel
    else:
        reader = pd.read_csv
    try:
        return reader(io.BytesIO(content), dtype=str).fillna(""), ""
    except ImportError:
        return None, "Excel import requires openpyxl."
    except (ValueError, pd.errors.ParserError, pd.errors.EmptyDataError) as exc:
        logger.warning("Client import could not be parsed: %s", exc)
        return None, "Format error"


def _column_map(frame: pd.DataFrame) -> dict[str, str]:
    lookup = {str(col).strip().lower(): col for col in frame.columns}
    mapping: dict[str, str] = {}
    for field_name, aliases in COLUMN_ALIASES.items():
        for alias in aliases:
            if alias in lookup:
                mapping[field_name] = lookup[alias]
                break
    return mapping


def import_clients(content: bytes, filename: str = "") -> tuple[int, str]:
    """Create clients from a CSV/Excel sheet; rows without a name or already known are skipped."""
    frame, err = load_client_dataframe(content, filename)
    if err:
        return 0, err
    columns = _column_map(frame)
    if "name" not in columns:
        return 0, "No name column found"

    count = 0
    with store_errors("import clients"):
        with get_session() as session:
            seen: set[str] = set()
            for _, row in frame.iterrows():
                values = {key: str(row[col]).strip() for key, col in columns.items()}
                name = values.get("name", "")
                if not name or name in seen or find_client_by_name(session, name):
                    continue
                seen.add(name)
                session.add(Client(**values))
                count += 1
            session.commit()
    logger.info("Imported %d clients from %s", count, filename or "upload")
    return count, ""
