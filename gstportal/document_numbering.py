from __future__ import annotations

import os
import re
from typing import Iterable

INVOICE_PREFIX = "INV"
ESTIMATE_PREFIX = "EST"

_MIN_DIGITS = 4
_LEADING_NUMBER = re.compile(r"^[A-Z]+-(\d+)")


def _number_pattern(prefix: str) -> re.Pattern[str]:
    return re.compile(rf"{re.escape(prefix)}-(\d+)")


def _format_number(prefix: str, value: int) -> str:
    return f"{prefix}-{str(value).zfill(_MIN_DIGITS)}"


def parse_document_number(number: str | None, prefix: str) -> int:
    match = _number_pattern(prefix).search(number or "")
    return int(match.group(1)) if match else 0


def next_document_number(existing: Iterable[str | None] | None, prefix: str) -> str:
    """Next sequential number after the highest ``PREFIX-<n>`` in ``existing``.

    Entries that do not carry the pattern count as 0. Two callers reading the
    same ``existing`` set get the same result; uniqueness is not enforced here.
    """
    highest = max((parse_document_number(number, prefix) for number in existing or []), default=0)
    return _format_number(prefix, max(highest, 0) + 1)


def increment_document_number(prefix: str, last: str | None) -> str:
    """Number following ``last`` alone, for call sites that only know the latest record."""
    base = last or _format_number(prefix, 0)
    return _LEADING_NUMBER.sub(lambda m: _format_number(prefix, int(m.group(1)) + 1), base, count=1)


def _sanitize_filename_part(value: str) -> str:
    cleaned = (value or "").strip().replace(os.sep, "-").replace("/", "-")
    cleaned = re.sub(r"[^\w.\-]+", "_", cleaned, flags=re.UNICODE)
    return cleaned.strip("._") or "document"


def build_pdf_filename(kind_label: str, number: str | None) -> str:
    return f"{kind_label}-{_sanitize_filename_part(number or '')}.pdf"
