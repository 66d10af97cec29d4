from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from gstportal.gst_calculations import line_total


def _new_line_id() -> str:
    return str(uuid.uuid4())


def _blank_to_zero(value: Any) -> Any:
    if value is None or (isinstance(value, str) and not value.strip()):
        return 0.0
    return value


class LineItemInput(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str = Field(default_factory=_new_line_id)
    description: str = ""
    quantity: float = Field(default=0.0, ge=0)
    unit_price: float = 0.0
    gst: bool = False

    @field_validator("quantity", "unit_price", mode="before")
    @classmethod
    def _missing_amounts_are_zero(cls, value: Any) -> Any:
        return _blank_to_zero(value)

    @field_validator("id", mode="before")
    @classmethod
    def _ensure_id(cls, value: Any) -> str:
        return str(value) if value not in (None, "") else _new_line_id()

    @property
    def total(self) -> float:
        return line_total(self.quantity, self.unit_price, self.gst)

    def to_record(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "description": self.description,
            "quantity": self.quantity,
            "unit_price": self.unit_price,
            "gst": self.gst,
            "total": self.total,
        }


class DocumentInput(BaseModel):
    """Form payload for an invoice or estimate.

    ``due_date`` carries the expiry date for estimates. Required fields are
    checked by the document service so the user gets one combined message.
    """

    model_config = ConfigDict(extra="ignore")

    number: str = ""
    date: str = ""
    client_name: str = ""
    client_address: str = ""
    due_date: str = ""
    payment_terms: Optional[str] = None
    line_items: List[LineItemInput] = Field(default_factory=list)
    status: Optional[str] = None

    @field_validator("number", "date", "client_name", "client_address", "due_date", mode="before")
    @classmethod
    def _strip(cls, value: Any) -> str:
        return str(value or "").strip()

    @field_validator("date", "due_date")
    @classmethod
    def _iso_date(cls, value: str) -> str:
        # Blank is left to the required-field check and the payment-terms path.
        if not value:
            return value
        try:
            return datetime.fromisoformat(value).date().isoformat()
        except ValueError:
            raise ValueError(f"expected a YYYY-MM-DD date, got '{value}'") from None


class ClientInput(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str = ""
    address: str = ""
    email: str = ""
    phone: str = ""
    abn: str = ""
    notes: str = ""

    @field_validator("*", mode="before")
    @classmethod
    def _strip(cls, value: Any) -> str:
        return str(value or "").strip()


class CompanySettingsInput(BaseModel):
    model_config = ConfigDict(extra="ignore")

    company_name: Optional[str] = None
    abn: Optional[str] = None
    address: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    bank_bsb: Optional[str] = None
    bank_account: Optional[str] = None
    bank_account_name: Optional[str] = None
    notes: Optional[str] = None
    invoice_notes: Optional[str] = None
    estimate_notes: Optional[str] = None
