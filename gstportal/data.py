from __future__ import annotations

import logging
import os
from contextlib import contextmanager
from datetime import datetime
from typing import Any, Iterator, Optional

from sqlalchemy import JSON, Column, Text
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Field, Session, SQLModel, create_engine

from gstportal.errors import StoreError
from gstportal.payment_terms import PaymentTerms
from gstportal.statuses import EstimateStatus, InvoiceStatus

logger = logging.getLogger(__name__)


def _now_iso() -> str:
    return datetime.now().isoformat(timespec="seconds")


# --- DB MODELS ---
class CompanySettings(SQLModel, table=True):
    __tablename__ = "company_settings"

    id: Optional[int] = Field(default=None, primary_key=True)
    company_name: str = ""
    abn: str = ""
    address: str = ""
    phone: str = ""
    email: str = ""
    bank_bsb: str = ""
    bank_account: str = ""
    bank_account_name: str = ""
    notes: str = Field(default="", sa_column=Column(Text, default=""))
    invoice_notes: str = Field(default="", sa_column=Column(Text, default=""))
    estimate_notes: str = Field(default="", sa_column=Column(Text, default=""))
    created_at: str = Field(default_factory=_now_iso)
    updated_at: str = Field(default_factory=_now_iso)


class Client(SQLModel, table=True):
    __tablename__ = "clients"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(index=True)
    address: str = ""
    email: str = ""
    phone: str = ""
    abn: str = ""
    notes: str = ""
    created_at: str = Field(default_factory=_now_iso)
    updated_at: str = Field(default_factory=_now_iso)


class Invoice(SQLModel, table=True):
    __tablename__ = "invoices"

    id: Optional[int] = Field(default=None, primary_key=True)
    invoice_number: str = Field(index=True)
    date: str = Field(index=True)
    client_name: str
    client_address: str = ""
    due_date: str = ""
    payment_terms: PaymentTerms = PaymentTerms.CUSTOM
    line_items: list[dict[str, Any]] = Field(default_factory=list, sa_column=Column(JSON))
    subtotal: float = 0.0
    gst: float = 0.0
    total: float = 0.0
    status: InvoiceStatus = InvoiceStatus.DRAFT
    created_at: str = Field(default_factory=_now_iso)
    updated_at: str = Field(default_factory=_now_iso)

    @property
    def number(self) -> str:
        return self.invoice_number

    @property
    def due_or_expiry_date(self) -> str:
        return self.due_date


class Estimate(SQLModel, table=True):
    __tablename__ = "estimates"

    id: Optional[int] = Field(default=None, primary_key=True)
    estimate_number: str = Field(index=True)
    date: str = Field(index=True)
    client_name: str
    client_address: str = ""
    expiry_date: str = ""
    line_items: list[dict[str, Any]] = Field(default_factory=list, sa_column=Column(JSON))
    subtotal: float = 0.0
    gst: float = 0.0
    total: float = 0.0
    status: EstimateStatus = EstimateStatus.DRAFT
    created_at: str = Field(default_factory=_now_iso)
    updated_at: str = Field(default_factory=_now_iso)

    @property
    def number(self) -> str:
        return self.estimate_number

    @property
    def due_or_expiry_date(self) -> str:
        return self.expiry_date


# --- ENGINE / SESSION ---
_engine: Engine | None = None


def _ensure_sqlite_dir(url: str) -> None:
    parsed = make_url(url)
    if parsed.get_backend_name() != "sqlite":
        return
    database = parsed.database or ""
    if not database or database == ":memory:":
        return
    directory = os.path.dirname(database)
    if directory:
        os.makedirs(directory, exist_ok=True)


def configure_engine(url: str, **kwargs: Any) -> Engine:
    """Point the store at ``url`` and create missing tables."""
    global _engine
    _ensure_sqlite_dir(url)
    if make_url(url).get_backend_name() == "sqlite":
        kwargs.setdefault("connect_args", {"check_same_thread": False})
    if _engine is not None:
        _engine.dispose()
    _engine = create_engine(url, **kwargs)
    init_db()
    logger.info("Database ready at %s", make_url(url).render_as_string(hide_password=True))
    return _engine


def get_engine() -> Engine:
    if _engine is None:
        from gstportal.config import AppConfig

        configure_engine(AppConfig.from_env().database_url)
    return _engine


def init_db() -> None:
    SQLModel.metadata.create_all(get_engine())


@contextmanager
def get_session() -> Iterator[Session]:
    with Session(get_engine(), expire_on_commit=False) as session:
        yield session


@contextmanager
def store_errors(action: str) -> Iterator[None]:
    """Log and re-raise persistence failures as :class:`StoreError`."""
    try:
        yield
    except SQLAlchemyError as exc:
        logger.exception("Store failure while trying to %s", action)
        raise StoreError(f"Failed to {action}") from exc
