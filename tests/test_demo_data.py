from datetime import date

import pytest

from gstportal.errors import DocumentValidationError
from gstportal.services import demo_data
from gstportal.services.demo_data import seed_demo_data
from gstportal.services.documents import DocumentKind, add_document, list_documents


def test_seed_demo_data(store) -> None:
    numbers = seed_demo_data(today=date(2024, 5, 10))
    assert numbers == {"invoices": ["INV-0001", "INV-0002"], "estimates": ["EST-0001"]}

    invoices = {inv.number: inv for inv in list_documents(DocumentKind.INVOICE)}
    assert invoices["INV-0001"].total == pytest.approx(5 * 120 * 1.1 + 2 * 80)
    assert invoices["INV-0001"].due_date == "2024-05-17"
    assert list_documents(DocumentKind.ESTIMATE)[0].expiry_date == "2024-06-09"


def test_seeding_twice_continues_numbering(store) -> None:
    seed_demo_data(today=date(2024, 5, 10))
    numbers = seed_demo_data(today=date(2024, 5, 11))
    assert numbers == {"invoices": ["INV-0003", "INV-0004"], "estimates": ["EST-0002"]}


def test_failed_seed_writes_nothing(store, monkeypatch) -> None:
    def add_invoices_only(session, kind, payload):
        if kind is DocumentKind.ESTIMATE:
            raise DocumentValidationError("estimate rejected")
        return add_document(session, kind, payload)

    monkeypatch.setattr(demo_data, "add_document", add_invoices_only)
    with pytest.raises(DocumentValidationError):
        seed_demo_data(today=date(2024, 5, 10))

    assert list_documents(DocumentKind.INVOICE) == []
    assert list_documents(DocumentKind.ESTIMATE) == []
