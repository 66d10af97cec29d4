import pytest

from gstportal.document_numbering import (
    ESTIMATE_PREFIX,
    INVOICE_PREFIX,
    build_pdf_filename,
    increment_document_number,
    next_document_number,
    parse_document_number,
)


def test_next_number_after_highest_existing() -> None:
    assert next_document_number(["INV-0001", "INV-0003", "INV-0002"], INVOICE_PREFIX) == "INV-0004"


def test_first_number_when_none_exist() -> None:
    assert next_document_number([], INVOICE_PREFIX) == "INV-0001"
    assert next_document_number(None, ESTIMATE_PREFIX) == "EST-0001"


def test_malformed_numbers_count_as_zero() -> None:
    assert next_document_number(["INV-abc"], INVOICE_PREFIX) == "INV-0001"
    assert next_document_number(["INV-abc", None, "", "INV-0005"], INVOICE_PREFIX) == "INV-0006"


def test_other_prefixes_are_ignored() -> None:
    assert next_document_number(["EST-0042", "INV-0002"], INVOICE_PREFIX) == "INV-0003"


def test_padding_grows_past_four_digits() -> None:
    assert next_document_number(["INV-9999"], INVOICE_PREFIX) == "INV-10000"


@pytest.mark.parametrize(
    ("number", "expected"),
    [("INV-0007", 7), ("INV-12345", 12345), ("INV-abc", 0), (None, 0), ("garbage", 0)],
)
def test_parse_document_number(number, expected) -> None:
    assert parse_document_number(number, INVOICE_PREFIX) == expected


def test_increment_from_latest_only() -> None:
    assert increment_document_number(INVOICE_PREFIX, "INV-0009") == "INV-0010"
    assert increment_document_number(ESTIMATE_PREFIX, None) == "EST-0001"
    assert increment_document_number(INVOICE_PREFIX, "custom-7") == "custom-7"


def test_pdf_filename() -> None:
    assert build_pdf_filename("Invoice", "INV-0001") == "Invoice-INV-0001.pdf"
    assert build_pdf_filename("Estimate", "EST 0002/a") == "Estimate-EST_0002-a.pdf"
    assert build_pdf_filename("Invoice", "") == "Invoice-document.pdf"
