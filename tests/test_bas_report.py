from datetime import date, datetime

import pytest

from gstportal.bas_report import (
    build_bas_report,
    list_quarter_labels,
    parse_quarter,
    quarter_label_for,
    select_reportable,
    to_date,
)


@pytest.fixture
def documents() -> list[dict]:
    return [
        {"invoice_number": "INV-0002", "date": "2024-04-01", "status": "sent", "subtotal": 50.0, "gst": 5.0},
        {"invoice_number": "INV-0001", "date": "2024-01-15", "status": "sent", "subtotal": 100.0, "gst": 10.0},
    ]


def test_first_quarter_only_counts_january_invoice(documents) -> None:
    start, end = parse_quarter("Q1-2024")
    report = build_bas_report(documents, start, end)
    assert report.total_sales == 100.0
    assert report.gst_on_sales == 10.0
    assert report.gst_payable == 10.0
    assert report.invoice_count == 1


def test_second_quarter_only_counts_april_invoice(documents) -> None:
    report = build_bas_report(documents, *parse_quarter("Q2-2024"))
    assert [d["invoice_number"] for d in report.invoices] == ["INV-0002"]
    assert report.total_sales == 50.0
    assert report.gst_on_sales == 5.0


def test_drafts_are_excluded(documents) -> None:
    documents.append({"date": "2024-02-01", "status": "draft", "subtotal": 999.0, "gst": 99.9})
    report = build_bas_report(documents, date(2024, 1, 1), date(2024, 3, 31))
    assert report.total_sales == 100.0
    assert report.invoice_count == 1


def test_paid_counts_but_overdue_does_not() -> None:
    docs = [
        {"date": "2024-05-01", "status": "paid", "subtotal": 10.0, "gst": 1.0},
        {"date": "2024-05-02", "status": "overdue", "subtotal": 20.0, "gst": 2.0},
    ]
    report = build_bas_report(docs, "2024-04-01", "2024-06-30")
    assert report.invoice_count == 1
    assert report.gst_on_sales == 1.0


def test_range_is_inclusive_and_sorted_ascending() -> None:
    docs = [
        {"date": "2024-03-31", "status": "sent", "subtotal": 3.0, "gst": 0.3},
        {"date": "2024-01-01", "status": "paid", "subtotal": 1.0, "gst": 0.1},
        {"date": "2024-02-10", "status": "sent", "subtotal": 2.0, "gst": 0.0},
    ]
    selected = select_reportable(docs, date(2024, 1, 1), date(2024, 3, 31))
    assert [d["date"] for d in selected] == ["2024-01-01", "2024-02-10", "2024-03-31"]


def test_inverted_or_empty_range_gives_empty_report(documents) -> None:
    report = build_bas_report(documents, date(2024, 3, 31), date(2024, 1, 1))
    assert report.invoice_count == 0
    assert report.total_sales == 0.0
    assert build_bas_report(documents, None, "2024-03-31").invoices == []


def test_as_dict_keys() -> None:
    report = build_bas_report([], date(2024, 1, 1), date(2024, 3, 31))
    assert report.as_dict() == {
        "start": "2024-01-01",
        "end": "2024-03-31",
        "totalSales": 0.0,
        "gstOnSales": 0.0,
        "gstPayable": 0.0,
        "invoiceCount": 0,
    }


@pytest.mark.parametrize(
    ("label", "expected"),
    [
        ("Q1-2024", (date(2024, 1, 1), date(2024, 3, 31))),
        ("Q2-2024", (date(2024, 4, 1), date(2024, 6, 30))),
        ("Q3-2023", (date(2023, 7, 1), date(2023, 9, 30))),
        ("q4-2024", (date(2024, 10, 1), date(2024, 12, 31))),
    ],
)
def test_parse_quarter(label, expected) -> None:
    assert parse_quarter(label) == expected


@pytest.mark.parametrize("label", ["Q5-2024", "Q0-2024", "2024-Q1", ""])
def test_parse_quarter_rejects_bad_labels(label) -> None:
    with pytest.raises(ValueError):
        parse_quarter(label)


def test_quarter_labels() -> None:
    assert quarter_label_for(date(2024, 8, 15)) == "Q3-2024"
    labels = list_quarter_labels(date(2024, 8, 15), years_back=1)
    assert labels[:4] == ["Q4-2024", "Q3-2024", "Q2-2024", "Q1-2024"]
    assert labels[-1] == "Q1-2023"
    assert len(labels) == 8


def test_to_date() -> None:
    assert to_date("2024-02-29") == date(2024, 2, 29)
    assert to_date(datetime(2024, 1, 2, 10, 30)) == date(2024, 1, 2)
    assert to_date("not a date") is None
    assert to_date("") is None
