from datetime import date

from gstportal.payment_terms import PaymentTerms, calculate_due_date


def test_net_terms_add_days() -> None:
    assert calculate_due_date("2024-01-15", PaymentTerms.NET_15) == "2024-01-30"
    assert calculate_due_date(date(2024, 1, 15), "net_30") == "2024-02-14"


def test_custom_keeps_entered_date() -> None:
    assert calculate_due_date("2024-01-15", "custom", "2024-03-01") == "2024-03-01"
    assert calculate_due_date("2024-01-15", "something-else", "2024-03-01") == "2024-03-01"


def test_missing_or_bad_date() -> None:
    assert calculate_due_date("", PaymentTerms.NET_30) == ""
    assert calculate_due_date("not-a-date", PaymentTerms.NET_30, "2024-02-01") == "2024-02-01"
