import io

import pandas as pd

from gstportal.services.client_import import import_clients, load_client_dataframe
from gstportal.services.clients import create_client, list_clients


def test_import_csv_skips_blank_and_duplicate_names(store) -> None:
    create_client({"name": "Existing Co"})
    content = (
        "Client Name,E-Mail,Phone,ABN\n"
        "Acme,acme@example.com,0400 000 000,12 345 678 901\n"
        ",blank@example.com,,\n"
        "Acme,again@example.com,,\n"
        "Existing Co,,,\n"
        "Globex,globex@example.com,,\n"
    ).encode("utf-8")

    count, err = import_clients(content, "clients.csv")

    assert err == ""
    assert count == 2
    clients = {c.name: c for c in list_clients()}
    assert set(clients) == {"Acme", "Existing Co", "Globex"}
    assert clients["Acme"].email == "acme@example.com"
    assert clients["Acme"].abn == "12 345 678 901"


def test_import_excel(store, tmp_path) -> None:
    buffer = io.BytesIO()
    pd.DataFrame([{"Name": "Initech", "Address": "1 Office Park"}]).to_excel(buffer, index=False)

    count, err = import_clients(buffer.getvalue(), "clients.xlsx")

    assert (count, err) == (1, "")
    assert list_clients()[0].address == "1 Office Park"


def test_import_without_name_column(store) -> None:
    assert import_clients(b"Email\na@example.com\n", "clients.csv") == (0, "No name column found")


def test_unreadable_file() -> None:
    frame, err = load_client_dataframe(b"", "clients.csv")
    assert frame is None
    assert err == "Format error"
