import pytest

from gstportal.errors import DocumentValidationError, NotFoundError
from gstportal.services.clients import (
    create_client,
    delete_client,
    get_client,
    list_clients,
    update_client,
)


def test_create_and_list_clients_sorted_by_name(store) -> None:
    create_client({"name": "  Zeta Co ", "email": "z@example.com"})
    create_client({"name": "Acme", "abn": "12 345 678 901"})

    clients = list_clients()
    assert [c.name for c in clients] == ["Acme", "Zeta Co"]
    assert clients[1].email == "z@example.com"


def test_name_is_required(store) -> None:
    with pytest.raises(DocumentValidationError, match="Client name is required"):
        create_client({"name": "   ", "email": "nobody@example.com"})


def test_update_client(store) -> None:
    client = create_client({"name": "Acme"})
    updated = update_client(client.id, {"name": "Acme Pty Ltd", "phone": "0400 000 000"})
    assert updated.name == "Acme Pty Ltd"
    assert get_client(client.id).phone == "0400 000 000"


def test_missing_client(store) -> None:
    with pytest.raises(NotFoundError):
        get_client(42)
    with pytest.raises(NotFoundError):
        update_client(42, {"name": "Ghost"})
    with pytest.raises(NotFoundError):
        delete_client(42)


def test_delete_client(store) -> None:
    client = create_client({"name": "Acme"})
    delete_client(client.id)
    assert list_clients() == []


def test_init_db_is_idempotent(store) -> None:
    from gstportal.data import get_engine, init_db

    create_client({"name": "Acme"})
    init_db()
    assert get_engine() is store
    assert [c.name for c in list_clients()] == ["Acme"]
