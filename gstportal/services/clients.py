from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Mapping

from pydantic import ValidationError
from sqlmodel import select

from gstportal.data import Client, get_session, store_errors
from gstportal.errors import DocumentValidationError, NotFoundError
from gstportal.models import ClientInput

logger = logging.getLogger(__name__)


def _validated(payload: ClientInput | Mapping[str, Any]) -> ClientInput:
    try:
        data = payload if isinstance(payload, ClientInput) else ClientInput.model_validate(dict(payload))
    except ValidationError as exc:
        raise DocumentValidationError("Invalid client details") from exc
    if not data.name:
        raise DocumentValidationError("Client name is required")
    return data


def list_clients() -> list[Client]:
    with store_errors("load clients"):
        with get_session() as session:
            return list(session.exec(select(Client).order_by(Client.name)).all())


def get_client(client_id: int) -> Client:
    with store_errors("load client"):
        with get_session() as session:
            client = session.get(Client, int(client_id))
    if client is None:
        raise NotFoundError(f"Client {client_id} not found")
    return client


def create_client(payload: ClientInput | Mapping[str, Any]) -> Client:
    data = _validated(payload)
    client = Client(**data.model_dump())
    with store_errors("save client"):
        with get_session() as session:
            session.add(client)
            session.commit()
            session.refresh(client)
    logger.info("Created client %s (id=%s)", client.name, client.id)
    return client


def update_client(client_id: int, payload: ClientInput | Mapping[str, Any]) -> Client:
    # Documents keep their own name/address snapshot and are not touched here.
    data = _validated(payload)
    with store_errors("save client"):
        with get_session() as session:
            client = session.get(Client, int(client_id))
            if client is None:
                raise NotFoundError(f"Client {client_id} not found")
            for key, value in data.model_dump().items():
                setattr(client, key, value)
            client.updated_at = datetime.now().isoformat(timespec="seconds")
            session.add(client)
            session.commit()
            session.refresh(client)
    logger.info("Updated client %s (id=%s)", client.name, client.id)
    return client


def delete_client(client_id: int) -> None:
    with store_errors("delete client"):
        with get_session() as session:
            client = session.get(Client, int(client_id))
            if client is None:
                raise NotFoundError(f"Client {client_id} not found")
            session.delete(client)
            session.commit()
    logger.info("Deleted client id=%s", client_id)


def find_client_by_name(session, name: str) -> Client | None:
    return session.exec(select(Client).where(Client.name == name)).first()
