from __future__ import annotations

from pathlib import Path

import pytest

from gstportal import data


@pytest.fixture
def store(tmp_path: Path, monkeypatch):
    """Point the document store at a fresh SQLite file for one test."""
    monkeypatch.chdir(tmp_path)
    engine = data.configure_engine(f"sqlite:///{tmp_path}/test.db")
    yield engine
    engine.dispose()


@pytest.fixture
def line_items() -> list[dict]:
    return [
        {"description": "Design work", "quantity": 2, "unit_price": 100, "gst": True},
        {"description": "Hosting", "quantity": 1, "unit_price": 50, "gst": False},
    ]
