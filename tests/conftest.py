from __future__ import annotations

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import create_engine

from eview_gateway import main
from eview_gateway.db import init_db
from eview_gateway.history import SqlHistoryStore


class FakeSink:
    def __init__(self) -> None:
        self.rows: list[tuple[str, str, str, str, str]] = []

    def append(self, device_name, phone_number, command, raw_message, status):
        self.rows.append((device_name, phone_number, command, raw_message, status))
        return None


@pytest.fixture
def sink() -> FakeSink:
    return FakeSink()


def _memory_engine():
    return create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )


@pytest.fixture
def engine():
    eng = _memory_engine()
    init_db(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def store(engine) -> SqlHistoryStore:
    return SqlHistoryStore(engine)


@pytest.fixture
def broken_store() -> SqlHistoryStore:
    # no tables created, so every write fails
    return SqlHistoryStore(_memory_engine())


@pytest.fixture
def client(store, monkeypatch) -> TestClient:
    monkeypatch.setattr(main, "store", store)
    return TestClient(main.app)
