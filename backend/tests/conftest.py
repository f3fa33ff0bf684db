from datetime import date

import pytest
from fastapi.testclient import TestClient

from palletwms.main import app
from palletwms.models import ReceiptLine
from palletwms.services.store import WarehouseStore


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch, tmp_path):
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    monkeypatch.setenv("AI_LOG_JSONL", str(tmp_path / "ai_planner.jsonl"))


@pytest.fixture
def store():
    s = WarehouseStore()
    s.slots.add_range("R", "1", (1, 4), (1, 3))
    return s


@pytest.fixture
def client():
    app.state.store = WarehouseStore()
    with TestClient(app) as c:
        yield c


def receive(store, sku, slot_id, lot, qty, *, name="", category="", entry_date=None):
    """Shortcut for ledger.receive with a ReceiptLine."""
    return store.ledger.receive(
        ReceiptLine(
            sku=sku,
            name=name or f"Product {sku}",
            category=category,
            quantity=qty,
            lot_number=lot,
            slot_id=slot_id,
            entry_date=entry_date,
        )
    )


D1 = date(2024, 1, 10)
D2 = date(2024, 2, 10)
D3 = date(2024, 3, 10)
