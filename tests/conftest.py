"""Shared test fixtures for all tests."""
import asyncio
import pytest
from datetime import datetime
from types import SimpleNamespace
from fastapi.testclient import TestClient

from smartshop.context import AppContext
from smartshop.core.config import Settings
from smartshop.core.database import LocalStore
from smartshop.core.exceptions import RemoteSyncFailure
from smartshop.main import create_app
from smartshop.recognition import ProductRecognizer
from smartshop.schemas.product import Product
from smartshop.schemas.sale import CustomerInfo, Sale


class FakeRemoteStore:
    """In-memory stand-in for the remote table store."""

    def __init__(self):
        self.tables = {"products": {}, "sales": {}}
        self.fail_reads = False
        self.fail_writes = 0  # number of upserts to fail before succeeding; -1 = always
        self.malformed = False
        self.hang_reads = False
        self.hang_writes = False
        self.read_gate = None  # asyncio.Event a read waits on before answering
        self.upserts = []

    async def select_all(self, table, order_by, descending=True):
        if self.hang_reads:
            await asyncio.Event().wait()
        if self.read_gate is not None:
            rows = [dict(r) for r in self.tables[table].values()]
            await self.read_gate.wait()
            return sorted(rows, key=lambda r: r[order_by], reverse=descending)
        if self.fail_reads:
            raise RemoteSyncFailure(table, "connection refused")
        if self.malformed:
            return [{"unexpected": "row"}]
        rows = list(self.tables[table].values())
        return sorted(rows, key=lambda r: r[order_by], reverse=descending)

    async def upsert(self, table, rows):
        if self.hang_writes:
            await asyncio.Event().wait()
        if self.fail_writes:
            if self.fail_writes > 0:
                self.fail_writes -= 1
            raise RemoteSyncFailure(table, "503 Service Unavailable")
        self.upserts.append((table, [r["id"] for r in rows]))
        for row in rows:
            self.tables[table][row["id"]] = dict(row)

    def seed(self, table, items):
        for item in items:
            self.tables[table][item.id] = item.to_document()


def build_product(**overrides) -> Product:
    data = {
        "id": "A",
        "name": "Sữa Vinamilk 1L",
        "brand": "Vinamilk",
        "category": "Sữa",
        "description": "Sữa tươi tiệt trùng",
        "unit": "hộp",
        "purchase_price": 60,
        "selling_price": 100,
        "stock": 10,
        "image_url": "",
        "created_at": 1704067200000,
    }
    data.update(overrides)
    return Product(**data)


def build_sale(when: datetime, amount: float = 50, **overrides) -> Sale:
    data = {
        "id": f"sale-{when.isoformat()}",
        "product_id": "A",
        "product_name": "Sữa Vinamilk 1L",
        "quantity": 1,
        "selling_price": amount,
        "purchase_price": amount * 0.6,
        "total_amount": amount,
        "timestamp": round(when.timestamp() * 1000),
    }
    data.update(overrides)
    return Sale(**data)


@pytest.fixture
def make_product():
    return build_product


@pytest.fixture
def make_sale():
    return build_sale


@pytest.fixture
def settings(tmp_path):
    """Settings pointing at a throwaway SQLite file with fast sync retries."""
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'smartshop.db'}",
        remote_store_url="https://example.supabase.co",
        remote_store_key="test-key",
        gemini_api_key="test-gemini-key",
        remote_timeout_seconds=0.2,
        sync_max_retries=2,
        sync_backoff_base_seconds=0,
        sync_backoff_max_seconds=0,
        log_file=str(tmp_path / "logs" / "app.log"),
    )


@pytest.fixture
def remote():
    return FakeRemoteStore()


@pytest.fixture
async def ctx(settings, remote):
    """Started application context over a temp database and the fake remote."""
    context = AppContext(settings, LocalStore(settings.database_url), remote)
    await context.start()
    try:
        yield context
    finally:
        await context.close()


@pytest.fixture
def customer():
    return CustomerInfo(full_name="Nguyễn Văn A", address="12 Lê Lợi, Huế", id_card="046099000123")


@pytest.fixture
def gemini_reply():
    """Mutable reply text for the stubbed Gemini client."""
    return {"text": '{"productId": null, "confidence": 0}'}


@pytest.fixture
def recognizer(gemini_reply):
    async def generate_content(model, contents, config):
        return SimpleNamespace(text=gemini_reply["text"])

    client = SimpleNamespace(aio=SimpleNamespace(models=SimpleNamespace(generate_content=generate_content)))
    return ProductRecognizer(client=client)


@pytest.fixture
def client(settings, remote, recognizer):
    """Test client whose lifespan builds a context over the fakes."""
    def context_factory(s):
        return AppContext(s, LocalStore(s.database_url), remote, recognizer)

    app = create_app(settings, context_factory=context_factory)
    with TestClient(app) as test_client:
        yield test_client
