"""
Catalog and ledger repositories.

Reads prefer the remote store and fall back to the local copy; writes go
to the local store first and are mirrored to the remote store by the sync
worker. The local copy is never merged with remote data, only replaced.
"""
import asyncio
from typing import Generic, Optional, Type, TypeVar

from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from smartshop.core.database import Base, LocalStore
from smartshop.core.exceptions import ProductNotFound, RemoteSyncFailure
from smartshop.logging_config import get_logger
from smartshop.models import ProductRecord, SaleRecord
from smartshop.schemas.common import CamelModel
from smartshop.schemas.product import Product
from smartshop.schemas.sale import Sale
from smartshop.sync import SyncWorker

logger = get_logger("repositories")

T = TypeVar("T", bound=CamelModel)


class SyncedRepository(Generic[T]):
    """Remote-preferred read, local-first write over one collection."""

    schema: Type[T]
    record: Type[Base]
    table: str
    order_key: str

    def __init__(
        self,
        local: LocalStore,
        remote,
        sync: SyncWorker,
        timeout: float = 10.0,
        write_lock: Optional[asyncio.Lock] = None,
    ):
        self.local = local
        self.remote = remote
        self.sync = sync
        self.timeout = timeout
        self.write_lock = write_lock or asyncio.Lock()

    def sort_value(self, item: T) -> int:
        raise NotImplementedError

    def _doc(self, item: T) -> tuple[str, int, dict]:
        return item.id, self.sort_value(item), item.to_document()

    def _local_is_ahead(self) -> bool:
        """True when the local copy holds writes the remote copy may not have."""
        return bool(self.sync.pending_for(self.table)) or self.sync.is_dirty(self.table)

    async def get_all(self) -> list[T]:
        """
        Authoritative list: remote when reachable, local copy otherwise.

        The local copy is served instead whenever it is ahead of the remote
        one: writes still queued, writes the worker gave up on, or a local
        write that started while the remote read was in flight. A table the
        worker gave up on is pushed again in full.
        """
        if self._local_is_ahead():
            return await self._serve_local("unsynced local writes")

        generation = self.local.generation(self.record)
        try:
            rows = await asyncio.wait_for(
                self.remote.select_all(self.table, order_by=self.order_key),
                self.timeout
            )
            items = [self.schema.model_validate(row) for row in rows]
        except (RemoteSyncFailure, asyncio.TimeoutError, ValidationError) as e:
            logger.warning(
                f"[READ] Remote {self.table} unavailable, using local copy: {e or type(e).__name__}"
            )
            return await self.local_all()

        async with self.write_lock:
            if self.local.generation(self.record) != generation or self._local_is_ahead():
                return await self._serve_local("local write during remote read")
            await self.local.replace_all(self.record, [self._doc(item) for item in items])
        return items

    async def _serve_local(self, reason: str) -> list[T]:
        items = await self.local_all()
        logger.info(f"[READ] {self.table}: {reason}, serving local copy")
        if self.sync.is_dirty(self.table) and not self.sync.pending_for(self.table):
            self.mirror(items, full=True)
        return items

    async def local_all(self) -> list[T]:
        payloads = await self.local.get_all(self.record)
        return [self.schema.model_validate(payload) for payload in payloads]

    async def replace_all(self, items: list[T]) -> None:
        """Overwrite the whole collection locally, then mirror it remotely."""
        await self.local.replace_all(self.record, [self._doc(item) for item in items])
        self.mirror(items, full=True)

    async def upsert_one(self, item: T, session: Optional[AsyncSession] = None) -> None:
        """
        Insert or overwrite one item by id.

        Inside a caller-owned session nothing is mirrored; the caller
        mirrors after its transaction commits.
        """
        await self.local.put(self.record, [self._doc(item)], session=session)
        if session is None:
            self.mirror([item])

    def mirror(self, items: list[T], full: bool = False) -> None:
        """Hand items to the sync worker; failures are only logged."""
        self.sync.enqueue(self.table, [item.to_document() for item in items], full=full)


class CatalogRepository(SyncedRepository[Product]):
    """Products, newest first."""

    schema = Product
    record = ProductRecord
    table = "products"
    order_key = "createdAt"

    def sort_value(self, item: Product) -> int:
        return item.created_at

    async def get(self, product_id: str) -> Product:
        """Current local state of one product."""
        payload = await self.local.get(self.record, product_id)
        if payload is None:
            raise ProductNotFound(product_id)
        return Product.model_validate(payload)


class LedgerRepository(SyncedRepository[Sale]):
    """Sales, newest first. Sales are only appended or bulk-replaced."""

    schema = Sale
    record = SaleRecord
    table = "sales"
    order_key = "timestamp"

    def sort_value(self, item: Sale) -> int:
        return item.timestamp

    async def append(self, sale: Sale, session: Optional[AsyncSession] = None) -> None:
        await self.upsert_one(sale, session=session)
