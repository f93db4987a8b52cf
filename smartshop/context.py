"""
Application context: owns the stores, the sync worker and the repositories.

One context is built per process and handed to every component that needs
it; nothing below keeps module-level state.
"""
import asyncio
from typing import Optional

from smartshop.core.config import Settings
from smartshop.core.database import LocalStore
from smartshop.logging_config import get_logger
from smartshop.recognition import ProductRecognizer
from smartshop.remote import RemoteTableStore
from smartshop.repositories import CatalogRepository, LedgerRepository
from smartshop.sync import SyncWorker
from smartshop.transactor import SaleTransactor

logger = get_logger("context")


class AppContext:

    def __init__(
        self,
        settings: Settings,
        local: LocalStore,
        remote,
        recognizer: Optional[ProductRecognizer] = None,
    ):
        self.settings = settings
        self.local = local
        self.remote = remote
        self.recognizer = recognizer
        self.sync = SyncWorker(
            remote,
            max_queue=settings.sync_queue_size,
            max_retries=settings.sync_max_retries,
            backoff_base=settings.sync_backoff_base_seconds,
            backoff_max=settings.sync_backoff_max_seconds,
            timeout=settings.remote_timeout_seconds,
        )
        # Serializes stock-changing writes (sales, restock, restore) and the
        # replacement of the local copy by a remote read
        self.sale_lock = asyncio.Lock()
        repo_options = {"timeout": settings.remote_timeout_seconds, "write_lock": self.sale_lock}
        self.catalog = CatalogRepository(local, remote, self.sync, **repo_options)
        self.ledger = LedgerRepository(local, remote, self.sync, **repo_options)

    def transactor(self) -> SaleTransactor:
        return SaleTransactor(self)

    async def start(self) -> None:
        await self.local.init()
        await self.sync.start()
        logger.info("Application context started")

    async def close(self) -> None:
        await self.sync.stop()
        await self.local.close()
        close_remote = getattr(self.remote, "close", None)
        if close_remote is not None:
            await close_remote()
        logger.info("Application context closed")


def build_context(settings: Settings) -> AppContext:
    """Wire the real collaborators; fails fast when credentials are missing."""
    settings.ensure_credentials()

    local = LocalStore(settings.database_url, echo=settings.db_echo)
    remote = RemoteTableStore(
        settings.remote_store_url,
        settings.remote_store_key,
        timeout=settings.remote_timeout_seconds,
    )
    recognizer = ProductRecognizer(
        api_key=settings.gemini_api_key,
        model=settings.gemini_model,
        confidence_threshold=settings.recognition_confidence_threshold,
        max_image_side=settings.recognition_max_image_side,
    )
    return AppContext(settings, local, remote, recognizer)
