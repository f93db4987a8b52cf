"""
Async local durable store with SQLAlchemy 2.0.
Each collection is a table keyed by record id holding the record's JSON payload.
"""
from collections import Counter
from typing import AsyncGenerator, Iterable, Type
from contextlib import asynccontextmanager
from pathlib import Path
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    create_async_engine,
    async_sessionmaker,
    AsyncEngine
)
from sqlalchemy.engine import make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy import MetaData, String, BigInteger, JSON, DateTime, delete, select, func, text
from sqlalchemy.pool import NullPool
from datetime import datetime

from smartshop.core.exceptions import StorageFailure
from smartshop.logging_config import get_logger

logger = get_logger("database")


# Naming convention for constraints
NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s"
}

metadata = MetaData(naming_convention=NAMING_CONVENTION)


class Base(DeclarativeBase):
    """Base class for all local collections."""
    metadata = metadata

    # Common columns for all collections
    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    sort_key: Mapped[int] = mapped_column(BigInteger, nullable=False)
    payload: Mapped[dict] = mapped_column(JSON, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False
    )


class LocalStore:
    """
    Key-value collections persisted in an embedded SQLite database.

    Payloads are plain JSON documents; `sort_key` mirrors the ordering key
    the remote store sorts by so both return records in the same order.
    """

    def __init__(self, database_url: str, echo: bool = False):
        self.database_url = database_url
        self.echo = echo
        self._engine: AsyncEngine | None = None
        self._session_factory: async_sessionmaker[AsyncSession] | None = None
        # Bumped when a write to a collection starts
        self._generations: Counter = Counter()

    @property
    def engine(self) -> AsyncEngine:
        """Get or create the database engine."""
        if self._engine is None:
            url = make_url(self.database_url)
            if url.get_backend_name() == "sqlite" and url.database not in (None, "", ":memory:"):
                Path(url.database).parent.mkdir(parents=True, exist_ok=True)

            self._engine = create_async_engine(
                self.database_url,
                echo=self.echo,
                poolclass=NullPool,
                connect_args={"check_same_thread": False}
            )
        return self._engine

    @property
    def session_factory(self) -> async_sessionmaker[AsyncSession]:
        """Get or create the session factory."""
        if self._session_factory is None:
            self._session_factory = async_sessionmaker(
                self.engine,
                class_=AsyncSession,
                expire_on_commit=False,
                autocommit=False,
                autoflush=False
            )
        return self._session_factory

    async def init(self) -> None:
        """Create collection tables if they do not exist."""
        # Import all records to ensure they're registered
        from smartshop.models import product, sale  # noqa: F401

        try:
            async with self.engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
        except SQLAlchemyError as e:
            raise StorageFailure("init", str(e)) from e

    async def close(self) -> None:
        """Close database connections."""
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None
        self._session_factory = None

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Transactional session; commits on success, rolls back on error.

        Usage:
            async with store.session() as session:
                await store.put(ProductRecord, [doc], session=session)
        """
        async with self.session_factory() as session:
            try:
                yield session
                await session.commit()
            except SQLAlchemyError as e:
                await session.rollback()
                logger.error(f"Local store transaction failed: {e}", exc_info=True)
                raise StorageFailure("write", str(e)) from e
            except Exception:
                await session.rollback()
                raise

    async def get_all(self, record: Type[Base]) -> list[dict]:
        """All payloads of a collection, newest sort key first."""
        try:
            async with self.session_factory() as session:
                result = await session.execute(
                    select(record.payload).order_by(record.sort_key.desc())
                )
                return [row for row in result.scalars().all()]
        except SQLAlchemyError as e:
            logger.error(f"Local read of {record.__tablename__} failed: {e}")
            raise StorageFailure(f"read {record.__tablename__}", str(e)) from e

    async def get(self, record: Type[Base], item_id: str) -> dict | None:
        try:
            async with self.session_factory() as session:
                row = await session.get(record, item_id)
                return dict(row.payload) if row else None
        except SQLAlchemyError as e:
            raise StorageFailure(f"read {record.__tablename__}", str(e)) from e

    async def put(
        self,
        record: Type[Base],
        docs: Iterable[tuple[str, int, dict]],
        session: AsyncSession | None = None
    ) -> None:
        """Upsert (id, sort_key, payload) documents, optionally inside a caller's session."""
        self._generations[record.__tablename__] += 1
        if session is None:
            async with self.session() as own_session:
                await self._merge(own_session, record, docs)
            return
        await self._merge(session, record, docs)

    async def replace_all(self, record: Type[Base], docs: Iterable[tuple[str, int, dict]]) -> None:
        """Clear the collection, then put each document."""
        self._generations[record.__tablename__] += 1
        async with self.session() as session:
            await session.execute(delete(record))
            await self._merge(session, record, docs)

    async def clear(self, record: Type[Base]) -> None:
        self._generations[record.__tablename__] += 1
        async with self.session() as session:
            await session.execute(delete(record))

    def generation(self, record: Type[Base]) -> int:
        """Count of writes started on a collection; changes whenever the local copy may have."""
        return self._generations[record.__tablename__]

    async def check(self) -> bool:
        """Health check for the local store."""
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except Exception:
            return False

    @staticmethod
    async def _merge(session: AsyncSession, record: Type[Base], docs: Iterable[tuple[str, int, dict]]) -> None:
        for item_id, sort_key, payload in docs:
            await session.merge(record(id=item_id, sort_key=sort_key, payload=payload))
        await session.flush()
