"""
Notebook API - Document Store
=============================

What:  An explicitly constructed store client wrapping an async SQLAlchemy
       engine, exposing find / insert / update / delete over named collections.
How:   `create_app()` builds one DocumentStore per process and keeps it on
       `app.state.store`. The lifespan connects it before serving and disposes
       it on shutdown. Route dependencies hand the same object to every request.
Who:   Used by the resource services; never by routes directly.

Connection Pooling Strategy:
    Server databases (PostgreSQL via asyncpg) get a sized pool with pre-ping
    and hourly recycling. SQLite (tests, local runs) keeps SQLAlchemy's
    default pool, which does not accept sizing arguments.

Filters:
    A filter is a flat dict of equality constraints. Only two keys exist:
        "id"     → primary key (uuid.UUID)
        "owner"  → owner_id column (subject id)
    Anything else raises ValueError; the API never searches user fields.

Atomicity:
    Each primitive runs in its own session and commits once. update_one is a
    row-locked read-merge-write inside that single transaction.
"""

import logging
import uuid
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict, List, Optional, Type

from sqlalchemy import delete, select, text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from notebook_api.models.document import COLLECTIONS, Base, DocumentMixin

logger = logging.getLogger(__name__)

Filter = Dict[str, Any]


class DocumentStore:
    """
    Long-lived, concurrency-safe handle to the document database.

    Lifecycle:
        store = DocumentStore(url)     # no I/O
        await store.connect()          # builds the engine and pool
        ...                            # primitives, from any number of requests
        await store.close()            # disposes every pooled connection
    """

    def __init__(
        self,
        database_url: str,
        pool_size: int = 10,
        max_overflow: int = 10,
        pool_pre_ping: bool = True,
        echo: bool = False,
    ):
        self.database_url = database_url
        self.pool_size = pool_size
        self.max_overflow = max_overflow
        self.pool_pre_ping = pool_pre_ping
        self.echo = echo
        self._engine: Optional[AsyncEngine] = None
        self._session_factory: Optional[async_sessionmaker[AsyncSession]] = None

    @classmethod
    def from_settings(cls, settings) -> "DocumentStore":
        return cls(
            settings.database_url,
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=settings.db_pool_pre_ping,
            echo=settings.log_level == "DEBUG",
        )

    @property
    def connected(self) -> bool:
        return self._engine is not None

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            raise RuntimeError("DocumentStore is not connected")
        return self._engine

    # ── Lifecycle ─────────────────────────────────────────────────────────

    async def connect(self) -> None:
        """Create the engine and session factory. Calling it twice is a no-op."""
        if self._engine is not None:
            return

        engine_kwargs: Dict[str, Any] = {"echo": self.echo}
        if not self.database_url.startswith("sqlite"):
            engine_kwargs.update(
                pool_size=self.pool_size,
                max_overflow=self.max_overflow,
                pool_pre_ping=self.pool_pre_ping,
                pool_recycle=3600,
            )

        self._engine = create_async_engine(self.database_url, **engine_kwargs)
        self._session_factory = async_sessionmaker(
            self._engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )
        logger.info("Document store engine created (%s)", self._engine.url.drivername)

    async def close(self) -> None:
        """Dispose the engine, closing every pooled connection."""
        if self._engine is None:
            return
        await self._engine.dispose()
        self._engine = None
        self._session_factory = None
        logger.info("Document store connections closed")

    async def ping(self) -> bool:
        """Run `SELECT 1`; False if the database cannot be reached."""
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.warning("Document store ping failed: %s", str(e))
            return False

    async def create_schema(self) -> None:
        """Create every collection table that does not exist yet."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Document store schema ensured: %s", ", ".join(sorted(COLLECTIONS)))

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Session scope for one primitive.

        Commits when the block exits cleanly, rolls back and re-raises on any
        error, always returns the connection to the pool.
        """
        if self._session_factory is None:
            raise RuntimeError("DocumentStore is not connected")
        async with self._session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise
            finally:
                await session.close()

    # ── Primitives ────────────────────────────────────────────────────────

    async def insert_one(self, collection: str, document: Dict[str, Any]) -> uuid.UUID:
        """
        Insert a document and return its store-assigned id.

        `document["owner"]` is required and becomes the owner column; every
        other key is stored as a user field.
        """
        model = self._model(collection)
        fields = dict(document)
        owner = fields.pop("owner")
        row = model(id=uuid.uuid4(), owner_id=owner, data=fields)
        async with self.session() as session:
            session.add(row)
            await session.flush()
        return row.id

    async def find(self, collection: str, filter: Filter) -> List[Dict[str, Any]]:
        """All documents matching `filter`, in insertion order."""
        model = self._model(collection)
        query = (
            select(model)
            .where(*self._where(model, filter))
            .order_by(model.created_at, model.id)
        )
        async with self.session() as session:
            result = await session.execute(query)
            return [row.to_document() for row in result.scalars().all()]

    async def find_one(self, collection: str, filter: Filter) -> Optional[Dict[str, Any]]:
        model = self._model(collection)
        async with self.session() as session:
            result = await session.execute(
                select(model).where(*self._where(model, filter)).limit(1)
            )
            row = result.scalars().first()
            return row.to_document() if row is not None else None

    async def update_one(self, collection: str, filter: Filter, fields: Dict[str, Any]) -> int:
        """
        Shallow-merge `fields` into the matching document's user fields.

        Returns the number of matched documents (0 or 1). A match with an
        empty `fields` dict still counts as matched.
        """
        model = self._model(collection)
        query = select(model).where(*self._where(model, filter)).with_for_update()
        async with self.session() as session:
            result = await session.execute(query)
            row = result.scalar_one_or_none()
            if row is None:
                return 0
            if fields:
                # Reassign so the JSON column is flagged dirty
                row.data = {**(row.data or {}), **fields}
            return 1

    async def delete_one(self, collection: str, filter: Filter) -> int:
        """Delete the matching document; returns the number deleted (0 or 1)."""
        model = self._model(collection)
        async with self.session() as session:
            result = await session.execute(delete(model).where(*self._where(model, filter)))
            return result.rowcount or 0

    # ── Helpers ───────────────────────────────────────────────────────────

    @staticmethod
    def _model(collection: str) -> Type[DocumentMixin]:
        try:
            return COLLECTIONS[collection]
        except KeyError:
            raise ValueError(f"Unknown collection '{collection}'") from None

    @staticmethod
    def _where(model: Type[DocumentMixin], filter: Filter) -> list:
        clauses = []
        for key, value in filter.items():
            if key == "id":
                clauses.append(model.id == value)
            elif key == "owner":
                clauses.append(model.owner_id == value)
            else:
                raise ValueError(f"Unsupported filter field '{key}'")
        return clauses
