"""
SQL-backed document store.

Documents live in the ``documents`` table. Commits use conditional updates
(``UPDATE ... WHERE version = :expected``) and the unique
``(collection, doc_id)`` constraint, so two writers racing on the same
document cannot both succeed.
"""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from artlog.models.base import utc_now
from artlog.models.document import StoredDocument
from artlog.storage.base import DocumentKey, DocumentStore, Transaction, VersionedDocument
from artlog.storage.errors import StorageError, TransactionConflictError

logger = logging.getLogger(__name__)

__all__ = ["SQLDocumentStore"]


class SQLDocumentStore(DocumentStore):
    """Document store on top of an async SQLAlchemy session factory."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def get(self, collection: str, doc_id: str) -> dict[str, Any] | None:
        current = await self._read(collection, doc_id)
        if current is None:
            return None
        return current.data

    async def set(self, collection: str, doc_id: str, data: dict[str, Any]) -> None:
        async def write(transaction: Transaction) -> None:
            transaction.set(collection, doc_id, data)

        await self.run_transaction(write)

    async def query(self, collection: str, **equals: Any) -> list[tuple[str, dict[str, Any]]]:
        stmt = (
            select(StoredDocument)
            .where(StoredDocument.collection == collection)
            .order_by(StoredDocument.id)
        )
        try:
            async with self._session_factory() as session:
                result = await session.execute(stmt)
                documents = list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error(f"Query on '{collection}' failed: {e}")
            raise StorageError(f"Query on '{collection}' failed") from e

        # JSON field filtering differs per dialect, so filter here
        return [
            (document.doc_id, dict(document.data))
            for document in documents
            if all(document.data.get(field) == value for field, value in equals.items())
        ]

    async def _read(self, collection: str, doc_id: str) -> VersionedDocument | None:
        stmt = select(StoredDocument).where(
            StoredDocument.collection == collection,
            StoredDocument.doc_id == doc_id,
        )
        try:
            async with self._session_factory() as session:
                result = await session.execute(stmt)
                document = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error(f"Read of '{collection}/{doc_id}' failed: {e}")
            raise StorageError(f"Read of '{collection}/{doc_id}' failed") from e

        if document is None:
            return None
        return VersionedDocument(version=document.version, data=dict(document.data))

    async def _commit(
        self,
        reads: dict[DocumentKey, int | None],
        writes: dict[DocumentKey, dict[str, Any]],
    ) -> None:
        async with self._session_factory() as session:
            key: DocumentKey | None = None
            try:
                for key, data in writes.items():
                    if key in reads:
                        await self._conditional_write(session, key, reads[key], data)
                    else:
                        await self._blind_write(session, key, data)

                # Documents that were only read must still be at the version seen
                for key, expected_version in reads.items():
                    if key in writes:
                        continue
                    if await self._current_version(session, key) != expected_version:
                        raise TransactionConflictError(*key)

                await session.commit()
            except IntegrityError as e:
                await session.rollback()
                collection, doc_id = key or ("", "")
                raise TransactionConflictError(collection, doc_id) from e
            except TransactionConflictError:
                await session.rollback()
                raise
            except SQLAlchemyError as e:
                await session.rollback()
                logger.error(f"Commit failed: {e}")
                raise StorageError("Commit failed") from e

    async def _conditional_write(
        self,
        session: AsyncSession,
        key: DocumentKey,
        expected_version: int | None,
        data: dict[str, Any],
    ) -> None:
        collection, doc_id = key
        if expected_version is None:
            # Seen as missing: the insert fails on the unique key if someone created it
            session.add(StoredDocument(collection=collection, doc_id=doc_id, version=1, data=data))
            await session.flush()
            return

        stmt = (
            update(StoredDocument)
            .where(
                StoredDocument.collection == collection,
                StoredDocument.doc_id == doc_id,
                StoredDocument.version == expected_version,
            )
            .values(data=data, version=expected_version + 1, updated_at=utc_now())
        )
        result = await session.execute(stmt)
        if result.rowcount != 1:
            raise TransactionConflictError(collection, doc_id)

    async def _blind_write(
        self,
        session: AsyncSession,
        key: DocumentKey,
        data: dict[str, Any],
    ) -> None:
        collection, doc_id = key
        stmt = (
            update(StoredDocument)
            .where(
                StoredDocument.collection == collection,
                StoredDocument.doc_id == doc_id,
            )
            .values(data=data, version=StoredDocument.version + 1, updated_at=utc_now())
        )
        result = await session.execute(stmt)
        if result.rowcount == 0:
            session.add(StoredDocument(collection=collection, doc_id=doc_id, version=1, data=data))
            await session.flush()

    async def _current_version(self, session: AsyncSession, key: DocumentKey) -> int | None:
        collection, doc_id = key
        stmt = select(StoredDocument.version).where(
            StoredDocument.collection == collection,
            StoredDocument.doc_id == doc_id,
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()
