"""
Document store abstraction with conditional transactions.

The store is a flat map of ``(collection, doc_id) -> JSON object``. Every
document carries a version that increases on each write. A transaction
records the version of every document it reads and buffers its writes;
commit succeeds only if none of those versions moved in the meantime
(compare-and-set), otherwise the whole function is re-run.

Usage:
    async def bump(txn: Transaction) -> int:
        doc = await txn.get("counters", "a") or {}
        doc["n"] = doc.get("n", 0) + 1
        txn.set("counters", "a", doc)
        return doc["n"]

    value = await store.run_transaction(bump, max_attempts=5)
"""

from __future__ import annotations

import copy
import logging
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, TypeVar

from artlog.storage.errors import TransactionAbortedError, TransactionConflictError

logger = logging.getLogger(__name__)

__all__ = [
    "DocumentKey",
    "VersionedDocument",
    "Transaction",
    "DocumentStore",
]

T = TypeVar("T")

DocumentKey = tuple[str, str]


@dataclass
class VersionedDocument:
    """A stored document together with its current version."""

    version: int
    data: dict[str, Any]


class Transaction:
    """Read set and write buffer for one transaction attempt."""

    def __init__(self, store: DocumentStore):
        self._store = store
        self.reads: dict[DocumentKey, int | None] = {}
        self.writes: dict[DocumentKey, dict[str, Any]] = {}

    async def get(self, collection: str, doc_id: str) -> dict[str, Any] | None:
        """Read a document, recording its version for the commit check."""
        key = (collection, doc_id)
        if key in self.writes:
            return copy.deepcopy(self.writes[key])

        current = await self._store._read(collection, doc_id)
        # Keep the first observed version; a later change fails the commit anyway
        self.reads.setdefault(key, current.version if current else None)
        if current is None:
            return None
        return copy.deepcopy(current.data)

    def set(self, collection: str, doc_id: str, data: dict[str, Any]) -> None:
        """Buffer a full-document write."""
        self.writes[(collection, doc_id)] = copy.deepcopy(data)


class DocumentStore(ABC):
    """Base class for document stores."""

    @abstractmethod
    async def get(self, collection: str, doc_id: str) -> dict[str, Any] | None:
        """Get a document outside any transaction."""

    @abstractmethod
    async def set(self, collection: str, doc_id: str, data: dict[str, Any]) -> None:
        """Create or replace a document outside any transaction."""

    @abstractmethod
    async def query(self, collection: str, **equals: Any) -> list[tuple[str, dict[str, Any]]]:
        """List ``(doc_id, data)`` pairs whose top-level fields equal the filters."""

    @abstractmethod
    async def _read(self, collection: str, doc_id: str) -> VersionedDocument | None:
        """Read a document with its version."""

    @abstractmethod
    async def _commit(
        self,
        reads: dict[DocumentKey, int | None],
        writes: dict[DocumentKey, dict[str, Any]],
    ) -> None:
        """
        Apply writes atomically if every read version is unchanged.

        Raises:
            TransactionConflictError: A read document changed or appeared
        """

    async def run_transaction(
        self,
        fn: Callable[[Transaction], Awaitable[T]],
        max_attempts: int = 5,
    ) -> T:
        """
        Run ``fn`` in a transaction, re-running it on commit conflicts.

        ``fn`` may be called several times and must not have side effects
        outside the transaction.

        Raises:
            TransactionAbortedError: Every attempt conflicted
        """
        for attempt in range(1, max_attempts + 1):
            transaction = Transaction(self)
            result = await fn(transaction)
            if not transaction.writes:
                return result
            try:
                await self._commit(transaction.reads, transaction.writes)
            except TransactionConflictError as e:
                logger.debug(f"Transaction attempt {attempt}/{max_attempts} conflicted: {e}")
                continue
            return result

        raise TransactionAbortedError(max_attempts)
