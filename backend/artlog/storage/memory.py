"""In-memory document store for development and tests."""

from __future__ import annotations

import copy
from typing import Any

from artlog.storage.base import DocumentKey, DocumentStore, VersionedDocument
from artlog.storage.errors import TransactionConflictError

__all__ = ["InMemoryDocumentStore"]


class InMemoryDocumentStore(DocumentStore):
    """
    Dictionary-backed document store.

    Commit runs without awaiting, so under a single event loop the version
    check and the writes happen as one step.
    """

    def __init__(self) -> None:
        self._documents: dict[DocumentKey, VersionedDocument] = {}

    async def get(self, collection: str, doc_id: str) -> dict[str, Any] | None:
        current = self._documents.get((collection, doc_id))
        if current is None:
            return None
        return copy.deepcopy(current.data)

    async def set(self, collection: str, doc_id: str, data: dict[str, Any]) -> None:
        self._write((collection, doc_id), data)

    async def query(self, collection: str, **equals: Any) -> list[tuple[str, dict[str, Any]]]:
        results = []
        for (doc_collection, doc_id), document in self._documents.items():
            if doc_collection != collection:
                continue
            if all(document.data.get(field) == value for field, value in equals.items()):
                results.append((doc_id, copy.deepcopy(document.data)))
        return results

    async def _read(self, collection: str, doc_id: str) -> VersionedDocument | None:
        current = self._documents.get((collection, doc_id))
        if current is None:
            return None
        return VersionedDocument(version=current.version, data=copy.deepcopy(current.data))

    async def _commit(
        self,
        reads: dict[DocumentKey, int | None],
        writes: dict[DocumentKey, dict[str, Any]],
    ) -> None:
        for key, expected_version in reads.items():
            current = self._documents.get(key)
            current_version = current.version if current else None
            if current_version != expected_version:
                raise TransactionConflictError(*key)

        for key, data in writes.items():
            self._write(key, data)

    def _write(self, key: DocumentKey, data: dict[str, Any]) -> None:
        current = self._documents.get(key)
        version = current.version + 1 if current else 1
        self._documents[key] = VersionedDocument(version=version, data=copy.deepcopy(data))
