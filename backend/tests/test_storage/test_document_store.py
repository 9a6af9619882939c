"""
Behaviour shared by every DocumentStore implementation.

Each test runs against the in-memory store and the SQL store on SQLite.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncGenerator
from pathlib import Path

import pytest

from artlog.core.config import Settings
from artlog.database import create_engine, create_session_factory, init_db
from artlog.storage.base import DocumentStore, Transaction
from artlog.storage.errors import TransactionAbortedError
from artlog.storage.memory import InMemoryDocumentStore
from artlog.storage.sql import SQLDocumentStore


@pytest.fixture(params=["memory", "sql"])
async def store(request, tmp_path: Path) -> AsyncGenerator[DocumentStore, None]:
    if request.param == "memory":
        yield InMemoryDocumentStore()
        return

    engine = create_engine(Settings(database_url=f"sqlite+aiosqlite:///{tmp_path / 'store.db'}"))
    await init_db(engine)
    yield SQLDocumentStore(create_session_factory(engine))
    await engine.dispose()


class InterleavingStore(InMemoryDocumentStore):
    """Yields to the event loop after every read so transactions overlap."""

    async def _read(self, collection, doc_id):
        current = await super()._read(collection, doc_id)
        await asyncio.sleep(0)
        return current


async def increment(transaction: Transaction) -> int:
    document = await transaction.get("counters", "a") or {"n": 0}
    document["n"] += 1
    transaction.set("counters", "a", document)
    return document["n"]


class TestBasicOperations:
    async def test_get_missing_returns_none(self, store: DocumentStore):
        assert await store.get("artworks", "nope") is None

    async def test_set_then_get(self, store: DocumentStore):
        await store.set("artworks", "a1", {"title": "Sunflowers", "tags": ["flowers"]})

        assert await store.get("artworks", "a1") == {"title": "Sunflowers", "tags": ["flowers"]}

    async def test_set_replaces_document(self, store: DocumentStore):
        await store.set("artworks", "a1", {"title": "Sunflowers", "medium": "Oil"})
        await store.set("artworks", "a1", {"title": "Irises"})

        assert await store.get("artworks", "a1") == {"title": "Irises"}

    async def test_returned_documents_are_copies(self, store: DocumentStore):
        await store.set("artworks", "a1", {"tags": ["flowers"]})

        document = await store.get("artworks", "a1")
        document["tags"].append("changed")

        assert await store.get("artworks", "a1") == {"tags": ["flowers"]}

    async def test_query_filters_by_collection_and_fields(self, store: DocumentStore):
        await store.set("reviews", "r1", {"userId": "alice", "location": "Met"})
        await store.set("reviews", "r2", {"userId": "bob", "location": "Met"})
        await store.set("reviews", "r3", {"userId": "alice", "location": "MoMA"})
        await store.set("artworks", "a1", {"userId": "alice"})

        alice = await store.query("reviews", userId="alice")
        at_the_met = await store.query("reviews", userId="alice", location="Met")

        assert sorted(doc_id for doc_id, _ in alice) == ["r1", "r3"]
        assert at_the_met == [("r1", {"userId": "alice", "location": "Met"})]
        assert len(await store.query("reviews")) == 3


class TestTransactions:
    async def test_transaction_commits_and_returns_result(self, store: DocumentStore):
        assert await store.run_transaction(increment) == 1
        assert await store.run_transaction(increment) == 2
        assert await store.get("counters", "a") == {"n": 2}

    async def test_transaction_sees_its_own_writes(self, store: DocumentStore):
        async def write_then_read(transaction: Transaction) -> dict:
            transaction.set("counters", "a", {"n": 41})
            return await transaction.get("counters", "a")

        assert await store.run_transaction(write_then_read) == {"n": 41}

    async def test_read_only_transaction_does_not_write(self, store: DocumentStore):
        async def read(transaction: Transaction):
            return await transaction.get("counters", "a")

        assert await store.run_transaction(read) is None
        assert await store.get("counters", "a") is None

    async def test_conflicting_update_is_retried(self, store: DocumentStore):
        await store.set("counters", "a", {"n": 10})
        attempts = 0

        async def increment_with_interference(transaction: Transaction) -> int:
            nonlocal attempts
            attempts += 1
            document = await transaction.get("counters", "a")
            if attempts == 1:
                # Another writer gets in between this read and the commit
                await store.set("counters", "a", {"n": 20})
            document["n"] += 1
            transaction.set("counters", "a", document)
            return document["n"]

        assert await store.run_transaction(increment_with_interference) == 21
        assert attempts == 2
        assert await store.get("counters", "a") == {"n": 21}

    async def test_conflicting_create_is_retried(self, store: DocumentStore):
        attempts = 0

        async def create_with_interference(transaction: Transaction) -> int:
            nonlocal attempts
            attempts += 1
            document = await transaction.get("counters", "a") or {"n": 0}
            if attempts == 1:
                await store.set("counters", "a", {"n": 5})
            document["n"] += 1
            transaction.set("counters", "a", document)
            return document["n"]

        assert await store.run_transaction(create_with_interference) == 6
        assert attempts == 2

    async def test_changed_read_only_document_conflicts(self, store: DocumentStore):
        await store.set("limits", "a", {"max": 1})
        attempts = 0

        async def copy_limit(transaction: Transaction) -> int:
            nonlocal attempts
            attempts += 1
            limit = await transaction.get("limits", "a")
            if attempts == 1:
                await store.set("limits", "a", {"max": 2})
            transaction.set("copies", "a", limit)
            return limit["max"]

        assert await store.run_transaction(copy_limit) == 2
        assert await store.get("copies", "a") == {"max": 2}

    async def test_exhausted_attempts_abort(self, store: DocumentStore):
        await store.set("counters", "a", {"n": 0})

        async def always_interfered(transaction: Transaction) -> None:
            document = await transaction.get("counters", "a")
            await store.set("counters", "a", {"n": document["n"] + 100})
            transaction.set("counters", "a", {"n": -1})

        with pytest.raises(TransactionAbortedError) as exc_info:
            await store.run_transaction(always_interfered, max_attempts=3)

        assert exc_info.value.attempts == 3
        # The aborted transaction wrote nothing
        assert await store.get("counters", "a") == {"n": 300}


class TestConcurrency:
    async def test_concurrent_increments_are_not_lost(self):
        store = InterleavingStore()
        tasks = 8

        results = await asyncio.gather(
            *(store.run_transaction(increment, max_attempts=tasks) for _ in range(tasks))
        )

        assert sorted(results) == list(range(1, tasks + 1))
        assert await store.get("counters", "a") == {"n": tasks}
