"""Exceptions raised by document store implementations."""

from __future__ import annotations


class StorageError(Exception):
    """Base exception for document store failures."""


class TransactionConflictError(StorageError):
    """A document read inside a transaction changed before commit."""

    def __init__(self, collection: str, doc_id: str):
        self.collection = collection
        self.doc_id = doc_id
        super().__init__(f"Document '{collection}/{doc_id}' changed during transaction")


class TransactionAbortedError(StorageError):
    """A transaction kept conflicting until its attempts ran out."""

    def __init__(self, attempts: int):
        self.attempts = attempts
        super().__init__(f"Transaction aborted after {attempts} attempts")
