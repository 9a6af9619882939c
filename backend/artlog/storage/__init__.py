"""
Document storage - the store of record for artworks, reviews and aggregates.
"""

from artlog.storage.base import DocumentStore, Transaction
from artlog.storage.errors import StorageError, TransactionAbortedError, TransactionConflictError
from artlog.storage.memory import InMemoryDocumentStore
from artlog.storage.sql import SQLDocumentStore

__all__ = [
    "DocumentStore",
    "Transaction",
    "InMemoryDocumentStore",
    "SQLDocumentStore",
    "StorageError",
    "TransactionAbortedError",
    "TransactionConflictError",
]
