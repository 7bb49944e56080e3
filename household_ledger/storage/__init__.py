"""
Storage Package

Provides abstract interfaces and an in-memory implementation for record
storage. The real backend lives outside this package.
"""

from household_ledger.storage.interface import (
    AuditStorageInterface,
    DuplicateError,
    LedgerSnapshot,
    LedgerStorageInterface,
    NotFoundError,
    StorageError,
)
from household_ledger.storage.memory import (
    InMemoryAuditStorage,
    InMemoryLedgerStorage,
)

__all__ = [
    # Interfaces
    "AuditStorageInterface",
    "LedgerSnapshot",
    "LedgerStorageInterface",
    # Exceptions
    "DuplicateError",
    "NotFoundError",
    "StorageError",
    # In-memory implementation
    "InMemoryAuditStorage",
    "InMemoryLedgerStorage",
]
