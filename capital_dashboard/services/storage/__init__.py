"""
Storage Services Package

Provides the abstract document store interface and its implementations:
Google Sheets (remote, signed-in users) and in-memory (local fallback).
"""

from capital_dashboard.services.storage.interface import (
    ConnectionError,
    DocumentStoreInterface,
    DuplicateError,
    NotFoundError,
    StorageError,
    Subscription,
)
from capital_dashboard.services.storage.memory import InMemoryDocumentStore
from capital_dashboard.services.storage.google_sheets import (
    GoogleSheetsClient,
    GoogleSheetsDocumentStore,
)

__all__ = [
    # Interfaces
    "DocumentStoreInterface",
    "Subscription",
    # Exceptions
    "ConnectionError",
    "DuplicateError",
    "NotFoundError",
    "StorageError",
    # Implementations
    "GoogleSheetsClient",
    "GoogleSheetsDocumentStore",
    "InMemoryDocumentStore",
]
