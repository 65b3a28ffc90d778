"""Collaborator interfaces (history, catalog, users) and local implementations."""

from .catalog import BookCatalogProvider, InMemoryCatalog, JsonCatalog
from .history import BorrowHistoryProvider, InMemoryBorrowHistory, JsonBorrowHistory
from .users import InMemoryUserDirectory, JsonUserDirectory, UserDirectory, admin_ids

__all__ = [
    "BookCatalogProvider",
    "BorrowHistoryProvider",
    "InMemoryBorrowHistory",
    "InMemoryCatalog",
    "InMemoryUserDirectory",
    "JsonBorrowHistory",
    "JsonCatalog",
    "JsonUserDirectory",
    "UserDirectory",
    "admin_ids",
]
