"""
Book catalog provider abstraction.

Supplies books (with category and availability) to the scorers and the
response builder. Implementations: in-memory and JSON file.
"""

import json
import threading
from pathlib import Path
from typing import Dict, List, Optional, Protocol, Union

from ..models.book import Book, ensure_books


class BookCatalogProvider(Protocol):
    """Protocol for catalog reads."""

    def find_by_id(self, book_id: int) -> Optional[Book]:
        """Return the book, or None when it is not in the catalog."""
        ...

    def search(
        self,
        filter: Optional[Dict[str, str]] = None,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> List[Book]:
        """
        Return books in catalog order, optionally filtered by exact field match
        (e.g. {"category": "History"}) and paginated.
        """
        ...


class InMemoryCatalog:
    """Catalog held in process memory, in insertion order."""

    def __init__(self, books: Optional[List[Union[dict, Book]]] = None):
        self._lock = threading.Lock()
        self._books: Dict[int, Book] = {}
        for book in ensure_books(books or []):
            self._books[book.id] = book

    def upsert(self, book: Union[dict, Book]) -> None:
        typed = ensure_books([book])[0]
        with self._lock:
            updated = dict(self._books)
            updated[typed.id] = typed
            self._books = updated

    def find_by_id(self, book_id: int) -> Optional[Book]:
        return self._books.get(book_id)

    def search(
        self,
        filter: Optional[Dict[str, str]] = None,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> List[Book]:
        books = list(self._books.values())
        if filter:
            books = [
                b for b in books
                if all(getattr(b, key, None) == value for key, value in filter.items())
            ]
        if offset:
            books = books[offset:]
        if limit is not None:
            books = books[: max(0, limit)]
        return books

    def __len__(self) -> int:
        return len(self._books)


class JsonCatalog(InMemoryCatalog):
    """Catalog loaded from a JSON file: a list of books or {"books": [...]}."""

    def __init__(self, path: Union[Path, str]):
        self._path = Path(path)
        if not self._path.exists():
            raise FileNotFoundError(f"Books JSON not found: {self._path}")
        with open(self._path) as f:
            data = json.load(f)
        books = data.get("books", []) if isinstance(data, dict) else data
        super().__init__(books)
