"""
Borrow history provider abstraction.

Supplies borrow records to the graph builder, profile builder and trending.
Implementations: in-memory (tests, embedding in other services) and JSON file.
Reads are lock-free; records are replaced wholesale, never mutated in place.
"""

import json
import threading
from collections import Counter, defaultdict
from datetime import datetime
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Protocol, Set, Union

from ..models.book import BorrowRecord, ensure_records


class BorrowHistoryProvider(Protocol):
    """Protocol for borrow history reads."""

    def find_by_user_id(self, user_id: int) -> List[BorrowRecord]:
        """All records of a user, newest borrow first."""
        ...

    def find_recent_by_user_id(self, user_id: int, limit: int) -> List[BorrowRecord]:
        """The user's `limit` most recent records, newest first."""
        ...

    def find_by_book_id(self, book_id: int) -> List[BorrowRecord]:
        """All records of a book, newest borrow first."""
        ...

    def borrow_counts(
        self,
        since: Optional[datetime] = None,
        exclude_user_ids: Optional[Set[int]] = None,
    ) -> Dict[int, int]:
        """Borrow count per book id, optionally since a time and without some users."""
        ...


def _newest_first(records: Iterable[BorrowRecord]) -> List[BorrowRecord]:
    # stable on book id so equal timestamps order deterministically
    return sorted(records, key=lambda r: (r.borrow_time, -r.book_id), reverse=True)


class InMemoryBorrowHistory:
    """Borrow history held in process memory."""

    def __init__(self, records: Optional[List[Union[dict, BorrowRecord]]] = None):
        self._lock = threading.Lock()
        self._records: List[BorrowRecord] = []
        self._by_user: Dict[int, List[BorrowRecord]] = {}
        self._by_book: Dict[int, List[BorrowRecord]] = {}
        if records:
            self.replace_all(records)

    def replace_all(self, records: List[Union[dict, BorrowRecord]]) -> None:
        typed = ensure_records(records)
        by_user: Dict[int, List[BorrowRecord]] = defaultdict(list)
        by_book: Dict[int, List[BorrowRecord]] = defaultdict(list)
        for r in typed:
            by_user[r.user_id].append(r)
            by_book[r.book_id].append(r)
        with self._lock:
            self._records = typed
            self._by_user = {uid: _newest_first(rs) for uid, rs in by_user.items()}
            self._by_book = {bid: _newest_first(rs) for bid, rs in by_book.items()}

    def add(self, record: Union[dict, BorrowRecord]) -> None:
        with self._lock:
            current = list(self._records)
        current.append(record)
        self.replace_all(current)

    def find_by_user_id(self, user_id: int) -> List[BorrowRecord]:
        return list(self._by_user.get(user_id, []))

    def find_recent_by_user_id(self, user_id: int, limit: int) -> List[BorrowRecord]:
        return self.find_by_user_id(user_id)[: max(0, limit)]

    def find_by_book_id(self, book_id: int) -> List[BorrowRecord]:
        return list(self._by_book.get(book_id, []))

    def borrow_counts(
        self,
        since: Optional[datetime] = None,
        exclude_user_ids: Optional[Set[int]] = None,
    ) -> Dict[int, int]:
        excluded = exclude_user_ids or set()
        counts: Counter = Counter()
        for r in self._records:
            if r.user_id in excluded:
                continue
            if since is not None and r.borrow_time < since:
                continue
            counts[r.book_id] += 1
        return dict(counts)

    def user_ids(self) -> List[int]:
        return sorted(self._by_user)


class JsonBorrowHistory(InMemoryBorrowHistory):
    """
    Borrow history loaded from a JSON file: a list of records, or
    {"records": [...]} with user_id, book_id and ISO borrow_time.
    """

    def __init__(self, path: Union[Path, str]):
        self._path = Path(path)
        if not self._path.exists():
            raise FileNotFoundError(f"Borrow records JSON not found: {self._path}")
        with open(self._path) as f:
            data = json.load(f)
        records = data.get("records", []) if isinstance(data, dict) else data
        super().__init__(records)
