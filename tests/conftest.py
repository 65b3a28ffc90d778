"""
Shared fixtures: a small library with known borrowing overlap.

Readers:
- alice (1): Dune (2d ago), Gone Girl (40d ago)
- bob (2):   Dune, Foundation, Neuromancer
- carol (3): Dune, Foundation, The Hobbit
- dave (4):  Gone Girl, Sapiens
- eve (5):   no history
- admin (99): borrows Cosmos three times (excluded from trending)

Embeddings are 3-d so expected similarities are easy to read off.
"""

from datetime import datetime, timedelta, timezone

import pytest

from shelfwise.embedding import ArrayEmbeddingBackend, EmbeddingStore
from shelfwise.providers import InMemoryBorrowHistory, InMemoryCatalog, InMemoryUserDirectory
from shelfwise.recommendation_engine import RecommendationEngine

NOW = datetime.now(timezone.utc).replace(microsecond=0)

BOOKS = [
    {"id": 1, "title": "Dune", "author": "Frank Herbert", "category": "SciFi", "available_count": 2},
    {"id": 2, "title": "Foundation", "author": "Isaac Asimov", "category": "SciFi", "available_count": 1},
    {"id": 3, "title": "Neuromancer", "author": "William Gibson", "category": "SciFi", "available_count": 3},
    {"id": 4, "title": "Hyperion", "author": "Dan Simmons", "category": "SciFi", "available_count": 0},
    {"id": 5, "title": "Gone Girl", "author": "Gillian Flynn", "category": "Mystery", "available_count": 2},
    {"id": 6, "title": "The Hobbit", "author": "J. R. R. Tolkien", "category": "Fantasy", "available_count": 1},
    {"id": 7, "title": "Sapiens", "author": "Yuval Noah Harari", "category": "History", "available_count": 4},
    {"id": 8, "title": "Cosmos", "author": "Carl Sagan", "category": "Science", "available_count": 1},
]

EMBEDDINGS = {
    1: [1.0, 0.0, 0.0],
    2: [0.9, 0.1, 0.0],
    3: [0.8, 0.2, 0.0],
    4: [0.95, 0.05, 0.0],
    5: [0.0, 1.0, 0.0],
    6: [0.1, 0.9, 0.1],
    7: [0.0, 0.0, 1.0],
    8: [0.5, 0.0, 0.5],
}

USERS = [
    {"id": 1, "username": "alice", "role": "USER"},
    {"id": 2, "username": "bob", "role": "USER"},
    {"id": 3, "username": "carol", "role": "USER"},
    {"id": 4, "username": "dave", "role": "USER"},
    {"id": 5, "username": "eve", "role": "USER"},
    {"id": 99, "username": "admin", "role": "ADMIN"},
]


def borrow(user_id: int, book_id: int, days_ago: int) -> dict:
    return {"user_id": user_id, "book_id": book_id, "borrow_time": NOW - timedelta(days=days_ago)}


RECORDS = [
    borrow(1, 1, 2),
    borrow(1, 5, 40),
    borrow(2, 1, 5),
    borrow(2, 2, 6),
    borrow(2, 3, 20),
    borrow(3, 1, 10),
    borrow(3, 2, 3),
    borrow(3, 6, 1),
    borrow(4, 5, 8),
    borrow(4, 7, 9),
    borrow(99, 8, 1),
    borrow(99, 8, 2),
    borrow(99, 8, 3),
]


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def clock():
    return lambda: NOW


@pytest.fixture
def catalog():
    return InMemoryCatalog(BOOKS)


@pytest.fixture
def history():
    return InMemoryBorrowHistory(RECORDS)


@pytest.fixture
def users():
    return InMemoryUserDirectory(USERS)


@pytest.fixture
def embedding_store():
    store = EmbeddingStore(ArrayEmbeddingBackend())
    for book_id, vector in EMBEDDINGS.items():
        store.upsert(book_id, vector, "test-model")
    return store


@pytest.fixture
def engine(history, catalog, embedding_store, users, clock):
    return RecommendationEngine(history, catalog, embedding_store, users=users, clock=clock)
