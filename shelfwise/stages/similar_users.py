"""
Readers with similar borrowing: Jaccard overlap of borrowed-book sets.
"""

import logging
from typing import List, Set

from pydantic import BaseModel

from ..models.book import is_admin
from ..providers.history import BorrowHistoryProvider
from ..providers.users import UserDirectory

logger = logging.getLogger(__name__)


class SimilarUser(BaseModel):
    user_id: int
    username: str
    similarity: float
    common_books: int


def jaccard(a: Set[int], b: Set[int]) -> float:
    union = a | b
    if not union:
        return 0.0
    return len(a & b) / len(union)


def find_similar_users(
    user_id: int,
    history: BorrowHistoryProvider,
    users: UserDirectory,
    top_n: int = 10,
) -> List[SimilarUser]:
    """Other non-admin readers ranked by Jaccard similarity (ties by user id)."""
    mine = {r.book_id for r in history.find_by_user_id(user_id)}
    scored: List[SimilarUser] = []
    for other in users.all_users():
        if other.id == user_id or is_admin(other):
            continue
        theirs = {r.book_id for r in history.find_by_user_id(other.id)}
        scored.append(
            SimilarUser(
                user_id=other.id,
                username=other.username,
                similarity=jaccard(mine, theirs),
                common_books=len(mine & theirs),
            )
        )
    scored.sort(key=lambda s: (-s.similarity, s.user_id))
    logger.info("[similar_users] RANKED user_id=%s compared=%s", user_id, len(scored))
    return scored[: max(0, top_n)]
