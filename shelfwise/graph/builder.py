"""
Interaction graph builder.

Expands the seed user's neighbourhood two hops out of the borrow history:
seed -> seed's books -> co-borrowers -> co-borrowers' other books.
Edge weight per interaction = behavior_weight * exp(-lambda * age_days).
"""

import logging
from datetime import datetime
from typing import Callable, List, Optional, Set

from ..models.book import BorrowRecord
from ..models.config import RecommendationConfig
from ..providers.history import BorrowHistoryProvider
from ..utils.deadline import Deadline, resolve_deadline
from ..utils.scores import days_between, exponential_decay, utc_now
from .interaction_graph import InteractionGraph, user_node

logger = logging.getLogger(__name__)

# Floor for very old interactions so every edge weight stays strictly positive.
MIN_EDGE_WEIGHT = 1e-12

DEFAULT_MAX_CO_BORROWERS_PER_BOOK = 50
DEFAULT_MAX_BOOKS_PER_NEIGHBOR = 50


class InteractionGraphBuilder:
    """Builds the per-request subgraph for one seed user."""

    def __init__(
        self,
        history: BorrowHistoryProvider,
        lambda_: float = 0.05,
        behavior_weight: float = 1.0,
        max_co_borrowers_per_book: int = DEFAULT_MAX_CO_BORROWERS_PER_BOOK,
        max_books_per_neighbor: int = DEFAULT_MAX_BOOKS_PER_NEIGHBOR,
        clock: Callable[[], datetime] = utc_now,
    ):
        if behavior_weight <= 0:
            raise ValueError("behavior_weight must be positive")
        if lambda_ < 0:
            raise ValueError("lambda_ must be non-negative")
        self.history = history
        self.lambda_ = lambda_
        # one interaction never weighs more than 1
        self.behavior_weight = min(behavior_weight, 1.0)
        self.max_co_borrowers_per_book = max_co_borrowers_per_book
        self.max_books_per_neighbor = max_books_per_neighbor
        self.clock = clock

    @classmethod
    def from_config(
        cls,
        history: BorrowHistoryProvider,
        config: RecommendationConfig,
        clock: Callable[[], datetime] = utc_now,
    ) -> "InteractionGraphBuilder":
        return cls(
            history,
            lambda_=config.lambda_,
            behavior_weight=config.behavior_weight,
            max_co_borrowers_per_book=config.max_co_borrowers_per_book,
            max_books_per_neighbor=config.max_books_per_neighbor,
            clock=clock,
        )

    def edge_weight(self, borrow_time: datetime, now: datetime) -> float:
        age = days_between(borrow_time, now)
        return max(MIN_EDGE_WEIGHT, self.behavior_weight * exponential_decay(age, self.lambda_))

    def _neighbor_records(self, user_id: int, seed_books: Set[int]) -> List[BorrowRecord]:
        """Co-borrower's records: all bridges to seed books, plus capped other books."""
        bridges: List[BorrowRecord] = []
        others: List[BorrowRecord] = []
        other_books: Set[int] = set()
        for record in self.history.find_by_user_id(user_id):
            if record.book_id in seed_books:
                bridges.append(record)
            elif record.book_id in other_books:
                others.append(record)
            elif len(other_books) < self.max_books_per_neighbor:
                other_books.add(record.book_id)
                others.append(record)
        return bridges + others

    def build(
        self,
        user_id: int,
        now: Optional[datetime] = None,
        deadline: Optional[Deadline] = None,
    ) -> InteractionGraph:
        """
        Build the seed user's subgraph.

        Returns an empty graph (node_count == 0) when the user has no borrow history.
        """
        deadline = resolve_deadline(deadline)
        now = now or self.clock()
        graph = InteractionGraph(seed_user_id=user_id)

        # --- 1. Seed user and their books (never capped) ---
        seed_records = self.history.find_by_user_id(user_id)
        if not seed_records:
            logger.warning("[graph] NO_HISTORY user_id=%s", user_id)
            return graph
        graph.add_node(user_node(user_id))
        seed_book_order: List[int] = []
        for record in seed_records:
            graph.add_interaction(user_id, record.book_id, self.edge_weight(record.borrow_time, now))
            if record.book_id not in seed_book_order:
                seed_book_order.append(record.book_id)
        seed_books = set(seed_book_order)

        # --- 2. Co-borrowers of each seed book, and their other books ---
        expanded_users = {user_id}
        for book_id in seed_book_order:
            deadline.check("graph_build")
            added = 0
            for co_record in self.history.find_by_book_id(book_id):
                if added >= self.max_co_borrowers_per_book:
                    break
                other_id = co_record.user_id
                if other_id in expanded_users:
                    continue
                expanded_users.add(other_id)
                added += 1
                for record in self._neighbor_records(other_id, seed_books):
                    graph.add_interaction(
                        other_id, record.book_id, self.edge_weight(record.borrow_time, now)
                    )

        logger.info(
            "[graph] BUILT user_id=%s nodes=%s edges=%s co_borrowers=%s",
            user_id, graph.node_count, graph.edge_count, len(expanded_users) - 1,
        )
        return graph
