"""
Graph recall: interaction subgraph + Personalized PageRank for one user.
"""

import logging
from datetime import datetime
from typing import Callable, List, Optional

from ..graph.builder import InteractionGraphBuilder
from ..graph.ppr import PersonalizedPageRankEngine
from ..models.config import RecommendationConfig, resolve_config
from ..models.errors import NotFoundError
from ..models.explanation import RecommendationExplanation
from ..providers.catalog import BookCatalogProvider
from ..providers.history import BorrowHistoryProvider
from ..utils.deadline import Deadline
from ..utils.scores import utc_now

logger = logging.getLogger(__name__)

DEFAULT_GRAPH_TOP_N = 10


class GraphRecall:
    def __init__(
        self,
        history: BorrowHistoryProvider,
        catalog: BookCatalogProvider,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.history = history
        self.catalog = catalog
        self.clock = clock

    def _title(self, book_id: int) -> Optional[str]:
        book = self.catalog.find_by_id(book_id)
        return book.title if book is not None else None

    def recommend(
        self,
        user_id: int,
        config: Optional[RecommendationConfig] = None,
        top_n: int = DEFAULT_GRAPH_TOP_N,
        now: Optional[datetime] = None,
        deadline: Optional[Deadline] = None,
    ) -> List[RecommendationExplanation]:
        """
        PPR-ranked books with collaborative explanations.

        Raises:
            NotFoundError: the user has no borrowing history, or no book was reachable.
        """
        config = resolve_config(config)
        builder = InteractionGraphBuilder.from_config(self.history, config, clock=self.clock)
        graph = builder.build(user_id, now=now, deadline=deadline)
        if graph.node_count == 0:
            raise NotFoundError("no borrowing history")

        # books that left the catalog can still sit in old borrow records
        missing = {b for b in graph.book_ids() if self.catalog.find_by_id(b) is None}
        engine = PersonalizedPageRankEngine(config.restart_probability, config.max_iterations)
        results = engine.rank(
            graph,
            user_id,
            top_n,
            exclude_book_ids=missing,
            deadline=deadline,
            title_of=self._title,
        )
        if not results:
            raise NotFoundError("no suitable books")
        return results
