"""
Personalized PageRank over the interaction graph.

r_{t+1} = (1 - alpha) * M^T r_t + alpha * e_seed, run for exactly
max_iterations steps. There is no convergence early exit, so the latency
and the output are fixed for a given graph.
"""

import logging
from typing import Callable, Dict, Iterable, List, Optional

import numpy as np

from ..models.explanation import ExplanationPath, PathType, RecommendationExplanation
from ..utils.deadline import Deadline, resolve_deadline
from .interaction_graph import InteractionGraph, NodeKey, NodeType, book_node, user_node

logger = logging.getLogger(__name__)

DEFAULT_RESTART_PROBABILITY = 0.15
DEFAULT_MAX_ITERATIONS = 30
MAX_PATHS_PER_BOOK = 3

TitleLookup = Callable[[int], Optional[str]]


def _describe(path: ExplanationPath, title_of: TitleLookup) -> str:
    target = title_of(path.target_book_id) or f"book {path.target_book_id}"
    if path.type == PathType.COLLABORATIVE and path.source_book_id is not None:
        source = title_of(path.source_book_id) or f"book {path.source_book_id}"
        return f"You borrowed \"{source}\"; readers who borrowed it also borrowed \"{target}\""
    return f"Readers with similar borrowing habits borrowed \"{target}\""


class PersonalizedPageRankEngine:
    """Fixed-iteration PPR seeded at one user node."""

    def __init__(
        self,
        restart_probability: float = DEFAULT_RESTART_PROBABILITY,
        max_iterations: int = DEFAULT_MAX_ITERATIONS,
    ):
        if not 0 < restart_probability < 1:
            raise ValueError("restart_probability must be in (0, 1)")
        if max_iterations <= 0:
            raise ValueError("max_iterations must be positive")
        self.restart_probability = restart_probability
        self.max_iterations = max_iterations

    def scores(
        self,
        graph: InteractionGraph,
        seed: NodeKey,
        deadline: Optional[Deadline] = None,
    ) -> Dict[NodeKey, float]:
        """Stationary-ish visit score per node after max_iterations steps."""
        deadline = resolve_deadline(deadline)
        index, src, dst, prob = graph.transition_edges()
        n = len(index)
        alpha = self.restart_probability

        restart = np.zeros(n)
        restart[index[seed]] = alpha
        rank = np.zeros(n)
        rank[index[seed]] = 1.0

        for _ in range(self.max_iterations):
            deadline.check("ppr")
            flow = np.bincount(dst, weights=rank[src] * prob, minlength=n)
            rank = (1.0 - alpha) * flow + restart

        keys = list(index)
        return {keys[i]: float(rank[i]) for i in range(n)}

    def explain(
        self,
        graph: InteractionGraph,
        seed_user_id: int,
        book_id: int,
        score: float,
    ) -> RecommendationExplanation:
        """Reconstruct seed -> seed book -> co-borrower -> target chains."""
        seed = user_node(seed_user_id)
        target = book_node(book_id)
        paths: List[ExplanationPath] = []

        for source, w1 in graph.neighbors(seed).items():
            for other, w2 in graph.neighbors(source).items():
                if other == seed or other[0] != NodeType.USER:
                    continue
                w3 = graph.edge_weight(other, target)
                if w3 <= 0:
                    continue
                paths.append(
                    ExplanationPath(
                        type=PathType.COLLABORATIVE,
                        source_book_id=source[1],
                        target_book_id=book_id,
                        contribution=(w1 + w2 + w3) / 3.0,
                    )
                )

        explanation = RecommendationExplanation(book_id=book_id, score=score)
        if paths:
            paths.sort(key=lambda p: (-p.contribution, p.source_book_id))
            # one path per source book, strongest co-borrower wins
            seen_sources = set()
            for path in paths:
                if path.source_book_id in seen_sources:
                    continue
                seen_sources.add(path.source_book_id)
                explanation.add_path(path)
                if len(explanation.paths) >= MAX_PATHS_PER_BOOK:
                    break
        else:
            explanation.add_path(
                ExplanationPath(
                    type=PathType.DIRECT_BORROW,
                    target_book_id=book_id,
                    contribution=score,
                )
            )
        return explanation

    def rank(
        self,
        graph: InteractionGraph,
        seed_user_id: int,
        top_n: int,
        exclude_book_ids: Optional[Iterable[int]] = None,
        deadline: Optional[Deadline] = None,
        title_of: Optional[TitleLookup] = None,
    ) -> List[RecommendationExplanation]:
        """
        Top-N unborrowed books by PPR score, ties broken by ascending book id.

        A seed that is absent or has no edges yields [].
        """
        seed = user_node(seed_user_id)
        if seed not in graph or not graph.neighbors(seed) or top_n <= 0:
            logger.info("[ppr] EMPTY_SEED user_id=%s", seed_user_id)
            return []

        # --- 1. Power iteration ---
        node_scores = self.scores(graph, seed, deadline=deadline)

        # --- 2. Book nodes minus the seed's own books ---
        excluded = set(graph.seed_book_ids)
        if exclude_book_ids:
            excluded.update(exclude_book_ids)
        books = [
            (key[1], score)
            for key, score in node_scores.items()
            if key[0] == NodeType.BOOK and key[1] not in excluded and score > 0
        ]
        books.sort(key=lambda item: (-item[1], item[0]))

        # --- 3. Explanations ---
        lookup = title_of or (lambda _book_id: None)
        results = []
        for book_id, score in books[:top_n]:
            explanation = self.explain(graph, seed_user_id, book_id, score)
            explanation.reason = _describe(explanation.paths[0], lookup)
            results.append(explanation)

        logger.info(
            "[ppr] RANKED user_id=%s candidates=%s returned=%s iterations=%s",
            seed_user_id, len(books), len(results), self.max_iterations,
        )
        return results
