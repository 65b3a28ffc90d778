"""
Ephemeral user-book interaction graph.

Undirected weighted bipartite graph built for one recommendation call and
discarded afterwards. Nodes are keyed (NodeType, id); repeated interactions
between the same user and book accumulate by summation.
"""

from collections import defaultdict
from enum import Enum
from typing import Dict, List, Optional, Set, Tuple

import numpy as np


class NodeType(str, Enum):
    USER = "user"
    BOOK = "book"


NodeKey = Tuple[NodeType, int]


def user_node(user_id: int) -> NodeKey:
    return (NodeType.USER, int(user_id))


def book_node(book_id: int) -> NodeKey:
    return (NodeType.BOOK, int(book_id))


class InteractionGraph:
    """Symmetric adjacency map plus the seed user's own borrowed books."""

    def __init__(self, seed_user_id: Optional[int] = None):
        self.seed_user_id = seed_user_id
        self.seed_book_ids: Set[int] = set()
        self._adj: Dict[NodeKey, Dict[NodeKey, float]] = {}

    def add_node(self, key: NodeKey) -> None:
        self._adj.setdefault(key, {})

    def add_interaction(self, user_id: int, book_id: int, weight: float) -> None:
        """Add one borrow interaction; an existing user-book edge accumulates."""
        u = user_node(user_id)
        b = book_node(book_id)
        self.add_node(u)
        self.add_node(b)
        self._adj[u][b] = self._adj[u].get(b, 0.0) + weight
        self._adj[b][u] = self._adj[b].get(u, 0.0) + weight
        if user_id == self.seed_user_id:
            self.seed_book_ids.add(int(book_id))

    def __contains__(self, key: NodeKey) -> bool:
        return key in self._adj

    @property
    def node_count(self) -> int:
        return len(self._adj)

    @property
    def edge_count(self) -> int:
        return sum(len(n) for n in self._adj.values()) // 2

    def neighbors(self, key: NodeKey) -> Dict[NodeKey, float]:
        return self._adj.get(key, {})

    def edge_weight(self, a: NodeKey, b: NodeKey) -> float:
        return self._adj.get(a, {}).get(b, 0.0)

    def book_ids(self) -> List[int]:
        return sorted(key[1] for key in self._adj if key[0] == NodeType.BOOK)

    def nodes(self) -> List[NodeKey]:
        """All nodes in a fixed order (type, then id)."""
        return sorted(self._adj, key=lambda k: (k[0].value, k[1]))

    def transition_edges(self) -> Tuple[Dict[NodeKey, int], np.ndarray, np.ndarray, np.ndarray]:
        """
        Edge-list form of the row-stochastic transition matrix M.

        Returns (index, src, dst, prob) where prob[i] = w(src, dst) / sum_k w(src, k).
        Nodes with no outgoing weight contribute no rows.
        """
        index = {key: i for i, key in enumerate(self.nodes())}
        src: List[int] = []
        dst: List[int] = []
        prob: List[float] = []
        for key, edges in self._adj.items():
            total = sum(edges.values())
            if total <= 0:
                continue
            i = index[key]
            for neighbor, weight in edges.items():
                src.append(i)
                dst.append(index[neighbor])
                prob.append(weight / total)
        return (
            index,
            np.asarray(src, dtype=np.int64),
            np.asarray(dst, dtype=np.int64),
            np.asarray(prob, dtype=np.float64),
        )

    def degree_summary(self) -> Dict[str, int]:
        counts: Dict[str, int] = defaultdict(int)
        for key in self._adj:
            counts[key[0].value] += 1
        return dict(counts)
