"""Graph recall: interaction subgraph construction and Personalized PageRank."""

from .builder import InteractionGraphBuilder
from .interaction_graph import InteractionGraph, NodeType, book_node, user_node
from .ppr import PersonalizedPageRankEngine

__all__ = [
    "InteractionGraph",
    "InteractionGraphBuilder",
    "NodeType",
    "PersonalizedPageRankEngine",
    "book_node",
    "user_node",
]
