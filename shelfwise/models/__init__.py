"""Data models for the recommender."""

from .book import Book, BorrowRecord, Role, User, ensure_books, ensure_records, is_admin
from .config import DEFAULT_CONFIG, RecommendationConfig, SemanticMode, resolve_config
from .errors import DeadlineExceededError, NotFoundError, RecommendationError, ServerError
from .explanation import ExplanationPath, PathType, RecommendationExplanation, RecommendedBook
from .profile import ProfileMode, UserProfile

__all__ = [
    "Book",
    "BorrowRecord",
    "DEFAULT_CONFIG",
    "DeadlineExceededError",
    "ExplanationPath",
    "NotFoundError",
    "PathType",
    "ProfileMode",
    "RecommendationConfig",
    "RecommendationError",
    "RecommendationExplanation",
    "RecommendedBook",
    "Role",
    "SemanticMode",
    "ServerError",
    "User",
    "UserProfile",
    "ensure_books",
    "ensure_records",
    "is_admin",
    "resolve_config",
]
