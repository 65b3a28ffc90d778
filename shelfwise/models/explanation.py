"""
Explanation model: why a book was recommended.

RecommendationExplanation carries a book's raw path score plus the provenance
paths a UI can show as tooltips. RecommendedBook is the response item after
fusion and display normalization.
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class PathType(str, Enum):
    # seed borrowed a book a co-borrower also borrowed, and that co-borrower borrowed the target
    COLLABORATIVE = "COLLABORATIVE"
    # a neighboring borrower borrowed the target directly
    DIRECT_BORROW = "DIRECT_BORROW"
    # target is close to the reader's profile in embedding space
    SEMANTIC = "SEMANTIC"


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ExplanationPath(_CamelModel):
    type: PathType
    target_book_id: int
    contribution: float
    source_book_id: Optional[int] = None


class RecommendationExplanation(_CamelModel):
    """A scored book from one recall path, with provenance."""

    book_id: int
    score: float
    reason: str = ""
    paths: List[ExplanationPath] = Field(default_factory=list)
    ai_enhanced: bool = False

    def add_path(self, path: ExplanationPath) -> None:
        self.paths.append(path)


class RecommendedBook(_CamelModel):
    """One row of the ranked list returned to callers."""

    book_id: int
    title: str = ""
    author: str = ""
    category: Optional[str] = None
    available_count: int = 0
    score: float
    reason: str = ""
    ai_enhanced: bool = False
    paths: List[ExplanationPath] = Field(default_factory=list)
