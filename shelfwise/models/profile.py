"""
User taste profile: ephemeral aggregate of recent borrow embeddings.
"""

from enum import Enum
from typing import List

import numpy as np
from pydantic import BaseModel, ConfigDict, Field


class ProfileMode(str, Enum):
    MEAN = "mean"
    TIME_DECAYED = "time_decayed"


class UserProfile(BaseModel):
    """
    Profile vector plus the category history used by deep-match scoring.

    source_count: borrow records that contributed a vector (0 on cold start).
    recent_book_ids: those records' book ids, newest first.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    vector: np.ndarray
    top_categories: List[str] = Field(default_factory=list)
    source_count: int = 0
    recent_book_ids: List[int] = Field(default_factory=list)
    cold_start: bool = False

    @property
    def dimension(self) -> int:
        return int(self.vector.shape[0])
