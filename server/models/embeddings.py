"""Embedding upsert and lookup payloads."""

from typing import List, Optional

from pydantic import Field

from .common import CamelModel


class UpsertEmbeddingRequest(CamelModel):
    vector: List[float] = Field(..., min_length=1)
    model_name: Optional[str] = None


class EmbeddingResponse(CamelModel):
    book_id: int
    dimensions: int
    vector: List[float]
    backend: str
