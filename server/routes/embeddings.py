"""Book embedding upsert and lookup endpoints."""

from fastapi import APIRouter, HTTPException

from shelfwise.embedding import DEFAULT_MODEL_NAME

from ..models import EmbeddingResponse, UpsertEmbeddingRequest
from ..state import get_state

router = APIRouter()


def _response(book_id: int, vector, backend: str) -> EmbeddingResponse:
    values = [float(x) for x in vector]
    return EmbeddingResponse(book_id=book_id, dimensions=len(values), vector=values, backend=backend)


@router.put("/{book_id}", response_model=EmbeddingResponse)
def upsert_embedding(book_id: int, request: UpsertEmbeddingRequest):
    """Insert or replace the book's current vector (last write wins)."""
    state = get_state()
    try:
        state.embeddings.upsert(book_id, request.vector, request.model_name or DEFAULT_MODEL_NAME)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _response(book_id, request.vector, state.embeddings.backend_name)


@router.get("/{book_id}", response_model=EmbeddingResponse)
def get_embedding(book_id: int):
    state = get_state()
    vector = state.embeddings.get_embedding(book_id)
    if vector is None:
        raise HTTPException(status_code=404, detail=f"No embedding for book {book_id}")
    return _response(book_id, vector, state.embeddings.backend_name)
