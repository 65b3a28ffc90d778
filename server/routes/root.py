"""Root and health endpoints."""

from fastapi import APIRouter

from shelfwise import __version__

from ..state import get_state

router = APIRouter()


@router.get("/")
def root():
    state = get_state()
    return {
        "name": "Shelfwise Recommendation API",
        "version": __version__,
        "status": "ok",
        "current": {
            "books": len(state.catalog.search()),
            "embeddings_count": len(state.embeddings),
            "embedding_backend": state.embeddings.backend_name,
            "exact_similarity": state.embeddings.is_exact,
        },
        "endpoints": {
            "recommendations": [
                "/api/recommendations/{user_id}",
                "/api/recommendations/{user_id}/graph",
                "/api/recommendations/{user_id}/semantic",
                "/api/recommendations/{user_id}/ai",
                "/api/recommendations/{user_id}/similar-users",
            ],
            "trending": ["/api/trending"],
            "embeddings": ["/api/embeddings/{book_id}"],
        },
    }


@router.get("/api/health")
def health():
    state = get_state()
    return {
        "status": "healthy",
        "embeddings": {
            "backend": state.embeddings.backend_name,
            "count": len(state.embeddings),
        },
    }
