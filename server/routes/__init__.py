"""Register all route modules on the FastAPI app."""

from fastapi import FastAPI

from .embeddings import router as embeddings_router
from .recommendations import router as recommendations_router
from .root import router as root_router
from .trending import router as trending_router


def register_routes(app: FastAPI) -> None:
    """Attach all API routers to the app."""
    app.include_router(root_router)
    app.include_router(recommendations_router, prefix="/api/recommendations", tags=["recommendations"])
    app.include_router(trending_router, prefix="/api/trending", tags=["trending"])
    app.include_router(embeddings_router, prefix="/api/embeddings", tags=["embeddings"])
