"""
Shelfwise Recommendation API: FastAPI app factory.

Use: uvicorn server.app:app
Or:  from server import app
"""

import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import get_config
from .routes import register_routes
from .state import AppState, get_state, set_state

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


def create_app(state: Optional[AppState] = None) -> FastAPI:
    """Build FastAPI app with CORS, routes, and startup."""
    configure_logging(state.config.log_level if state is not None else get_config().log_level)
    if state is not None:
        set_state(state)

    app = FastAPI(
        title="Shelfwise Recommendation API",
        description="Hybrid graph + semantic book recommendations with explanations",
        version="1.0.0",
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_routes(app)

    @app.on_event("startup")
    def _startup_logging():
        current = get_state()
        ok, errors = current.config.validate()
        for error in errors:
            logger.warning("[startup] CONFIG %s", error)
        logger.info(
            "[startup] Shelfwise API ready data_dir=%s embeddings=%s backend=%s",
            current.config.data_dir, len(current.embeddings), current.embeddings.backend_name,
        )

    return app


app = create_app()
