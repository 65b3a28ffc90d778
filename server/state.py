"""Application state: collaborators, embedding store and the recommendation engine."""

import json
import logging
from pathlib import Path
from typing import Optional

from shelfwise.embedding import DEFAULT_MODEL_NAME, EmbeddingStore, create_embedding_backend
from shelfwise.providers import (
    BookCatalogProvider,
    BorrowHistoryProvider,
    InMemoryBorrowHistory,
    InMemoryCatalog,
    JsonBorrowHistory,
    JsonCatalog,
    JsonUserDirectory,
    UserDirectory,
)
from shelfwise.recommendation_engine import RecommendationEngine
from shelfwise.utils import Deadline

from .config import ServerConfig, get_config

logger = logging.getLogger(__name__)


def load_embeddings_json(path: Path, store: EmbeddingStore) -> int:
    """
    Seed the store from {"embeddings": [{"book_id", "vector", "model_name"}]}
    or a plain {book_id: vector} map. Returns the number of rows loaded.
    """
    if not path.exists():
        return 0
    with open(path) as f:
        data = json.load(f)
    if isinstance(data, dict) and isinstance(data.get("embeddings"), list):
        rows = data["embeddings"]
    elif isinstance(data, dict):
        rows = [{"book_id": k, "vector": v} for k, v in data.items()]
    else:
        rows = data
    loaded = 0
    for row in rows:
        store.upsert(int(row["book_id"]), row["vector"], row.get("model_name") or DEFAULT_MODEL_NAME)
        loaded += 1
    return loaded


class AppState:
    """Global application state."""

    def __init__(
        self,
        config: ServerConfig,
        catalog: Optional[BookCatalogProvider] = None,
        history: Optional[BorrowHistoryProvider] = None,
        users: Optional[UserDirectory] = None,
        embeddings: Optional[EmbeddingStore] = None,
    ):
        self.config = config
        self.catalog = catalog if catalog is not None else self._create_catalog(config)
        self.history = history if history is not None else self._create_history(config)
        self.users = users if users is not None else JsonUserDirectory(config.users_json_path)

        if embeddings is None:
            embeddings = EmbeddingStore(
                create_embedding_backend(
                    config.qdrant_url,
                    scan_limit=config.embedding_scan_limit,
                    dimensions=config.embedding_dimensions,
                )
            )
            loaded = load_embeddings_json(config.embeddings_json_path, embeddings)
            logger.info("[startup] EMBEDDINGS_LOADED count=%s", loaded)
        self.embeddings = embeddings
        logger.info("[startup] Embedding backend: %s", self.embeddings.backend_name)

        self.engine = RecommendationEngine(
            self.history, self.catalog, self.embeddings, users=self.users
        )

    @staticmethod
    def _create_catalog(config: ServerConfig) -> BookCatalogProvider:
        if config.books_json_path.exists():
            return JsonCatalog(config.books_json_path)
        logger.warning("[startup] Books JSON not found at %s, catalog is empty", config.books_json_path)
        return InMemoryCatalog()

    @staticmethod
    def _create_history(config: ServerConfig) -> BorrowHistoryProvider:
        if config.records_json_path.exists():
            return JsonBorrowHistory(config.records_json_path)
        logger.warning(
            "[startup] Borrow records JSON not found at %s, history is empty", config.records_json_path
        )
        return InMemoryBorrowHistory()

    def new_deadline(self) -> Deadline:
        """Deadline for one request, from REQUEST_TIMEOUT_SECONDS."""
        return Deadline(self.config.request_timeout_seconds)


_state: Optional[AppState] = None


def get_state() -> AppState:
    global _state
    if _state is None:
        config = get_config()
        _state = AppState(config)
    return _state


def set_state(state: Optional[AppState]) -> None:
    """Install a prebuilt state (tests, embedding in another process); None resets."""
    global _state
    _state = state


__all__ = ["AppState", "get_state", "load_embeddings_json", "set_state"]
