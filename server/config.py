"""
Server Configuration

Loads configuration from environment variables and provides defaults.
A .env file at the project root is loaded with python-dotenv.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple

from dotenv import load_dotenv

root_env = Path(__file__).resolve().parent.parent / ".env"
if root_env.exists():
    load_dotenv(root_env)


def _int_env(key: str, default: Optional[int]) -> Optional[int]:
    v = os.getenv(key)
    if not v:
        return default
    try:
        return int(v)
    except ValueError:
        return default


def _float_env(key: str, default: Optional[float]) -> Optional[float]:
    v = os.getenv(key)
    if not v:
        return default
    try:
        return float(v)
    except ValueError:
        return default


@dataclass
class ServerConfig:
    """Server configuration."""

    # Server settings
    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "INFO"

    # JSON collaborators: books.json, borrow_records.json, users.json, embeddings.json
    data_dir: Path = Path(__file__).parent.parent / "data"

    # Embedding store: Qdrant URL (":memory:" for in-process), else capped linear scan
    qdrant_url: Optional[str] = None
    embedding_scan_limit: int = 1000
    embedding_dimensions: Optional[int] = None

    # Per-request deadline; None disables it
    request_timeout_seconds: Optional[float] = 10.0

    @property
    def books_json_path(self) -> Path:
        return self.data_dir / "books.json"

    @property
    def records_json_path(self) -> Path:
        return self.data_dir / "borrow_records.json"

    @property
    def users_json_path(self) -> Path:
        return self.data_dir / "users.json"

    @property
    def embeddings_json_path(self) -> Path:
        return self.data_dir / "embeddings.json"

    @classmethod
    def from_env(cls) -> "ServerConfig":
        """Load configuration from environment variables."""
        base_dir = Path(__file__).parent.parent
        data_dir = Path(os.getenv("DATA_DIR", str(base_dir / "data")))
        if not data_dir.is_absolute():
            data_dir = (base_dir / data_dir).resolve()
        timeout = _float_env("REQUEST_TIMEOUT_SECONDS", 10.0)
        return cls(
            host=os.getenv("HOST", "0.0.0.0"),
            port=_int_env("PORT", 8000),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            data_dir=data_dir,
            qdrant_url=os.getenv("QDRANT_URL") or None,
            embedding_scan_limit=_int_env("EMBEDDING_SCAN_LIMIT", 1000),
            embedding_dimensions=_int_env("EMBEDDING_DIMENSIONS", None),
            request_timeout_seconds=timeout if timeout and timeout > 0 else None,
        )

    def validate(self) -> Tuple[bool, List[str]]:
        """
        Validate the configuration.

        Returns:
            (is_valid, list_of_errors)
        """
        errors = []
        if not self.data_dir.exists():
            errors.append(f"Data directory not found: {self.data_dir}")
        if self.embedding_scan_limit <= 0:
            errors.append("EMBEDDING_SCAN_LIMIT must be positive")
        return len(errors) == 0, errors


# Global config instance
_config: Optional[ServerConfig] = None


def get_config() -> ServerConfig:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = ServerConfig.from_env()
    return _config


def reload_config() -> ServerConfig:
    """Reload configuration from environment."""
    global _config
    _config = None
    return get_config()
