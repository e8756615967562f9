"""
Configuration for the problem store and search providers.

Values resolve from explicit arguments first, then environment variables,
then defaults.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path


DEFAULT_DB_PATH = "~/.prep_search/problems.duckdb"
ENV_DB_PATH = "PREP_SEARCH_DB_PATH"

DEFAULT_EMBEDDING_MODEL = "gemini-embedding-001"
DEFAULT_EMBEDDING_DIM = 768
DEFAULT_EMBEDDING_BATCH_SIZE = 50
DEFAULT_CHAT_MODEL = "gemini-2.0-flash"
DEFAULT_REQUEST_TIMEOUT_S = 30.0
DEFAULT_MAX_QUERY_LIMIT = 500

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def resolve_db_path(override_path: str | None = None) -> str:
    """
    Resolve the DuckDB path from CLI override, env var, or default.

    Precedence:
    1) explicit override_path
    2) PREP_SEARCH_DB_PATH
    3) default path
    """
    raw_path = override_path or os.getenv(ENV_DB_PATH) or DEFAULT_DB_PATH
    resolved = Path(raw_path).expanduser().resolve()
    resolved.parent.mkdir(parents=True, exist_ok=True)
    return str(resolved)


@dataclass(frozen=True)
class SearchSettings:
    """Process-wide settings for the search providers."""

    api_key: str | None = None
    db_path: str | None = None
    embedding_model: str = DEFAULT_EMBEDDING_MODEL
    embedding_dim: int = DEFAULT_EMBEDDING_DIM
    embedding_batch_size: int = DEFAULT_EMBEDDING_BATCH_SIZE
    chat_model: str = DEFAULT_CHAT_MODEL
    request_timeout_s: float = DEFAULT_REQUEST_TIMEOUT_S
    max_query_limit: int = DEFAULT_MAX_QUERY_LIMIT
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, *, db_path: str | None = None) -> SearchSettings:
        return cls(
            api_key=os.getenv("GOOGLE_API_KEY"),
            db_path=db_path or os.getenv(ENV_DB_PATH),
            embedding_model=os.getenv(
                "PREP_SEARCH_EMBEDDING_MODEL", DEFAULT_EMBEDDING_MODEL
            ),
            embedding_dim=int(
                os.getenv("PREP_SEARCH_EMBEDDING_DIM", str(DEFAULT_EMBEDDING_DIM))
            ),
            embedding_batch_size=int(
                os.getenv(
                    "PREP_SEARCH_EMBEDDING_BATCH_SIZE",
                    str(DEFAULT_EMBEDDING_BATCH_SIZE),
                )
            ),
            chat_model=os.getenv("PREP_SEARCH_CHAT_MODEL", DEFAULT_CHAT_MODEL),
            request_timeout_s=float(
                os.getenv(
                    "PREP_SEARCH_REQUEST_TIMEOUT_S", str(DEFAULT_REQUEST_TIMEOUT_S)
                )
            ),
            max_query_limit=int(
                os.getenv("PREP_SEARCH_MAX_QUERY_LIMIT", str(DEFAULT_MAX_QUERY_LIMIT))
            ),
            log_level=os.getenv("PREP_SEARCH_LOG_LEVEL", "INFO").upper(),
        )

    @property
    def request_timeout_ms(self) -> int:
        return int(self.request_timeout_s * 1000)

    def resolved_db_path(self) -> str:
        return resolve_db_path(self.db_path)


def configure_logging(level: str | int = "INFO") -> None:
    """Install a root handler once; later calls only adjust the level."""
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(format=LOG_FORMAT)
    root.setLevel(level)
