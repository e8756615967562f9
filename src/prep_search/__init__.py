"""
PrepSearch - semantic search over interview coding problems.

Ranks a catalogue of coding problems against a company/role pair or a
free-text phrase using title embeddings from Google GenAI, and re-ranks
free-text results with a language model.

Example usage:
    >>> from prep_search import ProblemSearchService, SearchSettings
    >>> from prep_search import DuckDBProblemStorage
    >>> storage = DuckDBProblemStorage("problems.duckdb")
    >>> service = ProblemSearchService.from_settings(SearchSettings.from_env(), storage)
    >>> problems = service.rank_by_query("swiggy sde1", limit=20)
"""

from .config import SearchSettings, configure_logging, resolve_db_path
from .embeddings import EmbeddingProvider
from .errors import (
    CatalogueUnavailable,
    EmbeddingUnavailable,
    InvalidSearchRequest,
    ProblemNotFound,
    SearchError,
)
from .llm import LanguageModel
from .search import (
    LLMReranker,
    ProblemRanker,
    ProblemSearchService,
    QueryRewriter,
    cosine_similarity,
)
from .storage import DuckDBProblemStorage, ProblemRecord, ProblemRepository

__all__ = [
    # Configuration
    "SearchSettings",
    "configure_logging",
    "resolve_db_path",
    # Providers
    "EmbeddingProvider",
    "LanguageModel",
    # Errors
    "CatalogueUnavailable",
    "EmbeddingUnavailable",
    "InvalidSearchRequest",
    "ProblemNotFound",
    "SearchError",
    # Search
    "LLMReranker",
    "ProblemRanker",
    "ProblemSearchService",
    "QueryRewriter",
    "cosine_similarity",
    # Storage
    "DuckDBProblemStorage",
    "ProblemRecord",
    "ProblemRepository",
]
