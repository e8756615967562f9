"""Storage backends for the problem catalogue."""

from .base import ProblemRecord, ProblemRepository, StorageBackend
from .duckdb import DuckDBProblemStorage

__all__ = [
    "ProblemRecord",
    "ProblemRepository",
    "StorageBackend",
    "DuckDBProblemStorage",
]
