"""Catalogue import and embedding backfill."""

from .loader import ProblemImport, load_problems_file, parse_problems
from .pipeline import BackfillResult, EmbeddingBackfill

__all__ = [
    "ProblemImport",
    "load_problems_file",
    "parse_problems",
    "BackfillResult",
    "EmbeddingBackfill",
]
