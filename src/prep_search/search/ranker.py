"""
Similarity ranking of the embedded problem pool.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol

from ..errors import EmbeddingUnavailable
from ..storage import ProblemRecord, ProblemRepository
from .similarity import cosine_similarity

logger = logging.getLogger(__name__)


class QueryEmbedder(Protocol):
    def embed_query(self, query: str) -> list[float]: ...


@dataclass(frozen=True)
class ScoredProblem:
    """A candidate problem paired with its similarity to the query."""

    problem: ProblemRecord
    score: float
    position: int


def score_candidates(
    query_embedding: list[float], candidates: list[ProblemRecord]
) -> list[ScoredProblem]:
    """Score every usable candidate, keeping its repository position."""
    scored: list[ScoredProblem] = []
    for position, problem in enumerate(candidates):
        embedding = problem.embedding
        if not embedding or len(embedding) != len(query_embedding):
            logger.debug(
                "Skipping problem %s: embedding has %d dims, query has %d",
                problem.id,
                len(embedding or []),
                len(query_embedding),
            )
            continue
        scored.append(
            ScoredProblem(
                problem=problem,
                score=cosine_similarity(query_embedding, embedding),
                position=position,
            )
        )
    return scored


def rank_problems(scored: list[ScoredProblem], *, limit: int) -> list[ScoredProblem]:
    """Sort by descending score, ties in repository order, and apply limit."""
    if limit <= 0:
        return []
    ordered = sorted(scored, key=lambda item: (-item.score, item.position))
    return ordered[:limit]


class ProblemRanker:
    """Embed a query and rank the embedded problem pool against it."""

    def __init__(
        self,
        repository: ProblemRepository,
        embedding_provider: QueryEmbedder,
    ) -> None:
        self.repository = repository
        self.embedding_provider = embedding_provider

    def embed(self, query: str) -> list[float]:
        try:
            embedding = self.embedding_provider.embed_query(query)
        except Exception as exc:
            raise EmbeddingUnavailable(
                "Failed to generate embedding for search query"
            ) from exc
        if not embedding:
            raise EmbeddingUnavailable("Failed to generate embedding for search query")
        return list(embedding)

    def rank(self, query: str, *, limit: int) -> list[ScoredProblem]:
        query_embedding = self.embed(query)
        candidates = self.repository.find_problems_with_embeddings()
        scored = score_candidates(query_embedding, candidates)
        ranked = rank_problems(scored, limit=limit)
        logger.info(
            "Ranked %d of %d candidates for %r, returning %d",
            len(scored),
            len(candidates),
            query,
            len(ranked),
        )
        return ranked
