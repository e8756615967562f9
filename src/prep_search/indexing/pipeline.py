"""
Embedding backfill for problem titles.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol

from ..storage import StorageBackend

logger = logging.getLogger(__name__)


class TextEmbedder(Protocol):
    def embed_texts(
        self, texts: list[str], *, task_type: str = "RETRIEVAL_DOCUMENT"
    ) -> list[list[float]]: ...


@dataclass(frozen=True)
class BackfillResult:
    """Summary output for an embedding backfill run."""

    problems_seen: int
    embeddings_written: int


class EmbeddingBackfill:
    """Embed problem titles that have no stored vector yet."""

    def __init__(
        self,
        storage: StorageBackend,
        embedding_provider: TextEmbedder,
    ) -> None:
        self.storage = storage
        self.embedding_provider = embedding_provider

    def run(self, *, force: bool = False) -> BackfillResult:
        problems = (
            self.storage.list_problems()
            if force
            else self.storage.find_problems_missing_embeddings()
        )
        if not problems:
            return BackfillResult(problems_seen=0, embeddings_written=0)

        titles = [problem.title for problem in problems]
        embeddings = self.embedding_provider.embed_texts(titles)
        if len(embeddings) != len(titles):
            raise ValueError(
                f"Embedding provider returned {len(embeddings)} vectors "
                f"for {len(titles)} titles."
            )

        pairs: list[tuple[str, list[float]]] = [
            (problem.id, emb)
            for problem, emb in zip(problems, embeddings)
            if emb
        ]
        written = self.storage.store_problem_embeddings(pairs)
        logger.info(
            "Embedded %d of %d problem titles", written, len(problems)
        )
        return BackfillResult(problems_seen=len(problems), embeddings_written=written)
