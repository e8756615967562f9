"""
Embedding provider for problem-title semantic search.

Wraps the Google GenAI embedding API for batch and single-query embedding
with configurable model, dimensions, batch size, and request timeout.
"""

from __future__ import annotations

import os
from typing import Any

from google.genai import Client as GenAIClient
from google.genai.types import HttpOptions

from .config import (
    DEFAULT_EMBEDDING_BATCH_SIZE,
    DEFAULT_EMBEDDING_DIM,
    DEFAULT_EMBEDDING_MODEL,
    SearchSettings,
)


class EmbeddingProvider:
    """Generate text embeddings via Google GenAI."""

    def __init__(
        self,
        *,
        api_key: str | None = None,
        model: str | None = None,
        dim: int | None = None,
        batch_size: int | None = None,
        timeout_ms: int | None = None,
        client: Any | None = None,
    ) -> None:
        self.model = model or os.getenv(
            "PREP_SEARCH_EMBEDDING_MODEL", DEFAULT_EMBEDDING_MODEL
        )
        self.dim = dim or int(
            os.getenv("PREP_SEARCH_EMBEDDING_DIM", str(DEFAULT_EMBEDDING_DIM))
        )
        self.batch_size = batch_size or int(
            os.getenv(
                "PREP_SEARCH_EMBEDDING_BATCH_SIZE", str(DEFAULT_EMBEDDING_BATCH_SIZE)
            )
        )

        if client is not None:
            self._client = client
        else:
            resolved_key = api_key or os.getenv("GOOGLE_API_KEY")
            if resolved_key is None:
                raise ValueError(
                    "GOOGLE_API_KEY not found. "
                    "Provide api_key or set the environment variable."
                )
            self._client = GenAIClient(
                api_key=resolved_key,
                http_options=HttpOptions(timeout=timeout_ms),
            )

    @classmethod
    def from_settings(
        cls, settings: SearchSettings, *, client: Any | None = None
    ) -> EmbeddingProvider:
        return cls(
            api_key=settings.api_key,
            model=settings.embedding_model,
            dim=settings.embedding_dim,
            batch_size=settings.embedding_batch_size,
            timeout_ms=settings.request_timeout_ms,
            client=client,
        )

    def embed_texts(
        self,
        texts: list[str],
        *,
        task_type: str = "RETRIEVAL_DOCUMENT",
    ) -> list[list[float]]:
        """Embed a list of texts in batches.

        Returns a list of embedding vectors in the same order as *texts*.
        """
        all_embeddings: list[list[float]] = []
        for start in range(0, len(texts), self.batch_size):
            batch = texts[start : start + self.batch_size]
            result = self._client.models.embed_content(
                model=self.model,
                contents=batch,
                config={
                    "task_type": task_type,
                    "output_dimensionality": self.dim,
                },
            )
            for emb in result.embeddings or []:
                all_embeddings.append(list(emb.values or []))
        return all_embeddings

    def embed_query(self, query: str) -> list[float]:
        """Embed a single query text for retrieval.

        Returns an empty list when the API answers without a vector.
        """
        result = self._client.models.embed_content(
            model=self.model,
            contents=[query],
            config={
                "task_type": "RETRIEVAL_QUERY",
                "output_dimensionality": self.dim,
            },
        )
        if not result.embeddings:
            return []
        return list(result.embeddings[0].values or [])
