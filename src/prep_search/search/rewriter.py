"""
Language-model query rewriting for embedding retrieval.
"""

from __future__ import annotations

import logging
from typing import Protocol

logger = logging.getLogger(__name__)

REWRITE_SYSTEM_PROMPT = (
    "You are a search query optimizer. Generate concise, effective search queries."
)

REWRITE_PROMPT_TEMPLATE = """You are a search query optimizer. Given a user's search query about interview questions, generate an optimized search query that will help find the most relevant coding problems.

User query: "{query}"

Generate an optimized search query that includes:
- Company name (if mentioned)
- Role/level (if mentioned, e.g., SDE1, SDE2, SWE, etc.)
- Context about interview questions and coding problems

Return ONLY the optimized search query, nothing else."""

REWRITE_TEMPERATURE = 0.3
REWRITE_MAX_TOKENS = 100

QUERY_CONTEXT_SUFFIX = "interview questions software engineering coding problems"


class CompletionModel(Protocol):
    def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        *,
        temperature: float,
        max_tokens: int,
    ) -> str: ...


def fallback_query(user_query: str) -> str:
    """Deterministic search phrase used when rewriting is unavailable."""
    return f"{user_query} {QUERY_CONTEXT_SUFFIX}"


class QueryRewriter:
    """Turn a raw user phrase into a retrieval-friendly search phrase."""

    def __init__(self, llm: CompletionModel) -> None:
        self.llm = llm

    def rewrite(self, user_query: str) -> str:
        try:
            optimized = self.llm.complete(
                REWRITE_SYSTEM_PROMPT,
                REWRITE_PROMPT_TEMPLATE.format(query=user_query),
                temperature=REWRITE_TEMPERATURE,
                max_tokens=REWRITE_MAX_TOKENS,
            )
        except Exception as exc:
            logger.warning("Query rewrite failed for %r, using fallback: %s", user_query, exc)
            return fallback_query(user_query)

        optimized = (optimized or "").strip()
        if not optimized:
            logger.warning("Query rewrite returned no text for %r, using fallback", user_query)
            return fallback_query(user_query)

        logger.debug("Rewrote %r -> %r", user_query, optimized)
        return optimized
