"""
Language-model re-ranking of similarity-ranked problems.

The model sees a numbered list of candidate titles and answers with a
comma-separated permutation of those numbers. Any answer that cannot be
turned into at least one valid index, and any failed call, leaves the
similarity order untouched.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import TypeAlias

from ..storage import ProblemRecord
from .rewriter import CompletionModel

logger = logging.getLogger(__name__)

MAX_RERANK_CANDIDATES = 150

RERANK_SYSTEM_PROMPT = (
    "You are an expert at ranking coding interview problems by relevance. "
    "Return only numbers."
)

RERANK_PROMPT_TEMPLATE = """Given a user's search query about interview questions, rank the following coding problems by relevance.

User query: "{query}"

Problems:
{listing}

Return ONLY a comma-separated list of numbers (1-{count}) representing the most relevant problems in order of relevance. Return exactly {limit} numbers."""

RERANK_TEMPERATURE = 0.2
RERANK_MAX_TOKENS = 200

_LEADING_INT = re.compile(r"[+-]?\d+")
_TOKEN_WRAPPERS = "[](){}\"' \t\r\n"


@dataclass(frozen=True)
class ParsedRanking:
    """Valid 0-based candidate indices, best first."""

    indices: tuple[int, ...]


@dataclass(frozen=True)
class RankingFallback:
    """Model output that yielded no usable ranking."""

    reason: str


RankingResult: TypeAlias = ParsedRanking | RankingFallback


def build_rerank_prompt(query: str, titles: list[str], limit: int) -> str:
    listing = "\n".join(f"{idx + 1}. {title}" for idx, title in enumerate(titles))
    return RERANK_PROMPT_TEMPLATE.format(
        query=query, listing=listing, count=len(titles), limit=limit
    )


def parse_ranking(text: str | None, *, candidate_count: int, limit: int) -> RankingResult:
    """Parse a comma-separated list of 1-based positions.

    Each token contributes its leading integer. Out-of-range, repeated and
    non-numeric tokens are dropped; at most *limit* indices are kept.
    """
    if not text or not text.strip():
        return RankingFallback("empty response")

    indices: list[int] = []
    seen: set[int] = set()
    for token in text.split(","):
        match = _LEADING_INT.match(token.strip(_TOKEN_WRAPPERS))
        if match is None:
            continue
        idx = int(match.group()) - 1
        if idx < 0 or idx >= candidate_count or idx in seen:
            continue
        seen.add(idx)
        indices.append(idx)
        if len(indices) >= limit:
            break

    if not indices:
        return RankingFallback(f"no valid indices in {text[:80]!r}")
    return ParsedRanking(tuple(indices))


def apply_ranking(
    candidates: list[ProblemRecord], ranking: ParsedRanking, *, limit: int
) -> list[ProblemRecord]:
    """Order candidates by *ranking*, then top up in original order."""
    reranked = [candidates[idx] for idx in ranking.indices][:limit]
    if len(reranked) < limit:
        used = set(ranking.indices)
        for idx, problem in enumerate(candidates):
            if len(reranked) >= limit:
                break
            if idx not in used:
                reranked.append(problem)
    return reranked


class LLMReranker:
    """Reorder the head of a similarity ranking with a language model."""

    def __init__(
        self,
        llm: CompletionModel,
        *,
        max_candidates: int = MAX_RERANK_CANDIDATES,
    ) -> None:
        self.llm = llm
        self.max_candidates = max_candidates

    def rerank(
        self, query: str, problems: list[ProblemRecord], limit: int
    ) -> list[ProblemRecord]:
        if limit <= 0 or not problems:
            return []

        candidates = problems[: min(self.max_candidates, len(problems))]
        prompt = build_rerank_prompt(query, [p.title for p in candidates], limit)

        try:
            text = self.llm.complete(
                RERANK_SYSTEM_PROMPT,
                prompt,
                temperature=RERANK_TEMPERATURE,
                max_tokens=RERANK_MAX_TOKENS,
            )
        except Exception as exc:
            logger.warning("Re-ranking failed for %r, keeping similarity order: %s", query, exc)
            return problems[:limit]

        result = parse_ranking(text, candidate_count=len(candidates), limit=limit)
        if isinstance(result, RankingFallback):
            logger.warning(
                "Re-ranking unusable for %r (%s), keeping similarity order",
                query,
                result.reason,
            )
            return problems[:limit]

        return apply_ranking(candidates, result, limit=limit)
