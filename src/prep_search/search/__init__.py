"""Semantic search over the problem catalogue."""

from .ranker import ProblemRanker, ScoredProblem, rank_problems, score_candidates
from .reranker import (
    LLMReranker,
    ParsedRanking,
    RankingFallback,
    RankingResult,
    parse_ranking,
)
from .rewriter import QueryRewriter, fallback_query
from .service import ProblemSearchService
from .similarity import cosine_similarity

__all__ = [
    "ProblemRanker",
    "ScoredProblem",
    "rank_problems",
    "score_candidates",
    "LLMReranker",
    "ParsedRanking",
    "RankingFallback",
    "RankingResult",
    "parse_ranking",
    "QueryRewriter",
    "fallback_query",
    "ProblemSearchService",
    "cosine_similarity",
]
