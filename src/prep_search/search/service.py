"""
Semantic problem search: company search and free-text search.
"""

from __future__ import annotations

import logging

from ..config import DEFAULT_MAX_QUERY_LIMIT, SearchSettings
from ..embeddings import EmbeddingProvider
from ..errors import InvalidSearchRequest
from ..llm import LanguageModel
from ..storage import ProblemRecord, ProblemRepository
from .ranker import ProblemRanker, QueryEmbedder
from .reranker import LLMReranker
from .rewriter import CompletionModel, QueryRewriter, fallback_query

logger = logging.getLogger(__name__)

COMPANY_RESULT_LIMIT = 50
DEFAULT_QUERY_LIMIT = 100
DEFAULT_ROLE = "SDE"


class ProblemSearchService:
    """Compose rewriting, similarity ranking and LLM re-ranking."""

    def __init__(
        self,
        repository: ProblemRepository,
        embedding_provider: QueryEmbedder,
        llm: CompletionModel,
        *,
        max_query_limit: int = DEFAULT_MAX_QUERY_LIMIT,
    ) -> None:
        self.repository = repository
        self.ranker = ProblemRanker(repository, embedding_provider)
        self.rewriter = QueryRewriter(llm)
        self.reranker = LLMReranker(llm)
        self.max_query_limit = max(max_query_limit, 1)

    @classmethod
    def from_settings(
        cls, settings: SearchSettings, repository: ProblemRepository
    ) -> ProblemSearchService:
        return cls(
            repository,
            EmbeddingProvider.from_settings(settings),
            LanguageModel.from_settings(settings),
            max_query_limit=settings.max_query_limit,
        )

    def rank_by_company(
        self, company_name: str, role: str = DEFAULT_ROLE
    ) -> list[ProblemRecord]:
        """Top problems for a company and role, by title similarity."""
        company = company_name.strip()
        if not company:
            raise InvalidSearchRequest("company_name must not be empty")
        search_query = fallback_query(f"{company} {role.strip() or DEFAULT_ROLE}")
        ranked = self.ranker.rank(search_query, limit=COMPANY_RESULT_LIMIT)
        return [item.problem for item in ranked]

    def rank_by_query(
        self, user_query: str, limit: int = DEFAULT_QUERY_LIMIT
    ) -> list[ProblemRecord]:
        """Free-text search, e.g. "swiggy sde1".

        The phrase is rewritten for retrieval, similarity-ranked, then
        re-ranked against the original phrase.
        """
        query = user_query.strip()
        if not query:
            raise InvalidSearchRequest("query must not be empty")
        effective_limit = self.clamp_limit(limit)
        if effective_limit == 0:
            return []

        optimized_query = self.rewriter.rewrite(query)
        ranked = self.ranker.rank(optimized_query, limit=effective_limit)
        problems = [item.problem for item in ranked]
        if not problems:
            return []
        return self.reranker.rerank(query, problems, effective_limit)

    def clamp_limit(self, limit: int) -> int:
        if limit <= 0:
            return 0
        if limit > self.max_query_limit:
            logger.info("Clamping limit %d to %d", limit, self.max_query_limit)
            return self.max_query_limit
        return limit
