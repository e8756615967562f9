from __future__ import annotations

import math
from typing import Any

import pytest

from prep_search.storage import ProblemRecord


class FakeEmbedder:
    """Deterministic embedder recording every text it was asked for."""

    def __init__(
        self,
        vectors: dict[str, list[float]] | None = None,
        *,
        default: list[float] | None = None,
        error: Exception | None = None,
    ) -> None:
        self.vectors = vectors or {}
        self.default = default if default is not None else []
        self.error = error
        self.calls: list[str] = []

    def embed_query(self, query: str) -> list[float]:
        self.calls.append(query)
        if self.error is not None:
            raise self.error
        return list(self.vectors.get(query, self.default))

    def embed_texts(
        self, texts: list[str], *, task_type: str = "RETRIEVAL_DOCUMENT"
    ) -> list[list[float]]:
        self.calls.extend(texts)
        if self.error is not None:
            raise self.error
        return [list(self.vectors.get(text, self.default)) for text in texts]


class FakeLLM:
    """Routes rewrite and re-rank prompts to canned answers.

    An answer that is an exception instance is raised instead of returned.
    """

    def __init__(self, *, rewrite: Any = "", rerank: Any = "") -> None:
        self.rewrite = rewrite
        self.rerank = rerank
        self.calls: list[dict[str, Any]] = []

    def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        *,
        temperature: float,
        max_tokens: int,
    ) -> str:
        kind = "rewrite" if "search query optimizer" in system_prompt else "rerank"
        self.calls.append(
            {
                "kind": kind,
                "system_prompt": system_prompt,
                "user_prompt": user_prompt,
                "temperature": temperature,
                "max_tokens": max_tokens,
            }
        )
        answer = self.rewrite if kind == "rewrite" else self.rerank
        if isinstance(answer, Exception):
            raise answer
        return answer

    def calls_of(self, kind: str) -> list[dict[str, Any]]:
        return [call for call in self.calls if call["kind"] == kind]


class InMemoryProblemRepository:
    def __init__(self, problems: list[ProblemRecord]) -> None:
        self.problems = list(problems)
        self.fetches = 0

    def find_problem_by_id(self, problem_id: str) -> ProblemRecord | None:
        return next((p for p in self.problems if p.id == problem_id), None)

    def find_problems_by_ids(self, problem_ids: list[str]) -> list[ProblemRecord]:
        by_id = {p.id: p for p in self.problems}
        return [by_id[pid] for pid in problem_ids if pid in by_id]

    def find_problems_with_embeddings(self) -> list[ProblemRecord]:
        self.fetches += 1
        return [p for p in self.problems if p.embedding is not None]


def angle_vector(degrees: float) -> list[float]:
    """Unit vector in the plane; cosine against [1, 0] is cos(degrees)."""
    radians = math.radians(degrees)
    return [math.cos(radians), math.sin(radians)]


def make_problem(
    idx: int, embedding: list[float] | None, *, title: str | None = None
) -> ProblemRecord:
    return ProblemRecord(
        id=f"p{idx}",
        title=title or f"Problem {idx}",
        title_slug=f"problem-{idx}",
        frontend_question_id=str(idx),
        difficulty="Medium",
        topic_tags=["Array"],
        embedding=embedding,
    )


@pytest.fixture()
def fake_embedder_factory():
    return FakeEmbedder


@pytest.fixture()
def fake_llm_factory():
    return FakeLLM


@pytest.fixture()
def repository_factory():
    return InMemoryProblemRepository


@pytest.fixture()
def problem_factory():
    return make_problem


@pytest.fixture()
def angle():
    return angle_vector
