"""
Storage interfaces and data models for the problem catalogue.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol


@dataclass(frozen=True)
class ProblemRecord:
    """A coding problem, optionally carrying its title embedding."""

    id: str
    title: str
    title_slug: str = ""
    frontend_question_id: str = ""
    difficulty: str = "Medium"
    ac_rate: float | None = None
    topic_tags: list[str] = field(default_factory=list)
    paid_only: bool = False
    has_solution: bool = False
    has_video_solution: bool = False
    embedding: list[float] | None = None

    def to_public_dict(self) -> dict[str, Any]:
        """Serialize for API responses; the embedding vector is never exposed."""
        return {
            "id": self.id,
            "frontend_question_id": self.frontend_question_id,
            "title": self.title,
            "title_slug": self.title_slug,
            "difficulty": self.difficulty,
            "ac_rate": self.ac_rate,
            "topic_tags": list(self.topic_tags),
            "paid_only": self.paid_only,
            "has_solution": self.has_solution,
            "has_video_solution": self.has_video_solution,
        }


class ProblemRepository(Protocol):
    """Read operations the search core depends on."""

    def find_problem_by_id(self, problem_id: str) -> ProblemRecord | None:
        """Fetch a single problem."""

    def find_problems_by_ids(self, problem_ids: list[str]) -> list[ProblemRecord]:
        """Fetch problems in the order of *problem_ids*, skipping unknown ids."""

    def find_problems_with_embeddings(self) -> list[ProblemRecord]:
        """Return every problem that has a stored title embedding."""


class StorageBackend(ProblemRepository, Protocol):
    """Full persistence contract used by import, backfill and HTTP flows."""

    def initialize(self) -> None:
        """Initialize required tables."""

    def upsert_problems(self, problems: list[ProblemRecord]) -> int:
        """Insert or update catalogue rows. Return count written."""

    def find_problems_missing_embeddings(self) -> list[ProblemRecord]:
        """Return problems that have no stored title embedding."""

    def list_problems(self) -> list[ProblemRecord]:
        """Return every stored problem."""

    def search_problems_by_title(
        self, query: str, limit: int = 50
    ) -> list[ProblemRecord]:
        """Case-insensitive substring search on title, slug and question id."""

    def store_problem_embeddings(
        self, problem_embeddings: list[tuple[str, list[float]]]
    ) -> int:
        """Bulk-store (problem_id, embedding) pairs. Return count written."""

    def count_problems(self) -> int:
        """Count stored problems."""

    def has_embeddings(self) -> bool:
        """Return True if any problem has a stored embedding."""

    def close(self) -> None:
        """Release the underlying connection."""
