"""
Catalogue import: read problem exports into ProblemRecord values.

Accepts the LeetCode-style camelCase export used by the platform as well as
snake_case keys.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from ..storage import DuckDBProblemStorage, ProblemRecord


class ProblemImport(BaseModel):
    """One problem entry of an import file."""

    model_config = ConfigDict(extra="ignore")

    id: str | None = Field(default=None, validation_alias=AliasChoices("id", "_id"))
    title: str = Field(min_length=1)
    title_slug: str = Field(
        default="", validation_alias=AliasChoices("title_slug", "titleSlug")
    )
    frontend_question_id: str = Field(
        default="",
        validation_alias=AliasChoices("frontend_question_id", "frontendQuestionId"),
    )
    difficulty: Literal["Easy", "Medium", "Hard"] = "Medium"
    ac_rate: float | None = Field(
        default=None, validation_alias=AliasChoices("ac_rate", "acRate")
    )
    topic_tags: list[str] = Field(
        default_factory=list, validation_alias=AliasChoices("topic_tags", "topicTags")
    )
    paid_only: bool = Field(
        default=False, validation_alias=AliasChoices("paid_only", "paidOnly")
    )
    has_solution: bool = Field(
        default=False, validation_alias=AliasChoices("has_solution", "hasSolution")
    )
    has_video_solution: bool = Field(
        default=False,
        validation_alias=AliasChoices("has_video_solution", "hasVideoSolution"),
    )
    embedding: list[float] | None = Field(
        default=None,
        validation_alias=AliasChoices(
            "embedding", "title_embedding", "title_embeddings_OAI"
        ),
    )

    @field_validator("id", "frontend_question_id", mode="before")
    @classmethod
    def _coerce_identifier(cls, value: Any) -> Any:
        if isinstance(value, dict) and "$oid" in value:
            return str(value["$oid"])
        if isinstance(value, int):
            return str(value)
        return value

    @field_validator("topic_tags", mode="before")
    @classmethod
    def _tag_names(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, list):
            names: list[str] = []
            for tag in value:
                if isinstance(tag, dict):
                    name = tag.get("name") or tag.get("slug")
                    if isinstance(name, str) and name:
                        names.append(name)
                elif isinstance(tag, str) and tag:
                    names.append(tag)
            return names
        return value

    def to_record(self) -> ProblemRecord:
        slug = self.title_slug or _slugify(self.title)
        return ProblemRecord(
            id=self.id or DuckDBProblemStorage.make_problem_id(slug),
            title=self.title,
            title_slug=slug,
            frontend_question_id=self.frontend_question_id,
            difficulty=self.difficulty,
            ac_rate=self.ac_rate,
            topic_tags=list(self.topic_tags),
            paid_only=self.paid_only,
            has_solution=self.has_solution,
            has_video_solution=self.has_video_solution,
            embedding=list(self.embedding) if self.embedding else None,
        )


def _slugify(title: str) -> str:
    cleaned = "".join(ch if ch.isalnum() else "-" for ch in title.lower())
    return "-".join(part for part in cleaned.split("-") if part)


def parse_problems(payload: Any) -> list[ProblemRecord]:
    """Validate a decoded JSON payload (a list, or ``{"problems": [...]}``)."""
    if isinstance(payload, dict):
        payload = payload.get("problems")
    if not isinstance(payload, list):
        raise ValueError("Problem import must be a JSON array of problem objects.")
    return [ProblemImport.model_validate(item).to_record() for item in payload]


def load_problems_file(path: str) -> list[ProblemRecord]:
    file_path = Path(path)
    if not file_path.is_file():
        raise ValueError(f"No such file: {path}")
    return parse_problems(json.loads(file_path.read_text(encoding="utf-8")))
