"""Tests for catalogue import and the embedding backfill."""

import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from prep_search.indexing import EmbeddingBackfill, load_problems_file, parse_problems
from prep_search.storage import DuckDBProblemStorage


LEETCODE_EXPORT = [
    {
        "_id": {"$oid": "65f1c0ffee"},
        "frontendQuestionId": "1",
        "title": "Two Sum",
        "titleSlug": "two-sum",
        "difficulty": "Easy",
        "acRate": 52.1,
        "paidOnly": False,
        "hasSolution": True,
        "hasVideoSolution": True,
        "topicTags": [{"name": "Array", "slug": "array"}, {"name": "Hash Table"}],
        "title_embeddings_OAI": [0.1, 0.2],
    },
    {
        "frontend_question_id": 146,
        "title": "LRU Cache",
        "difficulty": "Medium",
        "topic_tags": ["Design"],
    },
]


def test_parse_problems_accepts_camel_and_snake_case() -> None:
    problems = parse_problems(LEETCODE_EXPORT)

    two_sum, lru = problems
    assert two_sum.id == "65f1c0ffee"
    assert two_sum.title_slug == "two-sum"
    assert two_sum.topic_tags == ["Array", "Hash Table"]
    assert two_sum.has_video_solution is True
    assert two_sum.embedding == [0.1, 0.2]

    assert lru.frontend_question_id == "146"
    assert lru.title_slug == "lru-cache"
    assert lru.id == DuckDBProblemStorage.make_problem_id("lru-cache")
    assert lru.embedding is None


def test_parse_problems_accepts_wrapped_payload() -> None:
    problems = parse_problems({"problems": LEETCODE_EXPORT[1:]})

    assert [p.title for p in problems] == ["LRU Cache"]


def test_parse_problems_rejects_non_list() -> None:
    with pytest.raises(ValueError, match="JSON array"):
        parse_problems({"title": "Two Sum"})


def test_parse_problems_rejects_unknown_difficulty() -> None:
    with pytest.raises(ValidationError):
        parse_problems([{"title": "Two Sum", "difficulty": "Trivial"}])


def test_load_problems_file(tmp_path: Path) -> None:
    path = tmp_path / "problems.json"
    path.write_text(json.dumps(LEETCODE_EXPORT))

    assert len(load_problems_file(str(path))) == 2

    with pytest.raises(ValueError, match="No such file"):
        load_problems_file(str(tmp_path / "missing.json"))


def test_backfill_embeds_only_missing_titles(tmp_path: Path, fake_embedder_factory) -> None:
    storage = DuckDBProblemStorage(str(tmp_path / "problems.duckdb"))
    storage.upsert_problems(parse_problems(LEETCODE_EXPORT))
    embedder = fake_embedder_factory(default=[0.3, 0.4])

    result = EmbeddingBackfill(storage, embedder).run()

    assert result.problems_seen == 1
    assert result.embeddings_written == 1
    assert embedder.calls == ["LRU Cache"]
    assert storage.find_problems_missing_embeddings() == []
    storage.close()


def test_backfill_force_re_embeds_everything(tmp_path: Path, fake_embedder_factory) -> None:
    storage = DuckDBProblemStorage(str(tmp_path / "problems.duckdb"))
    storage.upsert_problems(parse_problems(LEETCODE_EXPORT))
    embedder = fake_embedder_factory(default=[1.0, 0.0])

    result = EmbeddingBackfill(storage, embedder).run(force=True)

    assert result.embeddings_written == 2
    assert sorted(embedder.calls) == ["LRU Cache", "Two Sum"]
    assert all(p.embedding == [1.0, 0.0] for p in storage.find_problems_with_embeddings())
    storage.close()


def test_backfill_rejects_vector_count_mismatch(tmp_path: Path) -> None:
    class _ShortEmbedder:
        def embed_texts(self, texts, *, task_type="RETRIEVAL_DOCUMENT"):
            return []

    storage = DuckDBProblemStorage(str(tmp_path / "problems.duckdb"))
    storage.upsert_problems(parse_problems(LEETCODE_EXPORT[1:]))

    with pytest.raises(ValueError, match="returned 0 vectors"):
        EmbeddingBackfill(storage, _ShortEmbedder()).run()
    storage.close()


def test_backfill_noop_when_nothing_missing(tmp_path: Path, fake_embedder_factory) -> None:
    storage = DuckDBProblemStorage(str(tmp_path / "problems.duckdb"))
    embedder = fake_embedder_factory(default=[1.0])

    result = EmbeddingBackfill(storage, embedder).run()

    assert result.problems_seen == 0
    assert embedder.calls == []
    storage.close()
