"""
DuckDB storage backend for the problem catalogue and its title embeddings.
"""

from __future__ import annotations

import hashlib
import json
from pathlib import Path
from typing import Any

import duckdb

from .base import ProblemRecord


_PROBLEM_COLUMNS = """
    id, title, title_slug, frontend_question_id, difficulty, ac_rate,
    topic_tags, paid_only, has_solution, has_video_solution, title_embedding
"""

# Numeric question ids first, in catalogue order.
_CATALOGUE_ORDER = "try_cast(frontend_question_id AS INTEGER) NULLS LAST, id"


def _stable_id(prefix: str, value: str) -> str:
    digest = hashlib.sha1(value.encode("utf-8")).hexdigest()
    return f"{prefix}_{digest}"


def _escape_like(text: str) -> str:
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class DuckDBProblemStorage:
    """DuckDB-backed persistence for coding problems."""

    def __init__(
        self,
        db_path: str,
        *,
        read_only: bool = False,
        initialize: bool = True,
    ) -> None:
        self.db_path = str(Path(db_path).expanduser().resolve())
        self.read_only = read_only
        Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
        self._conn = duckdb.connect(self.db_path, read_only=read_only)
        if initialize and not read_only:
            self.initialize()

    def close(self) -> None:
        """Close the underlying DuckDB connection."""
        self._conn.close()

    def initialize(self) -> None:
        self._conn.execute(
            """
            CREATE TABLE IF NOT EXISTS problems (
                id VARCHAR PRIMARY KEY,
                title VARCHAR NOT NULL,
                title_slug VARCHAR NOT NULL DEFAULT '',
                frontend_question_id VARCHAR NOT NULL DEFAULT '',
                difficulty VARCHAR NOT NULL DEFAULT 'Medium',
                ac_rate DOUBLE,
                topic_tags VARCHAR NOT NULL DEFAULT '[]',
                paid_only BOOLEAN DEFAULT FALSE,
                has_solution BOOLEAN DEFAULT FALSE,
                has_video_solution BOOLEAN DEFAULT FALSE,
                title_embedding DOUBLE[],
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            );
            """
        )

    def upsert_problems(self, problems: list[ProblemRecord]) -> int:
        if not problems:
            return 0
        # Catalogue fields only; embeddings go through store_problem_embeddings
        # so a re-import never clears a stored vector.
        self._conn.executemany(
            """
            INSERT INTO problems (
                id, title, title_slug, frontend_question_id, difficulty, ac_rate,
                topic_tags, paid_only, has_solution, has_video_solution
            )
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            ON CONFLICT(id) DO UPDATE SET
                title = excluded.title,
                title_slug = excluded.title_slug,
                frontend_question_id = excluded.frontend_question_id,
                difficulty = excluded.difficulty,
                ac_rate = excluded.ac_rate,
                topic_tags = excluded.topic_tags,
                paid_only = excluded.paid_only,
                has_solution = excluded.has_solution,
                has_video_solution = excluded.has_video_solution,
                updated_at = now()
            """,
            [
                (
                    problem.id,
                    problem.title,
                    problem.title_slug,
                    problem.frontend_question_id,
                    problem.difficulty,
                    problem.ac_rate,
                    json.dumps(list(problem.topic_tags)),
                    problem.paid_only,
                    problem.has_solution,
                    problem.has_video_solution,
                )
                for problem in problems
            ],
        )
        embedded = [
            (problem.id, problem.embedding)
            for problem in problems
            if problem.embedding
        ]
        if embedded:
            self.store_problem_embeddings(embedded)
        return len(problems)

    def find_problem_by_id(self, problem_id: str) -> ProblemRecord | None:
        row = self._conn.execute(
            f"SELECT {_PROBLEM_COLUMNS} FROM problems WHERE id = ? LIMIT 1",
            [problem_id],
        ).fetchone()
        if row is None:
            return None
        return self._row_to_problem(row)

    def find_problems_by_ids(self, problem_ids: list[str]) -> list[ProblemRecord]:
        if not problem_ids:
            return []
        unique_ids = list(dict.fromkeys(problem_ids))
        placeholders = ", ".join(["?"] * len(unique_ids))
        rows = self._conn.execute(
            f"SELECT {_PROBLEM_COLUMNS} FROM problems WHERE id IN ({placeholders})",
            unique_ids,
        ).fetchall()
        by_id = {str(row[0]): self._row_to_problem(row) for row in rows}
        return [by_id[pid] for pid in problem_ids if pid in by_id]

    def find_problems_with_embeddings(self) -> list[ProblemRecord]:
        rows = self._conn.execute(
            f"""
            SELECT {_PROBLEM_COLUMNS}
            FROM problems
            WHERE title_embedding IS NOT NULL
            ORDER BY {_CATALOGUE_ORDER}
            """
        ).fetchall()
        return [self._row_to_problem(row) for row in rows]

    def find_problems_missing_embeddings(self) -> list[ProblemRecord]:
        rows = self._conn.execute(
            f"""
            SELECT {_PROBLEM_COLUMNS}
            FROM problems
            WHERE title_embedding IS NULL OR len(title_embedding) = 0
            ORDER BY {_CATALOGUE_ORDER}
            """
        ).fetchall()
        return [self._row_to_problem(row) for row in rows]

    def list_problems(self) -> list[ProblemRecord]:
        rows = self._conn.execute(
            f"SELECT {_PROBLEM_COLUMNS} FROM problems ORDER BY {_CATALOGUE_ORDER}"
        ).fetchall()
        return [self._row_to_problem(row) for row in rows]

    def search_problems_by_title(
        self, query: str, limit: int = 50
    ) -> list[ProblemRecord]:
        needle = query.strip()
        if not needle:
            return []
        pattern = f"%{_escape_like(needle)}%"
        rows = self._conn.execute(
            f"""
            SELECT {_PROBLEM_COLUMNS}
            FROM problems
            WHERE title ILIKE ? ESCAPE '\\'
               OR title_slug ILIKE ? ESCAPE '\\'
               OR frontend_question_id ILIKE ? ESCAPE '\\'
            ORDER BY {_CATALOGUE_ORDER}
            LIMIT ?
            """,
            [pattern, pattern, pattern, max(limit, 1)],
        ).fetchall()
        return [self._row_to_problem(row) for row in rows]

    def store_problem_embeddings(
        self, problem_embeddings: list[tuple[str, list[float]]]
    ) -> int:
        if not problem_embeddings:
            return 0
        self._conn.executemany(
            """
            UPDATE problems
            SET title_embedding = CAST(? AS DOUBLE[]), updated_at = now()
            WHERE id = ?
            """,
            [
                ([float(v) for v in embedding], problem_id)
                for problem_id, embedding in problem_embeddings
            ],
        )
        return len(problem_embeddings)

    def count_problems(self) -> int:
        row = self._conn.execute("SELECT COUNT(*) FROM problems").fetchone()
        return int(row[0]) if row else 0

    def has_embeddings(self) -> bool:
        row = self._conn.execute(
            "SELECT COUNT(*) FROM problems WHERE title_embedding IS NOT NULL"
        ).fetchone()
        return bool(row and int(row[0]) > 0)

    @staticmethod
    def make_problem_id(title_slug: str) -> str:
        return _stable_id("problem", title_slug)

    @staticmethod
    def _row_to_problem(row: tuple[Any, ...]) -> ProblemRecord:
        embedding = row[10]
        return ProblemRecord(
            id=str(row[0]),
            title=str(row[1]),
            title_slug=str(row[2]),
            frontend_question_id=str(row[3]),
            difficulty=str(row[4]),
            ac_rate=float(row[5]) if row[5] is not None else None,
            topic_tags=[str(tag) for tag in json.loads(str(row[6]) or "[]")],
            paid_only=bool(row[7]),
            has_solution=bool(row[8]),
            has_video_solution=bool(row[9]),
            embedding=list(embedding) if embedding is not None else None,
        )
