from __future__ import annotations

import sqlite3
from datetime import datetime, timezone
from pathlib import Path

from med_quiz.models import HistoryEntry, Quiz, Rating
from med_quiz.providers.base import QuizStore, validate_rating

SCHEMA = """
CREATE TABLE IF NOT EXISTS history (
    quiz_id TEXT PRIMARY KEY,
    title TEXT NOT NULL,
    source TEXT NOT NULL,
    generated_at TEXT NOT NULL,
    score TEXT,
    recorded_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS ratings (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    quiz_id TEXT NOT NULL,
    question_id TEXT NOT NULL,
    rating INTEGER NOT NULL,
    comment TEXT DEFAULT '',
    created_at TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_ratings_quiz ON ratings (quiz_id);
"""


def _entry(row: sqlite3.Row) -> HistoryEntry:
    return HistoryEntry(
        quiz_id=row["quiz_id"],
        title=row["title"],
        source=row["source"],
        generated_at=row["generated_at"],
        score=row["score"],
    )


class Database(QuizStore):
    """SQLite-backed quiz history and ratings."""

    def __init__(self, db_path: Path, history_limit: int = 50):
        self.db_path = db_path
        self.history_limit = history_limit
        self.conn = sqlite3.connect(str(db_path), check_same_thread=False)
        self.conn.row_factory = sqlite3.Row
        self.conn.execute("PRAGMA journal_mode=WAL")
        self._init_schema()

    def _init_schema(self) -> None:
        self.conn.executescript(SCHEMA)
        self.conn.commit()

    def close(self) -> None:
        self.conn.close()

    # ── History ───────────────────────────────────────────────────────────

    def record_quiz(self, quiz: Quiz) -> HistoryEntry:
        now = datetime.now(timezone.utc).isoformat()
        self.conn.execute(
            "INSERT OR REPLACE INTO history (quiz_id, title, source, generated_at, recorded_at) "
            "VALUES (?, ?, ?, ?, ?)",
            (quiz.id, quiz.title, quiz.source, quiz.generated_at, now),
        )
        # Keep only the newest entries
        self.conn.execute(
            "DELETE FROM history WHERE quiz_id NOT IN ("
            "  SELECT quiz_id FROM history ORDER BY recorded_at DESC, rowid DESC LIMIT ?"
            ")",
            (self.history_limit,),
        )
        self.conn.commit()
        return HistoryEntry(quiz.id, quiz.title, quiz.source, quiz.generated_at)

    def record_score(self, quiz_id: str, score: str) -> bool:
        cur = self.conn.execute(
            "UPDATE history SET score = ? WHERE quiz_id = ?", (score, quiz_id)
        )
        self.conn.commit()
        return cur.rowcount > 0

    def query_history(self, source: str | None = None, limit: int = 50) -> list[HistoryEntry]:
        if source is None:
            rows = self.conn.execute(
                "SELECT * FROM history ORDER BY recorded_at DESC, rowid DESC LIMIT ?",
                (limit,),
            ).fetchall()
        else:
            rows = self.conn.execute(
                "SELECT * FROM history WHERE source = ? "
                "ORDER BY recorded_at DESC, rowid DESC LIMIT ?",
                (source, limit),
            ).fetchall()
        return [_entry(r) for r in rows]

    def clear_history(self) -> None:
        self.conn.execute("DELETE FROM history")
        self.conn.commit()

    # ── Ratings ───────────────────────────────────────────────────────────

    def record_rating(self, rating: Rating) -> Rating:
        validate_rating(rating)
        if not rating.created_at:
            rating.created_at = datetime.now(timezone.utc).isoformat()
        self.conn.execute(
            "INSERT INTO ratings (quiz_id, question_id, rating, comment, created_at) "
            "VALUES (?, ?, ?, ?, ?)",
            (rating.quiz_id, rating.question_id, rating.rating, rating.comment, rating.created_at),
        )
        self.conn.commit()
        return rating

    def query_ratings(
        self,
        quiz_id: str | None = None,
        question_id: str | None = None,
        min_rating: int | None = None,
    ) -> list[Rating]:
        clauses: list[str] = []
        params: list = []
        if quiz_id is not None:
            clauses.append("quiz_id = ?")
            params.append(quiz_id)
        if question_id is not None:
            clauses.append("question_id = ?")
            params.append(question_id)
        if min_rating is not None:
            clauses.append("rating >= ?")
            params.append(min_rating)
        where = f"WHERE {' AND '.join(clauses)} " if clauses else ""
        rows = self.conn.execute(
            f"SELECT * FROM ratings {where}ORDER BY id", params
        ).fetchall()
        return [
            Rating(
                quiz_id=r["quiz_id"],
                question_id=r["question_id"],
                rating=r["rating"],
                comment=r["comment"] or "",
                created_at=r["created_at"],
            )
            for r in rows
        ]
