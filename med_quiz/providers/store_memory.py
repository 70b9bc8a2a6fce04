from __future__ import annotations

from datetime import datetime, timezone

from med_quiz.models import HistoryEntry, Quiz, Rating
from med_quiz.providers.base import QuizStore, validate_rating


class MemoryStore(QuizStore):
    """Process-scoped store; everything is lost on restart."""

    def __init__(self, history_limit: int = 50):
        self.history_limit = history_limit
        self._history: list[HistoryEntry] = []  # newest first
        self._ratings: list[Rating] = []

    def record_quiz(self, quiz: Quiz) -> HistoryEntry:
        entry = HistoryEntry(
            quiz_id=quiz.id,
            title=quiz.title,
            source=quiz.source,
            generated_at=quiz.generated_at,
        )
        self._history = [e for e in self._history if e.quiz_id != quiz.id]
        self._history.insert(0, entry)
        del self._history[self.history_limit:]
        return entry

    def record_score(self, quiz_id: str, score: str) -> bool:
        for entry in self._history:
            if entry.quiz_id == quiz_id:
                entry.score = score
                return True
        return False

    def query_history(self, source: str | None = None, limit: int = 50) -> list[HistoryEntry]:
        entries = [e for e in self._history if source is None or e.source == source]
        return entries[:limit]

    def clear_history(self) -> None:
        self._history.clear()

    def record_rating(self, rating: Rating) -> Rating:
        validate_rating(rating)
        if not rating.created_at:
            rating.created_at = datetime.now(timezone.utc).isoformat()
        self._ratings.append(rating)
        return rating

    def query_ratings(
        self,
        quiz_id: str | None = None,
        question_id: str | None = None,
        min_rating: int | None = None,
    ) -> list[Rating]:
        return [
            r for r in self._ratings
            if (quiz_id is None or r.quiz_id == quiz_id)
            and (question_id is None or r.question_id == question_id)
            and (min_rating is None or r.rating >= min_rating)
        ]
