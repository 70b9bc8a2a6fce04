from __future__ import annotations

from abc import ABC, abstractmethod

from med_quiz.models import HistoryEntry, Quiz, Rating

MIN_RATING = 1
MAX_RATING = 5


def validate_rating(rating: Rating) -> None:
    value = rating.rating
    if isinstance(value, bool) or not isinstance(value, int) or not MIN_RATING <= value <= MAX_RATING:
        raise ValueError(f"rating must be an integer {MIN_RATING}-{MAX_RATING} (got {rating.rating!r})")


class QuizStore(ABC):
    """Quiz history and question ratings, kept outside the stateless engine."""

    @abstractmethod
    def record_quiz(self, quiz: Quiz) -> HistoryEntry:
        ...

    @abstractmethod
    def record_score(self, quiz_id: str, score: str) -> bool:
        """Attach a score to a history entry; False if the quiz is unknown."""

    @abstractmethod
    def query_history(self, source: str | None = None, limit: int = 50) -> list[HistoryEntry]:
        ...

    @abstractmethod
    def clear_history(self) -> None:
        ...

    @abstractmethod
    def record_rating(self, rating: Rating) -> Rating:
        ...

    @abstractmethod
    def query_ratings(
        self,
        quiz_id: str | None = None,
        question_id: str | None = None,
        min_rating: int | None = None,
    ) -> list[Rating]:
        ...

    def close(self) -> None:
        pass
