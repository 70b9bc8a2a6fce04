from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class QuestionShape(str, Enum):
    CLOZE = "cloze"
    BENEFIT_CLAIM = "benefit_claim"
    FALSE_CLAIM = "false_claim"
    GENERIC = "generic"


@dataclass(frozen=True)
class CorpusIndex:
    numbers: tuple[str, ...]
    keywords: tuple[str, ...]


@dataclass
class QuestionDraft:
    prompt: str
    options: list[str]
    correct_index: int
    answer_text: str
    explanation: str
    shape: QuestionShape


@dataclass(frozen=True)
class Choice:
    id: str
    text: str

    def to_dict(self) -> dict:
        return {"id": self.id, "text": self.text}


@dataclass(frozen=True)
class Question:
    id: str
    prompt: str
    choices: tuple[Choice, ...]
    correct_choice_id: str
    correct_answer: str
    explanation: str
    shape: QuestionShape = QuestionShape.GENERIC

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "prompt": self.prompt,
            "choices": [c.to_dict() for c in self.choices],
            "correctChoiceId": self.correct_choice_id,
            "correctAnswer": self.correct_answer,
            "explanation": self.explanation,
        }


@dataclass(frozen=True)
class Quiz:
    id: str
    title: str
    source: str
    generated_at: str  # ISO-8601, UTC
    questions: tuple[Question, ...]
    total_possible_count: int
    current_index: int

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "source": self.source,
            "generatedAt": self.generated_at,
            "questions": [q.to_dict() for q in self.questions],
            "totalPossibleCount": self.total_possible_count,
            "currentIndex": self.current_index,
        }


@dataclass
class HistoryEntry:
    quiz_id: str
    title: str
    source: str
    generated_at: str
    score: str | None = None

    def to_dict(self) -> dict:
        return {
            "id": self.quiz_id,
            "title": self.title,
            "source": self.source,
            "generatedAt": self.generated_at,
            "score": self.score,
        }


@dataclass
class Rating:
    quiz_id: str
    question_id: str
    rating: int  # 1-5
    comment: str = ""
    created_at: str = ""

    def to_dict(self) -> dict:
        return {
            "quizId": self.quiz_id,
            "questionId": self.question_id,
            "rating": self.rating,
            "comment": self.comment,
            "createdAt": self.created_at,
        }
