"""Shared test fixtures."""
from __future__ import annotations

import random

import pytest

from med_quiz.config import Settings
from med_quiz.db import Database
from med_quiz.models import Choice, Question, QuestionShape, Quiz
from med_quiz.providers.store_memory import MemoryStore

MAGNESIUM_TEXT = (
    "Magnesium helps reduce muscle cramps and supports nerve function. "
    "Many adults consume less of this mineral than the recommended daily amount. "
    "Leafy greens, nuts, seeds and whole grains are common dietary sources of the mineral. "
    "Blood tests are sometimes ordered when a deficiency is suspected by a physician."
)

# No claim triggers, no domain hints
TRAIN_TEXT = (
    "The train left the station early in the morning and crossed the wide valley. "
    "Passengers watched the green hills roll past the large windows for several hours. "
    "A small cafe in the third carriage sold coffee, sandwiches and fresh fruit. "
    "The journey ended at a quiet coastal town just after the sun had set."
)

MEDICAL_TEXT = (
    "Hypertension is a common condition in which blood pressure stays elevated for long periods. "
    "Regular potassium intake may help lower blood pressure in most adults. "
    "Doctors often recommend a daily dose of 500mg of magnesium for patients with frequent cramps. "
    "Untreated diabetes increases the risk of heart disease, kidney damage and nerve pain. "
    "Vaccination remains the most reliable form of prevention against many infectious diseases. "
    "Omega-3 fatty acids from fish oil are associated with reduced inflammation in the joints. "
    "Common symptoms of influenza include fever, muscle pain and a persistent dry cough. "
    "Vitamin D supports calcium absorption and helps maintain strong and healthy bones. "
    "Statins are used to treat high cholesterol and lower the risk of heart attacks. "
    "Chronic inflammation has been linked to arthritis, obesity and several types of cancer."
)


class FixedDrawRandom(random.Random):
    """Random source whose float draw is pinned; integer draws stay seeded."""

    getrandbits = random.Random.getrandbits

    def __init__(self, draw: float, seed: int = 0):
        super().__init__(seed)
        self.draw = draw

    def random(self) -> float:
        return self.draw


@pytest.fixture
def settings():
    return Settings()


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def tmp_db(tmp_path):
    """Create a fresh temporary database."""
    db = Database(tmp_path / "test.db", history_limit=3)
    yield db
    db.close()


@pytest.fixture(params=["memory", "sqlite"])
def store(request, tmp_path):
    """Each QuizStore implementation, keeping at most 3 history entries."""
    if request.param == "memory":
        s = MemoryStore(history_limit=3)
    else:
        s = Database(tmp_path / "store.db", history_limit=3)
    yield s
    s.close()


def make_quiz(quiz_id: str = "quiz-1", source: str = "pasted text") -> Quiz:
    choices = (
        Choice("q1_c1", "Helps reduce muscle cramps"),
        Choice("q1_c2", "Improves quality of sleep"),
        Choice("q1_c3", "Promotes healthy skin"),
        Choice("q1_c4", "Reduces everyday fatigue"),
    )
    question = Question(
        id="q1",
        prompt="Which of the following is a reported benefit of magnesium?",
        choices=choices,
        correct_choice_id="q1_c1",
        correct_answer="Helps reduce muscle cramps",
        explanation='According to the source: "Magnesium helps reduce muscle cramps."',
        shape=QuestionShape.BENEFIT_CLAIM,
    )
    return Quiz(
        id=quiz_id,
        title="Magnesium",
        source=source,
        generated_at="2026-01-01T00:00:00+00:00",
        questions=(question,),
        total_possible_count=4,
        current_index=0,
    )


@pytest.fixture
def sample_quiz():
    return make_quiz()
