"""Assemble quizzes from raw source text."""
from __future__ import annotations

import logging
import random
import uuid
from datetime import datetime, timezone

from med_quiz.config import Settings
from med_quiz.models import Choice, Question, QuestionDraft, Quiz
from med_quiz.question_generator import synthesize_question
from med_quiz.text import build_corpus, prepare_pool

_log = logging.getLogger("med_quiz.quiz")

DEFAULT_TITLE = "Medical Source"
DEFAULT_SOURCE = "pasted text"


def _to_question(draft: QuestionDraft, number: int) -> Question:
    qid = f"q{number}"
    choices = tuple(
        Choice(id=f"{qid}_c{i + 1}", text=text) for i, text in enumerate(draft.options)
    )
    return Question(
        id=qid,
        prompt=draft.prompt,
        choices=choices,
        correct_choice_id=choices[draft.correct_index].id,
        correct_answer=draft.answer_text,
        explanation=draft.explanation,
        shape=draft.shape,
    )


def count_possible_quizzes(text: str, settings: Settings | None = None) -> int:
    """Estimate how many distinct quizzes *text* can yield without generating any."""
    s = settings or Settings()
    pool = prepare_pool(text, s)
    return min(len(pool), s.max_possible_quizzes)


def generate_quiz(
    text: str,
    title: str | None = None,
    source: str | None = None,
    quiz_index: int = 0,
    rng: random.Random | None = None,
    settings: Settings | None = None,
    question_count: int = 1,
) -> Quiz:
    """Generate a quiz from *text*.

    Raises InsufficientContent or NoSuitableContent; every other failure is
    absorbed while building the question.  Question *n* is seeded from
    ``quiz_index + n``, so varying *quiz_index* regenerates a different quiz
    from the same source.
    """
    s = settings or Settings()
    vocab = s.vocabulary()
    rng = rng or random.Random()

    pool = prepare_pool(text, s, vocab)
    corpus = build_corpus(pool, s.max_keywords, vocab)
    _log.info(
        "Pool: %d sentences, %d numbers, %d keywords",
        len(pool), len(corpus.numbers), len(corpus.keywords),
    )

    questions = []
    for n in range(max(1, question_count)):
        draft = synthesize_question(pool, corpus, quiz_index + n, rng, s, vocab)
        questions.append(_to_question(draft, n + 1))

    return Quiz(
        id=str(uuid.uuid4()),
        title=(title or "").strip() or DEFAULT_TITLE,
        source=(source or "").strip() or DEFAULT_SOURCE,
        generated_at=datetime.now(timezone.utc).isoformat(),
        questions=tuple(questions),
        total_possible_count=min(len(pool), s.max_possible_quizzes),
        current_index=quiz_index,
    )
