"""Text pipeline: normalize, split into sentences, filter, and index the corpus."""
from __future__ import annotations

import logging
import re

from med_quiz.config import Settings
from med_quiz.errors import InsufficientContent
from med_quiz.models import CorpusIndex
from med_quiz.vocabulary import DEFAULT_VOCABULARY, NUMBER_UNITS, Vocabulary

_log = logging.getLogger("med_quiz.text")

_SENTENCE_BOUNDARY = re.compile(r"(?<=[.!?])\s+(?=[A-Z0-9\"'(])")
_NUMBER = re.compile(
    r"(?:\d{1,3}(?:,\d{3})+|\d+)(?:\.\d+)?(?:\s?(?:" + NUMBER_UNITS + r")(?![A-Za-z]))?",
    re.IGNORECASE,
)
_HAS_LETTER = re.compile(r"[A-Za-z]")
_NON_WORD = re.compile(r"[^A-Za-z0-9\s\-]")


def normalize_text(text: str) -> str:
    return re.sub(r"\s+", " ", text.replace("\u00a0", " ")).strip()


def split_into_sentences(text: str) -> list[str]:
    """Split on ``.``/``!``/``?`` followed by whitespace and a capital, digit, quote or ``(``.

    Abbreviations such as "Dr. Smith" are split too; callers live with that.
    """
    parts = _SENTENCE_BOUNDARY.split(normalize_text(text))
    return [p.strip() for p in parts if p.strip()]


def filter_candidates(
    sentences: list[str],
    settings: Settings | None = None,
    vocab: Vocabulary | None = None,
) -> list[str]:
    """Keep sentences within the length bounds, narrowing to domain sentences when enough exist."""
    s = settings or Settings()
    vocab = vocab or DEFAULT_VOCABULARY

    candidates = [
        sent for sent in sentences
        if s.min_sentence_length <= len(sent) <= s.max_sentence_length
        and _HAS_LETTER.search(sent)
    ]
    domain = [sent for sent in candidates if vocab.has_domain_hint(sent)]
    if len(domain) >= s.domain_min_matches:
        _log.debug("Narrowed pool to %d domain sentences (of %d)", len(domain), len(candidates))
        candidates = domain
    if not candidates:
        raise InsufficientContent(
            "No sentences of a usable length were found in the source text."
        )
    return candidates


def find_numbers(sentence: str) -> list[str]:
    """Numeric tokens (with an optional unit) in order of first appearance."""
    return list(dict.fromkeys(m.group(0).strip() for m in _NUMBER.finditer(sentence)))


def extract_keywords(
    sentences: list[str],
    max_keywords: int = 100,
    stop_words: frozenset[str] | None = None,
) -> list[str]:
    stop = DEFAULT_VOCABULARY.stop_words if stop_words is None else stop_words
    freq: dict[str, int] = {}
    for sent in sentences:
        for w in _NON_WORD.sub(" ", sent).lower().split():
            if len(w) >= 5 and w not in stop:
                freq[w] = freq.get(w, 0) + 1
    # sorted() is stable, so ties keep first-seen order
    ranked = sorted(freq.items(), key=lambda kv: kv[1], reverse=True)
    return [w for w, _ in ranked[:max_keywords]]


def build_corpus(
    pool: list[str],
    max_keywords: int = 200,
    vocab: Vocabulary | None = None,
) -> CorpusIndex:
    vocab = vocab or DEFAULT_VOCABULARY
    numbers: dict[str, None] = {}
    for sent in pool:
        for n in find_numbers(sent):
            numbers.setdefault(n, None)
    return CorpusIndex(
        numbers=tuple(numbers),
        keywords=tuple(extract_keywords(pool, max_keywords, vocab.stop_words)),
    )


def prepare_pool(
    text: str,
    settings: Settings | None = None,
    vocab: Vocabulary | None = None,
) -> list[str]:
    """Run normalization, segmentation and filtering; raise InsufficientContent on thin input."""
    s = settings or Settings()
    normalized = normalize_text(text or "")
    if len(normalized) < s.min_text_length:
        raise InsufficientContent(
            "Source has insufficient extractable content to build a quiz."
        )
    return filter_candidates(split_into_sentences(normalized), s, vocab or s.vocabulary())
