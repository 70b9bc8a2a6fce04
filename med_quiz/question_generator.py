"""Synthesize multiple-choice questions from a candidate pool using text heuristics."""
from __future__ import annotations

import logging
import random
import re

from med_quiz.config import Settings
from med_quiz.errors import NoSuitableContent, ShapeFailed
from med_quiz.models import CorpusIndex, QuestionDraft, QuestionShape
from med_quiz.text import find_numbers
from med_quiz.vocabulary import (
    DEFAULT_VOCABULARY,
    FALLBACK_SUBJECT,
    FILLER_OPTION,
    GENERIC_PROMPTS,
    NUMBER_UNITS,
    Vocabulary,
)

_log = logging.getLogger("med_quiz.qgen")

OPTION_COUNT = 4
BENEFIT_CLAUSE_MIN = 15
BENEFIT_CLAUSE_MAX = 50
MAX_REAL_BENEFITS = 5
MAX_KEYWORD_DISTRACTORS = 50

# (multiplier, offset) pairs used to fabricate numeric distractors
NUMERIC_VARIATIONS = (
    (0.5, 0),
    (0.75, 0),
    (1.25, 0),
    (1.5, 0),
    (1, 1),
    (1, 5),
)

_UNIT_SUFFIX = re.compile(r"(\s?)(" + NUMBER_UNITS + r")$", re.IGNORECASE)


def _words(text: str, keep: str = r"[^a-z\s\-]") -> list[str]:
    return re.sub(keep, " ", text.lower()).split()


def _explain(seed: str) -> str:
    return f'According to the source: "{seed}"'


def _capitalize(text: str) -> str:
    return text[:1].upper() + text[1:]


# ── Seed and subject ─────────────────────────────────────────────────────


def find_seed_sentence(
    pool: list[str],
    quiz_index: int = 0,
    vocab: Vocabulary | None = None,
    min_length: int = 60,
    max_length: int = 300,
) -> str:
    """Pick the sentence a question is built from.

    Sentences carrying a claim trigger come first, starting at the middle
    match and wrapping around, so quiz 0 does not always quiz the opening
    paragraph.  Remaining domain-hint sentences follow in document order,
    then every other sentence, so *quiz_index* (taken modulo the ordering
    length) can walk the whole pool.
    """
    vocab = vocab or DEFAULT_VOCABULARY
    bounded = [s for s in pool if min_length <= len(s) <= max_length]

    facts = [s for s in bounded if vocab.has_claim_trigger(s)]
    mid = len(facts) // 2
    ordering = facts[mid:] + facts[:mid]
    seen = set(ordering)
    for s in bounded:
        if s not in seen and vocab.has_domain_hint(s):
            ordering.append(s)
            seen.add(s)

    if not ordering:
        raise NoSuitableContent(
            "Could not find a factual or topic-relevant sentence to build a question from."
        )
    for s in bounded:
        if s not in seen:
            ordering.append(s)
            seen.add(s)
    return ordering[quiz_index % len(ordering)]


def extract_subject(sentence: str, vocab: Vocabulary | None = None) -> str:
    """Name what *sentence* is about, most specific topic term first."""
    vocab = vocab or DEFAULT_VOCABULARY
    lower = sentence.lower()

    matches = [t for t in vocab.topic_terms if re.search(r"\b" + re.escape(t), lower)]
    if matches:
        return max(matches, key=len)

    words = [w for w in _words(lower) if len(w) >= 5 and w not in vocab.stop_words]
    for w in words:
        if any(frag in w for frag in vocab.medical_suffixes):
            return w
    if words:
        return words[0]
    return FALLBACK_SUBJECT


def pick_question_shape(
    seed: str,
    draw: float,
    negative_probability: float = 0.4,
    vocab: Vocabulary | None = None,
) -> QuestionShape:
    """Decide the question shape from the seed sentence and one random draw in [0, 1)."""
    vocab = vocab or DEFAULT_VOCABULARY
    if vocab.has_negation(seed) or draw < negative_probability:
        return QuestionShape.FALSE_CLAIM
    if vocab.has_claim_trigger(seed):
        return QuestionShape.BENEFIT_CLAIM
    return QuestionShape.CLOZE


# ── Option helpers ───────────────────────────────────────────────────────


def pad_unique(options: list[str], count: int = OPTION_COUNT) -> list[str]:
    """De-duplicate *options* case-insensitively (first wins) and pad with fillers to *count*."""
    result: list[str] = []
    seen: set[str] = set()
    for opt in options:
        text = opt.strip()
        key = text.lower()
        if not text or key in seen:
            continue
        seen.add(key)
        result.append(text)
        if len(result) == count:
            return result
    n = 1
    while len(result) < count:
        filler = FILLER_OPTION.format(n=n)
        if filler.lower() not in seen:
            seen.add(filler.lower())
            result.append(filler)
        n += 1
    return result


def _finalize(
    prompt: str,
    distractors: list[str],
    answer: str,
    explanation: str,
    shape: QuestionShape,
    rng: random.Random,
) -> QuestionDraft:
    answer = answer.strip()
    others = [d for d in distractors if d.strip().lower() != answer.lower()]
    options = pad_unique([answer] + others)
    rng.shuffle(options)
    correct_index = next(i for i, o in enumerate(options) if o.lower() == answer.lower())
    return QuestionDraft(
        prompt=prompt,
        options=options,
        correct_index=correct_index,
        answer_text=options[correct_index],
        explanation=explanation,
        shape=shape,
    )


def _format_number(value: float) -> str:
    if float(value).is_integer():
        return str(int(round(value)))
    rounded = round(value, 1)
    return str(int(rounded)) if rounded.is_integer() else str(rounded)


def fabricate_numeric_distractors(answer: str) -> list[str]:
    """Scaled and offset variants of *answer*, keeping its unit, never equal to it."""
    digits = re.sub(r"[^0-9.]", "", answer)
    try:
        value = float(digits)
    except ValueError:
        return []
    m = _UNIT_SUFFIX.search(answer)
    unit = m.group(0) if m else ""

    results: list[str] = []
    for factor, offset in NUMERIC_VARIATIONS:
        candidate = value * factor + offset
        text = _format_number(candidate) + unit
        if _format_number(candidate) == _format_number(value) or text == answer:
            continue
        if text not in results:
            results.append(text)
    return results


def _normalize_verb(verb: str) -> str:
    words = verb.lower().split()
    if len(words) == 1 and not words[0].endswith("s"):
        words[0] += "s"
    return _capitalize(" ".join(words))


def mine_benefits(
    sentences: list[str],
    subject: str,
    vocab: Vocabulary | None = None,
    limit: int | None = None,
) -> list[str]:
    """Extract short benefit phrases from sentences that mention *subject*.

    Each phrase is normalized to ``<Verb phrase> <clause>``, e.g. "Helps
    reduce muscle cramps".  Clauses outside 15-50 characters are skipped.
    """
    vocab = vocab or DEFAULT_VOCABULARY
    subj = subject.lower()
    found: list[str] = []
    seen: set[str] = set()
    for sent in sentences:
        if subj not in sent.lower():
            continue
        taken: list[tuple[int, int]] = []
        for pattern in vocab.compiled_benefit_patterns():
            for m in pattern.finditer(sent):
                if any(start <= m.start() < end for start, end in taken):
                    continue
                clause = m.group("clause").strip()
                if not BENEFIT_CLAUSE_MIN <= len(clause) <= BENEFIT_CLAUSE_MAX:
                    continue
                taken.append(m.span())
                phrase = f"{_normalize_verb(m.group('verb'))} {clause}"
                if phrase.lower() in seen:
                    continue
                seen.add(phrase.lower())
                found.append(phrase)
                if limit is not None and len(found) >= limit:
                    return found
    return found


# ── Question shapes ──────────────────────────────────────────────────────


def _pick_keyword_answer(sentence: str, keywords: tuple[str, ...], vocab: Vocabulary) -> str:
    words = [w for w in _words(sentence) if len(w) >= 5 and w not in vocab.stop_words]
    if words:
        rank = {k: i for i, k in enumerate(keywords)}
        return min(words, key=lambda w: rank.get(w, len(keywords)))
    fallback = [w for w in re.sub(r"[^A-Za-z\s]", " ", sentence).split() if len(w) >= 4]
    return fallback[0] if fallback else sentence.split(" ")[0]


def _blank_out(sentence: str, answer: str) -> str:
    bounded = re.compile(r"(?<![A-Za-z0-9])" + re.escape(answer) + r"(?![A-Za-z0-9])", re.IGNORECASE)
    if bounded.search(sentence):
        return bounded.sub("_____", sentence, count=1)
    return re.compile(re.escape(answer), re.IGNORECASE).sub("_____", sentence, count=1)


def build_cloze_question(
    sentence: str,
    corpus: CorpusIndex,
    rng: random.Random,
    vocab: Vocabulary | None = None,
) -> QuestionDraft:
    """Fill-in-the-blank over the first number in *sentence*, or its top keyword."""
    vocab = vocab or DEFAULT_VOCABULARY
    numbers = find_numbers(sentence)
    if numbers:
        answer = numbers[0]
        pool = [n for n in corpus.numbers if n != answer]
        if len(pool) < 3:
            pool = list(dict.fromkeys(pool + fabricate_numeric_distractors(answer)))
        distractors = rng.sample(pool, min(3, len(pool)))
        while len(distractors) < 3:
            extra = str(rng.randrange(100))
            if extra != answer and extra not in distractors:
                distractors.append(extra)
    else:
        answer = _pick_keyword_answer(sentence, corpus.keywords, vocab)
        pool = [k for k in corpus.keywords if k != answer.lower()][:MAX_KEYWORD_DISTRACTORS]
        distractors = rng.sample(pool, min(3, len(pool)))

    prompt = f"Fill in the blank: {_blank_out(sentence, answer)}"
    return _finalize(prompt, distractors, answer, _explain(sentence), QuestionShape.CLOZE, rng)


def build_benefit_question(
    seed: str,
    subject: str,
    pool: list[str],
    rng: random.Random,
    vocab: Vocabulary | None = None,
) -> QuestionDraft:
    vocab = vocab or DEFAULT_VOCABULARY
    mined = mine_benefits(pool, subject, vocab)
    if not mined:
        raise ShapeFailed(f"no benefit phrases mention {subject!r}")

    answer = rng.choice(mined)
    mined_keys = {m.lower() for m in mined}
    generic = [g for g in vocab.generic_benefits if g.lower() not in mined_keys]
    distractors = rng.sample(generic, min(3, len(generic)))
    prompt = rng.choice(vocab.benefit_prompts).format(subject=subject)
    return _finalize(prompt, distractors, answer, _explain(seed), QuestionShape.BENEFIT_CLAIM, rng)


def build_false_claim_question(
    seed: str,
    subject: str,
    pool: list[str],
    rng: random.Random,
    vocab: Vocabulary | None = None,
) -> QuestionDraft:
    """Three plausible benefits plus one exaggerated claim; the claim is the answer."""
    vocab = vocab or DEFAULT_VOCABULARY
    if not vocab.false_claims:
        raise ShapeFailed("false-claim bank is empty")

    real = mine_benefits(pool, subject, vocab, limit=MAX_REAL_BENEFITS)
    rng.shuffle(real)
    fallbacks = list(vocab.generic_benefits)
    rng.shuffle(fallbacks)
    real_options = pad_unique(real + fallbacks, count=3)

    false_claim = rng.choice(vocab.false_claims)
    prompt = rng.choice(vocab.false_claim_prompts).format(subject=subject)
    explanation = (
        f'"{false_claim}" is an exaggeration the source does not support. '
        + _explain(seed)
    )
    return _finalize(prompt, real_options, false_claim, explanation, QuestionShape.FALSE_CLAIM, rng)


def build_generic_question(
    seed: str,
    subject: str,
    rng: random.Random,
    vocab: Vocabulary | None = None,
) -> QuestionDraft:
    """Templated question about *subject*; cannot fail."""
    vocab = vocab or DEFAULT_VOCABULARY
    template = rng.choice(vocab.generic_prompts or GENERIC_PROMPTS)
    label = _capitalize(subject)
    claims = list(vocab.false_claims)
    rng.shuffle(claims)
    distractors = [f"{label} {c[:1].lower()}{c[1:]}" for c in claims[:3]]
    return _finalize(
        template.format(subject=subject),
        distractors,
        seed,
        _explain(seed),
        QuestionShape.GENERIC,
        rng,
    )


def build_question(
    shape: QuestionShape,
    seed: str,
    subject: str,
    pool: list[str],
    corpus: CorpusIndex,
    rng: random.Random,
    vocab: Vocabulary | None = None,
) -> QuestionDraft:
    """Build *shape*, falling back to the generic shape if it cannot be built."""
    vocab = vocab or DEFAULT_VOCABULARY
    try:
        if shape is QuestionShape.CLOZE:
            return build_cloze_question(seed, corpus, rng, vocab)
        if shape is QuestionShape.BENEFIT_CLAIM:
            return build_benefit_question(seed, subject, pool, rng, vocab)
        if shape is QuestionShape.FALSE_CLAIM:
            return build_false_claim_question(seed, subject, pool, rng, vocab)
    except Exception as e:
        _log.info("  %s failed (%s) — using generic question", shape.value, e)
    return build_generic_question(seed, subject, rng, vocab)


def synthesize_question(
    pool: list[str],
    corpus: CorpusIndex,
    quiz_index: int = 0,
    rng: random.Random | None = None,
    settings: Settings | None = None,
    vocab: Vocabulary | None = None,
) -> QuestionDraft:
    """Generate one question draft for the *quiz_index*-th seed sentence of *pool*."""
    s = settings or Settings()
    vocab = vocab or s.vocabulary()
    rng = rng or random.Random()

    seed = find_seed_sentence(
        pool, quiz_index, vocab, s.min_sentence_length, s.fact_sentence_max_length,
    )
    subject = extract_subject(seed, vocab)
    shape = pick_question_shape(seed, rng.random(), s.negative_shape_probability, vocab)
    _log.info("Generate %s about %r (seed %d)", shape.value, subject, quiz_index)
    return build_question(shape, seed, subject, pool, corpus, rng, vocab)
