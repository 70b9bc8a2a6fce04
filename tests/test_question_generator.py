"""Tests for seed selection, subject extraction, shape choice and question building."""
from __future__ import annotations

import random

import pytest

from med_quiz import question_generator
from med_quiz.errors import NoSuitableContent, ShapeFailed
from med_quiz.models import CorpusIndex, QuestionShape
from med_quiz.question_generator import (
    build_benefit_question,
    build_cloze_question,
    build_false_claim_question,
    build_generic_question,
    build_question,
    extract_subject,
    fabricate_numeric_distractors,
    find_seed_sentence,
    mine_benefits,
    pad_unique,
    pick_question_shape,
    synthesize_question,
)
from med_quiz.text import build_corpus, prepare_pool, split_into_sentences
from med_quiz.vocabulary import FALSE_CLAIMS, GENERIC_BENEFITS

from conftest import MAGNESIUM_TEXT, MEDICAL_TEXT, TRAIN_TEXT, FixedDrawRandom

PLAIN = split_into_sentences(TRAIN_TEXT)
MAGNESIUM_SENTENCE = "Magnesium helps reduce muscle cramps and supports nerve function."
DOSE_SENTENCE = "Doctors often recommend a daily dose of 500mg of magnesium for patients with frequent cramps."
DOMAIN_ONLY = "Patients with this condition often report fatigue and a poor appetite overall."


def _fact(i: int) -> str:
    return f"Sentence {i} says exercise helps improve mood and sleep for most adults."


def _assert_valid(draft):
    assert len(draft.options) == 4
    assert all(o.strip() for o in draft.options)
    assert len({o.lower() for o in draft.options}) == 4
    assert draft.options[draft.correct_index] == draft.answer_text


class TestFindSeedSentence:
    def test_middle_fact_first(self):
        pool = [PLAIN[0], _fact(0), PLAIN[1], _fact(1), _fact(2)]
        assert find_seed_sentence(pool, 0) == _fact(1)

    def test_index_walks_and_wraps(self):
        pool = [PLAIN[0], _fact(0), PLAIN[1], _fact(1), _fact(2)]
        assert find_seed_sentence(pool, 1) == _fact(2)
        assert find_seed_sentence(pool, 2) == _fact(0)
        assert find_seed_sentence(pool, 5) == _fact(1)

    def test_plain_sentences_follow_facts(self):
        pool = [PLAIN[0], _fact(0), PLAIN[1]]
        assert find_seed_sentence(pool, 1) == PLAIN[0]
        assert find_seed_sentence(pool, 2) == PLAIN[1]

    def test_index_walks_whole_pool(self):
        pool = prepare_pool(MAGNESIUM_TEXT)
        seeds = [find_seed_sentence(pool, i) for i in range(len(pool))]
        assert seeds[0] == MAGNESIUM_SENTENCE
        assert sorted(seeds) == sorted(pool)

    def test_consecutive_indices_differ(self):
        pool = prepare_pool(MEDICAL_TEXT)
        assert find_seed_sentence(pool, 0) != find_seed_sentence(pool, 1)

    def test_domain_fallback(self):
        pool = PLAIN + [DOMAIN_ONLY]
        assert find_seed_sentence(pool, 0) == DOMAIN_ONLY

    def test_domain_sentences_follow_facts(self):
        pool = [DOMAIN_ONLY, _fact(0)]
        assert find_seed_sentence(pool, 0) == _fact(0)
        assert find_seed_sentence(pool, 1) == DOMAIN_ONLY

    def test_no_suitable_content(self):
        with pytest.raises(NoSuitableContent):
            find_seed_sentence(PLAIN, 0)

    def test_length_bound(self):
        with pytest.raises(NoSuitableContent):
            find_seed_sentence([_fact(0)], 0, max_length=65)


class TestExtractSubject:
    def test_topic_term(self):
        assert extract_subject(MAGNESIUM_SENTENCE) == "magnesium"

    def test_longest_term_wins(self):
        assert extract_subject("Fish oil is a rich source of omega-3 fatty acids.") == "fish oil"

    def test_term_must_start_a_word(self):
        sentence = "The environment shapes public attitudes towards medication."
        assert extract_subject(sentence) == "medication"

    def test_first_long_word(self):
        assert extract_subject("Walking every morning keeps people active.") == "walking"

    def test_fallback_literal(self):
        assert extract_subject("It is on us.") == "this topic"


class TestPickQuestionShape:
    def test_negation_forces_false_claim(self):
        seed = "Antibiotics do not help against viral infections such as the common cold."
        assert pick_question_shape(seed, 0.99) is QuestionShape.FALSE_CLAIM

    def test_low_draw_false_claim(self):
        assert pick_question_shape(MAGNESIUM_SENTENCE, 0.1) is QuestionShape.FALSE_CLAIM

    def test_claim_sentence_benefit(self):
        assert pick_question_shape(MAGNESIUM_SENTENCE, 0.9) is QuestionShape.BENEFIT_CLAIM

    def test_plain_sentence_cloze(self):
        assert pick_question_shape(DOSE_SENTENCE, 0.9) is QuestionShape.CLOZE

    def test_probability_is_configurable(self):
        assert pick_question_shape(MAGNESIUM_SENTENCE, 0.1, negative_probability=0.0) is QuestionShape.BENEFIT_CLAIM
        assert pick_question_shape(MAGNESIUM_SENTENCE, 0.9, negative_probability=1.0) is QuestionShape.FALSE_CLAIM


class TestMineBenefits:
    def test_verb_clause(self):
        assert mine_benefits([MAGNESIUM_SENTENCE], "magnesium") == [
            "Helps reduce muscle cramps and supports nerve function"
        ]

    def test_modal_phrase_not_split(self):
        sent = "Regular potassium intake may help lower blood pressure in most adults."
        assert mine_benefits([sent], "potassium") == ["May help lower blood pressure in most adults"]

    def test_bare_verb_gets_third_person(self):
        sent = "Curcumin from turmeric can reduce swelling, and some people say turmeric relieve aching joints daily."
        assert "Relieves aching joints daily" in mine_benefits([sent], "turmeric")

    def test_requires_subject(self):
        assert mine_benefits([MAGNESIUM_SENTENCE], "calcium") == []

    def test_short_clause_skipped(self):
        assert mine_benefits(["Zinc supports immunity."], "zinc") == []

    def test_dedup_and_limit(self):
        sentences = [MAGNESIUM_SENTENCE, MAGNESIUM_SENTENCE,
                     "Magnesium improves sleep quality in older adults."]
        assert len(mine_benefits(sentences, "magnesium")) == 2
        assert len(mine_benefits(sentences, "magnesium", limit=1)) == 1


class TestOptionHelpers:
    def test_pad_unique(self):
        assert pad_unique(["A", "a", " B ", ""]) == [
            "A", "B", "None of the above (1)", "None of the above (2)",
        ]

    def test_pad_unique_truncates(self):
        assert pad_unique(["a", "b", "c", "d", "e"]) == ["a", "b", "c", "d"]

    def test_fabricate_integer(self):
        assert fabricate_numeric_distractors("500mg") == [
            "250mg", "375mg", "625mg", "750mg", "501mg", "505mg",
        ]

    def test_fabricate_keeps_separator(self):
        assert fabricate_numeric_distractors("1,500 mg")[0] == "750 mg"

    def test_fabricate_excludes_answer(self):
        assert fabricate_numeric_distractors("0") == ["1", "5"]


class TestCloze:
    def test_numeric_fabricated(self, rng):
        corpus = CorpusIndex(numbers=("500mg",), keywords=())
        draft = build_cloze_question(DOSE_SENTENCE, corpus, rng)
        _assert_valid(draft)
        assert draft.shape is QuestionShape.CLOZE
        assert draft.answer_text == "500mg"
        assert "_____" in draft.prompt
        assert "500mg" not in draft.prompt
        fabricated = set(fabricate_numeric_distractors("500mg"))
        assert set(draft.options) - {"500mg"} <= fabricated

    def test_numeric_from_corpus(self, rng):
        corpus = CorpusIndex(numbers=("500mg", "10 days", "20%", "2 hours"), keywords=())
        draft = build_cloze_question(DOSE_SENTENCE, corpus, rng)
        assert set(draft.options) == {"500mg", "10 days", "20%", "2 hours"}

    def test_keyword_answer(self, rng):
        sentence = "Insulin resistance develops slowly in people who rarely exercise."
        corpus = CorpusIndex(
            numbers=(),
            keywords=("resistance", "insulin", "develops", "people", "slowly", "exercise", "rarely"),
        )
        draft = build_cloze_question(sentence, corpus, rng)
        _assert_valid(draft)
        assert draft.answer_text == "resistance"
        assert draft.prompt == "Fill in the blank: Insulin _____ develops slowly in people who rarely exercise."

    def test_keyword_padding(self, rng):
        sentence = "Insulin resistance develops slowly in people who rarely exercise."
        draft = build_cloze_question(sentence, CorpusIndex(numbers=(), keywords=()), rng)
        _assert_valid(draft)
        assert "None of the above (1)" in draft.options


class TestClaimShapes:
    def test_benefit(self, rng):
        draft = build_benefit_question(MAGNESIUM_SENTENCE, "magnesium", [MAGNESIUM_SENTENCE], rng)
        _assert_valid(draft)
        assert draft.answer_text == "Helps reduce muscle cramps and supports nerve function"
        assert "magnesium" in draft.prompt
        others = [o for o in draft.options if o != draft.answer_text]
        assert all(o in GENERIC_BENEFITS for o in others)

    def test_benefit_without_material_fails(self, rng):
        with pytest.raises(ShapeFailed):
            build_benefit_question(DOSE_SENTENCE, "calcium", [DOSE_SENTENCE], rng)

    def test_false_claim(self, rng):
        draft = build_false_claim_question(MAGNESIUM_SENTENCE, "magnesium", [MAGNESIUM_SENTENCE], rng)
        _assert_valid(draft)
        assert draft.shape is QuestionShape.FALSE_CLAIM
        assert draft.answer_text in FALSE_CLAIMS
        assert MAGNESIUM_SENTENCE in draft.explanation

    def test_false_claim_without_mined_benefits(self, rng):
        draft = build_false_claim_question(DOSE_SENTENCE, "calcium", [DOSE_SENTENCE], rng)
        _assert_valid(draft)
        others = [o for o in draft.options if o != draft.answer_text]
        assert all(o in GENERIC_BENEFITS for o in others)

    def test_generic(self, rng):
        draft = build_generic_question(DOSE_SENTENCE, "magnesium", rng)
        _assert_valid(draft)
        assert draft.shape is QuestionShape.GENERIC
        assert draft.answer_text == DOSE_SENTENCE
        assert "magnesium" in draft.prompt


class TestBuildQuestion:
    def test_soft_failure_falls_back(self, rng):
        corpus = build_corpus([DOSE_SENTENCE])
        draft = build_question(
            QuestionShape.BENEFIT_CLAIM, DOSE_SENTENCE, "calcium", [DOSE_SENTENCE], corpus, rng,
        )
        _assert_valid(draft)
        assert draft.shape is QuestionShape.GENERIC

    def test_unexpected_error_falls_back(self, rng, monkeypatch):
        def boom(*args, **kwargs):
            raise RuntimeError("boom")

        monkeypatch.setattr(question_generator, "build_cloze_question", boom)
        corpus = build_corpus([DOSE_SENTENCE])
        draft = build_question(
            QuestionShape.CLOZE, DOSE_SENTENCE, "magnesium", [DOSE_SENTENCE], corpus, rng,
        )
        assert draft.shape is QuestionShape.GENERIC


class TestSynthesizeQuestion:
    def test_always_four_unique_options(self):
        pool = prepare_pool(MEDICAL_TEXT)
        corpus = build_corpus(pool)
        for i in range(60):
            _assert_valid(synthesize_question(pool, corpus, i, random.Random(i)))

    def test_seed_is_index_deterministic(self):
        pool = prepare_pool(MEDICAL_TEXT)
        corpus = build_corpus(pool)
        seed = find_seed_sentence(pool, 3)
        for r in (random.Random(1), random.Random(2), random.Random(1)):
            assert seed in synthesize_question(pool, corpus, 3, r).explanation

    def test_seeded_rng_reproducible(self):
        pool = prepare_pool(MEDICAL_TEXT)
        corpus = build_corpus(pool)
        a = synthesize_question(pool, corpus, 2, random.Random(7))
        b = synthesize_question(pool, corpus, 2, random.Random(7))
        assert a == b

    def test_magnesium_benefit_scenario(self):
        pool = prepare_pool(MAGNESIUM_TEXT)
        corpus = build_corpus(pool)
        draft = synthesize_question(pool, corpus, 0, FixedDrawRandom(0.9))
        assert draft.shape is QuestionShape.BENEFIT_CLAIM
        assert "reduce" in draft.answer_text or "support" in draft.answer_text
        assert "magnesium" in draft.prompt

    def test_magnesium_false_claim_draw(self):
        pool = prepare_pool(MAGNESIUM_TEXT)
        corpus = build_corpus(pool)
        draft = synthesize_question(pool, corpus, 0, FixedDrawRandom(0.1))
        assert draft.shape is QuestionShape.FALSE_CLAIM
        assert draft.answer_text in FALSE_CLAIMS

    def test_cloze_with_fabricated_numbers(self):
        pool = [DOSE_SENTENCE] + PLAIN
        corpus = build_corpus(pool)
        draft = synthesize_question(pool, corpus, 0, FixedDrawRandom(0.9))
        assert draft.shape is QuestionShape.CLOZE
        assert draft.answer_text == "500mg"
        assert set(draft.options) - {"500mg"} <= set(fabricate_numeric_distractors("500mg"))

    def test_no_suitable_content(self):
        corpus = build_corpus(PLAIN)
        with pytest.raises(NoSuitableContent):
            synthesize_question(PLAIN, corpus, 0, random.Random(0))
