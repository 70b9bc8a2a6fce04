"""Word lists and phrase banks that drive the quiz heuristics.

Everything here is plain data; the pipeline only reads it through a
``Vocabulary`` instance so callers can extend a list without touching the
control flow in ``text`` or ``question_generator``.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field

STOP_WORDS = frozenset({
    "the", "and", "that", "have", "for", "not", "with", "you", "this", "but",
    "his", "they", "her", "she", "from", "had", "was", "are", "been", "were",
    "their", "will", "would", "there", "what", "when", "where", "which", "your",
    "can", "all", "about", "more", "some", "other", "into", "than", "them",
    "then", "also", "such", "may", "like", "over", "most", "many", "those",
    "these", "within", "between", "without", "including", "because", "while",
    "after", "before", "under", "above", "during", "each", "both", "any",
    "very", "could", "should", "might", "used", "using", "use", "one", "two",
    "three", "four", "five", "six", "seven", "eight", "nine", "ten", "is",
    "of", "in", "to", "a", "an", "on", "at", "it", "as", "by", "or", "be",
    "we", "our", "its",
})

DOMAIN_HINTS = (
    "symptom", "symptoms", "diagnosis", "diagnose", "treatment", "treatments",
    "therapy", "therapies", "dosage", "dose", "mg", "ml", "side effect",
    "side effects", "risk", "risks", "cause", "causes", "caused", "prevention",
    "prevent", "vaccine", "vaccination", "disease", "condition", "disorder",
    "syndrome", "infection", "infectious", "pathogen", "virus", "bacteria",
    "bacterial", "viral", "fungal", "incidence", "prevalence", "mortality",
    "morbidity", "hypertension", "diabetes", "cancer", "asthma", "allergy",
    "allergic", "cardio", "heart", "renal", "kidney", "liver", "hepatitis",
    "covid", "immunity", "immune", "inflammation", "inflammatory", "pain",
    "fever", "blood pressure", "cholesterol", "glucose", "insulin",
)

TOPIC_TERMS = (
    "magnesium", "calcium", "iron", "zinc", "potassium", "sodium", "selenium",
    "vitamin a", "vitamin b12", "vitamin c", "vitamin d", "vitamin e",
    "vitamin k", "folic acid", "omega-3", "fish oil", "fiber", "protein",
    "probiotics", "antioxidants", "caffeine", "melatonin", "insulin",
    "metformin", "aspirin", "ibuprofen", "acetaminophen", "statins",
    "antibiotics", "vaccines", "vaccination", "exercise", "sleep",
    "meditation", "green tea", "turmeric", "curcumin", "ginger", "garlic",
    "collagen", "creatine", "cholesterol", "blood pressure", "hypertension",
    "diabetes", "asthma", "cancer", "obesity", "inflammation", "depression",
    "anxiety", "arthritis", "osteoporosis", "hydration",
)

CLAIM_TRIGGERS = (
    "benefit", "beneficial", "improve", "associated with", "side effect",
    "used for", "used to treat", "helps", "help ", "reduce", "lower",
    "support", "prevent", "protect", "linked to", "effective", "treat",
    "relieve", "boost", "risk of",
)

NEGATION_PATTERN = re.compile(
    r"\b(?:not|no|never|cannot|can't|doesn't|don't|isn't|aren't|neither|nor|"
    r"ineffective|unlikely)\b",
    re.IGNORECASE,
)

MEDICAL_SUFFIXES = ("tion", "ine", "ide", "ate", "ase", "ism", "itis", "osis", "emia")

NUMBER_UNITS = r"%|mg|ml|mmHg|kg|g|mcg|years|year|days|day|hours|hour|bpm"

# Each pattern captures a verb phrase and the clause that follows it.
_CLAUSE = r"(?P<clause>[^,;:.!?]+)"
BENEFIT_PATTERNS = (
    r"\b(?P<verb>(?:may|can|might) (?:help|reduce|improve|lower|support|prevent|protect))\s+" + _CLAUSE,
    r"\b(?P<verb>helps?|improves?|reduces?|supports?|lowers?|boosts?|strengthens?|"
    r"protects?|relieves?|promotes?|enhances?|regulates?)\s+" + _CLAUSE,
    r"\b(?P<verb>treats?|prevents?)\s+" + _CLAUSE,
    r"\b(?P<verb>effective (?:for|against|in)|used (?:for|to treat|to))\s+" + _CLAUSE,
)

GENERIC_BENEFITS = (
    "Supports healthy immune function",
    "Improves quality of sleep",
    "Helps maintain healthy bones",
    "Reduces everyday fatigue",
    "Supports normal heart rhythm",
    "Improves concentration and memory",
    "Helps regulate blood sugar levels",
    "Supports healthy digestion",
    "Reduces minor joint stiffness",
    "Promotes healthy skin",
)

FALSE_CLAIMS = (
    "Cures all forms of cancer within days",
    "Eliminates the need for any other medical treatment",
    "Makes a person completely immune to every infection",
    "Reverses aging permanently after a single dose",
    "Guarantees weight loss without any change in diet",
    "Repairs any damaged organ overnight",
    "Has no side effects at any dose for anyone",
    "Doubles life expectancy in healthy adults",
)

BENEFIT_PROMPTS = (
    "Which of the following is a reported benefit of {subject}?",
    "According to the source, what can {subject} do?",
    "Which statement about {subject} is supported by the text?",
    "What effect of {subject} is described in the source?",
)

FALSE_CLAIM_PROMPTS = (
    "Which of the following is NOT a supported claim about {subject}?",
    "Which statement about {subject} is an exaggeration not supported by the source?",
    "Which of these claims about {subject} is false?",
)

GENERIC_PROMPTS = (
    "Which of the following statements about {subject} appears in the source?",
    "What does the source say about {subject}?",
    "Which statement regarding {subject} is taken from the text?",
    "Which of these describes {subject} the way the source does?",
)

FILLER_OPTION = "None of the above ({n})"

FALLBACK_SUBJECT = "this topic"


@dataclass
class Vocabulary:
    stop_words: frozenset[str] = STOP_WORDS
    domain_hints: tuple[str, ...] = DOMAIN_HINTS
    topic_terms: tuple[str, ...] = TOPIC_TERMS
    claim_triggers: tuple[str, ...] = CLAIM_TRIGGERS
    medical_suffixes: tuple[str, ...] = MEDICAL_SUFFIXES
    benefit_patterns: tuple[str, ...] = BENEFIT_PATTERNS
    generic_benefits: tuple[str, ...] = GENERIC_BENEFITS
    false_claims: tuple[str, ...] = FALSE_CLAIMS
    benefit_prompts: tuple[str, ...] = BENEFIT_PROMPTS
    false_claim_prompts: tuple[str, ...] = FALSE_CLAIM_PROMPTS
    generic_prompts: tuple[str, ...] = GENERIC_PROMPTS
    _compiled: list[re.Pattern] = field(default_factory=list, init=False, repr=False)

    def extended(
        self,
        domain_hints: list[str] | None = None,
        topic_terms: list[str] | None = None,
        claim_triggers: list[str] | None = None,
    ) -> Vocabulary:
        """Return a copy with extra terms appended (lowercased, no duplicates)."""
        def merge(base: tuple[str, ...], extra: list[str] | None) -> tuple[str, ...]:
            merged = list(base)
            for term in extra or []:
                t = term.lower().strip()
                if t and t not in merged:
                    merged.append(t)
            return tuple(merged)

        return Vocabulary(
            stop_words=self.stop_words,
            domain_hints=merge(self.domain_hints, domain_hints),
            topic_terms=merge(self.topic_terms, topic_terms),
            claim_triggers=merge(self.claim_triggers, claim_triggers),
            medical_suffixes=self.medical_suffixes,
            benefit_patterns=self.benefit_patterns,
            generic_benefits=self.generic_benefits,
            false_claims=self.false_claims,
            benefit_prompts=self.benefit_prompts,
            false_claim_prompts=self.false_claim_prompts,
            generic_prompts=self.generic_prompts,
        )

    def compiled_benefit_patterns(self) -> list[re.Pattern]:
        if not self._compiled:
            self._compiled = [re.compile(p, re.IGNORECASE) for p in self.benefit_patterns]
        return self._compiled

    def has_domain_hint(self, sentence: str) -> bool:
        lower = sentence.lower()
        return any(kw in lower for kw in self.domain_hints)

    def has_claim_trigger(self, sentence: str) -> bool:
        lower = sentence.lower()
        return any(t in lower for t in self.claim_triggers)

    def has_negation(self, sentence: str) -> bool:
        return NEGATION_PATTERN.search(sentence) is not None


DEFAULT_VOCABULARY = Vocabulary()
