from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path

from med_quiz.vocabulary import DEFAULT_VOCABULARY, Vocabulary

CONFIG_PATH = Path(__file__).resolve().parent.parent / "config.json"

DEFAULTS = {
    "min_text_length": 200,
    "min_sentence_length": 60,
    "max_sentence_length": 250,
    "fact_sentence_max_length": 300,
    "domain_min_matches": 6,
    "max_keywords": 200,
    "max_possible_quizzes": 10,
    "negative_shape_probability": 0.4,
    "fetch_timeout": 15.0,
    "fetch_retry_delay": 1.0,
    "history_limit": 50,
    "store_backend": "memory",
    "db_path": "history.db",
    "extra_domain_hints": [],
    "extra_topic_terms": [],
    "extra_claim_triggers": [],
}


@dataclass
class Settings:
    min_text_length: int = DEFAULTS["min_text_length"]
    min_sentence_length: int = DEFAULTS["min_sentence_length"]
    max_sentence_length: int = DEFAULTS["max_sentence_length"]
    fact_sentence_max_length: int = DEFAULTS["fact_sentence_max_length"]
    domain_min_matches: int = DEFAULTS["domain_min_matches"]
    max_keywords: int = DEFAULTS["max_keywords"]
    max_possible_quizzes: int = DEFAULTS["max_possible_quizzes"]
    negative_shape_probability: float = DEFAULTS["negative_shape_probability"]
    fetch_timeout: float = DEFAULTS["fetch_timeout"]
    fetch_retry_delay: float = DEFAULTS["fetch_retry_delay"]
    history_limit: int = DEFAULTS["history_limit"]
    store_backend: str = DEFAULTS["store_backend"]
    db_path: str = DEFAULTS["db_path"]
    extra_domain_hints: list[str] = field(default_factory=lambda: list(DEFAULTS["extra_domain_hints"]))
    extra_topic_terms: list[str] = field(default_factory=lambda: list(DEFAULTS["extra_topic_terms"]))
    extra_claim_triggers: list[str] = field(default_factory=lambda: list(DEFAULTS["extra_claim_triggers"]))

    @property
    def project_root(self) -> Path:
        return Path(__file__).resolve().parent.parent

    @property
    def db_full_path(self) -> Path:
        return self.project_root / self.db_path

    def vocabulary(self) -> Vocabulary:
        if not (self.extra_domain_hints or self.extra_topic_terms or self.extra_claim_triggers):
            return DEFAULT_VOCABULARY
        return DEFAULT_VOCABULARY.extended(
            domain_hints=self.extra_domain_hints,
            topic_terms=self.extra_topic_terms,
            claim_triggers=self.extra_claim_triggers,
        )

    def to_dict(self) -> dict:
        return {
            "min_text_length": self.min_text_length,
            "min_sentence_length": self.min_sentence_length,
            "max_sentence_length": self.max_sentence_length,
            "fact_sentence_max_length": self.fact_sentence_max_length,
            "domain_min_matches": self.domain_min_matches,
            "max_keywords": self.max_keywords,
            "max_possible_quizzes": self.max_possible_quizzes,
            "negative_shape_probability": self.negative_shape_probability,
            "fetch_timeout": self.fetch_timeout,
            "fetch_retry_delay": self.fetch_retry_delay,
            "history_limit": self.history_limit,
            "store_backend": self.store_backend,
            "db_path": self.db_path,
            "extra_domain_hints": self.extra_domain_hints,
            "extra_topic_terms": self.extra_topic_terms,
            "extra_claim_triggers": self.extra_claim_triggers,
        }


def load_settings() -> Settings:
    if CONFIG_PATH.exists():
        raw = json.loads(CONFIG_PATH.read_text())
        known = {f.name for f in Settings.__dataclass_fields__.values()}
        filtered = {k: v for k, v in raw.items() if k in known}
        return Settings(**filtered)
    return Settings()


def save_settings(settings: Settings) -> None:
    CONFIG_PATH.write_text(json.dumps(settings.to_dict(), indent=4) + "\n")
