"""Data models returned by the classifier."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class CategoryScore:
    """Unnormalized log score of one category for one query."""

    category: str
    score: float

    def to_dict(self) -> dict:
        return {"category": self.category, "score": self.score}


@dataclass
class Categorization:
    """Outcome of ``NaiveBayes.categorize``.

    Attributes:
        category: Winning category label, or None if no category exists.
        scores: Log score of every known category, in the order the
            categories were first learned.
    """

    category: Optional[str]
    scores: list[CategoryScore] = field(default_factory=list)

    def probabilities(self) -> dict[str, float]:
        """Normalize the log scores into posterior probabilities.

        Uses log-sum-exp for numerical stability.
        """
        if not self.scores:
            return {}
        max_score = max(s.score for s in self.scores)
        if max_score == -math.inf:
            return {s.category: 0.0 for s in self.scores}
        exp_scores = {s.category: math.exp(s.score - max_score) for s in self.scores}
        total = sum(exp_scores.values())
        return {cat: value / total for cat, value in exp_scores.items()}

    @property
    def confidence(self) -> float:
        """Posterior probability of the winning category."""
        if self.category is None:
            return 0.0
        return self.probabilities()[self.category]

    def to_dict(self) -> dict:
        return {
            "category": self.category,
            "confidence": round(self.confidence, 4),
            "scores": [s.to_dict() for s in self.scores],
        }


@dataclass
class ModelStats:
    """Summary of a classifier's learned state."""

    total_documents: int = 0
    vocabulary_size: int = 0
    categories: list[str] = field(default_factory=list)
    doc_count: dict[str, int] = field(default_factory=dict)
    word_count: dict[str, int] = field(default_factory=dict)
    tokenizer: Optional[str] = None

    @property
    def category_count(self) -> int:
        return len(self.categories)

    def to_dict(self) -> dict:
        return {
            "total_documents": self.total_documents,
            "vocabulary_size": self.vocabulary_size,
            "category_count": self.category_count,
            "tokenizer": self.tokenizer,
            "categories": [
                {
                    "category": cat,
                    "documents": self.doc_count.get(cat, 0),
                    "words": self.word_count.get(cat, 0),
                }
                for cat in self.categories
            ],
        }
