"""Tests for result data models."""

from __future__ import annotations

import math

import pytest

from bayes_classifier.models import Categorization, CategoryScore, ModelStats


class TestCategorization:
    """Tests for Categorization."""

    def test_probabilities_sum_to_one(self):
        result = Categorization(
            category="a",
            scores=[CategoryScore("a", -1.0), CategoryScore("b", -2.0), CategoryScore("c", -3.0)],
        )
        probabilities = result.probabilities()
        assert sum(probabilities.values()) == pytest.approx(1.0)
        assert probabilities["a"] > probabilities["b"] > probabilities["c"]

    def test_probabilities_equal_scores(self):
        result = Categorization(
            category="a",
            scores=[CategoryScore("a", -5.0), CategoryScore("b", -5.0)],
        )
        assert result.probabilities() == {"a": 0.5, "b": 0.5}
        assert result.confidence == 0.5

    def test_very_negative_scores_do_not_underflow(self):
        result = Categorization(
            category="a",
            scores=[CategoryScore("a", -5000.0), CategoryScore("b", -5001.0)],
        )
        expected = 1 / (1 + math.exp(-1))
        assert result.confidence == pytest.approx(expected)

    def test_empty(self):
        result = Categorization(category=None)
        assert result.probabilities() == {}
        assert result.confidence == 0.0

    def test_to_dict(self):
        result = Categorization(
            category="spam",
            scores=[CategoryScore("spam", -1.5), CategoryScore("ham", -3.0)],
        )
        d = result.to_dict()
        assert d["category"] == "spam"
        assert d["scores"] == [
            {"category": "spam", "score": -1.5},
            {"category": "ham", "score": -3.0},
        ]
        assert 0.5 < d["confidence"] <= 1.0


class TestModelStats:
    """Tests for ModelStats."""

    def test_defaults(self):
        stats = ModelStats()
        assert stats.category_count == 0
        assert stats.to_dict()["categories"] == []

    def test_to_dict(self):
        stats = ModelStats(
            total_documents=3,
            vocabulary_size=7,
            categories=["b", "a"],
            doc_count={"b": 2, "a": 1},
            word_count={"b": 5, "a": 2},
            tokenizer="default",
        )
        d = stats.to_dict()
        assert d["category_count"] == 2
        assert d["tokenizer"] == "default"
        assert d["categories"] == [
            {"category": "b", "documents": 2, "words": 5},
            {"category": "a", "documents": 1, "words": 2},
        ]
