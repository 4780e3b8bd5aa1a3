"""Shared test fixtures for bayes-classifier tests."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from bayes_classifier import NaiveBayes

# Small chat-bot style corpus: each category has distinctive vocabulary
CHAT_CORPUS: dict[str, list[str]] = {
    "build-status": [
        "is the build green",
        "did the nightly build pass",
        "are the tests passing on the build machines",
        "what broke the build",
    ],
    "memory-graph": [
        "show me the memory graph",
        "how much memory are we using",
        "memory usage chart please",
    ],
    "greeting": [
        "hello there",
        "good morning everyone",
        "hi bot how are you",
    ],
}


@pytest.fixture
def spam_ham() -> NaiveBayes:
    """Classifier trained on two tiny documents."""
    classifier = NaiveBayes()
    classifier.learn("buy cheap now", "spam")
    classifier.learn("hello friend", "ham")
    return classifier


@pytest.fixture
def chat_classifier() -> NaiveBayes:
    """Classifier trained on the chat corpus."""
    classifier = NaiveBayes()
    for category, examples in CHAT_CORPUS.items():
        for text in examples:
            classifier.learn(text, category)
    return classifier


@pytest.fixture
def corpus_file(tmp_path: Path) -> Path:
    """The chat corpus written to a JSON file."""
    path = tmp_path / "corpus.json"
    path.write_text(json.dumps(CHAT_CORPUS), encoding="utf-8")
    return path


@pytest.fixture
def routes_file(tmp_path: Path) -> Path:
    """Replies for two of the three chat categories."""
    path = tmp_path / "routes.json"
    path.write_text(
        json.dumps({
            "build-status": "Build dashboard: https://ci.example.org/nightly",
            "memory-graph": "Memory graph: https://perf.example.org/memory",
        }),
        encoding="utf-8",
    )
    return path


def assert_invariants(classifier: NaiveBayes) -> None:
    """Check the counter invariants through the public views."""
    assert classifier.vocabulary_size == len(classifier.vocabulary)
    assert classifier.total_documents == sum(classifier.doc_count.values())
    frequencies = classifier.word_frequency_count
    for category, total in classifier.word_count.items():
        assert total == sum(frequencies[category].values())
    assert set(classifier.categories) == set(classifier.doc_count)


@pytest.fixture
def check_invariants():
    """The invariant checker, for tests that mutate a classifier."""
    return assert_invariants


@pytest.fixture
def chat_corpus() -> dict[str, list[str]]:
    return {category: list(examples) for category, examples in CHAT_CORPUS.items()}
