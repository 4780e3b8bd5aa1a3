"""Training corpora: category-to-examples tables loaded from JSON.

A corpus file maps each category to the example texts that teach it::

    {
        "greeting": ["hello there", "good morning"],
        "build-status": ["is the build green", "did the nightly pass"]
    }
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator, Mapping, Sequence
from pathlib import Path
from typing import Union

from .classifier import NaiveBayes

logger = logging.getLogger(__name__)

Corpus = Mapping[str, Sequence[str]]


def load_corpus(path: Union[str, Path]) -> dict[str, list[str]]:
    """Read a training corpus from a JSON file.

    Args:
        path: Path to a JSON object of ``{category: [example, ...]}``.

    Returns:
        Dict of category to example texts, in file order.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the file is not a valid corpus.
    """
    path = Path(path)
    with open(path, "r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as exc:
            raise ValueError(f"Corpus file {path} is not valid JSON: {exc}") from exc

    if not isinstance(data, dict):
        raise ValueError(f"Corpus file {path} must contain a JSON object")

    corpus: dict[str, list[str]] = {}
    for category, examples in data.items():
        if not category:
            raise ValueError(f"Corpus file {path} contains an empty category name")
        if not isinstance(examples, list) or not all(isinstance(e, str) for e in examples):
            raise ValueError(f"Examples for category {category!r} must be a list of strings")
        corpus[category] = examples

    logger.info(f"Loaded corpus from {path}: {len(corpus)} categories.")
    return corpus


def iter_examples(corpus: Corpus) -> Iterator[tuple[str, str]]:
    """Yield ``(text, category)`` pairs in corpus order."""
    for category, examples in corpus.items():
        for text in examples:
            yield text, category


def train_from_corpus(classifier: NaiveBayes, corpus: Corpus) -> int:
    """Teach every corpus example to ``classifier``.

    Returns:
        Number of documents learned.
    """
    learned = 0
    for text, category in iter_examples(corpus):
        classifier.learn(text, category)
        learned += 1
    logger.info(f"Trained classifier on {learned} documents.")
    return learned
