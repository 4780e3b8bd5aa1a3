"""Incremental multinomial Naive Bayes text classifier.

The classifier learns one labeled document at a time and scores new text
against every category it has seen, using Laplace (add-one) smoothing and
log-space arithmetic to avoid underflow on long documents.

Its complete learned state can be exported to a plain dictionary (or JSON)
and restored later. The snapshot field names are fixed::

    categories, docCount, totalDocuments, vocabulary, vocabularySize,
    wordCount, wordFrequencyCount, options

so that saved models stay readable by other tools using the same format.

Example::

    classifier = NaiveBayes()
    classifier.learn("buy cheap now", "spam").learn("hello friend", "ham")

    result = classifier.categorize("cheap now")
    print(result.category)      # "spam"

    classifier.save("model.json")
    restored = NaiveBayes.load("model.json")
"""

from __future__ import annotations

import copy
import json
import logging
import math
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional, Union

from .exceptions import (
    InvalidArgument,
    InvalidConfiguration,
    MalformedState,
    MissingField,
    NotTrained,
)
from .models import Categorization, CategoryScore, ModelStats
from .tokenizers import Tokenizer, default_tokenizer, frequency_table, get_tokenizer, tokenizer_name

logger = logging.getLogger(__name__)

# Keys of a serialized classifier state
STATE_KEYS: tuple[str, ...] = (
    "categories",
    "docCount",
    "totalDocuments",
    "vocabulary",
    "vocabularySize",
    "wordCount",
    "wordFrequencyCount",
    "options",
)


# ---------------------------------------------------------------------------
# Statistics store
# ---------------------------------------------------------------------------

@dataclass
class _Statistics:
    """All mutable counters of one classifier.

    ``categories`` keeps first-seen order, which decides ties during
    inference. ``vocabulary`` is a dict used as an insertion-ordered set.
    """

    categories: list[str] = field(default_factory=list)
    doc_count: dict[str, int] = field(default_factory=dict)
    word_count: dict[str, int] = field(default_factory=dict)
    word_frequency_count: dict[str, dict[str, int]] = field(default_factory=dict)
    vocabulary: dict[str, None] = field(default_factory=dict)
    vocabulary_size: int = 0
    total_documents: int = 0

    def add_category(self, category: str) -> None:
        self.categories.append(category)
        self.doc_count[category] = 0
        self.word_count[category] = 0
        self.word_frequency_count[category] = {}

    def invariant_violations(self) -> list[str]:
        """Describe every broken counter invariant (empty when consistent)."""
        problems: list[str] = []

        if self.vocabulary_size != len(self.vocabulary):
            problems.append(
                f"vocabularySize is {self.vocabulary_size} but vocabulary holds "
                f"{len(self.vocabulary)} tokens"
            )

        doc_total = sum(self.doc_count.values())
        if self.total_documents != doc_total:
            problems.append(
                f"totalDocuments is {self.total_documents} but docCount sums to {doc_total}"
            )

        for category in self.categories:
            frequencies = self.word_frequency_count[category]
            freq_total = sum(frequencies.values())
            if self.word_count[category] != freq_total:
                problems.append(
                    f"wordCount[{category!r}] is {self.word_count[category]} but its "
                    f"frequencies sum to {freq_total}"
                )
            unknown_tokens = [t for t in frequencies if t not in self.vocabulary]
            if unknown_tokens:
                problems.append(
                    f"wordFrequencyCount[{category!r}] has tokens outside the vocabulary: "
                    f"{unknown_tokens[:5]}"
                )

        return problems


# ---------------------------------------------------------------------------
# Classifier
# ---------------------------------------------------------------------------

class NaiveBayes:
    """Naive Bayes classifier with Laplace smoothing.

    Learns incrementally through ``learn`` and scores text through
    ``categorize``. An instance is meant for a single writer: concurrent
    ``learn``/``restore`` calls on the same object are not synchronized.

    Args:
        options: Optional configuration mapping. The only recognised key is
            ``"tokenizer"``, holding a callable or a registered tokenizer
            name. Other non-callable entries are kept and exported with the
            state.
        tokenizer: Tokenizer callable or registered name. Overrides
            ``options["tokenizer"]``.

    Raises:
        InvalidConfiguration: If ``options`` is not a mapping, or the
            tokenizer is neither callable nor a registered name.
    """

    def __init__(
        self,
        options: Optional[Mapping[str, Any]] = None,
        *,
        tokenizer: Union[Tokenizer, str, None] = None,
    ) -> None:
        if options is None:
            options = {}
        elif not isinstance(options, Mapping):
            raise InvalidConfiguration(
                f"NaiveBayes got invalid options: {options!r}. Pass in a mapping."
            )

        if tokenizer is None:
            tokenizer = options.get("tokenizer")
        self._tokenizer = _resolve_tokenizer(tokenizer)

        # Callables cannot be serialized; a registered tokenizer is kept by name
        self._options: dict[str, Any] = {
            key: copy.deepcopy(value)
            for key, value in options.items()
            if key != "tokenizer" and not callable(value)
        }
        if tokenizer is not None:
            name = tokenizer_name(self._tokenizer)
            if name is not None:
                self._options["tokenizer"] = name

        self._stats = _Statistics()

    def __repr__(self) -> str:
        return (
            f"NaiveBayes(categories={len(self._stats.categories)}, "
            f"documents={self._stats.total_documents}, "
            f"vocabulary={self._stats.vocabulary_size})"
        )

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def tokenizer(self) -> Tokenizer:
        return self._tokenizer

    @property
    def options(self) -> dict[str, Any]:
        """Serializable configuration used at construction."""
        return copy.deepcopy(self._options)

    @property
    def categories(self) -> list[str]:
        """Known categories in first-seen order."""
        return list(self._stats.categories)

    @property
    def vocabulary(self) -> frozenset[str]:
        return frozenset(self._stats.vocabulary)

    @property
    def vocabulary_size(self) -> int:
        return self._stats.vocabulary_size

    @property
    def total_documents(self) -> int:
        return self._stats.total_documents

    @property
    def doc_count(self) -> dict[str, int]:
        return dict(self._stats.doc_count)

    @property
    def word_count(self) -> dict[str, int]:
        return dict(self._stats.word_count)

    @property
    def word_frequency_count(self) -> dict[str, dict[str, int]]:
        return {cat: dict(freqs) for cat, freqs in self._stats.word_frequency_count.items()}

    @property
    def is_trained(self) -> bool:
        """Whether at least one document has been learned."""
        return self._stats.total_documents > 0

    # ------------------------------------------------------------------
    # Training
    # ------------------------------------------------------------------

    def learn(self, text: str, category: str) -> "NaiveBayes":
        """Train the classifier on one document labeled ``category``.

        A document that tokenizes to nothing still counts towards the
        category's document count.

        Args:
            text: Raw document text.
            category: Non-empty category label.

        Returns:
            Self (for method chaining).

        Raises:
            InvalidArgument: If ``category`` is empty or not a string, or
                ``text`` is not a string.
        """
        if not isinstance(category, str) or not category:
            raise InvalidArgument(f"category must be a non-empty string, got {category!r}")
        if not isinstance(text, str):
            raise InvalidArgument(f"text must be a string, got {type(text).__name__}")

        # Tokenize before touching any counter so a failing tokenizer leaves no trace
        frequencies = frequency_table(self._tokenizer(text))

        stats = self._stats
        if category not in stats.doc_count:
            stats.add_category(category)
            logger.debug(f"Initialized new category {category!r}.")

        stats.doc_count[category] += 1
        stats.total_documents += 1

        category_frequencies = stats.word_frequency_count[category]
        for token, count in frequencies.items():
            if token not in stats.vocabulary:
                stats.vocabulary[token] = None
                stats.vocabulary_size += 1
            category_frequencies[token] = category_frequencies.get(token, 0) + count
            stats.word_count[category] += count

        logger.debug(
            f"Learned {category!r} document with {sum(frequencies.values())} tokens "
            f"({len(frequencies)} distinct)."
        )
        return self

    def learn_many(self, examples: Iterable[tuple[str, str]]) -> "NaiveBayes":
        """Learn a sequence of ``(text, category)`` pairs in order.

        Returns:
            Self (for method chaining).
        """
        for text, category in examples:
            self.learn(text, category)
        return self

    # ------------------------------------------------------------------
    # Inference
    # ------------------------------------------------------------------

    def categorize(self, text: str) -> Categorization:
        """Determine which category ``text`` most likely belongs to.

        Every category is scored with its log prior plus the log
        likelihood of each query token. Categories are visited in
        first-seen order and a later category only wins with a strictly
        greater score, so the earliest category wins an exact tie.

        Args:
            text: Raw query text.

        Returns:
            Categorization with the winning label and every category's
            log score.

        Raises:
            NotTrained: If no document has been learned yet.
            InvalidArgument: If ``text`` is not a string.
        """
        if not isinstance(text, str):
            raise InvalidArgument(f"text must be a string, got {type(text).__name__}")

        stats = self._stats
        if stats.total_documents == 0:
            raise NotTrained("Classifier has not learned any documents. Call learn() first.")

        frequencies = frequency_table(self._tokenizer(text))

        best_score = -math.inf
        best_category: Optional[str] = None
        scores: list[CategoryScore] = []

        for category in stats.categories:
            prior = stats.doc_count[category] / stats.total_documents
            score = math.log(prior) if prior > 0 else -math.inf

            # With no vocabulary every token is unseen everywhere; the prior decides
            if stats.vocabulary_size:
                for token, count in frequencies.items():
                    score += count * math.log(self.token_probability(token, category))

            scores.append(CategoryScore(category=category, score=score))
            if score > best_score:
                best_score = score
                best_category = category

        logger.debug(f"Categorized text as {best_category!r} (score={best_score:.4f}).")
        return Categorization(category=best_category, scores=scores)

    def token_probability(self, token: str, category: str) -> float:
        """Smoothed probability of ``token`` under ``category``.

        ``(count + 1) / (words in category + vocabulary size)``

        The result is always above 0. It is below 1 unless the vocabulary
        holds a single token and ``category`` has seen only that token, in
        which case it is exactly 1.

        Raises:
            InvalidArgument: If ``category`` has never been learned.
            NotTrained: If the category and the vocabulary are both empty.
        """
        stats = self._stats
        if category not in stats.doc_count:
            raise InvalidArgument(f"Unknown category: {category!r}. Known: {stats.categories}")

        denominator = stats.word_count[category] + stats.vocabulary_size
        if denominator == 0:
            raise NotTrained("No tokens have been learned yet.")

        occurrences = stats.word_frequency_count[category].get(token, 0)
        return (occurrences + 1) / denominator

    def stats(self) -> ModelStats:
        """Summarize the learned state."""
        return ModelStats(
            total_documents=self._stats.total_documents,
            vocabulary_size=self._stats.vocabulary_size,
            categories=list(self._stats.categories),
            doc_count=dict(self._stats.doc_count),
            word_count=dict(self._stats.word_count),
            tokenizer=tokenizer_name(self._tokenizer),
        )

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def to_dict(self) -> dict:
        """Export the complete learned state as a snapshot dictionary."""
        stats = self._stats
        return {
            "categories": list(stats.categories),
            "docCount": dict(stats.doc_count),
            "totalDocuments": stats.total_documents,
            "vocabulary": list(stats.vocabulary),
            "vocabularySize": stats.vocabulary_size,
            "wordCount": dict(stats.word_count),
            "wordFrequencyCount": {
                cat: dict(freqs) for cat, freqs in stats.word_frequency_count.items()
            },
            "options": copy.deepcopy(self._options),
        }

    def to_json(self, indent: Optional[int] = None) -> str:
        """Export the learned state as a JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    def restore(self, snapshot: Mapping[str, Any], *, verify: bool = False) -> "NaiveBayes":
        """Replace the whole learned state with ``snapshot``.

        The snapshot is fully validated and converted before anything is
        replaced, so on error the classifier keeps its previous state. The
        tokenizer is not part of a snapshot; the instance keeps its own.

        Args:
            snapshot: Dictionary produced by ``to_dict`` (or parsed from
                ``to_json``).
            verify: Also re-check the counter invariants (vocabulary size,
                per-category word totals, document total).

        Returns:
            Self (for method chaining).

        Raises:
            MissingField: If a required key is absent.
            MalformedState: If a value has the wrong shape, or ``verify`` is
                set and the counters are inconsistent.
        """
        stats, options = _parse_snapshot(snapshot)
        self._install(stats, options, verify)

        restored_name = options.get("tokenizer")
        current_name = tokenizer_name(self._tokenizer)
        if isinstance(restored_name, str) and restored_name != current_name:
            logger.warning(
                f"Snapshot was built with tokenizer {restored_name!r} but this classifier "
                f"uses {current_name or 'a custom tokenizer'}."
            )
        return self

    def _install(self, stats: _Statistics, options: dict[str, Any], verify: bool) -> None:
        if verify:
            problems = stats.invariant_violations()
            if problems:
                raise MalformedState("Snapshot is inconsistent: " + "; ".join(problems))
        self._stats = stats
        self._options = options
        logger.info(
            f"Restored classifier state: {len(stats.categories)} categories, "
            f"{stats.total_documents} documents, {stats.vocabulary_size} tokens."
        )

    @classmethod
    def from_dict(
        cls,
        snapshot: Mapping[str, Any],
        *,
        tokenizer: Union[Tokenizer, str, None] = None,
        verify: bool = False,
    ) -> "NaiveBayes":
        """Build a classifier from a snapshot dictionary.

        The tokenizer is taken from ``tokenizer`` if given, otherwise from
        the tokenizer name recorded in the snapshot's options, otherwise the
        default tokenizer is used.

        Raises:
            MissingField: If a required key is absent.
            MalformedState: If the snapshot is malformed or inconsistent.
            InvalidConfiguration: If the recorded tokenizer name is unknown.
        """
        stats, options = _parse_snapshot(snapshot)
        classifier = cls(options, tokenizer=tokenizer)
        classifier._install(stats, options, verify)
        return classifier

    @classmethod
    def from_json(
        cls,
        data: str,
        *,
        tokenizer: Union[Tokenizer, str, None] = None,
        verify: bool = False,
    ) -> "NaiveBayes":
        """Build a classifier from a JSON snapshot string.

        Raises:
            MalformedState: If ``data`` is not valid JSON.
        """
        try:
            parsed = json.loads(data)
        except (TypeError, ValueError) as exc:
            raise MalformedState(f"Snapshot is not valid JSON: {exc}") from exc
        return cls.from_dict(parsed, tokenizer=tokenizer, verify=verify)

    def save(self, path: Union[str, Path]) -> None:
        """Save the learned state to a JSON file.

        Args:
            path: File path to save to. Parent directories are created.
        """
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f, indent=2)
        logger.info(f"Saved classifier state to {path}.")

    @classmethod
    def load(
        cls,
        path: Union[str, Path],
        *,
        tokenizer: Union[Tokenizer, str, None] = None,
        verify: bool = False,
    ) -> "NaiveBayes":
        """Load a classifier saved with ``save``.

        Args:
            path: Path to the saved model file.
            tokenizer: Tokenizer to use instead of the recorded one. Required
                when the model was trained with a custom callable.
            verify: Re-check the counter invariants after loading.

        Returns:
            NaiveBayes instance ready for further training or inference.
        """
        with open(path, "r", encoding="utf-8") as f:
            data = f.read()
        return cls.from_json(data, tokenizer=tokenizer, verify=verify)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _resolve_tokenizer(value: Union[Tokenizer, str, None]) -> Tokenizer:
    if value is None:
        return default_tokenizer
    if isinstance(value, str):
        return get_tokenizer(value)
    if callable(value):
        return value
    raise InvalidConfiguration(
        f"tokenizer must be callable or a registered name, got {type(value).__name__}"
    )


def _parse_snapshot(snapshot: Any) -> tuple[_Statistics, dict[str, Any]]:
    """Convert a snapshot into fresh statistics without touching any classifier."""
    if not isinstance(snapshot, Mapping):
        raise MalformedState(
            f"Snapshot must be a mapping, got {type(snapshot).__name__}"
        )

    for key in STATE_KEYS:
        if key not in snapshot:
            raise MissingField(key)

    categories = _as_label_list(snapshot["categories"], "categories")
    vocabulary = _as_label_list(snapshot["vocabulary"], "vocabulary")
    doc_count = _as_count_map(snapshot["docCount"], "docCount")
    word_count = _as_count_map(snapshot["wordCount"], "wordCount")

    raw_frequencies = snapshot["wordFrequencyCount"]
    if not isinstance(raw_frequencies, Mapping):
        raise MalformedState("wordFrequencyCount must be a mapping of category to token counts")
    word_frequency_count = {
        cat: _as_count_map(freqs, f"wordFrequencyCount[{cat!r}]")
        for cat, freqs in raw_frequencies.items()
    }

    options = snapshot["options"]
    if not isinstance(options, Mapping):
        raise MalformedState(f"options must be a mapping, got {type(options).__name__}")

    known = set(categories)
    for name, counters in (
        ("docCount", doc_count),
        ("wordCount", word_count),
        ("wordFrequencyCount", word_frequency_count),
    ):
        for category in categories:
            if category not in counters:
                raise MalformedState(f"{name} has no entry for category {category!r}")
        extra = [key for key in counters if key not in known]
        if extra:
            raise MalformedState(f"{name} has entries for unlisted categories: {extra}")

    stats = _Statistics(
        categories=categories,
        doc_count=doc_count,
        word_count=word_count,
        word_frequency_count=word_frequency_count,
        vocabulary=dict.fromkeys(vocabulary),
        vocabulary_size=_as_count(snapshot["vocabularySize"], "vocabularySize"),
        total_documents=_as_count(snapshot["totalDocuments"], "totalDocuments"),
    )
    return stats, copy.deepcopy(dict(options))


def _as_label_list(value: Any, name: str) -> list[str]:
    # Lists, or {label: true} objects as written by older exporters
    if isinstance(value, Mapping):
        labels = list(value.keys())
    elif isinstance(value, (list, tuple)):
        labels = list(value)
    else:
        raise MalformedState(f"{name} must be a list, got {type(value).__name__}")

    if not all(isinstance(label, str) for label in labels):
        raise MalformedState(f"{name} must contain only strings")
    if len(set(labels)) != len(labels):
        raise MalformedState(f"{name} contains duplicates")
    return labels


def _as_count_map(value: Any, name: str) -> dict[str, int]:
    if not isinstance(value, Mapping):
        raise MalformedState(f"{name} must be a mapping, got {type(value).__name__}")
    return {key: _as_count(count, f"{name}[{key!r}]") for key, count in value.items()}


def _as_count(value: Any, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise MalformedState(f"{name} must be a non-negative integer, got {value!r}")
    return value
