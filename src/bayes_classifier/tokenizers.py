"""Tokenizers and the per-document frequency table.

A tokenizer is any callable that turns text into an ordered sequence of
string tokens. The classifier takes one at construction time and uses it
for both training and inference, so it must be deterministic.

Two tokenizers ship with the package:

- ``default_tokenizer`` replaces punctuation with spaces and splits on
  whitespace, keeping the original case.
- ``porter_tokenizer`` additionally lower-cases and Porter-stems every
  token. It suits small training corpora of short chat phrases, where
  "deploying" and "deployed" should count as the same word.

Tokenizers can be referred to by name (see ``get_tokenizer``) so that a
saved model can record which one it was trained with.
"""

from __future__ import annotations

import re
from collections import Counter
from collections.abc import Callable, Iterable, Sequence

from .exceptions import InvalidConfiguration

Tokenizer = Callable[[str], Sequence[str]]

# Anything that is not a word character or whitespace
_PUNCTUATION_RE = re.compile(r"[^\w\s]")

_STOP_WORDS: frozenset[str] = frozenset({
    "a", "an", "the", "and", "or", "but", "in", "on", "at", "to", "for",
    "of", "with", "by", "from", "as", "is", "was", "are", "were", "be",
    "been", "it", "its", "this", "that", "these", "those", "i", "me", "my",
    "we", "our", "you", "your", "he", "she", "they", "them", "do", "does",
    "did", "so", "if", "then", "than", "there", "here",
})


def default_tokenizer(text: str) -> list[str]:
    """Strip punctuation and split on runs of whitespace.

    Punctuation is replaced by a space rather than deleted, so ``"don't"``
    yields ``["don", "t"]``.
    """
    return _PUNCTUATION_RE.sub(" ", text).split()


def porter_tokenizer(text: str, keep_stops: bool = True) -> list[str]:
    """Lower-case, strip punctuation and Porter-stem each token.

    Args:
        text: Input text.
        keep_stops: Keep common English stop words. Small corpora of short
            phrases lose too much signal without them, so this defaults to
            ``True``.

    Returns:
        List of stemmed tokens.

    Raises:
        ImportError: If nltk is not installed.
    """
    stemmer = _porter_stemmer()
    tokens = default_tokenizer(text.lower())
    if not keep_stops:
        tokens = [t for t in tokens if t not in _STOP_WORDS]
    return [stemmer.stem(t) for t in tokens]


_stemmer = None


def _porter_stemmer():
    global _stemmer
    if _stemmer is None:
        try:
            from nltk.stem import PorterStemmer
        except ImportError as exc:
            raise ImportError(
                "nltk is required for the porter tokenizer. Install it with: pip install nltk"
            ) from exc
        _stemmer = PorterStemmer()
    return _stemmer


_REGISTRY: dict[str, Tokenizer] = {
    "default": default_tokenizer,
    "porter": porter_tokenizer,
}


def available_tokenizers() -> list[str]:
    """Names accepted by ``get_tokenizer``."""
    return sorted(_REGISTRY)


def get_tokenizer(name: str) -> Tokenizer:
    """Resolve a registered tokenizer by name.

    Raises:
        InvalidConfiguration: If no tokenizer is registered under ``name``.
    """
    try:
        return _REGISTRY[name]
    except KeyError:
        raise InvalidConfiguration(
            f"Unknown tokenizer: {name!r}. Known: {', '.join(available_tokenizers())}"
        ) from None


def tokenizer_name(tokenizer: Tokenizer) -> str | None:
    """Return the registry name of ``tokenizer``, or None if unregistered."""
    for name, registered in _REGISTRY.items():
        if registered is tokenizer:
            return name
    return None


def frequency_table(tokens: Iterable[str]) -> Counter[str]:
    """Count occurrences of each token within one document.

    Keys keep the order in which tokens first appear.
    """
    return Counter(tokens)
