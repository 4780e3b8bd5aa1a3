"""Bayes Classifier -- incremental Naive Bayes text categorization."""

__version__ = "0.1.0"

from .classifier import STATE_KEYS, NaiveBayes
from .corpus import iter_examples, load_corpus, train_from_corpus
from .exceptions import (
    BayesClassifierError,
    InvalidArgument,
    InvalidConfiguration,
    MalformedState,
    MissingField,
    NotTrained,
)
from .models import Categorization, CategoryScore, ModelStats
from .routing import Reply, ResponseRouter
from .tokenizers import (
    Tokenizer,
    available_tokenizers,
    default_tokenizer,
    frequency_table,
    get_tokenizer,
    porter_tokenizer,
)

__all__ = [
    # Core
    "NaiveBayes",
    "STATE_KEYS",
    "Categorization",
    "CategoryScore",
    "ModelStats",
    # Tokenization
    "Tokenizer",
    "default_tokenizer",
    "porter_tokenizer",
    "get_tokenizer",
    "available_tokenizers",
    "frequency_table",
    # Training corpora
    "load_corpus",
    "iter_examples",
    "train_from_corpus",
    # Routing
    "ResponseRouter",
    "Reply",
    # Errors
    "BayesClassifierError",
    "InvalidConfiguration",
    "InvalidArgument",
    "NotTrained",
    "MalformedState",
    "MissingField",
]
