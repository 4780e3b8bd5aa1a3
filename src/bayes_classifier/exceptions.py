"""Error kinds raised by the classifier and its serialization layer."""

from __future__ import annotations


class BayesClassifierError(Exception):
    """Base class for every error raised by ``bayes_classifier``."""


class InvalidConfiguration(BayesClassifierError, TypeError):
    """Constructor options are not a mapping, or name an unusable tokenizer."""


class InvalidArgument(BayesClassifierError, ValueError):
    """An operation received an argument it cannot work with."""


class NotTrained(BayesClassifierError, RuntimeError):
    """Inference was requested before any document was learned."""


class MalformedState(BayesClassifierError, ValueError):
    """A snapshot cannot be parsed into the expected structure."""


class MissingField(MalformedState):
    """A snapshot omits one of the required state fields.

    Attributes:
        field: Name of the missing snapshot key.
    """

    def __init__(self, field: str) -> None:
        self.field = field
        super().__init__(f"Snapshot is missing an expected field: `{field}`.")
