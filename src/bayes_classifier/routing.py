"""Map categorized text to canned replies.

The classifier only knows category labels. A ``ResponseRouter`` holds the
table that gives those labels a meaning, for example the reply a chat bot
should send when a message falls into a category.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from .classifier import NaiveBayes
from .models import Categorization

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Reply:
    """A routed reply and the categorization that selected it."""

    category: str
    text: str
    categorization: Categorization

    def to_dict(self) -> dict:
        return {
            "category": self.category,
            "reply": self.text,
            "confidence": round(self.categorization.confidence, 4),
        }


class ResponseRouter:
    """Route text to a reply through a trained classifier.

    Args:
        routes: Mapping of category label to reply text.
        classifier: Trained classifier used to categorize incoming text.
    """

    def __init__(self, routes: Mapping[str, str], classifier: NaiveBayes) -> None:
        self._routes = dict(routes)
        self._classifier = classifier

        unrouted = [c for c in classifier.categories if c not in self._routes]
        if unrouted:
            logger.debug(f"Categories without a route: {unrouted}")

    @property
    def routes(self) -> dict[str, str]:
        return dict(self._routes)

    @classmethod
    def from_file(cls, path: Union[str, Path], classifier: NaiveBayes) -> "ResponseRouter":
        """Load routes from a JSON object of ``{category: reply}``.

        Raises:
            ValueError: If the file does not hold a mapping of strings.
        """
        path = Path(path)
        with open(path, "r", encoding="utf-8") as f:
            try:
                data = json.load(f)
            except json.JSONDecodeError as exc:
                raise ValueError(f"Routes file {path} is not valid JSON: {exc}") from exc

        if not isinstance(data, dict) or not all(isinstance(v, str) for v in data.values()):
            raise ValueError(f"Routes file {path} must map category names to reply strings")
        return cls(data, classifier)

    def reply(self, text: str) -> Optional[Reply]:
        """Categorize ``text`` and look up the reply for the winning category.

        Returns:
            The routed Reply, or None if the winning category has no route.

        Raises:
            NotTrained: If the classifier has not learned anything.
        """
        result = self._classifier.categorize(text)
        if result.category is None or result.category not in self._routes:
            logger.debug(f"No route for category {result.category!r}.")
            return None
        return Reply(
            category=result.category,
            text=self._routes[result.category],
            categorization=result,
        )
