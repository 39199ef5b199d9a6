"""
Type definitions for the matching modules.

Defines the query passed to the query matcher and the candidates returned
by the duplicate finder.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional, Sequence, Tuple

from standards_search.exceptions import ConfigurationError
from standards_search.models import SearchField

DEFAULT_FUZZY_THRESHOLD = 0.8


def check_threshold(threshold: Any, name: str = "threshold") -> float:
    """
    Ensure a similarity threshold lies in [0, 1].

    Raises:
        ConfigurationError: If the value is not a number in range
    """
    if isinstance(threshold, bool) or not isinstance(threshold, (int, float)):
        raise ConfigurationError(f"{name} must be numeric, got {threshold!r}")
    if not 0.0 <= threshold <= 1.0:
        raise ConfigurationError(f"{name} must be between 0 and 1, got {threshold}")
    return float(threshold)


@dataclass
class Query:
    """
    A text query against the register.

    Attributes:
        text: Raw query text ('' matches every record)
        fields: Restrict matching to these fields (None searches all)
        case_sensitive: Compare without case folding
        exact: Require a whole-field match instead of fuzzy word matching
        threshold: Minimum word similarity for fuzzy matches [0.0, 1.0]
    """
    text: str = ""
    fields: Optional[Sequence[SearchField]] = None
    case_sensitive: bool = False
    exact: bool = False
    threshold: float = DEFAULT_FUZZY_THRESHOLD

    def __post_init__(self):
        """Validate threshold and resolve field names."""
        self.threshold = check_threshold(self.threshold)
        self.text = self.text or ""
        if self.fields is not None:
            self.fields = tuple(SearchField.parse(f) for f in self.fields)

    @property
    def search_fields(self) -> Tuple[SearchField, ...]:
        """Fields to match against, defaulting to every searchable field."""
        if self.fields is None:
            return tuple(SearchField)
        return tuple(self.fields)


@dataclass(frozen=True)
class SimilarityCandidate:
    """
    An existing register entry that resembles a name being registered.

    Attributes:
        name: Name of the existing record
        identifier: Identifier of the existing record
        score: Similarity to the candidate name [0.0, 1.0]
    """
    name: str
    identifier: str
    score: float

    def __post_init__(self):
        """Validate score is in valid range."""
        if not 0.0 <= self.score <= 1.0:
            raise ValueError(f"Score must be between 0.0 and 1.0, got {self.score}")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "name": self.name,
            "identifier": self.identifier,
            "score": self.score,
        }
