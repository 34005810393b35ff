"""
Run configuration and content items.

- Configuration is read once per run and is immutable afterwards.
- Wire form uses the camelCase keys of the run input document.
- validate() is called explicitly by runtime code, never on construction.

Usage:
    config = Configuration.from_dict(payload)
    config = config.with_overrides(similarity_threshold=0.9)
    config.validate()
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, FrozenSet, Iterable, List, Mapping, Optional

from .errors import ConfigurationError


DEFAULT_THRESHOLD = 0.8


class Algorithm(str, Enum):
    """
    Available similarity algorithms.

    Declaration order is the canonical order used to break ties when two
    algorithms produce the same best score.
    """
    COSINE = 'cosine'
    LEVENSHTEIN = 'levenshtein'
    FUZZY = 'fuzzy'
    JACCARD = 'jaccard'

    def __str__(self) -> str:
        return self.value


ALGORITHM_ORDER: List[Algorithm] = list(Algorithm)


def parse_algorithm(label: Any) -> Optional[Algorithm]:
    """Return the Algorithm for a label such as 'cosine', or None if unknown."""
    try:
        return Algorithm(str(label).strip().lower())
    except ValueError:
        return None


def canonical_order(algorithms: Iterable[Algorithm]) -> List[Algorithm]:
    """Return the given algorithms deduplicated and in canonical order."""
    wanted = set(algorithms)
    return [algo for algo in ALGORITHM_ORDER if algo in wanted]


@dataclass(frozen=True)
class ContentItem:
    id: str
    text: str


@dataclass(frozen=True)
class Configuration:
    similarity_threshold: float = DEFAULT_THRESHOLD
    algorithms: FrozenSet[Algorithm] = field(default_factory=lambda: frozenset(ALGORITHM_ORDER))
    case_sensitive: bool = False
    ignore_whitespace: bool = True
    min_length: int = 0
    group_by_duplicate: bool = True

    @property
    def enabled_algorithms(self) -> List[Algorithm]:
        """Enabled algorithms in canonical order."""
        return canonical_order(self.algorithms)

    def validate(self) -> None:
        """Raise ConfigurationError if the configuration cannot drive a run."""
        if not self.algorithms:
            raise ConfigurationError("At least one similarity algorithm must be enabled")

        threshold = self.similarity_threshold
        if isinstance(threshold, bool) or not isinstance(threshold, (int, float)):
            raise ConfigurationError(f"similarityThreshold must be a number, got {threshold!r}")
        if not 0.0 <= threshold <= 1.0:
            raise ConfigurationError(f"similarityThreshold must be within [0, 1], got {threshold}")

        if isinstance(self.min_length, bool) or not isinstance(self.min_length, int):
            raise ConfigurationError(f"minLength must be an integer, got {self.min_length!r}")
        if self.min_length < 0:
            raise ConfigurationError(f"minLength must not be negative, got {self.min_length}")

        for key, value in (('caseSensitive', self.case_sensitive),
                           ('ignoreWhitespace', self.ignore_whitespace),
                           ('groupByDuplicate', self.group_by_duplicate)):
            if not isinstance(value, bool):
                raise ConfigurationError(f"{key} must be true or false, got {value!r}")

    def with_overrides(self, **overrides: Any) -> "Configuration":
        """Return a copy with every non-None override applied."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        if 'algorithms' in changes:
            changes['algorithms'] = _parse_algorithm_list(changes['algorithms'])
        return replace(self, **changes)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Configuration":
        """
        Build a configuration from the run input document.

        Absent keys fall back to defaults. 'algorithms' may be a mapping of
        label -> enabled flag or a list of labels.
        """
        defaults = cls()
        algorithms = data.get('algorithms')
        if algorithms is None:
            parsed = defaults.algorithms
        elif isinstance(algorithms, Mapping):
            parsed = _parse_algorithm_list(
                label for label, enabled in algorithms.items() if enabled
            )
        else:
            parsed = _parse_algorithm_list(algorithms)

        return cls(
            similarity_threshold=data.get('similarityThreshold', defaults.similarity_threshold),
            algorithms=parsed,
            case_sensitive=data.get('caseSensitive', defaults.case_sensitive),
            ignore_whitespace=data.get('ignoreWhitespace', defaults.ignore_whitespace),
            min_length=data.get('minLength', defaults.min_length),
            group_by_duplicate=data.get('groupByDuplicate', defaults.group_by_duplicate),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'similarityThreshold': self.similarity_threshold,
            'algorithms': {algo.value: algo in self.algorithms for algo in ALGORITHM_ORDER},
            'caseSensitive': self.case_sensitive,
            'ignoreWhitespace': self.ignore_whitespace,
            'minLength': self.min_length,
            'groupByDuplicate': self.group_by_duplicate,
        }


def _parse_algorithm_list(labels: Iterable[Any]) -> FrozenSet[Algorithm]:
    if isinstance(labels, str):
        labels = [part for part in labels.split(',') if part.strip()]
    parsed = set()
    for label in labels:
        algo = label if isinstance(label, Algorithm) else parse_algorithm(label)
        if algo is None:
            valid = ', '.join(a.value for a in ALGORITHM_ORDER)
            raise ConfigurationError(f"Unknown algorithm {label!r} (expected one of: {valid})")
        parsed.add(algo)
    return frozenset(parsed)


def parse_content_items(records: Optional[Iterable[Any]]) -> List[ContentItem]:
    """
    Convert raw content records into ContentItem objects.

    Raises:
        ConfigurationError: if the list is missing or empty, a record lacks
                            an id or text, or an id repeats
    """
    if records is None:
        raise ConfigurationError("No content provided")
    if isinstance(records, (str, bytes, Mapping)):
        raise ConfigurationError("content must be a list of {id, text} records")

    items: List[ContentItem] = []
    seen = set()
    for index, record in enumerate(records):
        if isinstance(record, ContentItem):
            item = record
        elif isinstance(record, Mapping):
            if 'id' not in record or record['id'] is None:
                raise ConfigurationError(f"content[{index}] has no id")
            text = record.get('text')
            if not isinstance(text, str):
                raise ConfigurationError(f"content[{index}] text must be a string")
            item = ContentItem(id=str(record['id']), text=text)
        else:
            raise ConfigurationError(f"content[{index}] must be an object with id and text")

        if item.id in seen:
            raise ConfigurationError(f"Duplicate content id: {item.id}")
        seen.add(item.id)
        items.append(item)

    if not items:
        raise ConfigurationError("No content provided")

    return items
