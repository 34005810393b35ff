"""
Similarity finder - scores every pair of items and groups duplicates.

This module provides:
- score_pair: best-of-N algorithm scoring for one pair
- SimilarityFinder: filters, normalizes and compares a batch of items
- group_duplicates: connected duplicate groups via union-find
- Summary statistics over accepted matches

License: GPL v3
"""

import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from loguru import logger

from ..core.config import Algorithm, Configuration, ContentItem, canonical_order, parse_content_items
from ..core.errors import ConfigurationError
from .matching import get_algorithm_fn, normalize_text

__license__ = 'GPL v3'


SIMILARITY_DECIMALS = 4


def utc_timestamp() -> str:
    """Current UTC time as an ISO-8601 string with millisecond precision."""
    return datetime.now(timezone.utc).isoformat(timespec='milliseconds').replace('+00:00', 'Z')


@dataclass(frozen=True)
class NormalizedItem:
    id: str
    text: str
    normalized_text: str


@dataclass(frozen=True)
class SimilarityMatch:
    """An accepted pair, with the winning algorithm and its rounded score."""
    item1: str
    item2: str
    text1: str
    text2: str
    similarity: float
    algorithm: str

    def to_record(self) -> Dict[str, Any]:
        return {
            'item1': self.item1,
            'item2': self.item2,
            'text1': self.text1,
            'text2': self.text2,
            'similarity': self.similarity,
            'algorithm': self.algorithm,
        }


class DuplicateGroup:
    """Represents a connected group of duplicate items."""

    def __init__(self, group_id: str, members: List[str]):
        self.group_id = group_id
        self.members = members

    @property
    def size(self) -> int:
        return len(self.members)

    def to_record(self) -> Dict[str, Any]:
        return {
            'groupId': self.group_id,
            'members': list(self.members),
            'size': self.size,
        }

    def __repr__(self):
        return f"DuplicateGroup({self.group_id}, members={self.members})"

    def __len__(self):
        return len(self.members)


@dataclass
class RunResult:
    matches: List[SimilarityMatch]
    groups: Optional[List[DuplicateGroup]]
    groups_record: Optional[Dict[str, Any]]
    stats: Dict[str, Any]


# ----------------------------------------------------------------
#           Pair scoring
# ----------------------------------------------------------------

def score_pair(text1: str, text2: str,
               algorithms: Iterable[Algorithm]) -> Tuple[float, Algorithm]:
    """
    Score one pair of normalized texts under every enabled algorithm.

    Args:
        text1: First normalized text
        text2: Second normalized text
        algorithms: Enabled algorithms (any order)

    Returns:
        Tuple of (best score at full precision, winning algorithm). On a tie
        the first algorithm in canonical order wins.

    Raises:
        ConfigurationError: if no algorithm is enabled
    """
    ordered = canonical_order(algorithms)
    if not ordered:
        raise ConfigurationError("At least one similarity algorithm must be enabled")

    best_score = -1.0
    best_algorithm = ordered[0]
    for algorithm in ordered:
        score = get_algorithm_fn(algorithm)(text1, text2)
        # Strictly greater, so earlier algorithms keep ties
        if score > best_score:
            best_score = score
            best_algorithm = algorithm

    return best_score, best_algorithm


# ----------------------------------------------------------------
#           Duplicate grouping
# ----------------------------------------------------------------

class DisjointSet:
    """
    Union-find over hashable keys with path compression and union by size.

    Keys are registered lazily; insertion order is remembered so that
    components can be reported deterministically.
    """

    def __init__(self):
        self._parent: Dict[str, str] = {}
        self._size: Dict[str, int] = {}
        self._order: Dict[str, int] = {}

    def __contains__(self, key: str) -> bool:
        return key in self._parent

    def __len__(self) -> int:
        return len(self._parent)

    def add(self, key: str) -> None:
        if key not in self:
            self._parent[key] = key
            self._size[key] = 1
            self._order[key] = len(self._order)

    def find(self, key: str) -> str:
        """Return the root of key's set, compressing the path behind it."""
        self.add(key)
        root = key
        while self._parent[root] != root:
            root = self._parent[root]
        while self._parent[key] != root:
            self._parent[key], key = root, self._parent[key]
        return root

    def union(self, key1: str, key2: str) -> str:
        """Merge the sets containing key1 and key2 and return the new root."""
        root1 = self.find(key1)
        root2 = self.find(key2)
        if root1 == root2:
            return root1
        if self._size[root1] < self._size[root2]:
            root1, root2 = root2, root1
        self._parent[root2] = root1
        self._size[root1] += self._size[root2]
        return root1

    def components(self) -> List[List[str]]:
        """
        All sets, each listed in insertion order, ordered by the earliest
        inserted member of each set.
        """
        by_root: Dict[str, List[str]] = {}
        for key in sorted(self._parent, key=self._order.__getitem__):
            by_root.setdefault(self.find(key), []).append(key)
        return list(by_root.values())


def group_duplicates(matches: Sequence[SimilarityMatch]) -> List[DuplicateGroup]:
    """
    Partition matched items into connected duplicate groups.

    Every match is an undirected edge; a later match that bridges two
    existing groups merges them. Group ids follow the order in which each
    group's first member appears in the match list.

    Args:
        matches: Accepted matches

    Returns:
        List of DuplicateGroup objects, each with at least two members
    """
    dsu = DisjointSet()
    for match in matches:
        dsu.union(match.item1, match.item2)

    groups = []
    for members in dsu.components():
        if len(members) > 1:
            groups.append(DuplicateGroup(
                group_id=f"group_{len(groups) + 1}",
                members=members
            ))

    return groups


# ----------------------------------------------------------------
#           Finder
# ----------------------------------------------------------------

class SimilarityFinder:
    """
    Brute-force all-pairs similarity finder.

    Example usage:
        from simfinder.core.config import Configuration
        from simfinder.similarity.finder import SimilarityFinder

        finder = SimilarityFinder(Configuration(similarity_threshold=0.8))
        result = finder.run([{'id': '1', 'text': 'the quick brown fox'},
                             {'id': '2', 'text': 'the quick brown fox!'}])
        for match in result.matches:
            print(match.item1, match.item2, match.similarity)
    """

    def __init__(self, config: Configuration,
                 progress_callback: Optional[Callable[[str, int, int], None]] = None):
        """
        Initialize the similarity finder.

        Args:
            config: Run configuration
            progress_callback: Optional callback(message, current, total) for progress
        """
        self.config = config
        self.progress_callback = progress_callback

    def _progress(self, message: str, current: int = 0, total: int = 0) -> None:
        """Report progress if callback is set."""
        if self.progress_callback:
            self.progress_callback(message, current, total)

    def prepare_items(self, items: Sequence[ContentItem]) -> List[NormalizedItem]:
        """Drop items shorter than min_length and normalize the rest."""
        config = self.config
        return [
            NormalizedItem(
                id=item.id,
                text=item.text,
                normalized_text=normalize_text(item.text, config.case_sensitive,
                                               config.ignore_whitespace),
            )
            for item in items
            if len(item.text) >= config.min_length
        ]

    def find_similar(self, items: Sequence[ContentItem]) -> List[SimilarityMatch]:
        """
        Compare every unordered pair of items and keep those above threshold.

        Args:
            items: Content items (validated)

        Returns:
            Matches in evaluation order: ascending by first item, then by
            second item, over the filtered list
        """
        config = self.config
        algorithms = config.enabled_algorithms
        threshold = config.similarity_threshold

        normalized = self.prepare_items(items)
        total = len(normalized)

        logger.info(
            "Finding similar content: total_items={}, filtered_items={}, threshold={}",
            len(items), total, threshold
        )

        matches: List[SimilarityMatch] = []
        for i in range(total):
            self._progress("Comparing items", i, total)
            first = normalized[i]
            for j in range(i + 1, total):
                second = normalized[j]
                score, algorithm = score_pair(first.normalized_text, second.normalized_text,
                                              algorithms)
                if score >= threshold:
                    matches.append(SimilarityMatch(
                        item1=first.id,
                        item2=second.id,
                        text1=first.text,
                        text2=second.text,
                        similarity=round(score, SIMILARITY_DECIMALS),
                        algorithm=algorithm.value,
                    ))
        self._progress("Comparing items", total, total)

        return matches

    def group_duplicates(self, matches: Sequence[SimilarityMatch]) -> List[DuplicateGroup]:
        return group_duplicates(matches)

    def get_groups_record(self, groups: List[DuplicateGroup]) -> Dict[str, Any]:
        """Aggregate record persisted for duplicate groups."""
        return {
            'totalGroups': len(groups),
            'groups': [group.to_record() for group in groups],
            'timestamp': utc_timestamp(),
        }

    def get_summary(self, matches: Sequence[SimilarityMatch]) -> Dict[str, Any]:
        """
        Get summary statistics about accepted matches.

        Args:
            matches: List of SimilarityMatch from find_similar()

        Returns:
            Dict with totalMatches, avgSimilarity, algorithmCounts, timestamp
        """
        algorithm_counts: Dict[str, int] = {}
        for match in matches:
            algorithm_counts[match.algorithm] = algorithm_counts.get(match.algorithm, 0) + 1

        if matches:
            avg_similarity = sum(m.similarity for m in matches) / len(matches)
        else:
            avg_similarity = 0

        return {
            'totalMatches': len(matches),
            'avgSimilarity': avg_similarity,
            'algorithmCounts': algorithm_counts,
            'timestamp': utc_timestamp(),
        }

    def run(self, items: Iterable[Any]) -> RunResult:
        """
        Validate, find matches, group them when enabled and summarize.

        Args:
            items: ContentItem objects or {id, text} mappings

        Raises:
            ConfigurationError: before any comparison if the configuration or
                                item list is unusable
        """
        content = parse_content_items(items)
        self.config.validate()

        start = time.time()
        logger.info(
            "Starting content similarity analysis: item_count={}, threshold={}, algorithms={}",
            len(content), self.config.similarity_threshold,
            [a.value for a in self.config.enabled_algorithms]
        )

        matches = self.find_similar(content)
        logger.info("Found {} similar pairs", len(matches))

        groups = None
        groups_record = None
        if self.config.group_by_duplicate and matches:
            groups = self.group_duplicates(matches)
            groups_record = self.get_groups_record(groups)
            logger.info("Grouped matches into {} duplicate groups", len(groups))

        stats = self.get_summary(matches)

        elapsed = time.time() - start
        logger.info("Content similarity analysis complete: matches={}, elapsed={:.2f}s",
                    len(matches), elapsed)

        return RunResult(matches=matches, groups=groups,
                         groups_record=groups_record, stats=stats)


# Convenience function for simple usage
def find_similar_content(items: Iterable[Any], **config_kwargs) -> RunResult:
    """
    Run the full pipeline on a list of items.

    Args:
        items: ContentItem objects or {id, text} mappings
        **config_kwargs: Configuration fields (similarity_threshold, algorithms, ...)

    Returns:
        RunResult
    """
    config = Configuration().with_overrides(**config_kwargs)
    return SimilarityFinder(config).run(items)
