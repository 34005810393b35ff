"""
Text similarity algorithms - normalization plus four pairwise scorers.

This module provides pure Python entry points for:
- Text normalization: case folding, whitespace collapsing
- Cosine similarity over a per-pair TF-IDF corpus
- Levenshtein ratio
- Fuzzy token-sort ratio
- Jaccard similarity over whitespace token sets

Every scorer takes two already-normalized strings and returns a float in
[0, 1]. Scorers hold no state between calls.

License: GPL v3
"""

import re
from typing import Callable, Dict, List, Optional

from loguru import logger
from rapidfuzz import fuzz
from rapidfuzz.distance import Levenshtein
from sklearn.feature_extraction.text import TfidfVectorizer
from sklearn.metrics.pairwise import cosine_similarity as _pairwise_cosine

from ..core.config import Algorithm, parse_algorithm

__license__ = 'GPL v3'


_WHITESPACE_RE = re.compile(r'\s+')


# ----------------------------------------------------------------
#           Normalization
# ----------------------------------------------------------------

def normalize_text(text: str, case_sensitive: bool = False,
                   ignore_whitespace: bool = True) -> str:
    """
    Canonicalize text before comparison.

    Args:
        text: Raw item text
        case_sensitive: Keep original case when True, otherwise lowercase
        ignore_whitespace: Collapse whitespace runs to one space and trim

    Returns:
        Normalized text (possibly empty)

    Examples:
        "The  Quick\\tFox " -> "the quick fox"
    """
    normalized = text or ''

    if not case_sensitive:
        normalized = normalized.lower()

    if ignore_whitespace:
        normalized = _WHITESPACE_RE.sub(' ', normalized).strip()

    return normalized


def tokenize(text: str) -> List[str]:
    """Split text on whitespace runs, dropping empty tokens."""
    return text.split()


# ----------------------------------------------------------------
#           Similarity Algorithm Functions
# ----------------------------------------------------------------

def cosine_tfidf_similarity(text1: str, text2: str) -> float:
    """
    Cosine similarity of TF-IDF vectors built from the pair alone.

    The two strings form their own two-document corpus, so document
    frequencies never depend on any other item. Returns 0 when either
    vector has zero magnitude (no tokens).
    """
    tokens1 = tokenize(text1)
    tokens2 = tokenize(text2)

    if not tokens1 or not tokens2:
        logger.debug("cosine: zero-magnitude vector, scoring 0")
        return 0.0

    if tokens1 == tokens2:
        return 1.0

    # Fixed document order so the score does not depend on argument order
    text1, text2 = sorted((text1, text2))

    # A fresh vectorizer per call keeps vocabulary and idf local to the pair
    vectorizer = TfidfVectorizer(
        tokenizer=tokenize,
        token_pattern=None,
        lowercase=False,
    )
    matrix = vectorizer.fit_transform([text1, text2])
    score = float(_pairwise_cosine(matrix[0], matrix[1])[0, 0])

    return min(1.0, max(0.0, score))


def levenshtein_similarity(text1: str, text2: str) -> float:
    """
    Levenshtein ratio: 1 - edit_distance / longest_length.

    Two empty strings are identical and score 1.
    """
    max_length = max(len(text1), len(text2))
    if max_length == 0:
        logger.debug("levenshtein: both strings empty, scoring 1")
        return 1.0

    dist = Levenshtein.distance(text1, text2)
    return 1.0 - dist / max_length


def fuzzy_similarity(text1: str, text2: str) -> float:
    """
    Fuzzy token-sort ratio scaled to [0, 1].

    Token order is ignored; only identical token multisets score 1.
    Returns 0 when either side has no tokens.
    """
    if not tokenize(text1) or not tokenize(text2):
        logger.debug("fuzzy: empty token set, scoring 0")
        return 0.0

    return fuzz.token_sort_ratio(text1, text2) / 100.0


def jaccard_similarity(text1: str, text2: str) -> float:
    """
    Jaccard index of the whitespace token sets.

    When both token sets are empty the ratio is undefined; it scores 0.
    """
    words1 = set(tokenize(text1))
    words2 = set(tokenize(text2))

    union = words1 | words2
    if not union:
        logger.debug("jaccard: empty union, scoring 0")
        return 0.0

    return len(words1 & words2) / len(union)


# ----------------------------------------------------------------
#           Algorithm Factory Functions
# ----------------------------------------------------------------

SimilarityFn = Callable[[str, str], float]

_ALGORITHM_FNS: Dict[Algorithm, SimilarityFn] = {
    Algorithm.COSINE: cosine_tfidf_similarity,
    Algorithm.LEVENSHTEIN: levenshtein_similarity,
    Algorithm.FUZZY: fuzzy_similarity,
    Algorithm.JACCARD: jaccard_similarity,
}


def get_algorithm_fn(algorithm) -> Optional[SimilarityFn]:
    """
    Return the scoring function for an algorithm.

    Args:
        algorithm: An Algorithm member or one of 'cosine', 'levenshtein',
                   'fuzzy', 'jaccard'

    Returns:
        Scoring function or None if invalid
    """
    if not isinstance(algorithm, Algorithm):
        algorithm = parse_algorithm(algorithm)
    return _ALGORITHM_FNS.get(algorithm)
