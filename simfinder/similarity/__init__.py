"""
Similarity scoring and duplicate grouping.

This module provides the pairwise similarity algorithms and the finder
that applies them to a batch of content items.
"""

from .matching import (
    # Normalization
    normalize_text,
    tokenize,

    # Similarity algorithms
    cosine_tfidf_similarity,
    levenshtein_similarity,
    fuzzy_similarity,
    jaccard_similarity,
    get_algorithm_fn,
)

from .finder import (
    DisjointSet,
    DuplicateGroup,
    RunResult,
    SimilarityFinder,
    SimilarityMatch,
    find_similar_content,
    group_duplicates,
    score_pair,
)

__all__ = [
    'SimilarityFinder',
    'SimilarityMatch',
    'DuplicateGroup',
    'DisjointSet',
    'RunResult',
    'find_similar_content',
    'group_duplicates',
    'score_pair',
    'normalize_text',
    'tokenize',
    'cosine_tfidf_similarity',
    'levenshtein_similarity',
    'fuzzy_similarity',
    'jaccard_similarity',
    'get_algorithm_fn',
]
