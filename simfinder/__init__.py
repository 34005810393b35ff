"""
simfinder - Headless content similarity and duplicate detection

This package scores every pair of text items under interchangeable
similarity algorithms and groups matching items into duplicate groups.

Supported operations:
- Pairwise similarity (cosine TF-IDF, Levenshtein, fuzzy token sort, Jaccard)
- Threshold filtering with best-algorithm selection
- Transitive duplicate grouping
- Run statistics and result persistence

License: GPL v3
"""

__version__ = '0.1.0'
__license__ = 'GPL v3'
