"""Tests for pair scoring, the finder and statistics."""

import pytest

from simfinder.core.config import Algorithm, Configuration, ContentItem
from simfinder.core.errors import ConfigurationError
from simfinder.similarity.finder import (
    SimilarityFinder,
    SimilarityMatch,
    find_similar_content,
    score_pair,
)


def _finder(**kwargs) -> SimilarityFinder:
    return SimilarityFinder(Configuration().with_overrides(**kwargs))


class TestScorePair:

    def test_tie_goes_to_first_canonical_algorithm(self):
        score, algorithm = score_pair("same text", "same text", set(Algorithm))
        assert score == 1.0
        assert algorithm is Algorithm.COSINE

    def test_tie_break_ignores_given_order(self):
        score, algorithm = score_pair("same text", "same text",
                                      [Algorithm.JACCARD, Algorithm.LEVENSHTEIN])
        assert score == 1.0
        assert algorithm is Algorithm.LEVENSHTEIN

    def test_picks_maximum(self):
        # one edit out of seven characters beats the token based scores
        score, algorithm = score_pair("abcdefg", "abcdefh",
                                      [Algorithm.JACCARD, Algorithm.LEVENSHTEIN])
        assert algorithm is Algorithm.LEVENSHTEIN
        assert score == pytest.approx(6 / 7)

    def test_empty_strings(self):
        score, algorithm = score_pair("", "", set(Algorithm))
        assert score == 1.0
        assert algorithm is Algorithm.LEVENSHTEIN

    def test_no_algorithms_is_configuration_error(self):
        with pytest.raises(ConfigurationError):
            score_pair("a", "b", [])


class TestFindSimilar:

    def test_end_to_end_example(self, sample_items):
        result = find_similar_content(sample_items, similarity_threshold=0.8)

        assert len(result.matches) == 1
        match = result.matches[0]
        assert (match.item1, match.item2) == ("1", "2")
        assert match.similarity >= 0.8
        assert match.text1 == "the quick brown fox"
        assert match.text2 == "the quick brown fox!"

        assert result.groups_record["totalGroups"] == 1
        group = result.groups_record["groups"][0]
        assert group["members"] == ["1", "2"]
        assert group["size"] == 2

    def test_evaluation_order(self):
        items = [ContentItem(id=i, text="duplicate text") for i in ("a", "b", "c")]
        matches = _finder().find_similar(items)
        assert [(m.item1, m.item2) for m in matches] == [("a", "b"), ("a", "c"), ("b", "c")]

    def test_min_length_filter(self):
        items = [
            ContentItem(id="short1", text="hey"),
            ContentItem(id="short2", text="hey"),
            ContentItem(id="long1", text="a longer sentence"),
            ContentItem(id="long2", text="a longer sentence"),
        ]
        result = _finder(min_length=5).run(items)

        ids = {m.item1 for m in result.matches} | {m.item2 for m in result.matches}
        assert ids == {"long1", "long2"}
        members = {member for g in result.groups for member in g.members}
        assert "short1" not in members and "short2" not in members

    def test_min_length_boundary_is_inclusive(self):
        items = [ContentItem(id="1", text="abcde"), ContentItem(id="2", text="abcde")]
        assert len(_finder(min_length=5).find_similar(items)) == 1

    def test_case_sensitivity(self):
        items = [ContentItem(id="1", text="HELLO"), ContentItem(id="2", text="hello")]
        assert _finder(similarity_threshold=1.0).find_similar(items)
        assert not _finder(similarity_threshold=1.0, case_sensitive=True).find_similar(items)

    def test_ignore_whitespace(self):
        items = [ContentItem(id="1", text="a  b"), ContentItem(id="2", text=" a b")]
        finder = _finder(similarity_threshold=1.0, algorithms=["levenshtein"])
        assert finder.find_similar(items)
        finder = _finder(similarity_threshold=1.0, algorithms=["levenshtein"],
                         ignore_whitespace=False)
        assert not finder.find_similar(items)

    def test_short_item_inside_longer_ones_is_not_a_duplicate(self):
        items = [
            ContentItem("1", "the"),
            ContentItem("2", "the tax code of the united states"),
            ContentItem("3", "the cat sat on the mat"),
        ]
        finder = _finder(similarity_threshold=0.95, algorithms="fuzzy")
        assert finder.find_similar(items) == []

    def test_threshold_compared_before_rounding(self):
        items = [ContentItem(id="1", text="kitten"), ContentItem(id="2", text="sitting")]

        # 1 - 3/7 = 0.571428...
        matches = _finder(similarity_threshold=0.57142, algorithms=["levenshtein"]).find_similar(items)
        assert len(matches) == 1
        assert matches[0].similarity == 0.5714
        assert matches[0].algorithm == "levenshtein"

        assert not _finder(similarity_threshold=0.57143, algorithms=["levenshtein"]).find_similar(items)

    def test_progress_callback(self, sample_items):
        calls = []
        finder = SimilarityFinder(Configuration(),
                                  progress_callback=lambda msg, cur, tot: calls.append((cur, tot)))
        finder.run(sample_items)
        assert calls[0] == (0, 3)
        assert calls[-1] == (3, 3)


class TestRun:

    def test_empty_items_is_configuration_error(self):
        with pytest.raises(ConfigurationError):
            _finder().run([])

    def test_missing_items_is_configuration_error(self):
        with pytest.raises(ConfigurationError):
            _finder().run(None)

    def test_no_algorithms_is_configuration_error(self, sample_items):
        finder = SimilarityFinder(Configuration(algorithms=frozenset()))
        with pytest.raises(ConfigurationError):
            finder.run(sample_items)

    def test_threshold_out_of_range(self, sample_items):
        with pytest.raises(ConfigurationError):
            _finder(similarity_threshold=1.5).run(sample_items)

    def test_grouping_disabled(self, sample_items):
        result = _finder(group_by_duplicate=False).run(sample_items)
        assert result.matches
        assert result.groups is None
        assert result.groups_record is None

    def test_no_matches_means_no_groups(self, sample_items):
        result = _finder(similarity_threshold=1.0).run(sample_items)
        assert result.matches == []
        assert result.groups is None
        assert result.stats["totalMatches"] == 0
        assert result.stats["avgSimilarity"] == 0


class TestSummary:

    def test_counts_and_average(self):
        matches = [
            SimilarityMatch("a", "b", "", "", 0.9, "cosine"),
            SimilarityMatch("a", "c", "", "", 0.8, "jaccard"),
            SimilarityMatch("b", "c", "", "", 1.0, "cosine"),
        ]
        stats = _finder().get_summary(matches)
        assert stats["totalMatches"] == 3
        assert stats["avgSimilarity"] == pytest.approx(0.9)
        assert stats["algorithmCounts"] == {"cosine": 2, "jaccard": 1}
        assert stats["timestamp"].endswith("Z")

    def test_empty(self):
        stats = _finder().get_summary([])
        assert stats["totalMatches"] == 0
        assert stats["avgSimilarity"] == 0
        assert stats["algorithmCounts"] == {}
