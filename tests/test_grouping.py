"""Tests for duplicate grouping."""

import itertools

from simfinder.similarity.finder import DisjointSet, SimilarityMatch, group_duplicates


def _edge(a: str, b: str) -> SimilarityMatch:
    return SimilarityMatch(a, b, a, b, 1.0, "levenshtein")


def _member_sets(groups) -> set:
    return {frozenset(g.members) for g in groups}


class TestDisjointSet:

    def test_singletons(self):
        dsu = DisjointSet()
        dsu.add("a")
        dsu.add("b")
        assert dsu.find("a") != dsu.find("b")
        assert len(dsu) == 2

    def test_membership(self):
        dsu = DisjointSet()
        dsu.union("a", "b")
        assert "a" in dsu and "b" in dsu
        assert "c" not in dsu
        dsu.add("a")
        assert len(dsu) == 2

    def test_union_and_find(self):
        dsu = DisjointSet()
        dsu.union("a", "b")
        dsu.union("c", "d")
        assert dsu.find("a") == dsu.find("b")
        assert dsu.find("a") != dsu.find("c")
        dsu.union("b", "d")
        assert len({dsu.find(k) for k in "abcd"}) == 1

    def test_components_in_insertion_order(self):
        dsu = DisjointSet()
        dsu.union("x", "y")
        dsu.union("a", "b")
        dsu.union("b", "x")
        dsu.add("z")
        assert dsu.components() == [["x", "y", "a", "b"], ["z"]]


class TestGroupDuplicates:

    def test_single_pair(self):
        groups = group_duplicates([_edge("1", "2")])
        assert len(groups) == 1
        assert groups[0].group_id == "group_1"
        assert groups[0].members == ["1", "2"]
        assert groups[0].size == 2

    def test_transitive_chain(self):
        groups = group_duplicates([_edge("A", "B"), _edge("B", "C")])
        assert _member_sets(groups) == {frozenset("ABC")}

    def test_bridge_merges_existing_groups(self):
        matches = [_edge("A", "B"), _edge("C", "D"), _edge("B", "C")]
        groups = group_duplicates(matches)
        assert len(groups) == 1
        assert groups[0].members == ["A", "B", "C", "D"]
        assert groups[0].size == 4

    def test_separate_components(self):
        matches = [_edge("A", "B"), _edge("C", "D"), _edge("E", "A")]
        groups = group_duplicates(matches)
        assert [g.group_id for g in groups] == ["group_1", "group_2"]
        assert [g.members for g in groups] == [["A", "B", "E"], ["C", "D"]]

    def test_membership_independent_of_match_order(self):
        matches = [_edge("A", "B"), _edge("C", "D"), _edge("B", "C"),
                   _edge("E", "F"), _edge("G", "E")]
        expected = _member_sets(group_duplicates(matches))
        assert expected == {frozenset("ABCD"), frozenset("EFG")}
        for perm in itertools.permutations(matches):
            assert _member_sets(group_duplicates(list(perm))) == expected

    def test_repeatable(self):
        matches = [_edge("3", "1"), _edge("2", "4"), _edge("4", "1")]
        first = [(g.group_id, g.members) for g in group_duplicates(matches)]
        second = [(g.group_id, g.members) for g in group_duplicates(matches)]
        assert first == second

    def test_no_matches(self):
        assert group_duplicates([]) == []

    def test_to_record(self):
        record = group_duplicates([_edge("1", "2")])[0].to_record()
        assert record == {"groupId": "group_1", "members": ["1", "2"], "size": 2}
