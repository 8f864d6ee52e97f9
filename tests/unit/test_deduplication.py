"""Unit tests for union-find deduplication and non-person filters."""

import pytest

from records_intel.models import PersonAggregate
from records_intel.processing.deduplication import DisjointSet, deduplicate
from records_intel.processing.filters import is_junk_name, is_non_person


def _aggregate(name, mentions, docs=1, role="Unknown", category="other") -> PersonAggregate:
    return PersonAggregate(
        normalized_name=name, total_mentions=mentions, doc_count=docs, top_role=role, top_category=category
    )


class TestDisjointSet:
    """Tests for DisjointSet."""

    def test_union_and_find(self):
        sets = DisjointSet(5)

        assert sets.union(0, 1)
        assert sets.union(3, 4)
        assert not sets.union(1, 0)
        assert sets.find(0) == sets.find(1)
        assert sets.find(2) != sets.find(0)

    def test_groups_transitive(self):
        sets = DisjointSet(4)
        sets.union(0, 1)
        sets.union(1, 2)

        groups = sorted(sorted(group) for group in sets.groups())
        assert groups == [[0, 1, 2], [3]]


class TestDeduplicate:
    """Tests for deduplicate."""

    def test_empty(self):
        assert deduplicate([]) == []

    def test_variants_collapse_to_top_mention_name(self):
        aggregates = [
            _aggregate("jeffrey epstein", 100, 40, role="Defendant", category="key figure"),
            _aggregate("jeff epstein", 10, 5, role="Financier", category="associate"),
            _aggregate("epstein jeffrey", 3, 2),
            _aggregate("ghislaine maxwell", 50, 20, role="Associate", category="associate"),
        ]

        result = deduplicate(aggregates)

        assert [p.normalized_name for p in result] == ["jeffrey epstein", "ghislaine maxwell"]
        assert result[0].total_mentions == 113
        assert result[0].doc_count == 47
        assert result[0].top_role == "Defendant"
        assert result[0].top_category == "key figure"

    def test_role_from_first_known(self):
        aggregates = [
            _aggregate("robert smith", 20, role="Unknown"),
            _aggregate("bob smith", 5, role="Pilot"),
        ]

        result = deduplicate(aggregates)

        assert len(result) == 1
        assert result[0].normalized_name == "robert smith"
        assert result[0].top_role == "Pilot"

    def test_most_specific_category(self):
        aggregates = [
            _aggregate("robert smith", 20, category="other"),
            _aggregate("bob smith", 5, category="victim"),
            _aggregate("robert j smith", 2, category="witness"),
        ]

        result = deduplicate(aggregates)

        assert len(result) == 1
        assert result[0].top_category == "victim"

    def test_transitive_cluster(self):
        # "james smith" and "john smith" never match directly; "j smith" links them
        aggregates = [
            _aggregate("james smith", 8),
            _aggregate("john smith", 4),
            _aggregate("j smith", 1),
        ]
        assert len(deduplicate(aggregates)) == 1

    def test_totals_preserved_and_count_not_larger(self):
        aggregates = [
            _aggregate("jeffrey epstein", 100, 40),
            _aggregate("jeff epstein", 10, 5),
            _aggregate("robert smith", 7, 3),
            _aggregate("robert jones", 6, 2),
            _aggregate("ghislaine maxwell", 50, 20),
        ]

        result = deduplicate(aggregates)

        assert len(result) <= len(aggregates)
        assert sum(p.total_mentions for p in result) == sum(p.total_mentions for p in aggregates)
        assert sum(p.doc_count for p in result) == sum(p.doc_count for p in aggregates)

    def test_sorted_by_mentions(self):
        aggregates = [_aggregate("mary major", 3), _aggregate("ghislaine maxwell", 50), _aggregate("john poe", 9)]
        result = deduplicate(aggregates)
        assert [p.total_mentions for p in result] == [50, 9, 3]

    def test_inputs_not_modified(self):
        aggregates = [_aggregate("jeffrey epstein", 100), _aggregate("jeff epstein", 10)]
        deduplicate(aggregates)
        assert [a.total_mentions for a in aggregates] == [100, 10]

    def test_deterministic(self):
        aggregates = [
            _aggregate("jeffrey epstein", 100, 40),
            _aggregate("jeff epstein", 10, 5),
            _aggregate("ghislaine maxwell", 50, 20),
            _aggregate("maxwell ghislaine", 2, 1),
        ]
        assert deduplicate(aggregates) == deduplicate(list(reversed(aggregates)))


class TestIsJunkName:
    """Tests for raw-name junk filtering."""

    @pytest.mark.parametrize(
        "raw",
        [
            "JE",
            "x" * 61,
            "John; Smith",
            "Smith/Jones",
            "EFTA00012345",
            "Jo3n Smith",
            "[REDACTED]",
            "ABCDEF",
            "Special Agent",
            "Unknown Sender",
        ],
    )
    def test_junk(self, raw):
        assert is_junk_name(raw)

    @pytest.mark.parametrize("raw", ["Jeffrey Epstein", "Jean-Luc Brunel", "J. Smith", "Sarah Kellen"])
    def test_not_junk(self, raw):
        assert not is_junk_name(raw)


class TestIsNonPerson:
    """Tests for normalized-name filtering."""

    @pytest.mark.parametrize(
        "name",
        [
            "",
            "epstein",
            "abc",
            "federal bureau of investigation",
            "jp morgan bank",
            "jane doe",
            "john doe",
            "redacted name",
            "unknown male",
            "special agent",
            "female minor",
            "j e",
            "victim 1",
        ],
    )
    def test_non_person(self, name):
        assert is_non_person(name)

    @pytest.mark.parametrize("name", ["jeffrey epstein", "ghislaine maxwell", "j smith"])
    def test_person(self, name):
        assert not is_non_person(name)
