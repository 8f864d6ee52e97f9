"""Unit tests for name normalization and same-person matching."""

import itertools

import pytest

from records_intel.processing.name_matching import (
    NameMatcher,
    NameMatchSettings,
    canonical_first_name,
    collapse_ocr_spaces,
    normalize_name,
)


@pytest.fixture
def matcher() -> NameMatcher:
    return NameMatcher(NameMatchSettings())


class TestNormalizeName:
    """Tests for normalize_name."""

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("Jeffrey Epstein", "jeffrey epstein"),
            ("Epstein, Jeffrey", "jeffrey epstein"),
            ("Dr. Smith, John J.", "john j smith"),
            ("Mr. John  Smith III", "john smith"),
            ("Jean-Luc Brunel", "jeanluc brunel"),
            ("  O'Brien,  ", "obrien"),
        ],
    )
    def test_normalize(self, raw, expected):
        assert normalize_name(raw) == expected


class TestHelpers:
    """Tests for nickname and OCR helpers."""

    def test_canonical_first_name(self):
        assert canonical_first_name("bob") == "robert"
        assert canonical_first_name("robert") == "robert"
        assert canonical_first_name("zed") == "zed"

    def test_collapse_ocr_spaces(self):
        assert collapse_ocr_spaces("jeff pa liuca") == "jeff paliuca"
        assert collapse_ocr_spaces("j effrey epstein") == "jeffrey epstein"
        assert collapse_ocr_spaces("jeffrey epstein") == "jeffrey epstein"


class TestShouldMerge:
    """Tests for NameMatcher.should_merge."""

    @pytest.mark.parametrize(
        "a, b",
        [
            ("Robert J. Smith", "Bob Smith"),
            ("Jeffrey Epstein", "jeffrey epstein"),
            ("tony ricco", "tonyricco"),
            ("maxwell ghislaine", "ghislaine maxwell"),
            ("jeff pa liuca", "jeff paliuca"),
            ("john william smith", "john smith"),
            ("john smith jr", "john smith"),
            ("j smith", "james smith"),
            ("alex acosta", "alexander acosta"),
            ("jeff epstein", "jeffrey epstein"),
            ("jeffrey epstien", "jeffrey epstein"),
            ("ghislane maxwell", "ghislaine maxwell"),
            ("richard mennin", "richard menninger"),
            ("david perry", "david perry qc"),
        ],
    )
    def test_same_person(self, matcher, a, b):
        assert matcher.should_merge(a, b)

    @pytest.mark.parametrize(
        "a, b",
        [
            ("Robert Smith", "Robert Jones"),
            ("john smith", "jane smith"),
            ("smith", "john smith"),
            ("epstein", "mark epstein"),
            ("mark epstein", "jeffrey epstein"),
            ("al li", "al lo"),
            ("matthew rogers", "jose matthew rogers"),
            ("", "john smith"),
        ],
    )
    def test_different_person(self, matcher, a, b):
        assert not matcher.should_merge(a, b)

    def test_single_token_exact_merges(self, matcher):
        assert matcher.should_merge("maxwell", "Maxwell")

    def test_symmetric(self, matcher):
        names = [
            "robert j smith", "bob smith", "robert jones", "jeffrey epstein", "jeff epstein",
            "epstein jeffrey", "ghislaine maxwell", "g maxwell", "david perry qc", "david perry",
            "smith",
        ]
        for a, b in itertools.combinations(names, 2):
            assert matcher.should_merge(a, b) == matcher.should_merge(b, a), (a, b)

    def test_thresholds_are_tunable(self):
        strict = NameMatcher(
            NameMatchSettings(max_first_distance=0, max_last_distance=0, max_whole_name_distance=0)
        )
        assert not strict.should_merge("jeffrey epstien", "jeffrey epstein")
