"""
Unit tests for text normalization
"""

import pytest

from discovery.models.search import WorkType
from discovery.search.normalizer import build_search_text, normalize_text, split_terms


class TestNormalizeText:
    """Test normalize_text"""

    def test_lowercases_and_collapses_whitespace(self):
        assert normalize_text("  One   PIECE \t\n") == "one piece"

    def test_strips_latin_diacritics(self):
        assert normalize_text("Café Crème") == "cafe creme"
        assert normalize_text("Satoru Gojō") == "satoru gojo"

    def test_strips_arabic_diacritics(self):
        assert normalize_text("مُحَمَّد") == "محمد"

    def test_replaces_punctuation_with_space(self):
        assert normalize_text("Watchmen (Issue #1)") == "watchmen issue 1"
        assert normalize_text("Demon Slayer: Kimetsu no Yaiba") == "demon slayer kimetsu no yaiba"

    def test_keeps_handle_characters(self):
        assert normalize_text("@dev.luffy") == "@dev.luffy"
        assert normalize_text("One-Punch Man") == "one-punch man"
        assert normalize_text("snake_case") == "snake_case"

    def test_none_and_empty(self):
        assert normalize_text(None) == ""
        assert normalize_text("") == ""
        assert normalize_text("!!! ???") == ""

    def test_non_string_input(self):
        assert normalize_text(1999) == "1999"

    @pytest.mark.parametrize("raw", [
        "Spoiler‑Safe One Piece",
        "ﬁnal ﬂash",
        "Ⅻ Kingdoms",
        "ＦＵＬＬＷＩＤＴＨ Ｔｅｘｔ",
        "Jujutsu Kaisen: direction & cuts (spoiler‑safe)",
        "مُحَمَّد @Fanaara",
    ])
    def test_idempotent(self, raw):
        once = normalize_text(raw)
        assert normalize_text(once) == once

    def test_compatibility_forms(self):
        assert normalize_text("ＦＵＬＬＷＩＤＴＨ") == "fullwidth"
        assert normalize_text("ﬁnal") == "final"


class TestSplitTerms:
    """Test split_terms"""

    def test_splits_on_whitespace(self):
        assert split_terms("  One   PIECE ") == ["one", "piece"]

    def test_no_empty_terms(self):
        assert split_terms("") == []
        assert split_terms(None) == []
        assert split_terms("a -- b") == ["a", "--", "b"]
        assert split_terms("a !! b") == ["a", "b"]

    def test_preserves_order(self):
        assert split_terms("piece one") == ["piece", "one"]


class TestBuildSearchText:
    """Test build_search_text"""

    def test_joins_and_normalizes_fields(self):
        text = build_search_text("One Piece", None, ["Action", "Drama"], WorkType.ANIME, 1999)
        assert text == "one piece action drama anime 1999"

    def test_skips_booleans_and_nested_lists(self):
        assert build_search_text("Berserk", True, [["Seinen"], "Drama"]) == "berserk seinen drama"

    def test_empty(self):
        assert build_search_text() == ""
        assert build_search_text(None, []) == ""
