"""
Unit tests for type-ahead suggestions
"""

from datetime import datetime, timezone

from discovery.models.search import (
    HistoryEntry,
    SavedQuery,
    SearchFilters,
    SortMode,
    SuggestionSource,
)
from discovery.search.suggestions import EMPTY_QUERY_HINT, SuggestionBuilder, build_suggestions

NOW = datetime(2026, 1, 1, tzinfo=timezone.utc)


def history_entry(query, **kwargs):
    return HistoryEntry(id=f"h_{query}", query=query, executed_at=NOW, **kwargs)


def saved_query(query, **kwargs):
    return SavedQuery(id=f"s_{query}", name=query, query=query, created_at=NOW, **kwargs)


class TestNonEmptyQuery:
    """Test suggestions while typing"""

    def setup_method(self):
        self.builder = SuggestionBuilder(limit=8)

    def test_prefix_only(self):
        items = self.builder.build("at", pool=["Attack", "Battle", "Atlas Studio"])
        labels = [item.label for item in items[:-1]]
        assert "Attack" in labels
        assert "Battle" not in labels

    def test_hint_is_last(self):
        items = self.builder.build("ber", pool=["Berserk"])
        assert items[-1].source == SuggestionSource.HINT
        assert items[-1].label == 'Search for "ber"'
        assert items[-1].query == "ber"

    def test_hint_uses_trimmed_raw_query(self):
        items = self.builder.build("  Ber ", pool=["Berserk"])
        assert items[-1].label == 'Search for "Ber"'

    def test_sorted_by_length_then_lexicographic(self):
        items = self.builder.build("s", pool=["Studio Insider", "Seinen", "Shonen", "Spoilers"])
        assert [item.label for item in items[:-1]] == ["Seinen", "Shonen", "Spoilers", "Studio Insider"]

    def test_hard_cap_includes_hint(self):
        pool = [f"Star {i}" for i in range(20)]
        items = SuggestionBuilder(limit=5).build("star", pool=pool)
        assert len(items) == 5
        assert items[-1].source == SuggestionSource.HINT

    def test_earlier_source_wins_duplicates(self):
        filters = SearchFilters(kind="work")
        items = self.builder.build(
            "one",
            history=[history_entry("one piece", filters=filters, sort=SortMode.NEWEST)],
            trending=["One Piece"],
            pool=["ONE PIECE"],
        )
        content = items[:-1]
        assert len(content) == 1
        assert content[0].source == SuggestionSource.HISTORY
        assert content[0].label == "one piece"

    def test_history_and_saved_carry_snapshot(self):
        filters = SearchFilters(kind="post", posts={"hide_spoilers": True})
        items = self.builder.build(
            "titan",
            history=[history_entry("titan ending", filters=filters, sort=SortMode.NEWEST)],
            saved=[saved_query("titan ost", filters=filters)],
        )
        by_label = {item.label: item for item in items}
        assert by_label["titan ending"].filters == filters
        assert by_label["titan ending"].sort == SortMode.NEWEST
        assert by_label["titan ost"].source == SuggestionSource.SAVED
        assert by_label["titan ost"].filters == filters

    def test_trending_and_pool_carry_no_snapshot(self):
        items = self.builder.build("ma", trending=["MAPPA"], pool=["Manga Lab"])
        for item in items[:-1]:
            assert item.filters is None
            assert item.sort is None

    def test_matching_is_normalized(self):
        items = self.builder.build("CAFÉ", pool=["cafe society", "Café Latte"])
        assert {item.label for item in items[:-1]} == {"cafe society", "Café Latte"}

    def test_no_matches_still_offers_hint(self):
        items = self.builder.build("zzz", pool=["Berserk"])
        assert len(items) == 1
        assert items[0].source == SuggestionSource.HINT


class TestEmptyQuery:
    """Test suggestions for empty input"""

    def test_history_then_trending_then_hint(self):
        history = [history_entry("berserk"), history_entry("mappa")]
        items = SuggestionBuilder(limit=8).build("", history=history, trending=["One Piece"])
        assert [item.label for item in items] == ["berserk", "mappa", "One Piece", EMPTY_QUERY_HINT]
        assert [item.source for item in items] == [
            SuggestionSource.HISTORY,
            SuggestionSource.HISTORY,
            SuggestionSource.TRENDING,
            SuggestionSource.HINT,
        ]

    def test_recent_history_is_capped(self):
        history = [history_entry(f"query {i}") for i in range(9)]
        items = SuggestionBuilder(limit=20, recent_limit=5).build(None, history=history)
        assert len([item for item in items if item.source == SuggestionSource.HISTORY]) == 5

    def test_never_exceeds_limit(self):
        history = [history_entry(f"query {i}") for i in range(5)]
        trending = [f"trend {i}" for i in range(10)]
        items = SuggestionBuilder(limit=8).build("   ", history=history, trending=trending)
        assert len(items) == 8
        assert items[-1].label == EMPTY_QUERY_HINT

    def test_saved_and_pool_are_not_used(self):
        items = SuggestionBuilder().build("", saved=[saved_query("berserk")], pool=["Berserk"])
        assert [item.source for item in items] == [SuggestionSource.HINT]


class TestBuildSuggestions:
    """Test the module-level helper"""

    def test_limit_one_is_only_the_hint(self):
        items = build_suggestions("at", [], [], [], ["Attack"], limit=1)
        assert len(items) == 1
        assert items[0].source == SuggestionSource.HINT

    def test_zero_limit(self):
        assert build_suggestions("at", [], [], [], ["Attack"], limit=0) == []
