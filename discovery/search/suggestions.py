"""
Type-ahead suggestions for the discovery engine
Prefix-only matching over history, saved queries, trending terms and entity titles
"""

import logging
from typing import Dict, List, Optional, Sequence

from ..models.search import HistoryEntry, SavedQuery, SuggestionItem, SuggestionSource
from .config import SearchConfig
from .normalizer import normalize_text

logger = logging.getLogger(__name__)

EMPTY_QUERY_HINT = "Type to search people, works, posts and communities"


class SuggestionBuilder:
    """Builds short, predictable suggestion lists on every keystroke"""

    def __init__(
        self,
        limit: int = SearchConfig.SUGGESTION_LIMIT,
        recent_limit: int = SearchConfig.RECENT_SUGGESTIONS,
    ):
        self.limit = limit
        self.recent_limit = recent_limit

    def build(
        self,
        raw_query: Optional[str],
        history: Sequence[HistoryEntry] = (),
        saved: Sequence[SavedQuery] = (),
        trending: Sequence[str] = (),
        pool: Sequence[str] = (),
        limit: Optional[int] = None,
    ) -> List[SuggestionItem]:
        """
        Build suggestions for the current input

        Args:
            raw_query: Current input text
            history: History entries, most recent first
            saved: Saved queries
            trending: Trending terms
            pool: Entity titles, handles and names
            limit: Hard cap on the number of items (hint included)

        Returns:
            Ordered suggestions; the hint item is always last
        """
        limit = self.limit if limit is None else limit
        if limit <= 0:
            return []

        q = normalize_text(raw_query)
        if not q:
            return self._build_for_empty_query(history, trending, limit)

        # normalized -> item; the first source to claim a key keeps it
        candidates: Dict[str, SuggestionItem] = {}

        def offer(label: str, item: SuggestionItem) -> None:
            key = normalize_text(label)
            if key and key not in candidates:
                candidates[key] = item

        for entry in history:
            offer(entry.query, self._from_history(entry))
        for entry in saved:
            offer(entry.query, self._from_saved(entry))
        for term in trending:
            offer(term, SuggestionItem(label=term, source=SuggestionSource.TRENDING, query=term))
        for label in pool:
            offer(label, SuggestionItem(label=label, source=SuggestionSource.ENTITY, query=label))

        picked = [(key, item) for key, item in candidates.items() if key.startswith(q)]
        picked.sort(key=lambda pair: (len(pair[0]), pair[0]))

        items = [item for _, item in picked[: limit - 1]]
        items.append(self._hint(raw_query.strip()))

        logger.debug(f"Suggestions for '{q}': {len(items) - 1} matches")
        return items

    def _build_for_empty_query(
        self,
        history: Sequence[HistoryEntry],
        trending: Sequence[str],
        limit: int,
    ) -> List[SuggestionItem]:
        items = [self._from_history(entry) for entry in list(history)[: self.recent_limit]]
        items.extend(
            SuggestionItem(label=term, source=SuggestionSource.TRENDING, query=term)
            for term in trending
        )

        items = items[: limit - 1]
        items.append(SuggestionItem(label=EMPTY_QUERY_HINT, source=SuggestionSource.HINT))
        return items

    @staticmethod
    def _from_history(entry: HistoryEntry) -> SuggestionItem:
        return SuggestionItem(
            label=entry.query,
            source=SuggestionSource.HISTORY,
            query=entry.query,
            filters=entry.filters,
            sort=entry.sort,
        )

    @staticmethod
    def _from_saved(entry: SavedQuery) -> SuggestionItem:
        return SuggestionItem(
            label=entry.query,
            source=SuggestionSource.SAVED,
            query=entry.query,
            filters=entry.filters,
            sort=entry.sort,
        )

    @staticmethod
    def _hint(query: str) -> SuggestionItem:
        return SuggestionItem(label=f'Search for "{query}"', source=SuggestionSource.HINT, query=query)


def build_suggestions(
    raw_query: Optional[str],
    history: Sequence[HistoryEntry],
    saved: Sequence[SavedQuery],
    trending: Sequence[str],
    pool: Sequence[str],
    limit: int = SearchConfig.SUGGESTION_LIMIT,
) -> List[SuggestionItem]:
    return SuggestionBuilder(limit=limit).build(raw_query, history, saved, trending, pool)
