"""
Search Engine Core for Fanaara Discovery
Fans one query out to every entity kind, aggregates counts and picks a top match
"""

import logging
import time
from typing import Dict, List, Optional

from ..models.search import SearchFilters
from .data_source import DataSource
from .handlers import HANDLERS, EntityKindHandler
from .models import (
    RESULT_FIELDS,
    EntityKind,
    ScoredMatch,
    SearchResults,
    SortMode,
    TopMatch,
)

logger = logging.getLogger(__name__)

# Tie-break order for the top match, highest priority first
KIND_PRIORITY: List[EntityKind] = [
    EntityKind.WORK,
    EntityKind.PERSON,
    EntityKind.POST,
    EntityKind.GROUP,
    EntityKind.ORGANIZATION,
]


class SearchEngine:
    """
    Query orchestrator over an abstract data source
    """

    def __init__(
        self,
        data_source: DataSource,
        handlers: Optional[Dict[EntityKind, EntityKindHandler]] = None,
    ):
        """Initialize search engine with a data source and per-kind handlers"""
        self.data_source = data_source
        self.handlers = handlers or HANDLERS

    def run_search(
        self,
        query: str,
        filters: Optional[SearchFilters] = None,
        sort: SortMode = SortMode.RELEVANCE,
    ) -> SearchResults:
        """
        Run one search across all entity kinds

        An empty query still executes and yields empty results.

        Args:
            query: Raw query text
            filters: Filter state (kind scope plus per-kind blocks)
            sort: relevance or newest

        Returns:
            Immutable results snapshot
        """
        start_time = time.perf_counter()

        q = (query or "").strip()
        filters = filters or SearchFilters()
        sort = SortMode(sort)

        matches: Dict[EntityKind, List[ScoredMatch]] = {}
        for kind, handler in self.handlers.items():
            if not filters.kind.includes(kind):
                matches[kind] = []
                continue
            matches[kind] = handler.search(q, filters, sort, self.data_source.entities(kind))

        total = sum(len(kind_matches) for kind_matches in matches.values())
        top_match = self._select_top_match(matches)

        took_ms = max(1, round((time.perf_counter() - start_time) * 1000))

        results = SearchResults(
            query=q,
            took_ms=took_ms,
            total=total,
            top_match=top_match,
            **{
                RESULT_FIELDS[kind]: [match.entity for match in kind_matches]
                for kind, kind_matches in matches.items()
            },
        )

        logger.info(
            f"Search completed: {total} results in {took_ms}ms "
            f"(query: '{q}', scope: {filters.kind.value}, sort: {sort.value})"
        )
        return results

    def _select_top_match(self, matches: Dict[EntityKind, List[ScoredMatch]]) -> Optional[TopMatch]:
        """Highest-scoring head across kinds; equal scores go to the higher-priority kind"""
        best: Optional[TopMatch] = None

        for kind in KIND_PRIORITY:
            kind_matches = matches.get(kind) or []
            if not kind_matches:
                continue
            head = kind_matches[0]
            if best is None or head.score > best.score:
                best = TopMatch(kind=kind, entity=head.entity, score=head.score)

        return best


def run_search(
    query: str,
    filters: Optional[SearchFilters],
    sort: SortMode,
    data_source: DataSource,
) -> SearchResults:
    """Run one search against a data source with the default handlers"""
    return SearchEngine(data_source).run_search(query, filters, sort)
