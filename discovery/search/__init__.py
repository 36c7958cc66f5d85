"""
Search module for Fanaara Discovery
Provides text normalization, relevance scoring, per-kind search and suggestions
"""

from .normalizer import normalize_text, split_terms, build_search_text
from .scorer import ScoringWeights, DEFAULT_WEIGHTS, RelevanceScorer, score_text
from .models import (
    PersonEntity,
    WorkEntity,
    PostEntity,
    GroupEntity,
    OrganizationEntity,
    ScoredMatch,
    TopMatch,
    SearchResults,
)
from .handlers import (
    HANDLERS,
    EntityKindHandler,
    search_people,
    search_works,
    search_posts,
    search_groups,
    search_organizations,
)
from .data_source import DataSource, InMemoryDataSource
from .engine import SearchEngine, run_search, KIND_PRIORITY
from .suggestions import SuggestionBuilder, build_suggestions, EMPTY_QUERY_HINT

__all__ = [
    "normalize_text",
    "split_terms",
    "build_search_text",
    "ScoringWeights",
    "DEFAULT_WEIGHTS",
    "RelevanceScorer",
    "score_text",
    "PersonEntity",
    "WorkEntity",
    "PostEntity",
    "GroupEntity",
    "OrganizationEntity",
    "ScoredMatch",
    "TopMatch",
    "SearchResults",
    "HANDLERS",
    "EntityKindHandler",
    "search_people",
    "search_works",
    "search_posts",
    "search_groups",
    "search_organizations",
    "DataSource",
    "InMemoryDataSource",
    "SearchEngine",
    "run_search",
    "KIND_PRIORITY",
    "SuggestionBuilder",
    "build_suggestions",
    "EMPTY_QUERY_HINT"
]
