"""
Per-kind entity search for the discovery engine
Each handler scores, filters and sorts one entity kind
"""

import logging
from typing import Any, Dict, Iterable, List, Optional, Sequence, Union

from pydantic import BaseModel

from ..models.search import (
    GroupFilters,
    OrganizationFilters,
    PersonFilters,
    PostFilters,
    SearchFilters,
    WorkFilters,
)
from .models import (
    RESULT_FIELDS,
    EntityKind,
    GroupEntity,
    OrganizationEntity,
    PersonEntity,
    PostEntity,
    ScoredMatch,
    SortMode,
    WorkEntity,
)
from .normalizer import normalize_text, split_terms
from .scorer import DEFAULT_WEIGHTS, RelevanceScorer, ScoringWeights

logger = logging.getLogger(__name__)


def _labels_intersect(wanted: Sequence[str], actual: Iterable[str]) -> bool:
    """Any-of membership, compared on normalized labels"""
    if not wanted:
        return True
    actual_normalized = {normalize_text(label) for label in actual}
    return any(normalize_text(label) in actual_normalized for label in wanted)


def _same_label(wanted: Optional[str], actual: Optional[str]) -> bool:
    if wanted is None:
        return True
    return normalize_text(wanted) == normalize_text(actual)


class EntityKindHandler:
    """Filter and sort capability for one entity kind"""

    kind: EntityKind
    filters_model = BaseModel

    def __init__(self, weights: ScoringWeights = DEFAULT_WEIGHTS):
        self.weights = weights
        self.scorer = RelevanceScorer(weights)

    def kind_filters(self, filters: Union[SearchFilters, BaseModel, Dict[str, Any], None]) -> Any:
        """Extract this kind's filter block; anything unusable means no filter"""
        if isinstance(filters, SearchFilters):
            return getattr(filters, RESULT_FIELDS[self.kind])
        if isinstance(filters, self.filters_model):
            return filters
        if isinstance(filters, dict):
            return self.filters_model(**filters)
        return self.filters_model()

    def matches_filters(self, entity: Any, filters: Any) -> bool:
        return True

    def popularity(self, entity: Any) -> float:
        return 0.0

    def recency(self, entity: Any) -> float:
        return entity.updated_at.timestamp()

    def sort(self, matches: List[ScoredMatch], sort_mode: SortMode) -> List[ScoredMatch]:
        """Three-key sort; entity id settles whatever is still tied"""
        if sort_mode == SortMode.NEWEST:
            def key(match: ScoredMatch):
                return (
                    -self.recency(match.entity),
                    -self.popularity(match.entity),
                    -match.score,
                    match.entity.id,
                )
        else:
            def key(match: ScoredMatch):
                return (
                    -match.score,
                    -self.popularity(match.entity),
                    -self.recency(match.entity),
                    match.entity.id,
                )

        return sorted(matches, key=key)

    def search(
        self,
        query: str,
        filters: Union[SearchFilters, BaseModel, Dict[str, Any], None],
        sort_mode: SortMode,
        entities: Iterable[Any],
    ) -> List[ScoredMatch]:
        """
        Score, filter and sort entities of this kind

        Args:
            query: Raw query text
            filters: Search filters (whole filter state or this kind's block)
            sort_mode: relevance or newest
            entities: Candidate entities of this kind

        Returns:
            Full ordered list of matches (no capping)
        """
        terms = split_terms(query)
        if not terms:
            return []

        kind_filters = self.kind_filters(filters)
        matches = [
            match for match in self.scorer.score_many(entities, terms)
            if self.matches_filters(match.entity, kind_filters)
        ]

        return self.sort(matches, sort_mode)


class PersonHandler(EntityKindHandler):
    kind = EntityKind.PERSON
    filters_model = PersonFilters

    def matches_filters(self, entity: PersonEntity, filters: PersonFilters) -> bool:
        if filters.role is not None and entity.role != filters.role:
            return False
        if filters.min_followers is not None and entity.followers < filters.min_followers:
            return False
        if filters.verified_only and not entity.verified:
            return False
        return True

    def popularity(self, entity: PersonEntity) -> float:
        return entity.followers


class WorkHandler(EntityKindHandler):
    kind = EntityKind.WORK
    filters_model = WorkFilters

    def matches_filters(self, entity: WorkEntity, filters: WorkFilters) -> bool:
        if filters.work_type is not None and entity.work_type != filters.work_type:
            return False
        if filters.status is not None and entity.status != filters.status:
            return False
        if filters.year_from is not None and (entity.year is None or entity.year < filters.year_from):
            return False
        if filters.year_to is not None and (entity.year is None or entity.year > filters.year_to):
            return False
        if not _labels_intersect(filters.genres, entity.genres):
            return False
        if filters.min_rating is not None and entity.rating < filters.min_rating:
            return False
        return True

    def popularity(self, entity: WorkEntity) -> float:
        return entity.rating


class PostHandler(EntityKindHandler):
    kind = EntityKind.POST
    filters_model = PostFilters

    def matches_filters(self, entity: PostEntity, filters: PostFilters) -> bool:
        if filters.post_type is not None and entity.post_type != filters.post_type:
            return False
        if not _labels_intersect(filters.tags, entity.tags):
            return False
        if filters.hide_spoilers and entity.has_spoiler:
            return False
        if filters.min_reactions is not None and entity.reactions < filters.min_reactions:
            return False
        return True

    def popularity(self, entity: PostEntity) -> float:
        return entity.reactions

    def recency(self, entity: PostEntity) -> float:
        return max(entity.created_at.timestamp(), entity.updated_at.timestamp())


class GroupHandler(EntityKindHandler):
    kind = EntityKind.GROUP
    filters_model = GroupFilters

    def matches_filters(self, entity: GroupEntity, filters: GroupFilters) -> bool:
        if filters.min_members is not None and entity.members < filters.min_members:
            return False
        if filters.official_only and not entity.is_official:
            return False
        if not _same_label(filters.region, entity.region):
            return False
        return True

    def popularity(self, entity: GroupEntity) -> float:
        return entity.members


class OrganizationHandler(EntityKindHandler):
    kind = EntityKind.ORGANIZATION
    filters_model = OrganizationFilters

    def matches_filters(self, entity: OrganizationEntity, filters: OrganizationFilters) -> bool:
        if not _same_label(filters.country, entity.country):
            return False
        if filters.verified_only and not entity.verified:
            return False
        if filters.min_works is not None and entity.works_count < filters.min_works:
            return False
        return True

    def popularity(self, entity: OrganizationEntity) -> float:
        return entity.works_count


HANDLERS: Dict[EntityKind, EntityKindHandler] = {
    EntityKind.PERSON: PersonHandler(),
    EntityKind.WORK: WorkHandler(),
    EntityKind.POST: PostHandler(),
    EntityKind.GROUP: GroupHandler(),
    EntityKind.ORGANIZATION: OrganizationHandler(),
}


def _search_kind(kind: EntityKind, query, filters, sort_mode, entities) -> List[Any]:
    return [match.entity for match in HANDLERS[kind].search(query, filters, sort_mode, entities)]


def search_people(query: str, filters, sort_mode: SortMode, entities: Iterable[PersonEntity]) -> List[PersonEntity]:
    return _search_kind(EntityKind.PERSON, query, filters, sort_mode, entities)


def search_works(query: str, filters, sort_mode: SortMode, entities: Iterable[WorkEntity]) -> List[WorkEntity]:
    return _search_kind(EntityKind.WORK, query, filters, sort_mode, entities)


def search_posts(query: str, filters, sort_mode: SortMode, entities: Iterable[PostEntity]) -> List[PostEntity]:
    return _search_kind(EntityKind.POST, query, filters, sort_mode, entities)


def search_groups(query: str, filters, sort_mode: SortMode, entities: Iterable[GroupEntity]) -> List[GroupEntity]:
    return _search_kind(EntityKind.GROUP, query, filters, sort_mode, entities)


def search_organizations(
    query: str, filters, sort_mode: SortMode, entities: Iterable[OrganizationEntity]
) -> List[OrganizationEntity]:
    return _search_kind(EntityKind.ORGANIZATION, query, filters, sort_mode, entities)
