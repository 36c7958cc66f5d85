"""
Entity data sources consumed by the search pipeline
The pipeline only reads from a source; it never mutates entities
"""

import logging
from typing import Dict, Iterable, List, Optional, Protocol, Sequence, Tuple

from .models import (
    EntityKind,
    GroupEntity,
    OrganizationEntity,
    PersonEntity,
    PostEntity,
    WorkEntity,
)

logger = logging.getLogger(__name__)


class DataSource(Protocol):
    """Read-only view over entities, one ordered sequence per kind"""

    def entities(self, kind: EntityKind) -> Sequence: ...

    def suggestion_pool(self) -> List[str]: ...

    def trending(self) -> List[str]: ...


class InMemoryDataSource:
    """Data source backed by immutable in-memory tuples"""

    def __init__(
        self,
        people: Iterable[PersonEntity] = (),
        works: Iterable[WorkEntity] = (),
        posts: Iterable[PostEntity] = (),
        groups: Iterable[GroupEntity] = (),
        organizations: Iterable[OrganizationEntity] = (),
        trending: Iterable[str] = (),
        extra_suggestions: Optional[Iterable[str]] = None,
    ):
        self._entities: Dict[EntityKind, Tuple] = {
            EntityKind.PERSON: tuple(people),
            EntityKind.WORK: tuple(works),
            EntityKind.POST: tuple(posts),
            EntityKind.GROUP: tuple(groups),
            EntityKind.ORGANIZATION: tuple(organizations),
        }
        self._trending: Tuple[str, ...] = tuple(trending)
        self._suggestion_pool = self._build_suggestion_pool(extra_suggestions or ())

        logger.info(
            "In-memory data source ready: "
            + ", ".join(f"{kind.value}={len(items)}" for kind, items in self._entities.items())
        )

    def entities(self, kind: EntityKind) -> Sequence:
        return self._entities.get(EntityKind(kind), ())

    def suggestion_pool(self) -> List[str]:
        return list(self._suggestion_pool)

    def trending(self) -> List[str]:
        return list(self._trending)

    def _build_suggestion_pool(self, extra: Iterable[str]) -> Tuple[str, ...]:
        """Entity labels offered as type-ahead candidates (titles, handles, names)"""
        labels: List[str] = []

        for person in self._entities[EntityKind.PERSON]:
            labels.append(person.username)
            if person.display_name != person.username:
                labels.append(person.display_name)
        for work in self._entities[EntityKind.WORK]:
            labels.append(work.title)
            if work.studio:
                labels.append(work.studio)
        for post in self._entities[EntityKind.POST]:
            labels.extend(post.tags)
        for group in self._entities[EntityKind.GROUP]:
            labels.append(group.name)
        for organization in self._entities[EntityKind.ORGANIZATION]:
            labels.append(organization.name)

        labels.extend(extra)

        # Keep first occurrence order
        seen = set()
        pool = []
        for label in labels:
            if label and label not in seen:
                seen.add(label)
                pool.append(label)
        return tuple(pool)
