"""
Search-related data models for the discovery engine
Entities are immutable and carry their searchable text precomputed at ingestion
"""

from datetime import datetime
from typing import Annotated, Any, ClassVar, Dict, List, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

from ..models.search import (
    EntityKind,
    PersonRole,
    PostType,
    SearchScope,
    SortMode,
    WorkStatus,
    WorkType,
)
from .normalizer import build_search_text


class BaseEntity(BaseModel):
    """Common shape of every searchable entity"""

    model_config = ConfigDict(frozen=True)

    # Fields concatenated into search_text when it is not supplied
    SEARCH_FIELDS: ClassVar[Tuple[str, ...]] = ()

    id: str
    updated_at: datetime
    search_text: str = ""

    @model_validator(mode="before")
    @classmethod
    def _precompute_search_text(cls, data: Any) -> Any:
        if isinstance(data, dict) and not data.get("search_text"):
            data = dict(data)
            data["search_text"] = build_search_text(
                *(data.get(field) for field in cls.SEARCH_FIELDS)
            )
        return data


class PersonEntity(BaseEntity):
    SEARCH_FIELDS: ClassVar[Tuple[str, ...]] = ("username", "display_name", "bio", "role")

    kind: Literal["person"] = "person"
    username: str
    display_name: str
    bio: str = ""
    role: PersonRole = PersonRole.USER
    verified: bool = False
    followers: int = 0
    avatar_url: Optional[str] = None


class WorkEntity(BaseEntity):
    SEARCH_FIELDS: ClassVar[Tuple[str, ...]] = ("title", "work_type", "studio", "year", "genres")

    kind: Literal["work"] = "work"
    title: str
    work_type: WorkType
    year: Optional[int] = None
    studio: Optional[str] = None
    status: Optional[WorkStatus] = None
    rating: float = 0.0
    genres: Tuple[str, ...] = ()
    cover_url: Optional[str] = None


class PostEntity(BaseEntity):
    SEARCH_FIELDS: ClassVar[Tuple[str, ...]] = ("title", "excerpt", "tags", "post_type")

    kind: Literal["post"] = "post"
    title: str
    excerpt: str = ""
    author_id: str
    post_type: PostType = PostType.POST
    created_at: datetime
    reactions: int = 0
    comments: int = 0
    tags: Tuple[str, ...] = ()
    has_spoiler: bool = False


class GroupEntity(BaseEntity):
    SEARCH_FIELDS: ClassVar[Tuple[str, ...]] = ("name", "description", "region")

    kind: Literal["group"] = "group"
    name: str
    description: str = ""
    members: int = 0
    posts_per_day: int = 0
    is_official: bool = False
    region: Optional[str] = None
    banner_url: Optional[str] = None


class OrganizationEntity(BaseEntity):
    SEARCH_FIELDS: ClassVar[Tuple[str, ...]] = ("name", "country")

    kind: Literal["organization"] = "organization"
    name: str
    country: str = ""
    verified: bool = False
    works_count: int = 0
    logo_url: Optional[str] = None


Entity = Annotated[
    Union[PersonEntity, WorkEntity, PostEntity, GroupEntity, OrganizationEntity],
    Field(discriminator="kind"),
]


class ScoredMatch(BaseModel):
    """An entity paired with its relevance score (0 means excluded)"""

    model_config = ConfigDict(frozen=True)

    entity: Any
    score: int = Field(ge=0)


class TopMatch(BaseModel):
    """Single best match selected across kinds"""
    kind: EntityKind
    entity: Entity
    score: int


class SearchResults(BaseModel):
    """Snapshot of one search execution"""

    model_config = ConfigDict(frozen=True)

    query: str
    took_ms: int
    total: int
    people: List[PersonEntity] = []
    works: List[WorkEntity] = []
    posts: List[PostEntity] = []
    groups: List[GroupEntity] = []
    organizations: List[OrganizationEntity] = []
    top_match: Optional[TopMatch] = None

    def results_for(self, kind: EntityKind) -> List[Any]:
        return getattr(self, RESULT_FIELDS[kind])

    def counts(self) -> Dict[str, int]:
        """Per-kind result counts"""
        return {kind.value: len(self.results_for(kind)) for kind in EntityKind}


RESULT_FIELDS: Dict[EntityKind, str] = {
    EntityKind.PERSON: "people",
    EntityKind.WORK: "works",
    EntityKind.POST: "posts",
    EntityKind.GROUP: "groups",
    EntityKind.ORGANIZATION: "organizations",
}
