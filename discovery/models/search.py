import math
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Type

from pydantic import BaseModel, ConfigDict, Field, field_validator


class EntityKind(str, Enum):
    """Searchable entity kinds"""
    PERSON = "person"
    WORK = "work"
    POST = "post"
    GROUP = "group"
    ORGANIZATION = "organization"


class SortMode(str, Enum):
    RELEVANCE = "relevance"
    NEWEST = "newest"


class SearchScope(str, Enum):
    """Kind filter of a search: everything or a single entity kind"""
    ALL = "all"
    PERSON = "person"
    WORK = "work"
    POST = "post"
    GROUP = "group"
    ORGANIZATION = "organization"

    def includes(self, kind: EntityKind) -> bool:
        return self is SearchScope.ALL or self.value == kind.value


class PersonRole(str, Enum):
    USER = "user"
    CREATOR = "creator"
    INFLUENCER = "influencer"


class WorkType(str, Enum):
    ANIME = "anime"
    MANGA = "manga"
    COMIC = "comic"


class WorkStatus(str, Enum):
    ONGOING = "ongoing"
    COMPLETED = "completed"
    HIATUS = "hiatus"


class PostType(str, Enum):
    POST = "post"
    REVIEW = "review"
    ARTICLE = "article"


# Filter values that mean "no constraint"
ANY_VALUES = {"any", "all", ""}


def is_unset(value: Any) -> bool:
    if value is None:
        return True
    return isinstance(value, str) and value.strip().lower() in ANY_VALUES


def coerce_enum(enum_cls: Type[Enum], value: Any) -> Optional[Enum]:
    """Map a raw filter value onto an enum member, or None when unknown"""
    if is_unset(value):
        return None
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(str(value).strip().lower())
    except ValueError:
        return None


def coerce_threshold(value: Any, maximum: Optional[float] = None) -> Optional[float]:
    """Parse a non-negative numeric threshold, None when invalid or out of range"""
    if is_unset(value) or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number) or number < 0:
        return None
    if maximum is not None and number > maximum:
        return None
    return number


def coerce_flag(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value == 1
    if isinstance(value, str):
        return value.strip().lower() in {"true", "1", "yes", "on"}
    return False


def coerce_labels(value: Any) -> List[str]:
    """Normalize an any-of filter into a list of labels"""
    if is_unset(value):
        return []
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, (list, tuple, set, frozenset)):
        return []
    return [str(item).strip() for item in value if not is_unset(item) and str(item).strip()]


def _as_int(number: Optional[float]) -> Optional[int]:
    return None if number is None else int(number)


class PersonFilters(BaseModel):
    model_config = ConfigDict(frozen=True)

    role: Optional[PersonRole] = None
    min_followers: Optional[int] = None
    verified_only: bool = False

    @field_validator("role", mode="before")
    @classmethod
    def validate_role(cls, v):
        return coerce_enum(PersonRole, v)

    @field_validator("min_followers", mode="before")
    @classmethod
    def validate_min_followers(cls, v):
        return _as_int(coerce_threshold(v))

    @field_validator("verified_only", mode="before")
    @classmethod
    def validate_verified_only(cls, v):
        return coerce_flag(v)


class WorkFilters(BaseModel):
    model_config = ConfigDict(frozen=True)

    work_type: Optional[WorkType] = None
    status: Optional[WorkStatus] = None
    year_from: Optional[int] = None
    year_to: Optional[int] = None
    genres: List[str] = []
    min_rating: Optional[float] = None

    @field_validator("work_type", mode="before")
    @classmethod
    def validate_work_type(cls, v):
        return coerce_enum(WorkType, v)

    @field_validator("status", mode="before")
    @classmethod
    def validate_status(cls, v):
        return coerce_enum(WorkStatus, v)

    @field_validator("year_from", "year_to", mode="before")
    @classmethod
    def validate_year(cls, v):
        return _as_int(coerce_threshold(v, maximum=9999))

    @field_validator("genres", mode="before")
    @classmethod
    def validate_genres(cls, v):
        return coerce_labels(v)

    @field_validator("min_rating", mode="before")
    @classmethod
    def validate_min_rating(cls, v):
        return coerce_threshold(v, maximum=10)


class PostFilters(BaseModel):
    model_config = ConfigDict(frozen=True)

    post_type: Optional[PostType] = None
    tags: List[str] = []
    hide_spoilers: bool = False
    min_reactions: Optional[int] = None

    @field_validator("post_type", mode="before")
    @classmethod
    def validate_post_type(cls, v):
        return coerce_enum(PostType, v)

    @field_validator("tags", mode="before")
    @classmethod
    def validate_tags(cls, v):
        return coerce_labels(v)

    @field_validator("hide_spoilers", mode="before")
    @classmethod
    def validate_hide_spoilers(cls, v):
        return coerce_flag(v)

    @field_validator("min_reactions", mode="before")
    @classmethod
    def validate_min_reactions(cls, v):
        return _as_int(coerce_threshold(v))


class GroupFilters(BaseModel):
    model_config = ConfigDict(frozen=True)

    min_members: Optional[int] = None
    official_only: bool = False
    region: Optional[str] = None

    @field_validator("min_members", mode="before")
    @classmethod
    def validate_min_members(cls, v):
        return _as_int(coerce_threshold(v))

    @field_validator("official_only", mode="before")
    @classmethod
    def validate_official_only(cls, v):
        return coerce_flag(v)

    @field_validator("region", mode="before")
    @classmethod
    def validate_region(cls, v):
        return None if is_unset(v) else str(v).strip()


class OrganizationFilters(BaseModel):
    model_config = ConfigDict(frozen=True)

    country: Optional[str] = None
    verified_only: bool = False
    min_works: Optional[int] = None

    @field_validator("country", mode="before")
    @classmethod
    def validate_country(cls, v):
        return None if is_unset(v) else str(v).strip()

    @field_validator("verified_only", mode="before")
    @classmethod
    def validate_verified_only(cls, v):
        return coerce_flag(v)

    @field_validator("min_works", mode="before")
    @classmethod
    def validate_min_works(cls, v):
        return _as_int(coerce_threshold(v))


class SearchFilters(BaseModel):
    """Filter state of a search, one block per entity kind"""

    model_config = ConfigDict(frozen=True)

    kind: SearchScope = SearchScope.ALL
    people: PersonFilters = Field(default_factory=PersonFilters)
    works: WorkFilters = Field(default_factory=WorkFilters)
    posts: PostFilters = Field(default_factory=PostFilters)
    groups: GroupFilters = Field(default_factory=GroupFilters)
    organizations: OrganizationFilters = Field(default_factory=OrganizationFilters)

    @field_validator("kind", mode="before")
    @classmethod
    def validate_kind(cls, v):
        return coerce_enum(SearchScope, v) or SearchScope.ALL

    @field_validator("people", "works", "posts", "groups", "organizations", mode="before")
    @classmethod
    def validate_block(cls, v):
        # A malformed block behaves like an unfiltered one
        if v is None or not isinstance(v, (dict, BaseModel)):
            return {}
        return v


class SearchRequest(BaseModel):
    query: str = ""
    filters: SearchFilters = Field(default_factory=SearchFilters)
    sort: SortMode = SortMode.RELEVANCE

    @field_validator("sort", mode="before")
    @classmethod
    def validate_sort(cls, v):
        return coerce_enum(SortMode, v) or SortMode.RELEVANCE

    @field_validator("query", mode="before")
    @classmethod
    def validate_query(cls, v):
        return "" if v is None else str(v)


class HistoryEntry(BaseModel):
    """One executed search, most-recent-first in the history log"""
    id: str
    query: str
    filters: SearchFilters = Field(default_factory=SearchFilters)
    sort: SortMode = SortMode.RELEVANCE
    executed_at: datetime
    result_counts: Dict[str, int] = {}


class SavedQuery(BaseModel):
    """Named bookmark of a search"""
    id: str
    name: str
    query: str
    kind: SearchScope = SearchScope.ALL
    filters: SearchFilters = Field(default_factory=SearchFilters)
    sort: SortMode = SortMode.RELEVANCE
    created_at: datetime


class SuggestionSource(str, Enum):
    HISTORY = "history"
    SAVED = "saved"
    TRENDING = "trending"
    ENTITY = "entity"
    HINT = "hint"


class SuggestionItem(BaseModel):
    """Type-ahead suggestion; history/saved items carry their search snapshot"""
    label: str
    source: SuggestionSource
    query: Optional[str] = None
    filters: Optional[SearchFilters] = None
    sort: Optional[SortMode] = None


class ToggleSavedRequest(BaseModel):
    query: str
    filters: SearchFilters = Field(default_factory=SearchFilters)
    sort: SortMode = SortMode.RELEVANCE
    name: Optional[str] = None


class RenameSavedRequest(BaseModel):
    name: str


class ToggleSavedResponse(BaseModel):
    saved: bool
    entry: Optional[SavedQuery] = None
