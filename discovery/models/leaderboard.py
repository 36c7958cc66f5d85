from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, field_validator

from .search import coerce_enum, is_unset


class RankCategory(str, Enum):
    ANIME = "anime"
    MANGA = "manga"
    CHARACTER = "character"
    STUDIO = "studio"
    EPISODE = "episode"
    USER = "user"


class TimeRange(str, Enum):
    DAY = "24h"
    WEEK = "week"
    MONTH = "month"
    ALL = "all"


class RankSort(str, Enum):
    TOP = "top"
    WORST = "worst"
    RISING = "rising"
    FALLING = "falling"


class RankMetric(str, Enum):
    SCORE = "score"
    HYPE = "hype"
    SAVES = "saves"
    DISCUSSED = "discussed"
    FAVORITES = "favorites"
    FOLLOWERS = "followers"
    OUTPUT = "output"
    REACTIONS = "reactions"
    SENKO = "senko"
    ASHBIYA = "ashbiya"


class LeaderboardSelector(BaseModel):
    """Composite key that fully determines one generated leaderboard"""

    model_config = ConfigDict(frozen=True)

    category: RankCategory = RankCategory.ANIME
    metric: Optional[RankMetric] = None
    time_range: TimeRange = TimeRange.DAY
    sort: RankSort = RankSort.TOP
    filter_a: str = "all"
    filter_b: str = "all"

    @field_validator("category", mode="before")
    @classmethod
    def validate_category(cls, v):
        return coerce_enum(RankCategory, v) or RankCategory.ANIME

    @field_validator("metric", mode="before")
    @classmethod
    def validate_metric(cls, v):
        return coerce_enum(RankMetric, v)

    @field_validator("time_range", mode="before")
    @classmethod
    def validate_time_range(cls, v):
        return coerce_enum(TimeRange, v) or TimeRange.DAY

    @field_validator("sort", mode="before")
    @classmethod
    def validate_sort(cls, v):
        return coerce_enum(RankSort, v) or RankSort.TOP

    @field_validator("filter_a", "filter_b", mode="before")
    @classmethod
    def validate_filter(cls, v):
        return "all" if is_unset(v) else str(v).strip()

    def seed_key(self) -> str:
        metric = self.metric.value if self.metric else ""
        return "|".join(
            [self.category.value, metric, self.time_range.value, self.sort.value, self.filter_a, self.filter_b]
        )


class RankItem(BaseModel):
    """One leaderboard row; rank and prev_rank are 1-based"""

    model_config = ConfigDict(frozen=True)

    id: str
    category: RankCategory
    href: str
    title: str
    title_en: str
    tags: List[str] = []
    attributes: Dict[str, Any] = {}
    metric: RankMetric
    metric_value: float
    trend: int = 0
    rank: int = 0
    prev_rank: int = 0
