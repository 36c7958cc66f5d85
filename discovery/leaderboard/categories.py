"""
Leaderboard category configuration
Metrics, filter options and per-category item attributes
"""

from typing import Any, Callable, Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict

from ..models.leaderboard import RankCategory, RankMetric
from ..models.search import is_unset
from .random import Mulberry32, pick

TITLE_ATOMS_AR = ("أسطورة", "شظايا", "ليلة", "نار", "قمر", "ظلال", "عاصفة", "ومضة", "نجم", "بوابة")
TITLE_ATOMS_EN = ("Legend", "Shards", "Night", "Ember", "Moon", "Shadows", "Storm", "Spark", "Star", "Gate")
TAGS_POOL = ("أكشن", "خيال", "دراما", "غموض", "رومانسي", "قوى خارقة", "مغامرات", "نفسي", "كوميدي", "ملحمي")

STUDIOS = ("MAPPA-ish", "Kyoto-ish", "Bones-ish", "Wit-ish", "Clover-ish")
MAGAZINES = ("Jump-ish", "Young-ish", "Ultra-ish", "Edge-ish")
ORIGINS = ("Fanaara", "Shonen", "Seinen")

AttributeGenerator = Callable[[Mulberry32, int], Dict[str, Any]]


class CategoryConfig(BaseModel):
    """How one leaderboard category is generated and filtered"""

    model_config = ConfigDict(frozen=True)

    category: RankCategory
    href_prefix: str
    default_metric: RankMetric
    metrics: Tuple[RankMetric, ...]
    filter_a_attribute: str
    filter_a_options: Tuple[str, ...]
    filter_b_attribute: str
    filter_b_options: Tuple[str, ...]
    generate_attributes: AttributeGenerator

    def resolve_metric(self, metric: Optional[RankMetric]) -> RankMetric:
        """Metrics this category does not offer fall back to its default"""
        if metric in self.metrics:
            return metric
        return self.default_metric

    def resolve_filter_a(self, value: Optional[str]) -> str:
        return _resolve_option(self.filter_a_options, value)

    def resolve_filter_b(self, value: Optional[str]) -> str:
        return _resolve_option(self.filter_b_options, value)

    def href_for(self, idx: int) -> str:
        return f"{self.href_prefix}/{idx}"


def _resolve_option(options: Tuple[str, ...], value: Optional[str]) -> str:
    """Canonical option id, or "all" for unset and unknown values"""
    if is_unset(value):
        return "all"
    wanted = str(value).strip().lower()
    for option in options:
        if option.lower() == wanted:
            return option
    return "all"


def _anime_attributes(rng: Mulberry32, idx: int) -> Dict[str, Any]:
    fmt = pick(rng, ("TV", "Movie", "ONA", "Special"))
    status = pick(rng, ("Airing", "Finished"))
    episodes = 1 if fmt == "Movie" else rng.randint_below(24) + 8
    return {"format": fmt, "status": status, "episodes": episodes, "studio": pick(rng, STUDIOS)}


def _manga_attributes(rng: Mulberry32, idx: int) -> Dict[str, Any]:
    fmt = pick(rng, ("Manga", "Manhwa", "Novel", "One-shot"))
    status = pick(rng, ("Publishing", "Finished"))
    volumes = 1 if fmt == "One-shot" else rng.randint_below(22) + 2
    return {"format": fmt, "status": status, "volumes": volumes, "magazine": pick(rng, MAGAZINES)}


def _character_attributes(rng: Mulberry32, idx: int) -> Dict[str, Any]:
    role = pick(rng, ("Hero", "Villain", "Support"))
    return {"role": role, "origin": pick(rng, ORIGINS)}


def _studio_attributes(rng: Mulberry32, idx: int) -> Dict[str, Any]:
    region = pick(rng, ("JP", "KR", "US"))
    return {"region": region, "known_for": pick(rng, ("Action", "Drama", "Fantasy"))}


def season_for_episode(number: int) -> str:
    if number <= 8:
        return "S1"
    if number <= 16:
        return "S2"
    return "S3"


def level_bucket(level: int) -> str:
    if level <= 20:
        return "1-20"
    if level <= 50:
        return "21-50"
    return "51+"


def _episode_attributes(rng: Mulberry32, idx: int) -> Dict[str, Any]:
    episode_type = pick(rng, ("Episode", "Chapter"))
    series_title = f"{pick(rng, TITLE_ATOMS_AR)} {pick(rng, TITLE_ATOMS_AR)}"
    number = rng.randint_below(24) + 1
    return {
        "type": episode_type,
        "series_title": series_title,
        "number": number,
        "season": season_for_episode(number),
    }


def _user_attributes(rng: Mulberry32, idx: int) -> Dict[str, Any]:
    badge = pick(rng, ("Creator", "Fan", "Moderator"))
    level = rng.randint_below(70) + 1
    return {
        "badge": badge,
        "handle": f"@nakama_{idx}",
        "level": level,
        "level_bucket": level_bucket(level),
    }


CATEGORY_CONFIGS: Dict[RankCategory, CategoryConfig] = {
    RankCategory.ANIME: CategoryConfig(
        category=RankCategory.ANIME,
        href_prefix="/anime",
        default_metric=RankMetric.SCORE,
        metrics=(RankMetric.SCORE, RankMetric.HYPE, RankMetric.SAVES, RankMetric.DISCUSSED),
        filter_a_attribute="format",
        filter_a_options=("TV", "Movie", "ONA", "Special"),
        filter_b_attribute="status",
        filter_b_options=("Airing", "Finished"),
        generate_attributes=_anime_attributes,
    ),
    RankCategory.MANGA: CategoryConfig(
        category=RankCategory.MANGA,
        href_prefix="/manga",
        default_metric=RankMetric.SCORE,
        metrics=(RankMetric.SCORE, RankMetric.SAVES, RankMetric.DISCUSSED, RankMetric.HYPE),
        filter_a_attribute="format",
        filter_a_options=("Manga", "Manhwa", "Novel", "One-shot"),
        filter_b_attribute="status",
        filter_b_options=("Publishing", "Finished"),
        generate_attributes=_manga_attributes,
    ),
    RankCategory.CHARACTER: CategoryConfig(
        category=RankCategory.CHARACTER,
        href_prefix="/character",
        default_metric=RankMetric.FAVORITES,
        metrics=(RankMetric.FAVORITES, RankMetric.HYPE, RankMetric.DISCUSSED),
        filter_a_attribute="role",
        filter_a_options=("Hero", "Villain", "Support"),
        filter_b_attribute="origin",
        filter_b_options=ORIGINS,
        generate_attributes=_character_attributes,
    ),
    RankCategory.STUDIO: CategoryConfig(
        category=RankCategory.STUDIO,
        href_prefix="/studio",
        default_metric=RankMetric.FOLLOWERS,
        metrics=(RankMetric.FOLLOWERS, RankMetric.OUTPUT, RankMetric.SCORE),
        filter_a_attribute="region",
        filter_a_options=("JP", "KR", "US"),
        filter_b_attribute="known_for",
        filter_b_options=("Action", "Drama", "Fantasy"),
        generate_attributes=_studio_attributes,
    ),
    RankCategory.EPISODE: CategoryConfig(
        category=RankCategory.EPISODE,
        href_prefix="/episodes",
        default_metric=RankMetric.REACTIONS,
        metrics=(RankMetric.REACTIONS, RankMetric.DISCUSSED, RankMetric.HYPE),
        filter_a_attribute="type",
        filter_a_options=("Episode", "Chapter"),
        filter_b_attribute="season",
        filter_b_options=("S1", "S2", "S3"),
        generate_attributes=_episode_attributes,
    ),
    RankCategory.USER: CategoryConfig(
        category=RankCategory.USER,
        href_prefix="/users",
        default_metric=RankMetric.SENKO,
        metrics=(RankMetric.SENKO, RankMetric.ASHBIYA, RankMetric.FOLLOWERS, RankMetric.DISCUSSED),
        filter_a_attribute="badge",
        filter_a_options=("Creator", "Fan", "Moderator"),
        filter_b_attribute="level_bucket",
        filter_b_options=("1-20", "21-50", "51+"),
        generate_attributes=_user_attributes,
    ),
}


def get_category_config(category: RankCategory) -> CategoryConfig:
    return CATEGORY_CONFIGS[RankCategory(category)]
