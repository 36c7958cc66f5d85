"""
Deterministic leaderboard generator
The same selector always reproduces the same ordered rows, ranks and previous ranks
"""

import logging
from typing import Any, Dict, List

from ..models.leaderboard import LeaderboardSelector, RankCategory, RankItem, RankMetric, RankSort, TimeRange
from ..search.config import SearchConfig
from .categories import TAGS_POOL, TITLE_ATOMS_AR, TITLE_ATOMS_EN, CategoryConfig, get_category_config
from .random import Mulberry32, pick, round_half_up

logger = logging.getLogger(__name__)

# Largest trend magnitude per window; shorter windows move more
TREND_MAX = {
    TimeRange.DAY: 12,
    TimeRange.WEEK: 9,
    TimeRange.MONTH: 6,
    TimeRange.ALL: 3,
}

# Per-rank step of the windowed metrics
HYPE_STEP = {TimeRange.DAY: 180, TimeRange.WEEK: 120, TimeRange.MONTH: 80, TimeRange.ALL: 40}
SAVES_STEP = {TimeRange.DAY: 70, TimeRange.WEEK: 90, TimeRange.MONTH: 110, TimeRange.ALL: 150}
DISCUSSED_STEP = {TimeRange.DAY: 45, TimeRange.WEEK: 60, TimeRange.MONTH: 85, TimeRange.ALL: 120}


def clamp(value, low, high):
    return min(high, max(low, value))


def resolve_selector(selector: LeaderboardSelector) -> LeaderboardSelector:
    """Fill the default metric and drop filter values the category does not offer"""
    config = get_category_config(selector.category)
    return selector.model_copy(
        update={
            "metric": config.resolve_metric(selector.metric),
            "filter_a": config.resolve_filter_a(selector.filter_a),
            "filter_b": config.resolve_filter_b(selector.filter_b),
        }
    )


def _roll_trend(rng: Mulberry32, trend_max: int) -> int:
    roll = rng.random()
    if roll < 0.55:
        return 0
    if roll < 0.78:
        return round_half_up(rng.random() * (trend_max * 0.5))
    return -round_half_up(rng.random() * trend_max)


def _metric_values(rng: Mulberry32, idx: int, pool_size: int, time_range: TimeRange, trend: int) -> Dict[RankMetric, float]:
    """Every metric for one row; draws happen in a fixed order regardless of the selected metric"""
    steps = pool_size - idx

    score_base = 9.85 - idx * 0.025 + (rng.random() - 0.5) * 0.18
    hype_base = steps * HYPE_STEP[time_range] + rng.random() * 90
    saves_base = steps * SAVES_STEP[time_range] + rng.random() * 120
    discussed_base = steps * DISCUSSED_STEP[time_range] + rng.random() * 70
    favorites_base = steps * 120 + rng.random() * 240
    followers_base = steps * 220 + rng.random() * 500
    output_base = steps * 4 + rng.random() * 8
    reactions_base = steps * 140 + rng.random() * 260
    senko_base = steps * 310 + rng.random() * 900
    ashbiya_base = steps * 260 + rng.random() * 700

    return {
        RankMetric.SCORE: clamp(score_base, 6.5, 9.98),
        RankMetric.HYPE: max(0.0, hype_base + trend * 50),
        RankMetric.SAVES: max(0.0, saves_base + trend * 30),
        RankMetric.DISCUSSED: max(0.0, discussed_base + trend * 24),
        RankMetric.FAVORITES: max(0.0, favorites_base + trend * 20),
        RankMetric.FOLLOWERS: max(0.0, followers_base + trend * 35),
        RankMetric.OUTPUT: max(0.0, output_base + trend * 0.2),
        RankMetric.REACTIONS: max(0.0, reactions_base + trend * 22),
        RankMetric.SENKO: max(0.0, senko_base + trend * 40),
        RankMetric.ASHBIYA: max(0.0, ashbiya_base + trend * 35),
    }


def _build_pool(selector: LeaderboardSelector, config: CategoryConfig, pool_size: int) -> List[Dict[str, Any]]:
    rng = Mulberry32.from_key(selector.seed_key())
    trend_max = TREND_MAX[selector.time_range]

    pool = []
    for idx in range(1, pool_size + 1):
        a = pick(rng, TITLE_ATOMS_AR)
        b = pick(rng, TITLE_ATOMS_AR)
        a_en = pick(rng, TITLE_ATOMS_EN)
        b_en = pick(rng, TITLE_ATOMS_EN)

        tags: List[str] = []
        for _ in range(3):
            tag = pick(rng, TAGS_POOL)
            if tag not in tags:
                tags.append(tag)

        trend = _roll_trend(rng, trend_max)
        values = _metric_values(rng, idx, pool_size, selector.time_range, trend)

        if config.category == RankCategory.USER:
            title = title_en = f"Nakama {idx}"
        else:
            title = f"{a} {b} {idx}"
            title_en = f"{a_en} {b_en} #{idx}"

        pool.append({
            "id": f"{config.category.value}-{idx}",
            "category": config.category,
            "href": config.href_for(idx),
            "title": title,
            "title_en": title_en,
            "tags": tags,
            "attributes": config.generate_attributes(rng, idx),
            "metric": selector.metric,
            "metric_value": values[selector.metric],
            "trend": trend,
        })
    return pool


def _matches_filters(row: Dict[str, Any], selector: LeaderboardSelector, config: CategoryConfig) -> bool:
    attributes = row["attributes"]
    if selector.filter_a != "all" and attributes.get(config.filter_a_attribute) != selector.filter_a:
        return False
    if selector.filter_b != "all" and attributes.get(config.filter_b_attribute) != selector.filter_b:
        return False
    return True


def _sort_rows(rows: List[Dict[str, Any]], sort: RankSort) -> List[Dict[str, Any]]:
    """Stable sort; remaining ties keep pool order"""
    if sort == RankSort.RISING:
        return sorted(rows, key=lambda row: (-row["trend"], -row["metric_value"]))
    if sort == RankSort.FALLING:
        return sorted(rows, key=lambda row: (row["trend"], -row["metric_value"]))
    if sort == RankSort.WORST:
        return sorted(rows, key=lambda row: row["metric_value"])
    return sorted(rows, key=lambda row: -row["metric_value"])


def generate_leaderboard(
    selector: LeaderboardSelector,
    pool_size: int = SearchConfig.LEADERBOARD_POOL_SIZE,
) -> List[RankItem]:
    """
    Generate the ranked rows for a selector

    Args:
        selector: Category, metric, time range, sort and filter values
        pool_size: Number of synthetic rows before filtering

    Returns:
        Rows in rank order with rank and prev_rank assigned
    """
    selector = resolve_selector(selector)
    config = get_category_config(selector.category)

    pool = _build_pool(selector, config, max(0, pool_size))
    rows = _sort_rows([row for row in pool if _matches_filters(row, selector, config)], selector.sort)

    count = len(rows)
    items = []
    for position, row in enumerate(rows, start=1):
        prev_rank = clamp(position + row["trend"], 1, max(1, count))
        items.append(RankItem(rank=position, prev_rank=prev_rank, **row))

    logger.debug(f"Generated leaderboard '{selector.seed_key()}': {count} of {len(pool)} rows")
    return items
