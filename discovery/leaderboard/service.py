"""
Leaderboard service
Generates boards on demand and caches them under the selector hash
"""

import logging
from typing import List, Optional

from pydantic import ValidationError

from ..cache.manager import CacheManager
from ..models.leaderboard import LeaderboardSelector, RankItem
from ..search.config import SearchConfig
from .generator import generate_leaderboard, resolve_selector

logger = logging.getLogger(__name__)


class LeaderboardService:
    """Serves generated leaderboards, reusing cached boards when available"""

    def __init__(self, cache_manager: Optional[CacheManager] = None, pool_size: int = SearchConfig.LEADERBOARD_POOL_SIZE):
        self.cache_manager = cache_manager or CacheManager(None)
        self.pool_size = pool_size

    def get_leaderboard(self, selector: LeaderboardSelector) -> List[RankItem]:
        selector = resolve_selector(selector)
        seed_key = selector.seed_key()

        cached = self.cache_manager.get_cached_leaderboard(seed_key)
        if isinstance(cached, dict) and isinstance(cached.get("items"), list):
            try:
                items = [RankItem.model_validate(item) for item in cached["items"]]
                logger.debug(f"Leaderboard cache hit: {seed_key}")
                return items
            except ValidationError as e:
                logger.warning(f"Discarding malformed cached leaderboard '{seed_key}': {e.error_count()} errors")

        items = generate_leaderboard(selector, pool_size=self.pool_size)
        self.cache_manager.cache_leaderboard(seed_key, [item.model_dump(mode="json") for item in items])
        return items
