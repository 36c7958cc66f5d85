"""
Shared FastAPI dependencies for the discovery routes
"""
import logging
from typing import Optional

from fastapi import Depends

from ..cache.manager import CacheManager
from ..database.connection import get_redis
from ..database.seeder import build_data_source
from ..leaderboard.service import LeaderboardService
from ..search.data_source import DataSource
from ..search.engine import SearchEngine
from ..services.history import SearchHistoryStore

logger = logging.getLogger(__name__)

_data_source: Optional[DataSource] = None
_history_store: Optional[SearchHistoryStore] = None


def get_data_source() -> DataSource:
    """Seed dataset, built once per process"""
    global _data_source
    if _data_source is None:
        _data_source = build_data_source()
    return _data_source


def get_cache_manager() -> CacheManager:
    return CacheManager(get_redis())


def get_search_engine(data_source: DataSource = Depends(get_data_source)) -> SearchEngine:
    return SearchEngine(data_source)


def get_history_store(cache_manager: CacheManager = Depends(get_cache_manager)) -> SearchHistoryStore:
    """Single history store per process; it is the only writer of its records"""
    global _history_store
    if _history_store is None:
        _history_store = SearchHistoryStore(cache_manager)
        _history_store.load()
    return _history_store


def get_leaderboard_service(cache_manager: CacheManager = Depends(get_cache_manager)) -> LeaderboardService:
    return LeaderboardService(cache_manager)
