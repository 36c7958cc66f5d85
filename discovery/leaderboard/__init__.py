"""
Leaderboard module for Fanaara Discovery
Deterministic, seeded generation of ranked boards per selector
"""

from .random import Mulberry32, hash_string, pick
from .categories import CATEGORY_CONFIGS, CategoryConfig, get_category_config
from .generator import generate_leaderboard, resolve_selector
from .service import LeaderboardService

__all__ = [
    "Mulberry32",
    "hash_string",
    "pick",
    "CATEGORY_CONFIGS",
    "CategoryConfig",
    "get_category_config",
    "generate_leaderboard",
    "resolve_selector",
    "LeaderboardService"
]
