"""
Routes module for Fanaara Discovery
API endpoints for search, suggestions, history, saved queries and leaderboards
"""

from .search import router as search_router
from .ranks import router as ranks_router

__all__ = [
    "search_router",
    "ranks_router"
]
