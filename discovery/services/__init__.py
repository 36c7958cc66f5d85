"""
Service layer for Fanaara Discovery
History/saved-query persistence and the async execution contract
"""

from .history import SearchHistoryStore
from .execution import (
    ExecutionState,
    ExecutionSnapshot,
    SingleFlightExecutor,
    SearchExecutor,
    LeaderboardExecutor,
)

__all__ = [
    "SearchHistoryStore",
    "ExecutionState",
    "ExecutionSnapshot",
    "SingleFlightExecutor",
    "SearchExecutor",
    "LeaderboardExecutor"
]
