"""
Search configuration settings
"""
import os


class SearchConfig:
    """Configuration class for search, suggestions and leaderboards"""

    # History / saved queries
    HISTORY_CAPACITY = int(os.getenv("SEARCH_HISTORY_CAPACITY", "10"))

    # Suggestions
    SUGGESTION_LIMIT = int(os.getenv("SUGGESTION_LIMIT", "8"))
    RECENT_SUGGESTIONS = int(os.getenv("RECENT_SUGGESTIONS", "5"))

    # Async execution
    EXECUTION_TIMEOUT = float(os.getenv("SEARCH_EXECUTION_TIMEOUT", "5.0"))  # seconds
    SIMULATED_LATENCY = float(os.getenv("SEARCH_SIMULATED_LATENCY", "0.0"))  # seconds

    # Leaderboards
    LEADERBOARD_POOL_SIZE = int(os.getenv("LEADERBOARD_POOL_SIZE", "100"))
