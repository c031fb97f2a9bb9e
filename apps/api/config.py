"""
Configuration constants for the Social Graph API
"""
import os

from libs.common.config import (
    GRAPH_CACHE_ENABLED,
    DEFAULT_SUGGESTION_LIMIT,
    DEFAULT_CENTRALITY_LIMIT,
    LOG_LEVEL,
)

# Application settings
APP_TITLE = "social-graph API"
APP_VERSION = "1.0.0"
API_PREFIX = "/api/graph"

# Query limits
DEFAULT_SEARCH_LIMIT = 10
MAX_QUERY_LIMIT = 100

# Use the in-memory repository instead of the SQL store (local demos)
USE_MEMORY_REPOSITORY = os.getenv("USE_MEMORY_REPOSITORY", "0") == "1"

__all__ = [
    "APP_TITLE",
    "APP_VERSION",
    "API_PREFIX",
    "DEFAULT_SEARCH_LIMIT",
    "MAX_QUERY_LIMIT",
    "USE_MEMORY_REPOSITORY",
    "GRAPH_CACHE_ENABLED",
    "DEFAULT_SUGGESTION_LIMIT",
    "DEFAULT_CENTRALITY_LIMIT",
    "LOG_LEVEL",
]
