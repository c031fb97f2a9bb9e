"""
Repository and service wiring for the Social Graph API
"""
import logging
from functools import lru_cache

from libs.social_graph.repository import InMemoryRepository, SocialRepository, SqlAlchemyRepository
from libs.social_graph.service import GraphAnalyticsService
from . import config

logger = logging.getLogger("apps.api.database")


def get_repository() -> SocialRepository:
    """
    Build the repository the API reads from.

    Returns:
        SocialRepository: SQL-backed repository, or an empty in-memory one when
        USE_MEMORY_REPOSITORY=1
    """
    if config.USE_MEMORY_REPOSITORY:
        logger.info("Using in-memory repository")
        return InMemoryRepository()

    from libs.storage.db import SessionLocal, init_db

    if init_db():
        logger.info("Initialized social graph tables (SQLite fallback)")
    return SqlAlchemyRepository(SessionLocal)


@lru_cache(maxsize=1)
def get_graph_service() -> GraphAnalyticsService:
    """FastAPI dependency returning the process-wide analytics service"""
    return GraphAnalyticsService(get_repository(), cache_enabled=config.GRAPH_CACHE_ENABLED)
