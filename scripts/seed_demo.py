#!/usr/bin/env python3
"""Seed the configured database with the demo social network.

Uses POSTGRES_* / DATABASE_URL from the environment; with no reachable
database the SQLite in-memory fallback is seeded (useful only for smoke runs).
"""
import logging
import sys

from libs.social_graph.demo import seed, ACCEPTED_PAIRS, PENDING_PAIRS
from libs.social_graph.errors import SocialGraphError
from libs.social_graph.repository import SqlAlchemyRepository
from libs.storage.db import SessionLocal, init_db

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("scripts.seed_demo")

init_db(force=True)
try:
    users = seed(SqlAlchemyRepository(SessionLocal))
except SocialGraphError as e:
    logger.error("Seeding failed: %s", e.message)
    sys.exit(1)

logger.info("Created %d users, %d accepted and %d pending relationships",
            len(users), len(ACCEPTED_PAIRS), len(PENDING_PAIRS))
sys.exit(0)
