import logging

from sqlalchemy import create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.pool import StaticPool
from libs.common.config import POSTGRES_DSN

logger = logging.getLogger(__name__)

# Try to use the configured Postgres DSN; if the DB driver isn't available
# or Postgres isn't reachable (e.g. local test env), fall back to SQLite
# in-memory so the API and tests run without an external DB.
engine = None
try:
	engine = create_engine(POSTGRES_DSN, pool_pre_ping=True, future=True)
	with engine.connect():
		pass
except (SQLAlchemyError, ImportError) as e:
	logger.info("Database at configured DSN unavailable (%s); using SQLite in-memory fallback", e.__class__.__name__)
	engine = None

if engine is None:
	# StaticPool + check_same_thread=False keeps the in-memory database alive
	# across connections and threads (FastAPI runs sync handlers in a pool).
	engine = create_engine(
		"sqlite:///:memory:",
		connect_args={"check_same_thread": False},
		poolclass=StaticPool,
		future=True,
	)

SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)
Base = declarative_base()


def init_db(force: bool = False) -> bool:
	"""Create all tables when using the SQLite fallback.

	By default this only runs when the engine is SQLite (i.e., the Postgres
	connection wasn't available). Pass force=True to run unconditionally.
	"""
	# Importing the model module registers its tables on Base
	import libs.social_graph.db_models  # noqa: F401

	is_sqlite = engine.url.get_backend_name() == "sqlite"
	if is_sqlite or force:
		Base.metadata.create_all(engine)
		return True
	return False
