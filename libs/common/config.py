import os


def _env_bool(var: str, default: str = "0") -> bool:
    return os.getenv(var, default).strip().lower() in ("1", "true", "yes", "on")


def _env_int(var: str, default: int) -> int:
    value = os.getenv(var)
    if value is None or value.strip() == "":
        return default
    try:
        return int(value)
    except ValueError:
        raise EnvironmentError(f"Environment variable {var} must be an integer, got {value!r}")


class Config:
    # Database
    POSTGRES_USER = os.getenv("POSTGRES_USER", "socialgraph")
    POSTGRES_PASSWORD = os.getenv("POSTGRES_PASSWORD", "socialgraph")
    POSTGRES_HOST = os.getenv("POSTGRES_HOST", "localhost")
    POSTGRES_PORT = os.getenv("POSTGRES_PORT", "5432")
    POSTGRES_DB = os.getenv("POSTGRES_DB", "socialgraph")
    POSTGRES_DSN = os.getenv(
        "DATABASE_URL",
        f"postgresql+psycopg://{POSTGRES_USER}:{POSTGRES_PASSWORD}"
        f"@{POSTGRES_HOST}:{POSTGRES_PORT}/{POSTGRES_DB}",
    )

    # Graph analytics
    GRAPH_CACHE_ENABLED = _env_bool("GRAPH_CACHE_ENABLED")
    DEFAULT_SUGGESTION_LIMIT = _env_int("DEFAULT_SUGGESTION_LIMIT", 10)
    DEFAULT_CENTRALITY_LIMIT = _env_int("DEFAULT_CENTRALITY_LIMIT", 20)

    # Logging
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


CFG = Config()

# Module-level exports (tests and other modules import these)
POSTGRES_USER = CFG.POSTGRES_USER
POSTGRES_PASSWORD = CFG.POSTGRES_PASSWORD
POSTGRES_HOST = CFG.POSTGRES_HOST
POSTGRES_PORT = CFG.POSTGRES_PORT
POSTGRES_DB = CFG.POSTGRES_DB
POSTGRES_DSN = CFG.POSTGRES_DSN

GRAPH_CACHE_ENABLED = CFG.GRAPH_CACHE_ENABLED
DEFAULT_SUGGESTION_LIMIT = CFG.DEFAULT_SUGGESTION_LIMIT
DEFAULT_CENTRALITY_LIMIT = CFG.DEFAULT_CENTRALITY_LIMIT
LOG_LEVEL = CFG.LOG_LEVEL
