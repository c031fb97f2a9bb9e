"""
Social Graph API - Main FastAPI application
"""
import logging
from contextlib import asynccontextmanager

from fastapi import APIRouter, Depends, FastAPI, Query
from fastapi.responses import JSONResponse, PlainTextResponse
from prometheus_client import Counter, Gauge, generate_latest, CONTENT_TYPE_LATEST
from sqlalchemy.exc import SQLAlchemyError

from libs.social_graph.errors import SocialGraphError
from libs.social_graph.service import GraphAnalyticsService
from . import config
from .database import get_graph_service
from .exceptions import GraphAPIException, DatabaseError, from_graph_error, error_payload
from .models import (
    CentralityResponse,
    ErrorResponse,
    GraphDataResponse,
    HealthResponse,
    InfluencerResponse,
    PathResponse,
    StatsResponse,
    SuggestionsResponse,
    UserSearchResponse,
)

# Logger
logger = logging.getLogger("apps.api.main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    logging.basicConfig(level=config.LOG_LEVEL)
    logger.info("Starting %s %s (graph cache %s)", config.APP_TITLE, config.APP_VERSION,
                "enabled" if config.GRAPH_CACHE_ENABLED else "disabled")
    yield


# Initialize FastAPI app
app = FastAPI(
    title=config.APP_TITLE,
    version=config.APP_VERSION,
    description="Friendship graph analytics: paths, centrality, components and suggestions",
    lifespan=lifespan,
)

# Prometheus metrics
REQS = Counter("graph_api_requests_total", "Total graph API requests", ["endpoint"])
HEALTH = Gauge("graph_app_health", "Health status")

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


@app.exception_handler(GraphAPIException)
def _graph_api_exception_handler(request, exc: GraphAPIException):
    """Convert GraphAPIException subclasses into JSON HTTP responses."""
    return JSONResponse(status_code=exc.status_code, content=error_payload(exc))


@app.exception_handler(SocialGraphError)
def _social_graph_error_handler(request, exc: SocialGraphError):
    """Library errors (unknown user, bad query) surface as 400/404 responses."""
    api_exc = from_graph_error(exc)
    return JSONResponse(status_code=api_exc.status_code, content=error_payload(api_exc))


@app.exception_handler(SQLAlchemyError)
def _database_error_handler(request, exc: SQLAlchemyError):
    logger.exception("Database operation failed: %s", exc)
    api_exc = DatabaseError("Database operation failed", details={"error_type": exc.__class__.__name__})
    return JSONResponse(status_code=api_exc.status_code, content=error_payload(api_exc))


@app.get("/healthz", response_model=HealthResponse)
def healthz() -> HealthResponse:
    """Health check endpoint"""
    HEALTH.set(1)
    return HealthResponse()


@app.get("/metrics")
def metrics():
    return PlainTextResponse(generate_latest(), media_type=CONTENT_TYPE_LATEST)


# ============================================================================
# GRAPH ANALYTICS ENDPOINTS
# ============================================================================

router = APIRouter(prefix=config.API_PREFIX, responses=ERROR_RESPONSES)


@router.get("/path/{id1}/{id2}", response_model=PathResponse, response_model_exclude_none=True)
def get_shortest_path(id1: str, id2: str, service: GraphAnalyticsService = Depends(get_graph_service)):
    """Get shortest path between two users"""
    REQS.labels("/path").inc()
    result = service.shortest_path(id1, id2)
    if not result["exists"]:
        return {"success": True, "message": "No path exists between these users", "path": result}
    return {"success": True, "path": result}


@router.get("/influencer", response_model=InfluencerResponse)
def get_most_influential_user(service: GraphAnalyticsService = Depends(get_graph_service)):
    """Get the user with the highest degree centrality"""
    REQS.labels("/influencer").inc()
    influencer = service.most_influential()
    if influencer is None:
        return {"success": True, "message": "No users found in the network", "influencer": None}
    return {"success": True, "influencer": influencer}


@router.get("/centrality", response_model=CentralityResponse)
def get_degree_centrality(
    limit: int = Query(config.DEFAULT_CENTRALITY_LIMIT, ge=1, le=config.MAX_QUERY_LIMIT),
    service: GraphAnalyticsService = Depends(get_graph_service),
):
    """Get degree centrality for all active users"""
    REQS.labels("/centrality").inc()
    ranking = service.degree_centrality(limit)
    return {"success": True, **ranking}


@router.get("/stats", response_model=StatsResponse)
def get_network_statistics(service: GraphAnalyticsService = Depends(get_graph_service)):
    """Get network statistics"""
    REQS.labels("/stats").inc()
    return {"success": True, "stats": service.network_stats()}


@router.get("/suggestions/{user_id}", response_model=SuggestionsResponse)
def get_friend_suggestions(
    user_id: str,
    limit: int = Query(config.DEFAULT_SUGGESTION_LIMIT, ge=0, le=config.MAX_QUERY_LIMIT),
    service: GraphAnalyticsService = Depends(get_graph_service),
):
    """Get friend suggestions for a user"""
    REQS.labels("/suggestions").inc()
    suggestions = service.suggest_friends(user_id, limit)
    return {"success": True, "count": len(suggestions), "suggestions": suggestions}


@router.get("/data", response_model=GraphDataResponse)
def get_graph_data(service: GraphAnalyticsService = Depends(get_graph_service)):
    """Get graph data for visualization"""
    REQS.labels("/data").inc()
    return {"success": True, **service.graph_data()}


@router.get("/users/search", response_model=UserSearchResponse)
def search_users(
    q: str = "",
    limit: int = Query(config.DEFAULT_SEARCH_LIMIT, ge=1, le=config.MAX_QUERY_LIMIT),
    service: GraphAnalyticsService = Depends(get_graph_service),
):
    """Search users for graph operations"""
    REQS.labels("/users/search").inc()
    users = service.search_users(q, limit)
    return {"success": True, "count": len(users), "users": users}


app.include_router(router)
