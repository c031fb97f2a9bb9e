"""
Pydantic models for request/response validation
"""
from typing import Optional, List, Dict, Any
from pydantic import BaseModel, Field


class UserSummary(BaseModel):
    """User display data joined onto graph results"""
    id: str
    username: str
    firstName: str = ""
    lastName: str = ""
    fullName: str = ""
    avatar: Optional[str] = None
    bio: Optional[str] = None


class PathInfo(BaseModel):
    """Shortest path between two users"""
    exists: bool
    distance: int
    users: List[UserSummary] = Field(default_factory=list)
    connections: Optional[int] = None


class PathResponse(BaseModel):
    success: bool = True
    message: Optional[str] = None
    path: PathInfo


class CentralityEntry(BaseModel):
    """Degree centrality for one user"""
    user: UserSummary
    connections: int = Field(..., ge=0)
    centrality: int = Field(..., ge=0)


class InfluencerResponse(BaseModel):
    success: bool = True
    message: Optional[str] = None
    influencer: Optional[CentralityEntry] = None


class CentralityResponse(BaseModel):
    success: bool = True
    count: int
    total: int
    users: List[CentralityEntry]


class NetworkStatsModel(BaseModel):
    """Network-wide connectivity summary"""
    totalUsers: int
    connectedUsers: int
    isolatedUsers: int
    totalFriendships: int
    pendingRequests: int
    averageDegree: float
    connectedComponents: int
    largestComponent: int


class StatsResponse(BaseModel):
    success: bool = True
    stats: NetworkStatsModel


class SuggestionEntry(BaseModel):
    """Suggested friend with mutual friend count"""
    user: UserSummary
    mutualFriends: int = Field(..., ge=1)


class SuggestionsResponse(BaseModel):
    success: bool = True
    count: int
    suggestions: List[SuggestionEntry]


class GraphNode(BaseModel):
    id: str
    label: str
    name: str
    avatar: Optional[str] = None
    bio: Optional[str] = None
    connections: int = 0


class GraphEdge(BaseModel):
    source: str
    target: str


class GraphPayload(BaseModel):
    nodes: List[GraphNode]
    edges: List[GraphEdge]


class GraphDataResponse(BaseModel):
    success: bool = True
    graph: GraphPayload
    stats: Dict[str, int]


class UserSearchResponse(BaseModel):
    success: bool = True
    count: int
    users: List[UserSummary]


class HealthResponse(BaseModel):
    """Health check response"""
    status: str = "ok"


class ErrorResponse(BaseModel):
    """Error response"""
    success: bool = False
    error: str
    message: str
    details: Optional[Dict[str, Any]] = None
