"""
Social Graph Data Models

This module defines the data structures shared by the graph analytics engine:
- FriendshipStatus: Lifecycle state of a friendship request
- Relationship: One stored follow/friendship row
- UserProfile: Display data joined onto graph identifiers by the service layer
- SocialGraph: Undirected adjacency-list snapshot of accepted friendships
- PathResult, CentralityRecord, SuggestionRecord, NetworkStats: query results
"""

from typing import Dict, List, Set, Optional, Any, Iterator, Tuple
from datetime import datetime
from dataclasses import dataclass, field
from enum import Enum


NO_PATH_DISTANCE = -1


class FriendshipStatus(str, Enum):
    """Status of a stored relationship row"""

    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"

    @classmethod
    def parse(cls, value: Any) -> 'FriendshipStatus':
        """Parse a status string, mapping legacy values onto the current set"""
        if isinstance(value, cls):
            return value
        text = str(value or "").strip().lower()
        if text in ("declined", "blocked"):
            return cls.REJECTED
        return cls(text)


@dataclass
class Relationship:
    """A directed follow/friendship row as stored by the persistence layer"""

    follower_id: str
    following_id: str
    status: FriendshipStatus = FriendshipStatus.ACCEPTED
    created_at: datetime = field(default_factory=datetime.now)

    def __post_init__(self):
        self.follower_id = str(self.follower_id)
        self.following_id = str(self.following_id)
        self.status = FriendshipStatus.parse(self.status)

    @property
    def is_accepted(self) -> bool:
        return self.status == FriendshipStatus.ACCEPTED

    def edge(self) -> Tuple[str, str]:
        """Canonical undirected pair for this row"""
        a, b = self.follower_id, self.following_id
        return (a, b) if a <= b else (b, a)

    def involves(self, user_id: str) -> bool:
        return user_id in (self.follower_id, self.following_id)

    def to_dict(self) -> Dict[str, Any]:
        """Convert relationship to dictionary for serialization"""
        return {
            "follower": self.follower_id,
            "following": self.following_id,
            "status": self.status.value,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Relationship':
        """Create relationship from dictionary

        Accepts both follow-style (follower/following) and request-style
        (requester/recipient) keys.
        """
        follower = data.get("follower", data.get("requester", data.get("follower_id", "")))
        following = data.get("following", data.get("recipient", data.get("following_id", "")))

        created_at = datetime.now()
        if data.get("created_at"):
            try:
                created_at = datetime.fromisoformat(data["created_at"])
            except (TypeError, ValueError):
                created_at = datetime.now()

        return cls(
            follower_id=str(follower),
            following_id=str(following),
            status=data.get("status", FriendshipStatus.ACCEPTED),
            created_at=created_at,
        )


@dataclass
class UserProfile:
    """Display data for one user, owned by the user store"""

    id: str
    username: str
    first_name: str = ""
    last_name: str = ""
    avatar: Optional[str] = None
    bio: Optional[str] = None
    is_active: bool = True

    def __post_init__(self):
        self.id = str(self.id)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def to_dict(self) -> Dict[str, Any]:
        """Convert profile to the summary shape used in API payloads"""
        return {
            "id": self.id,
            "username": self.username,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "fullName": self.full_name,
            "avatar": self.avatar,
            "bio": self.bio,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'UserProfile':
        """Create profile from dictionary (snake_case or camelCase keys)"""
        return cls(
            id=str(data.get("id", data.get("_id", ""))),
            username=data.get("username", "") or "",
            first_name=data.get("first_name", data.get("firstName", "")) or "",
            last_name=data.get("last_name", data.get("lastName", "")) or "",
            avatar=data.get("avatar"),
            bio=data.get("bio"),
            is_active=bool(data.get("is_active", data.get("isActive", True))),
        )


class SocialGraph:
    """Undirected adjacency-list graph built from accepted friendships.

    Neighbor lists keep insertion order so traversals are deterministic for a
    given input ordering. A node only exists once it has at least one edge.
    """

    def __init__(self):
        self.adjacency_list: Dict[str, List[str]] = {}
        self._neighbor_sets: Dict[str, Set[str]] = {}

    def _ensure_node(self, node: str):
        if node not in self.adjacency_list:
            self.adjacency_list[node] = []
            self._neighbor_sets[node] = set()

    def add_edge(self, u: str, v: str) -> bool:
        """Add an undirected edge; returns False if it was already present"""
        self._ensure_node(u)
        self._ensure_node(v)
        if v in self._neighbor_sets[u]:
            return False
        self.adjacency_list[u].append(v)
        self._neighbor_sets[u].add(v)
        self.adjacency_list[v].append(u)
        self._neighbor_sets[v].add(u)
        return True

    def neighbors(self, node: str) -> List[str]:
        return self.adjacency_list.get(node, [])

    def neighbor_set(self, node: str) -> Set[str]:
        return self._neighbor_sets.get(node, set())

    def degree(self, node: str) -> int:
        return len(self.adjacency_list.get(node, ()))

    def has_edge(self, u: str, v: str) -> bool:
        return v in self._neighbor_sets.get(u, ())

    def nodes(self) -> List[str]:
        return list(self.adjacency_list.keys())

    def edges(self) -> Iterator[Tuple[str, str]]:
        """Yield each undirected edge once, in discovery order"""
        seen: Set[Tuple[str, str]] = set()
        for u, neighbors in self.adjacency_list.items():
            for v in neighbors:
                pair = (u, v) if u <= v else (v, u)
                if pair not in seen:
                    seen.add(pair)
                    yield (u, v)

    def edge_count(self) -> int:
        return sum(len(n) for n in self.adjacency_list.values()) // 2

    def __contains__(self, node: object) -> bool:
        return node in self.adjacency_list

    def __len__(self) -> int:
        return len(self.adjacency_list)

    def to_dict(self) -> Dict[str, List[str]]:
        """Plain mapping of node -> sorted neighbor ids"""
        return {node: sorted(neighbors) for node, neighbors in self.adjacency_list.items()}


@dataclass
class PathResult:
    """Shortest path between two users"""

    exists: bool
    distance: int
    path: List[str] = field(default_factory=list)

    @classmethod
    def not_found(cls) -> 'PathResult':
        return cls(exists=False, distance=NO_PATH_DISTANCE, path=[])

    def to_dict(self) -> Dict[str, Any]:
        return {"exists": self.exists, "distance": self.distance, "path": list(self.path)}


@dataclass
class CentralityRecord:
    """Degree centrality for a single user (raw degree, not normalized)"""

    id: str
    degree: int

    @property
    def centrality(self) -> int:
        return self.degree

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "degree": self.degree, "centrality": self.centrality}


@dataclass
class SuggestionRecord:
    """Friend-of-friend candidate with its mutual connection count"""

    id: str
    mutual_count: int

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "mutualCount": self.mutual_count}


@dataclass
class NetworkStats:
    """Network-wide connectivity summary"""

    connected_users: int
    isolated_users: int
    average_degree: float
    component_count: int
    largest_component: int
    total_users: int = 0
    total_friendships: int = 0
    pending_requests: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalUsers": self.total_users,
            "connectedUsers": self.connected_users,
            "isolatedUsers": self.isolated_users,
            "totalFriendships": self.total_friendships,
            "pendingRequests": self.pending_requests,
            "averageDegree": self.average_degree,
            "connectedComponents": self.component_count,
            "largestComponent": self.largest_component,
        }
