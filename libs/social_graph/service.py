"""
Graph Analytics Service

Calling layer around the graph algorithms. Each query reads the current
relationship rows from the repository, builds its own graph snapshot, runs the
pure algorithm and joins user display data onto the returned identifiers.
"""

import logging
import threading
from typing import Any, Dict, List, Optional

from .builder import build_graph
from .errors import NotFoundError, ValidationError
from .graph_algorithms import GraphAlgorithms
from .models import FriendshipStatus, Relationship, SocialGraph, UserProfile
from .repository import SocialRepository

logger = logging.getLogger(__name__)

MIN_SEARCH_LENGTH = 2


class GraphSnapshotCache:
    """Holds at most one immutable graph snapshot.

    Readers take whatever snapshot is current; a rebuild swaps in a new object
    under the lock and every relationship write drops it.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._snapshot: Optional[SocialGraph] = None
        self._generation = 0

    def get(self, build) -> SocialGraph:
        snapshot = self._snapshot
        if snapshot is not None:
            return snapshot

        with self._lock:
            generation = self._generation
        graph = build()
        with self._lock:
            # A write during the build makes this snapshot stale; hand it to
            # the caller but do not publish it.
            if self._generation == generation:
                self._snapshot = graph
        return graph

    def invalidate(self):
        with self._lock:
            self._generation += 1
            self._snapshot = None


class GraphAnalyticsService:
    """Answers graph queries against a repository"""

    def __init__(self, repository: SocialRepository, cache_enabled: bool = False):
        self.repository = repository
        self.cache = GraphSnapshotCache() if cache_enabled else None

    # -- snapshot -----------------------------------------------------------

    def _build(self) -> SocialGraph:
        return build_graph(self.repository.accepted_relationships())

    def graph(self) -> SocialGraph:
        """Graph snapshot for one query"""
        if self.cache is not None:
            return self.cache.get(self._build)
        return self._build()

    def algorithms(self) -> GraphAlgorithms:
        return GraphAlgorithms(self.graph())

    def _require_user(self, user_id: str) -> UserProfile:
        profile = self.repository.get_user(user_id)
        if profile is None:
            raise NotFoundError("User", user_id)
        return profile

    # -- queries ------------------------------------------------------------

    def shortest_path(self, source_id: str, target_id: str) -> Dict[str, Any]:
        """Shortest path between two existing users, joined with profiles"""
        self._require_user(source_id)
        self._require_user(target_id)

        result = self.algorithms().shortest_path(source_id, target_id)
        if not result.exists:
            return {"exists": False, "distance": result.distance, "users": []}

        profiles = self.repository.get_users(result.path)
        return {
            "exists": True,
            "distance": result.distance,
            "users": [profiles[uid].to_dict() for uid in result.path if uid in profiles],
            "connections": result.distance,
        }

    def degree_centrality(self, limit: Optional[int] = None) -> Dict[str, Any]:
        """Degree ranking of all active users"""
        active = self.repository.active_user_ids()
        ranked = self.algorithms().degree_centrality(active)
        shown = ranked if limit is None else ranked[:max(limit, 0)]

        profiles = self.repository.get_users(r.id for r in shown)
        users = [
            {"user": profiles[r.id].to_dict(), "connections": r.degree, "centrality": r.centrality}
            for r in shown if r.id in profiles
        ]
        return {"count": len(users), "total": len(ranked), "users": users}

    def most_influential(self) -> Optional[Dict[str, Any]]:
        """Active user with the most friends, or None for an empty network"""
        top = self.algorithms().most_influential(self.repository.active_user_ids())
        if top is None:
            return None

        profile = self._require_user(top.id)
        return {"user": profile.to_dict(), "connections": top.degree, "centrality": top.centrality}

    def network_stats(self) -> Dict[str, Any]:
        stats = self.algorithms().network_stats(
            self.repository.count_active_users(),
            self.repository.count_relationships(FriendshipStatus.ACCEPTED),
            self.repository.count_relationships(FriendshipStatus.PENDING),
        )
        return stats.to_dict()

    def connected_components(self) -> List[List[str]]:
        return [sorted(component) for component in self.algorithms().connected_components()]

    def suggest_friends(self, user_id: str, limit: int = 10) -> List[Dict[str, Any]]:
        """Friend-of-friend suggestions restricted to active users"""
        self._require_user(user_id)

        suggestions = self.algorithms().suggest_connections(user_id, limit)
        profiles = self.repository.get_users(s.id for s in suggestions)

        results = []
        for suggestion in suggestions:
            profile = profiles.get(suggestion.id)
            if profile is None or not profile.is_active:
                continue
            results.append({"user": profile.to_dict(), "mutualFriends": suggestion.mutual_count})
        return results

    def graph_data(self) -> Dict[str, Any]:
        """Nodes and edges for visualization"""
        graph = self.graph()
        active = self.repository.active_user_ids()
        profiles = self.repository.get_users(active)

        nodes = []
        for uid in active:
            profile = profiles.get(uid)
            if profile is None:
                continue
            nodes.append({
                "id": uid,
                "label": profile.username,
                "name": profile.full_name,
                "avatar": profile.avatar,
                "bio": profile.bio,
                "connections": graph.degree(uid),
            })

        edges = [{"source": u, "target": v} for u, v in graph.edges()]
        return {
            "graph": {"nodes": nodes, "edges": edges},
            "stats": {"totalNodes": len(nodes), "totalEdges": len(edges)},
        }

    def search_users(self, query: Optional[str], limit: int = 10) -> List[Dict[str, Any]]:
        if not query or len(query.strip()) < MIN_SEARCH_LENGTH:
            raise ValidationError("Search query must be at least 2 characters", field="q")
        return [profile.to_dict() for profile in self.repository.search_users(query.strip(), limit)]

    # -- writes -------------------------------------------------------------

    def record_relationship(self, follower_id: str, following_id: str,
                            status: FriendshipStatus = FriendshipStatus.PENDING) -> Relationship:
        rel = self.repository.add_relationship(follower_id, following_id, status)
        self._invalidate()
        return rel

    def update_relationship_status(self, follower_id: str, following_id: str,
                                   status: FriendshipStatus) -> Relationship:
        rel = self.repository.set_relationship_status(follower_id, following_id, status)
        self._invalidate()
        return rel

    def _invalidate(self):
        if self.cache is not None:
            self.cache.invalidate()
            logger.debug("Graph snapshot invalidated after relationship write")
