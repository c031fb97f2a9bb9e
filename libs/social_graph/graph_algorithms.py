"""
Graph Algorithms for Social Graph Analysis

This module provides the structural queries answered over a friendship graph:
- Shortest path between two users (breadth-first search)
- Degree centrality ranking and the most influential user
- Connected components (iterative depth-first search)
- Friend suggestions based on mutual connections
- Network-wide connectivity statistics

Every function is pure: it reads one SocialGraph snapshot and never mutates it.
"""

from typing import List, Dict, Set, Optional, Iterable
from collections import deque

from .models import (
    SocialGraph,
    PathResult,
    CentralityRecord,
    SuggestionRecord,
    NetworkStats,
)


def shortest_path(graph: SocialGraph, source: str, target: str) -> PathResult:
    """Find the shortest path between two users using BFS"""
    if source == target:
        return PathResult(exists=True, distance=0, path=[source])

    # Users with no friendships are absent from the graph
    if source not in graph or target not in graph:
        return PathResult.not_found()

    queue = deque([source])
    visited = {source}
    parent: Dict[str, Optional[str]] = {source: None}
    distance = {source: 0}

    while queue:
        current = queue.popleft()

        for neighbor in graph.neighbors(current):
            if neighbor in visited:
                continue
            visited.add(neighbor)
            parent[neighbor] = current
            distance[neighbor] = distance[current] + 1

            if neighbor == target:
                path = []
                node: Optional[str] = target
                while node is not None:
                    path.append(node)
                    node = parent[node]
                path.reverse()
                return PathResult(exists=True, distance=distance[target], path=path)

            queue.append(neighbor)

    return PathResult.not_found()


def degree_centrality(graph: SocialGraph, active_users: Iterable[str]) -> List[CentralityRecord]:
    """Raw degree for every active user, sorted descending.

    Degree is intentionally left unnormalized. The sort is stable, so users
    with equal degree keep their input order.
    """
    records = [CentralityRecord(id=str(user_id), degree=graph.degree(str(user_id))) for user_id in active_users]
    records.sort(key=lambda r: r.degree, reverse=True)
    return records


def most_influential(graph: SocialGraph, active_users: Iterable[str]) -> Optional[CentralityRecord]:
    """User with the highest degree, or None when there are no active users"""
    ranked = degree_centrality(graph, active_users)
    if not ranked:
        return None
    return ranked[0]


def connected_components(graph: SocialGraph) -> List[Set[str]]:
    """Find connected components with an explicit-stack DFS.

    Isolated users are not in the graph and therefore not in any component.
    """
    visited: Set[str] = set()
    components: List[Set[str]] = []

    for node in graph.nodes():
        if node in visited:
            continue

        component: Set[str] = set()
        stack = [node]
        visited.add(node)

        while stack:
            current = stack.pop()
            component.add(current)
            for neighbor in graph.neighbors(current):
                if neighbor not in visited:
                    visited.add(neighbor)
                    stack.append(neighbor)

        components.append(component)

    return components


def suggest_connections(graph: SocialGraph, user_id: str, limit: int = 10) -> List[SuggestionRecord]:
    """Suggest friends-of-friends ranked by number of mutual friends.

    Results are graph identifiers only; filtering to active accounts is left
    to the caller.
    """
    if limit <= 0:
        return []

    friends = graph.neighbor_set(user_id)
    if not friends:
        return []

    mutual_counts: Dict[str, int] = {}
    for friend_id in graph.neighbors(user_id):
        for candidate in graph.neighbors(friend_id):
            if candidate == user_id or candidate in friends:
                continue
            mutual_counts[candidate] = mutual_counts.get(candidate, 0) + 1

    ranked = sorted(mutual_counts.items(), key=lambda item: item[1], reverse=True)
    return [SuggestionRecord(id=cid, mutual_count=count) for cid, count in ranked[:limit]]


def network_stats(
    active_user_count: int,
    accepted_count: int,
    pending_count: int,
    graph: SocialGraph,
) -> NetworkStats:
    """Summarize connectivity of the network"""
    connected = len(graph)
    total_degree = sum(graph.degree(node) for node in graph.nodes())
    average_degree = round(total_degree / connected, 2) if connected > 0 else 0

    components = connected_components(graph)

    return NetworkStats(
        connected_users=connected,
        isolated_users=active_user_count - connected,
        average_degree=average_degree,
        component_count=len(components),
        largest_component=max((len(c) for c in components), default=0),
        total_users=active_user_count,
        total_friendships=accepted_count,
        pending_requests=pending_count,
    )


class GraphAlgorithms:
    """Collection of graph algorithms bound to one graph snapshot"""

    def __init__(self, graph: SocialGraph):
        self.graph = graph

    def shortest_path(self, source: str, target: str) -> PathResult:
        return shortest_path(self.graph, source, target)

    def degree_centrality(self, active_users: Iterable[str]) -> List[CentralityRecord]:
        return degree_centrality(self.graph, active_users)

    def most_influential(self, active_users: Iterable[str]) -> Optional[CentralityRecord]:
        return most_influential(self.graph, active_users)

    def connected_components(self) -> List[Set[str]]:
        return connected_components(self.graph)

    def suggest_connections(self, user_id: str, limit: int = 10) -> List[SuggestionRecord]:
        return suggest_connections(self.graph, user_id, limit)

    def network_stats(self, active_user_count: int, accepted_count: int, pending_count: int) -> NetworkStats:
        return network_stats(active_user_count, accepted_count, pending_count, self.graph)
