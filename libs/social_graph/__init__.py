"""
Social Graph Analytics Module

This module provides analytics over the friendship graph of a social network:
- Graph construction from accepted friendship rows
- Shortest paths, degree centrality and connected components
- Friend suggestions based on mutual connections
- Network-wide statistics
"""

from .models import (
    FriendshipStatus,
    Relationship,
    UserProfile,
    SocialGraph,
    PathResult,
    CentralityRecord,
    SuggestionRecord,
    NetworkStats,
)
from .builder import build_graph, canonical_edges
from .graph_algorithms import (
    GraphAlgorithms,
    shortest_path,
    degree_centrality,
    most_influential,
    connected_components,
    suggest_connections,
    network_stats,
)
from .errors import SocialGraphError, ValidationError, NotFoundError

__all__ = [
    'FriendshipStatus',
    'Relationship',
    'UserProfile',
    'SocialGraph',
    'PathResult',
    'CentralityRecord',
    'SuggestionRecord',
    'NetworkStats',
    'build_graph',
    'canonical_edges',
    'GraphAlgorithms',
    'shortest_path',
    'degree_centrality',
    'most_influential',
    'connected_components',
    'suggest_connections',
    'network_stats',
    'SocialGraphError',
    'ValidationError',
    'NotFoundError',
]
