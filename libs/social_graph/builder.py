"""
Graph construction from stored friendship rows.

Rows arrive from the persistence layer as directed follow records with a
status. Only accepted rows form edges, and a row in either direction means the
pair is friends, so rows are normalized to canonical undirected pairs in a
single pass before the adjacency list is built.
"""

import logging
from typing import Any, Iterable, List, Optional, Set, Tuple

from .models import FriendshipStatus, Relationship, SocialGraph

logger = logging.getLogger(__name__)


def _endpoint(value: Any) -> Optional[str]:
    if value is None:
        return None
    value = str(value)
    return value or None


def _as_pair(row: Any) -> Optional[Tuple[Optional[str], Optional[str]]]:
    """Extract an (a, b) pair from an accepted row, or None if it is not accepted"""
    if isinstance(row, Relationship):
        if not row.is_accepted:
            return None
        return _endpoint(row.follower_id), _endpoint(row.following_id)

    if isinstance(row, dict):
        status = row.get("status", FriendshipStatus.ACCEPTED.value)
        try:
            if FriendshipStatus.parse(status) != FriendshipStatus.ACCEPTED:
                return None
        except ValueError:
            logger.warning("Ignoring relationship row with unknown status %r", status)
            return None
        a = row.get("follower", row.get("requester"))
        b = row.get("following", row.get("recipient"))
        return _endpoint(a), _endpoint(b)

    # plain (a, b) tuples are taken as already-accepted pairs
    a, b = row
    return _endpoint(a), _endpoint(b)


def canonical_edges(relationships: Iterable[Any]) -> List[Tuple[str, str]]:
    """Normalize accepted rows into a de-duplicated list of undirected pairs.

    Pairs keep the orientation of the first row that produced them so the
    resulting graph has the same neighbor ordering as the input.
    Self pairs violate the store's own invariant; they are logged and dropped.
    """
    seen: Set[Tuple[str, str]] = set()
    edges: List[Tuple[str, str]] = []

    for row in relationships:
        pair = _as_pair(row)
        if pair is None:
            continue

        a, b = pair
        if a is None or b is None:
            logger.error("Rejected relationship row missing an endpoint: %r", row)
            continue
        if a == b:
            logger.error("Rejected self-relationship for user %s; upstream invariant violated", a)
            continue

        key = (a, b) if a <= b else (b, a)
        if key in seen:
            continue
        seen.add(key)
        edges.append((a, b))

    return edges


def build_graph(relationships: Iterable[Any]) -> SocialGraph:
    """Build an undirected SocialGraph from accepted friendship rows.

    Users without accepted relationships get no entry in the graph. The input
    collection is not modified.
    """
    graph = SocialGraph()
    for a, b in canonical_edges(relationships):
        graph.add_edge(a, b)

    logger.debug("Built graph with %d nodes and %d edges", len(graph), graph.edge_count())
    return graph
