#!/usr/bin/env python3
from __future__ import annotations
import argparse, json, logging, sys

from libs.social_graph import (
    Relationship,
    UserProfile,
    build_graph,
    shortest_path,
    degree_centrality,
    most_influential,
    connected_components,
    suggest_connections,
    network_stats,
    FriendshipStatus,
)


def load_network(path: str):
    """Read {"users": [...], "relationships": [...]} from a JSON file ('-' for stdin)"""
    if path == "-":
        data = json.load(sys.stdin)
    else:
        with open(path, "r", encoding="utf-8") as fh:
            data = json.load(fh)

    users = [UserProfile.from_dict(u) for u in data.get("users", [])]
    relationships = [Relationship.from_dict(r) for r in data.get("relationships", [])]
    return users, relationships


def run(args) -> object:
    users, relationships = load_network(args.input)
    graph = build_graph(relationships)

    # Without a user list every node in the graph counts as active
    if users:
        active = [u.id for u in users if u.is_active]
    else:
        active = graph.nodes()

    if args.command == "path":
        return shortest_path(graph, args.source, args.target).to_dict()
    if args.command == "centrality":
        return [r.to_dict() for r in degree_centrality(graph, active)[:max(args.limit, 0)]]
    if args.command == "influencer":
        top = most_influential(graph, active)
        return top.to_dict() if top else None
    if args.command == "components":
        return [sorted(c) for c in connected_components(graph)]
    if args.command == "stats":
        accepted = sum(1 for r in relationships if r.status == FriendshipStatus.ACCEPTED)
        pending = sum(1 for r in relationships if r.status == FriendshipStatus.PENDING)
        return network_stats(len(active), accepted, pending, graph).to_dict()
    if args.command == "suggest":
        return [s.to_dict() for s in suggest_connections(graph, args.user, args.limit)]
    raise SystemExit(f"unknown command: {args.command}")


def main(argv=None):
    p = argparse.ArgumentParser(prog="socialgraph", description="Run friendship graph analytics over a JSON export")
    p.add_argument("--input", "-i", default="-", help="JSON file with users and relationships ('-' for stdin)")
    p.add_argument("--verbose", "-v", action="store_true")
    sub = p.add_subparsers(dest="command", required=True)

    sp = sub.add_parser("path", help="Shortest path between two users")
    sp.add_argument("source")
    sp.add_argument("target")

    sc = sub.add_parser("centrality", help="Degree centrality ranking")
    sc.add_argument("--limit", type=int, default=20)

    sub.add_parser("influencer", help="Most connected user")
    sub.add_parser("components", help="Connected components")
    sub.add_parser("stats", help="Network statistics")

    ss = sub.add_parser("suggest", help="Friend suggestions for a user")
    ss.add_argument("user")
    ss.add_argument("--limit", type=int, default=10)

    args = p.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    result = run(args)
    json.dump(result, sys.stdout, indent=2)
    sys.stdout.write("\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
