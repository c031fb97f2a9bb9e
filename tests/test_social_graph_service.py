"""
Tests for the graph analytics service and repositories

This module contains tests for:
- GraphAnalyticsService queries over the demo network
- Active-user filtering and profile joins
- Snapshot cache invalidation on relationship writes
- In-memory and SQLAlchemy repositories
"""

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from libs.social_graph.demo import seed, ACCEPTED_PAIRS, PENDING_PAIRS
from libs.social_graph.errors import NotFoundError, ValidationError
from libs.social_graph.models import FriendshipStatus, UserProfile
from libs.social_graph.repository import InMemoryRepository, SqlAlchemyRepository
from libs.social_graph.service import GraphAnalyticsService, GraphSnapshotCache


def _usernames(users):
    return [u["username"] for u in users]


class TestGraphAnalyticsService:
    """Test cases for service queries over the demo network"""

    def setup_method(self):
        """Setup a seeded in-memory repository"""
        self.repository = InMemoryRepository()
        seed(self.repository)
        self.service = GraphAnalyticsService(self.repository)

    def test_shortest_path(self):
        """Test path profiles are joined in order"""
        result = self.service.shortest_path("alice_johnson", "jack_wilson")

        assert result["exists"] is True
        assert result["distance"] == 2
        assert result["connections"] == 2
        assert _usernames(result["users"]) == ["alice_johnson", "bob_smith", "jack_wilson"]
        assert result["users"][0]["fullName"] == "Alice Johnson"

    def test_shortest_path_same_user(self):
        """Test a user's path to themselves"""
        result = self.service.shortest_path("alice_johnson", "alice_johnson")

        assert result["distance"] == 0
        assert _usernames(result["users"]) == ["alice_johnson"]

    def test_shortest_path_isolated_user(self):
        """Test a user without friends is unreachable"""
        self.repository.add_user(UserProfile(id="zoe", username="zoe"))

        result = self.service.shortest_path("alice_johnson", "zoe")

        assert result == {"exists": False, "distance": -1, "users": []}

    def test_shortest_path_unknown_user(self):
        """Test unknown users are reported before any graph work"""
        with pytest.raises(NotFoundError) as exc:
            self.service.shortest_path("alice_johnson", "ghost")

        assert exc.value.resource_id == "ghost"

    def test_degree_centrality(self):
        """Test the ranking covers all active users and honours the limit"""
        ranking = self.service.degree_centrality(limit=3)

        assert ranking["count"] == 3
        assert ranking["total"] == 10
        assert ranking["users"][0]["user"]["username"] == "alice_johnson"
        assert ranking["users"][0]["connections"] == 3
        assert ranking["users"][0]["centrality"] == 3

    def test_degree_centrality_unlimited(self):
        """Test degrees sum to twice the accepted friendships"""
        ranking = self.service.degree_centrality()

        assert ranking["count"] == 10
        assert sum(u["connections"] for u in ranking["users"]) == 2 * len(ACCEPTED_PAIRS)

    def test_most_influential(self):
        """Test the first highest-degree active user is returned"""
        top = self.service.most_influential()

        assert top["user"]["username"] == "alice_johnson"
        assert top["connections"] == 3

    def test_most_influential_empty_network(self):
        """Test an empty network reports no influencer"""
        service = GraphAnalyticsService(InMemoryRepository())

        assert service.most_influential() is None

    def test_network_stats(self):
        """Test counts from the repository are combined with graph stats"""
        stats = self.service.network_stats()

        assert stats == {
            "totalUsers": 10,
            "connectedUsers": 10,
            "isolatedUsers": 0,
            "totalFriendships": len(ACCEPTED_PAIRS),
            "pendingRequests": len(PENDING_PAIRS),
            "averageDegree": 2.8,
            "connectedComponents": 1,
            "largestComponent": 10,
        }

    def test_network_stats_with_isolated_user(self):
        """Test newly registered users count as isolated"""
        self.repository.add_user(UserProfile(id="zoe", username="zoe"))

        stats = self.service.network_stats()

        assert stats["totalUsers"] == 11
        assert stats["isolatedUsers"] == 1

    def test_connected_components(self):
        """Test the demo network is a single component"""
        components = self.service.connected_components()

        assert len(components) == 1
        assert len(components[0]) == 10

    def test_suggest_friends(self):
        """Test suggestions are ranked by mutual friends"""
        suggestions = self.service.suggest_friends("alice_johnson", 10)

        assert [(s["user"]["username"], s["mutualFriends"]) for s in suggestions] == [
            ("diana_prince", 2),
            ("eve_adams", 2),
            ("jack_wilson", 1),
            ("ivy_chen", 1),
        ]

    def test_suggest_friends_skips_inactive_users(self):
        """Test deactivated accounts are filtered by the service"""
        self.repository.users["diana_prince"].is_active = False

        suggestions = self.service.suggest_friends("alice_johnson", 10)

        assert "diana_prince" not in [s["user"]["username"] for s in suggestions]

    def test_suggest_friends_unknown_user(self):
        """Test suggestions for an unknown user raise NotFoundError"""
        with pytest.raises(NotFoundError):
            self.service.suggest_friends("ghost", 5)

    def test_graph_data(self):
        """Test visualization payload lists every edge once"""
        data = self.service.graph_data()

        assert data["stats"] == {"totalNodes": 10, "totalEdges": len(ACCEPTED_PAIRS)}
        pairs = {tuple(sorted((e["source"], e["target"]))) for e in data["graph"]["edges"]}
        assert len(pairs) == len(ACCEPTED_PAIRS)
        alice = next(n for n in data["graph"]["nodes"] if n["id"] == "alice_johnson")
        assert alice["connections"] == 3
        assert alice["name"] == "Alice Johnson"

    def test_search_users(self):
        """Test search matches username and names case-insensitively"""
        users = self.service.search_users("CH", 10)

        assert _usernames(users) == ["charlie_brown", "ivy_chen"]

    @pytest.mark.parametrize("query", [None, "", " a "])
    def test_search_users_short_query(self, query):
        """Test queries under two characters are rejected"""
        with pytest.raises(ValidationError):
            self.service.search_users(query, 10)

    def test_accepting_request_creates_edge(self):
        """Test a pending request becomes a path once accepted"""
        before = self.service.shortest_path("alice_johnson", "henry_ford")
        assert before["distance"] > 1

        self.service.update_relationship_status("henry_ford", "alice_johnson", FriendshipStatus.ACCEPTED)

        after = self.service.shortest_path("alice_johnson", "henry_ford")
        assert after["distance"] == 1


class TestGraphSnapshotCache:
    """Test cases for the optional snapshot cache"""

    def setup_method(self):
        """Setup a cached service over a small network"""
        self.repository = InMemoryRepository(users=[
            UserProfile(id="a", username="a"),
            UserProfile(id="b", username="b"),
            UserProfile(id="c", username="c"),
        ])
        self.repository.add_relationship("a", "b", FriendshipStatus.ACCEPTED)
        self.service = GraphAnalyticsService(self.repository, cache_enabled=True)

    def test_snapshot_reused(self):
        """Test repeated queries share one snapshot"""
        assert self.service.graph() is self.service.graph()

    def test_uncached_service_rebuilds(self):
        """Test the default service builds a new snapshot per query"""
        service = GraphAnalyticsService(self.repository)

        assert service.graph() is not service.graph()

    def test_write_invalidates_snapshot(self):
        """Test recording a relationship drops the cached snapshot"""
        first = self.service.graph()
        self.service.record_relationship("b", "c", FriendshipStatus.ACCEPTED)
        second = self.service.graph()

        assert second is not first
        assert second.has_edge("b", "c")
        assert not first.has_edge("b", "c")

    def test_stale_build_not_published(self):
        """Test a snapshot built across an invalidation is not cached"""
        cache = GraphSnapshotCache()
        built = []

        def build():
            cache.invalidate()
            built.append(object())
            return built[-1]

        first = cache.get(build)
        second = cache.get(lambda: "fresh")

        assert first is built[0]
        assert second == "fresh"


class TestInMemoryRepository:
    """Test cases for the in-memory repository"""

    def setup_method(self):
        """Setup a repository with two users"""
        self.repository = InMemoryRepository(users=[
            UserProfile(id="a", username="a"),
            UserProfile(id="b", username="b"),
        ])

    def test_self_relationship_rejected(self):
        """Test users cannot befriend themselves"""
        with pytest.raises(ValidationError):
            self.repository.add_relationship("a", "a")

    def test_duplicate_in_either_direction_rejected(self):
        """Test a request cannot be repeated or mirrored"""
        self.repository.add_relationship("a", "b")

        with pytest.raises(ValidationError):
            self.repository.add_relationship("b", "a")

    def test_unknown_user_rejected(self):
        """Test relationships require existing users"""
        with pytest.raises(NotFoundError):
            self.repository.add_relationship("a", "ghost")

    def test_status_update_missing_relationship(self):
        """Test updating a relationship that does not exist"""
        with pytest.raises(NotFoundError):
            self.repository.set_relationship_status("a", "b", FriendshipStatus.ACCEPTED)

    def test_counts(self):
        """Test status counts"""
        self.repository.add_relationship("a", "b")

        assert self.repository.count_relationships(FriendshipStatus.PENDING) == 1
        assert self.repository.count_relationships(FriendshipStatus.ACCEPTED) == 0
        assert self.repository.accepted_relationships() == []


class TestSqlAlchemyRepository:
    """Test cases for the SQL repository against SQLite"""

    def setup_method(self):
        """Setup a private in-memory SQLite database"""
        from libs.storage.db import Base
        import libs.social_graph.db_models  # noqa: F401

        self.engine = create_engine(
            "sqlite://",
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
            future=True,
        )
        Base.metadata.create_all(self.engine)
        self.repository = SqlAlchemyRepository(sessionmaker(bind=self.engine, future=True))
        seed(self.repository)

    def teardown_method(self):
        """Dispose of the database"""
        self.engine.dispose()

    def test_counts(self):
        """Test seeded counts"""
        assert self.repository.count_active_users() == 10
        assert len(self.repository.active_user_ids()) == 10
        assert self.repository.count_relationships(FriendshipStatus.ACCEPTED) == len(ACCEPTED_PAIRS)
        assert self.repository.count_relationships(FriendshipStatus.PENDING) == len(PENDING_PAIRS)

    def test_accepted_relationships(self):
        """Test only accepted rows are returned"""
        rows = self.repository.accepted_relationships()

        assert len(rows) == len(ACCEPTED_PAIRS)
        assert all(r.is_accepted for r in rows)

    def test_get_users(self):
        """Test bulk profile lookup"""
        users = self.repository.get_users(["alice_johnson", "ghost"])

        assert list(users) == ["alice_johnson"]
        assert users["alice_johnson"].full_name == "Alice Johnson"
        assert self.repository.get_user("ghost") is None

    def test_search_users(self):
        """Test case-insensitive search ordered by username"""
        users = self.repository.search_users("ch", 10)

        assert [u.username for u in users] == ["charlie_brown", "ivy_chen"]

    def test_duplicate_user_rejected(self):
        """Test inserting an existing user id"""
        with pytest.raises(ValidationError):
            self.repository.add_user(UserProfile(id="alice_johnson", username="alice_johnson"))

    def test_duplicate_relationship_rejected(self):
        """Test mirrored requests are rejected"""
        with pytest.raises(ValidationError):
            self.repository.add_relationship("bob_smith", "alice_johnson")

    def test_self_relationship_rejected(self):
        """Test self relationships never reach the database"""
        with pytest.raises(ValidationError):
            self.repository.add_relationship("bob_smith", "bob_smith")

    def test_racing_mirrored_insert_rejected(self, monkeypatch):
        """Test the undirected unique key catches a mirrored insert that skipped the lookup"""
        monkeypatch.setattr(self.repository, "_find", lambda session, a, b: None)

        with pytest.raises(ValidationError) as exc:
            self.repository.add_relationship("bob_smith", "alice_johnson", FriendshipStatus.ACCEPTED)

        assert exc.value.details["error_type"] == "IntegrityError"
        assert self.repository.count_relationships(FriendshipStatus.ACCEPTED) == len(ACCEPTED_PAIRS)

    @pytest.mark.parametrize("query,expected", [
        ("__", []),
        ("%%", []),
        ("e_j", ["alice_johnson"]),
        ("CH", ["charlie_brown", "ivy_chen"]),
    ])
    def test_search_matches_memory_repository(self, query, expected):
        """Test LIKE wildcards in the query are matched literally, as in memory"""
        memory = InMemoryRepository()
        seed(memory)

        sql_names = [u.username for u in self.repository.search_users(query, 50)]
        memory_names = [u.username for u in memory.search_users(query, 50)]

        assert sql_names == memory_names == expected

    def test_status_update(self):
        """Test accepting a pending request"""
        rel = self.repository.set_relationship_status("henry_ford", "alice_johnson", "accepted")

        assert rel.is_accepted
        assert self.repository.count_relationships(FriendshipStatus.PENDING) == len(PENDING_PAIRS) - 1

    def test_service_over_sql(self):
        """Test the service produces the same stats from the SQL store"""
        stats = GraphAnalyticsService(self.repository).network_stats()

        assert stats["connectedUsers"] == 10
        assert stats["averageDegree"] == 2.8
        assert stats["connectedComponents"] == 1
        assert stats["pendingRequests"] == len(PENDING_PAIRS)
