"""
Tests for the Social Graph API endpoints
"""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from apps.api.main import app
from apps.api.database import get_graph_service
from libs.social_graph.demo import seed, ACCEPTED_PAIRS
from libs.social_graph.models import UserProfile
from libs.social_graph.repository import InMemoryRepository
from libs.social_graph.service import GraphAnalyticsService


class TestGraphAPI:
    """Test cases for the /api/graph routes over the demo network"""

    def setup_method(self):
        """Setup a client backed by a seeded in-memory repository"""
        self.repository = InMemoryRepository()
        seed(self.repository)
        self.service = GraphAnalyticsService(self.repository)
        app.dependency_overrides[get_graph_service] = lambda: self.service
        self.client = TestClient(app)

    def teardown_method(self):
        """Remove dependency overrides"""
        app.dependency_overrides.clear()

    def test_healthz(self):
        """Test health endpoint"""
        response = self.client.get("/healthz")

        assert response.status_code == 200
        assert response.json() == {"status": "ok"}

    def test_metrics(self):
        """Test request counters are exported"""
        self.client.get("/api/graph/stats")
        response = self.client.get("/metrics")

        assert response.status_code == 200
        assert "graph_api_requests_total" in response.text

    def test_shortest_path(self):
        """Test path endpoint returns joined user profiles"""
        response = self.client.get("/api/graph/path/alice_johnson/jack_wilson")

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["path"]["exists"] is True
        assert data["path"]["distance"] == 2
        assert data["path"]["connections"] == 2
        assert [u["username"] for u in data["path"]["users"]] == ["alice_johnson", "bob_smith", "jack_wilson"]

    def test_shortest_path_no_path(self):
        """Test unreachable users get a message and distance -1"""
        self.repository.add_user(UserProfile(id="zoe", username="zoe"))

        response = self.client.get("/api/graph/path/alice_johnson/zoe")

        assert response.status_code == 200
        data = response.json()
        assert data["message"] == "No path exists between these users"
        assert data["path"] == {"exists": False, "distance": -1, "users": []}

    def test_shortest_path_unknown_user(self):
        """Test unknown user yields 404 with the error envelope"""
        response = self.client.get("/api/graph/path/alice_johnson/ghost")

        assert response.status_code == 404
        data = response.json()
        assert data["success"] is False
        assert data["error"] == "NotFoundError"
        assert "ghost" in data["message"]

    def test_influencer(self):
        """Test most influential user endpoint"""
        response = self.client.get("/api/graph/influencer")

        assert response.status_code == 200
        influencer = response.json()["influencer"]
        assert influencer["user"]["username"] == "alice_johnson"
        assert influencer["connections"] == 3

    def test_influencer_empty_network(self):
        """Test empty network returns a null influencer"""
        app.dependency_overrides[get_graph_service] = lambda: GraphAnalyticsService(InMemoryRepository())

        response = self.client.get("/api/graph/influencer")

        assert response.status_code == 200
        data = response.json()
        assert data["influencer"] is None
        assert data["message"] == "No users found in the network"

    def test_centrality(self):
        """Test centrality honours the limit and reports the total"""
        response = self.client.get("/api/graph/centrality", params={"limit": 5})

        assert response.status_code == 200
        data = response.json()
        assert data["count"] == 5
        assert data["total"] == 10
        degrees = [u["connections"] for u in data["users"]]
        assert degrees == sorted(degrees, reverse=True)

    @pytest.mark.parametrize("limit", [0, 101, "abc"])
    def test_centrality_bad_limit(self, limit):
        """Test out-of-range limits are rejected by validation"""
        response = self.client.get("/api/graph/centrality", params={"limit": limit})

        assert response.status_code == 422

    def test_stats(self):
        """Test network statistics endpoint"""
        response = self.client.get("/api/graph/stats")

        assert response.status_code == 200
        stats = response.json()["stats"]
        assert stats["totalUsers"] == 10
        assert stats["totalFriendships"] == len(ACCEPTED_PAIRS)
        assert stats["averageDegree"] == 2.8
        assert stats["connectedComponents"] == 1
        assert stats["largestComponent"] == 10
        assert stats["isolatedUsers"] == 0

    def test_suggestions(self):
        """Test suggestions are ranked by mutual friends"""
        response = self.client.get("/api/graph/suggestions/alice_johnson", params={"limit": 2})

        assert response.status_code == 200
        data = response.json()
        assert data["count"] == 2
        assert [(s["user"]["username"], s["mutualFriends"]) for s in data["suggestions"]] == [
            ("diana_prince", 2),
            ("eve_adams", 2),
        ]

    def test_suggestions_zero_limit(self):
        """Test a zero limit returns no suggestions"""
        response = self.client.get("/api/graph/suggestions/alice_johnson", params={"limit": 0})

        assert response.status_code == 200
        assert response.json()["suggestions"] == []

    def test_suggestions_unknown_user(self):
        """Test suggestions for an unknown user"""
        response = self.client.get("/api/graph/suggestions/ghost")

        assert response.status_code == 404

    def test_graph_data(self):
        """Test visualization data endpoint"""
        response = self.client.get("/api/graph/data")

        assert response.status_code == 200
        data = response.json()
        assert data["stats"] == {"totalNodes": 10, "totalEdges": len(ACCEPTED_PAIRS)}
        assert len(data["graph"]["edges"]) == len(ACCEPTED_PAIRS)

    def test_search_users(self):
        """Test user search endpoint"""
        response = self.client.get("/api/graph/users/search", params={"q": "ch"})

        assert response.status_code == 200
        data = response.json()
        assert data["count"] == 2
        assert [u["username"] for u in data["users"]] == ["charlie_brown", "ivy_chen"]

    @pytest.mark.parametrize("params", [{}, {"q": "a"}])
    def test_search_users_short_query(self, params):
        """Test short queries are rejected with 400"""
        response = self.client.get("/api/graph/users/search", params=params)

        assert response.status_code == 400
        data = response.json()
        assert data["error"] == "ValidationError"
        assert data["details"]["field"] == "q"


class TestGraphAPIDatabaseErrors:
    """Test database failures surface as 500 responses"""

    def teardown_method(self):
        app.dependency_overrides.clear()

    def test_database_error(self):
        """Test SQLAlchemy errors are converted to the error envelope"""

        class BrokenRepository(InMemoryRepository):
            def count_active_users(self):
                raise OperationalError("SELECT 1", {}, Exception("connection refused"))

        app.dependency_overrides[get_graph_service] = lambda: GraphAnalyticsService(BrokenRepository())
        client = TestClient(app, raise_server_exceptions=False)

        response = client.get("/api/graph/stats")

        assert response.status_code == 500
        data = response.json()
        assert data["success"] is False
        assert data["details"]["error_type"] == "OperationalError"
