"""
Tests for the discovery API endpoints
"""
import pytest
from fastapi.testclient import TestClient

from main import app
from discovery.cache.manager import CacheManager
from discovery.leaderboard.service import LeaderboardService
from discovery.routes.dependencies import (
    get_cache_manager,
    get_history_store,
    get_leaderboard_service,
    get_search_engine,
)
from discovery.services.history import SearchHistoryStore

client = TestClient(app)


class BrokenEngine:
    """Engine stub whose backend is down"""

    def run_search(self, query, filters=None, sort=None):
        raise RuntimeError("search backend unavailable")


class TestDiscoveryAPI:
    """Test discovery API endpoints"""

    def setup_method(self):
        self.history_store = SearchHistoryStore(CacheManager(None))
        app.dependency_overrides[get_cache_manager] = lambda: CacheManager(None)
        app.dependency_overrides[get_history_store] = lambda: self.history_store
        app.dependency_overrides[get_leaderboard_service] = lambda: LeaderboardService(CacheManager(None))

    def teardown_method(self):
        app.dependency_overrides.clear()

    def test_root(self):
        response = client.get("/")
        assert response.status_code == 200
        assert response.json()["message"] == "Fanaara Discovery API"

    def test_health(self):
        response = client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["features"]["search"] is True

    def test_search(self):
        response = client.post("/search", json={"query": "one"})

        assert response.status_code == 200
        data = response.json()
        assert data["query"] == "one"
        assert data["works"][0]["title"] == "One Piece"
        assert data["total"] > 0

        history = client.get("/search/history").json()
        assert [entry["query"] for entry in history] == ["one"]

    def test_search_with_kind_scope(self):
        response = client.post("/search", json={"query": "one", "filters": {"kind": "work"}})
        data = response.json()
        assert data["works"]
        assert data["people"] == []
        assert data["posts"] == []

    def test_invalid_sort_falls_back(self):
        response = client.post("/search", json={"query": "berserk", "sort": "popularity"})
        assert response.status_code == 200

    @pytest.mark.parametrize("threshold", ['"inf"', '"1e999"', "1e999"])
    def test_non_finite_filter_threshold_fails_open(self, threshold):
        body = '{"query": "one", "filters": {"people": {"min_followers": %s}, "groups": {"min_members": %s}}}' % (
            threshold, threshold
        )
        response = client.post("/search", content=body, headers={"Content-Type": "application/json"})

        assert response.status_code == 200
        assert response.json()["works"][0]["title"] == "One Piece"

    def test_empty_query(self):
        response = client.post("/search", json={"query": "   "})
        assert response.status_code == 200
        assert response.json()["total"] == 0
        assert client.get("/search/history").json() == []

    def test_search_backend_failure(self):
        app.dependency_overrides[get_search_engine] = lambda: BrokenEngine()

        response = client.post("/search", json={"query": "one"})

        assert response.status_code == 503
        data = response.json()
        assert data["state"] == "error"
        assert "unavailable" in data["error"]

    def test_suggestions(self):
        response = client.get("/search/suggestions?q=at")

        assert response.status_code == 200
        items = response.json()
        labels = [item["label"] for item in items]
        assert "Attack on Titan" in labels
        assert items[-1]["source"] == "hint"
        assert len(items) <= 8

    def test_suggestions_include_history_when_empty(self):
        client.post("/search", json={"query": "berserk"})
        items = client.get("/search/suggestions").json()
        assert items[0]["label"] == "berserk"
        assert items[0]["source"] == "history"

    @pytest.mark.parametrize("limit", [0, 51])
    def test_suggestions_limit_validation(self, limit):
        response = client.get(f"/search/suggestions?q=at&limit={limit}")
        assert response.status_code == 422

    def test_history_delete(self):
        client.post("/search", json={"query": "berserk"})
        client.post("/search", json={"query": "mappa"})
        entry_id = client.get("/search/history").json()[0]["id"]

        assert client.delete(f"/search/history/{entry_id}").status_code == 204
        assert [e["query"] for e in client.get("/search/history").json()] == ["berserk"]
        assert client.delete(f"/search/history/{entry_id}").status_code == 404

        assert client.delete("/search/history").status_code == 204
        assert client.get("/search/history").json() == []

    def test_toggle_saved(self):
        first = client.post("/search/saved/toggle", json={"query": "mappa", "filters": {"kind": "organization"}})
        assert first.status_code == 200
        assert first.json()["saved"] is True
        assert first.json()["entry"]["kind"] == "organization"
        assert len(client.get("/search/saved").json()) == 1

        second = client.post("/search/saved/toggle", json={"query": "MAPPA", "filters": {"kind": "organization"}})
        assert second.json() == {"saved": False, "entry": None}
        assert client.get("/search/saved").json() == []

    def test_rename_and_delete_saved(self):
        entry = client.post("/search/saved/toggle", json={"query": "berserk"}).json()["entry"]

        renamed = client.patch(f"/search/saved/{entry['id']}", json={"name": "Dark fantasy"})
        assert renamed.status_code == 200
        assert renamed.json()["name"] == "Dark fantasy"

        assert client.delete(f"/search/saved/{entry['id']}").status_code == 204
        assert client.get("/search/saved").json() == []

    def test_unknown_saved_id(self):
        assert client.patch("/search/saved/s_missing", json={"name": "x"}).status_code == 404
        assert client.delete("/search/saved/s_missing").status_code == 404

    def test_ranks_default(self):
        response = client.get("/ranks")

        assert response.status_code == 200
        items = response.json()
        assert len(items) == 100
        assert items[0]["category"] == "anime"
        assert items[0]["metric"] == "score"
        assert items[0]["rank"] == 1

    def test_ranks_with_filter(self):
        items = client.get("/ranks?category=studio&filter_a=KR").json()
        assert items
        assert all(item["attributes"]["region"] == "KR" for item in items)
        assert all(item["href"].startswith("/studio/") for item in items)

    def test_ranks_invalid_values_fall_back(self):
        bogus = client.get("/ranks?category=planets&sort=sideways&time_range=decade").json()
        default = client.get("/ranks").json()
        assert bogus == default

    def test_ranks_are_deterministic(self):
        url = "/ranks?category=user&metric=ashbiya&time_range=week&sort=rising"
        assert client.get(url).json() == client.get(url).json()
