"""Integration tests for API endpoints.

These tests verify API endpoints work correctly end-to-end against an
in-memory database and a fixed clock (Wednesday 2024-01-10 12:00).
"""

import pytest
from fastapi.testclient import TestClient


def _create(test_client: TestClient, **overrides) -> dict:
    body = {"title": "Test Task", "category_id": "1", **overrides}
    response = test_client.post("/tasks", json=body)
    assert response.status_code == 201, response.text
    return response.json()["task"]


class TestHealth:
    def test_health(self, test_client):
        response = test_client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


class TestTaskEndpoints:
    """Test task CRUD API endpoints."""

    def test_create_task(self, test_client):
        """Test POST /tasks endpoint."""
        task = _create(test_client, description="Test description", priority=3,
                       due_date="2024-01-11T09:00:00")

        assert task["title"] == "Test Task"
        assert task["description"] == "Test description"
        assert task["category_id"] == "1"
        assert task["priority"] == 3
        assert task["completed"] is False
        assert task["completed_at"] is None
        assert task["archived"] is False
        assert task["created_at"] == "2024-01-10T12:00:00"

    @pytest.mark.parametrize("body", [
        {"category_id": "1"},
        {"title": "  ", "category_id": "1"},
        {"title": "No category"},
    ])
    def test_create_task_missing_required_fields(self, test_client, body):
        response = test_client.post("/tasks", json=body)
        assert response.status_code == 422
        assert test_client.get("/tasks").json()["count"] == 0

    def test_get_task_by_id(self, test_client):
        created = _create(test_client, title="Get Test Task")

        response = test_client.get(f"/tasks/{created['id']}")

        assert response.status_code == 200
        assert response.json()["task"]["title"] == "Get Test Task"

    def test_get_unknown_task_returns_404(self, test_client):
        assert test_client.get("/tasks/nonexistent-id").status_code == 404

    def test_toggle_completion(self, test_client):
        """Test PATCH /tasks/{id} stamps completed_at on completion and keeps it on revert."""
        created = _create(test_client)

        done = test_client.patch(f"/tasks/{created['id']}", json={"completed": True})
        assert done.status_code == 200
        assert done.json()["task"]["completed_at"] == "2024-01-10T12:00:00"

        reverted = test_client.patch(f"/tasks/{created['id']}", json={"completed": False})
        assert reverted.json()["task"]["completed"] is False
        assert reverted.json()["task"]["completed_at"] == "2024-01-10T12:00:00"

    def test_patch_unknown_task_returns_404(self, test_client):
        response = test_client.patch("/tasks/nonexistent-id", json={"title": "x"})
        assert response.status_code == 404

    def test_patch_rejects_immutable_fields(self, test_client):
        created = _create(test_client)
        response = test_client.patch(f"/tasks/{created['id']}", json={"id": "other"})
        assert response.status_code == 422

    def test_delete_task(self, test_client):
        created = _create(test_client)

        response = test_client.delete(f"/tasks/{created['id']}")

        assert response.status_code == 204
        assert test_client.get(f"/tasks/{created['id']}").status_code == 404
        assert test_client.delete(f"/tasks/{created['id']}").status_code == 404

    def test_archive_and_restore(self, test_client):
        created = _create(test_client)

        archived = test_client.post(f"/tasks/{created['id']}/archive")
        assert archived.status_code == 200
        assert archived.json()["task"]["archived"] is True
        assert test_client.get("/tasks", params={"archived": True}).json()["count"] == 1
        assert test_client.get("/tasks", params={"archived": False}).json()["count"] == 0

        restored = test_client.post(f"/tasks/{created['id']}/restore")
        assert restored.json()["task"]["archived_at"] is None
        assert test_client.get("/tasks", params={"archived": True}).json()["count"] == 0
        assert test_client.get("/tasks", params={"archived": False}).json()["count"] == 1

    def test_archive_unknown_task_returns_404(self, test_client):
        assert test_client.post("/tasks/nonexistent-id/archive").status_code == 404
        assert test_client.post("/tasks/nonexistent-id/restore").status_code == 404

    def test_list_search_and_sort(self, test_client):
        _create(test_client, title="Buy milk", priority=1)
        _create(test_client, title="Buy bread", priority=3)
        _create(test_client, title="Gym", priority=2)

        response = test_client.get("/tasks", params={"q": "buy", "sort_by": "priority"})

        data = response.json()
        assert data["count"] == 2
        assert [t["title"] for t in data["tasks"]] == ["Buy bread", "Buy milk"]

    def test_list_rejects_unknown_sort_key(self, test_client):
        assert test_client.get("/tasks", params={"sort_by": "colour"}).status_code == 422


class TestRecurringEndpoint:
    """Test POST /tasks/recurring."""

    def test_creates_all_occurrences(self, test_client):
        response = test_client.post(
            "/tasks/recurring",
            params={"anchor_date": "2024-01-10T09:00:00"},
            json={
                "title": "Stand-up",
                "category_id": "1",
                "schedule_pattern": "daily",
                "interval": 2,
                "max_occurrences": 3,
            },
        )

        assert response.status_code == 201
        data = response.json()
        assert data["count"] == 3
        assert [t["due_date"] for t in data["tasks"]] == [
            "2024-01-10T09:00:00",
            "2024-01-12T09:00:00",
            "2024-01-14T09:00:00",
        ]
        assert [t["title"] for t in data["tasks"]] == ["Stand-up", "Stand-up (2)", "Stand-up (3)"]
        assert len({t["recurring_id"] for t in data["tasks"]}) == 1
        assert test_client.get("/tasks").json()["count"] == 3

    def test_invalid_spec_stores_nothing(self, test_client):
        response = test_client.post(
            "/tasks/recurring",
            json={"title": "Stand-up", "category_id": "1", "schedule_pattern": "weekly", "interval": 1},
        )

        assert response.status_code == 422
        assert test_client.get("/tasks").json()["count"] == 0

    def test_out_of_range_interval_is_rejected(self, test_client):
        response = test_client.post(
            "/tasks/recurring",
            json={
                "title": "Stand-up",
                "category_id": "1",
                "schedule_pattern": "daily",
                "interval": 10**9,
                "max_occurrences": 2,
            },
        )

        assert response.status_code == 422
        assert test_client.get("/tasks").json()["count"] == 0


class TestSummaryEndpoints:
    """Test analytics endpoints."""

    def test_daily_summary(self, test_client):
        created = _create(test_client, due_date="2024-01-10T09:00:00")
        test_client.patch(f"/tasks/{created['id']}", json={"completed": True})

        response = test_client.get("/summary/daily", params={"days": 1})

        assert response.status_code == 200
        buckets = response.json()
        assert len(buckets) == 1
        assert buckets[0]["date"] == "2024-01-10"
        assert (buckets[0]["completed"], buckets[0]["total"], buckets[0]["completion_rate"]) == (1, 1, 100.0)

    def test_daily_summary_default_length(self, test_client):
        assert len(test_client.get("/summary/daily").json()) == 7

    def test_daily_summary_rejects_zero_days(self, test_client):
        assert test_client.get("/summary/daily", params={"days": 0}).status_code == 422

    def test_weekly_summary(self, test_client):
        response = test_client.get("/summary/weekly", params={"weeks": 2})
        assert [b["date"] for b in response.json()] == ["2023-12-31", "2024-01-07"]

    def test_category_breakdown(self, test_client):
        _create(test_client, category_id="1")
        _create(test_client, category_id="4")
        _create(test_client, category_id="4")

        stats = test_client.get("/summary/categories").json()

        assert [(s["category_id"], s["name"], s["total"]) for s in stats] == [("1", "Work", 1), ("4", "Health", 2)]

    def test_overall_stats_empty(self, test_client):
        stats = test_client.get("/summary/overall").json()

        assert stats["today"]["completion_rate"] == 0.0
        assert stats["week"]["completion_rate"] == 0.0
        assert stats["overall"]["completion_rate"] == 0.0

    def test_progress_and_categories(self, test_client):
        _create(test_client, category_id="2", due_date="2024-01-09T09:00:00")

        progress = test_client.get("/summary/progress").json()
        categories = test_client.get("/categories").json()

        assert progress["overdue"] == 1
        assert categories["pending_counts"]["2"] == 1
        assert len(categories["categories"]) == 5
