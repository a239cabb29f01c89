"""
tests/test_planner_routes.py -- Tasks, events, and the dashboard aggregate.

Every record is private to its owner: another user's id behaves exactly like
a nonexistent one (404).
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from fastapi.testclient import TestClient


def _iso(delta: timedelta) -> str:
    return (datetime.now(timezone.utc) + delta).isoformat()


class TestTasks:
    def test_create_with_defaults(self, client: TestClient, make_user) -> None:
        headers, user = make_user("tasks@example.com")
        resp = client.post("/api/tasks", json={"title": "  Write report  "}, headers=headers)
        assert resp.status_code == 201, resp.text
        task = resp.json()
        assert task["title"] == "Write report"
        assert task["status"] == "todo"
        assert task["priority"] == "medium"
        assert task["dueDate"] is None
        assert task["userId"] == user["id"]

    def test_due_date_normalized_to_utc(self, client: TestClient, make_user) -> None:
        headers, _ = make_user("tasks@example.com")
        resp = client.post(
            "/api/tasks", json={"title": "Call", "dueDate": "2030-01-01T10:00:00+02:00"}, headers=headers
        )
        assert resp.json()["dueDate"] == "2030-01-01T08:00:00+00:00"

    def test_list_newest_first(self, client: TestClient, make_user) -> None:
        headers, _ = make_user("tasks@example.com")
        first = client.post("/api/tasks", json={"title": "First"}, headers=headers).json()
        second = client.post("/api/tasks", json={"title": "Second"}, headers=headers).json()
        ids = [t["id"] for t in client.get("/api/tasks", headers=headers).json()]
        assert ids == [second["id"], first["id"]]

    def test_partial_update(self, client: TestClient, make_user) -> None:
        headers, _ = make_user("tasks@example.com")
        task = client.post(
            "/api/tasks", json={"title": "Ship", "priority": "high"}, headers=headers
        ).json()
        resp = client.put(f"/api/tasks/{task['id']}", json={"status": "in-progress"}, headers=headers)
        assert resp.status_code == 200, resp.text
        updated = resp.json()
        assert updated["status"] == "in-progress"
        assert updated["priority"] == "high"
        assert updated["title"] == "Ship"

    def test_invalid_status_is_400(self, client: TestClient, make_user) -> None:
        headers, _ = make_user("tasks@example.com")
        resp = client.post("/api/tasks", json={"title": "Bad", "status": "archived"}, headers=headers)
        assert resp.status_code == 400

    def test_null_title_is_400(self, client: TestClient, make_user) -> None:
        headers, _ = make_user("tasks@example.com")
        task = client.post("/api/tasks", json={"title": "Keep"}, headers=headers).json()
        resp = client.put(f"/api/tasks/{task['id']}", json={"title": None}, headers=headers)
        assert resp.status_code == 400

    def test_delete(self, client: TestClient, make_user) -> None:
        headers, _ = make_user("tasks@example.com")
        task = client.post("/api/tasks", json={"title": "Gone"}, headers=headers).json()
        resp = client.delete(f"/api/tasks/{task['id']}", headers=headers)
        assert resp.status_code == 200
        assert resp.json()["message"] == "Task deleted successfully"
        assert client.get("/api/tasks", headers=headers).json() == []

    def test_other_users_task_is_404(self, client: TestClient, make_user) -> None:
        owner_headers, _ = make_user("owner@example.com")
        other_headers, _ = make_user("other@example.com")
        task = client.post("/api/tasks", json={"title": "Private"}, headers=owner_headers).json()

        assert client.get("/api/tasks", headers=other_headers).json() == []
        assert client.put(f"/api/tasks/{task['id']}", json={"title": "Mine"}, headers=other_headers).status_code == 404
        assert client.delete(f"/api/tasks/{task['id']}", headers=other_headers).status_code == 404
        assert client.get("/api/tasks", headers=owner_headers).json()[0]["title"] == "Private"


class TestEvents:
    def test_default_color(self, client: TestClient, make_user) -> None:
        headers, _ = make_user("events@example.com")
        resp = client.post("/api/events", json={"title": "Standup", "date": _iso(timedelta(days=1))}, headers=headers)
        assert resp.status_code == 201, resp.text
        assert resp.json()["color"] == "#8B5CF6"

    def test_chronological_order(self, client: TestClient, make_user) -> None:
        headers, _ = make_user("events@example.com")
        later = client.post(
            "/api/events", json={"title": "Later", "date": _iso(timedelta(days=5))}, headers=headers
        ).json()
        sooner = client.post(
            "/api/events", json={"title": "Sooner", "date": _iso(timedelta(days=1))}, headers=headers
        ).json()
        ids = [e["id"] for e in client.get("/api/events", headers=headers).json()]
        assert ids == [sooner["id"], later["id"]]

    def test_missing_date_is_400(self, client: TestClient, make_user) -> None:
        headers, _ = make_user("events@example.com")
        assert client.post("/api/events", json={"title": "No date"}, headers=headers).status_code == 400

    def test_update_and_delete(self, client: TestClient, make_user) -> None:
        headers, _ = make_user("events@example.com")
        event = client.post(
            "/api/events", json={"title": "Review", "date": _iso(timedelta(days=2))}, headers=headers
        ).json()
        resp = client.put(f"/api/events/{event['id']}", json={"color": "#10B981"}, headers=headers)
        assert resp.status_code == 200, resp.text
        assert resp.json()["color"] == "#10B981"
        assert resp.json()["title"] == "Review"

        resp = client.delete(f"/api/events/{event['id']}", headers=headers)
        assert resp.json()["message"] == "Event deleted successfully"
        assert client.delete(f"/api/events/{event['id']}", headers=headers).status_code == 404

    def test_other_users_event_is_404(self, client: TestClient, make_user) -> None:
        owner_headers, _ = make_user("owner@example.com")
        other_headers, _ = make_user("other@example.com")
        event = client.post(
            "/api/events", json={"title": "Private", "date": _iso(timedelta(days=1))}, headers=owner_headers
        ).json()
        resp = client.put(f"/api/events/{event['id']}", json={"title": "Mine"}, headers=other_headers)
        assert resp.status_code == 404


class TestDashboard:
    def test_counts(self, client: TestClient, make_user) -> None:
        headers, _ = make_user("dash@example.com")
        _h, teammate = make_user("mate@example.com")

        client.post("/api/tasks", json={"title": "A"}, headers=headers)
        client.post("/api/tasks", json={"title": "B", "status": "done"}, headers=headers)
        client.post("/api/tasks", json={"title": "C", "status": "in-progress"}, headers=headers)
        client.post("/api/events", json={"title": "Past", "date": _iso(timedelta(days=-3))}, headers=headers)
        client.post("/api/events", json={"title": "Next", "date": _iso(timedelta(days=3))}, headers=headers)
        client.post("/api/team-members", json={"user_id": teammate["id"]}, headers=headers)

        resp = client.get("/api/dashboard", headers=headers)
        assert resp.status_code == 200
        data = resp.json()
        assert data["totalTasks"] == 3
        assert data["taskCounts"] == {"todo": 1, "in-progress": 1, "done": 1}
        assert data["upcomingEvents"] == 1
        assert data["teamSize"] == 1

    def test_empty_dashboard(self, client: TestClient, make_user) -> None:
        headers, _ = make_user("dash@example.com")
        data = client.get("/api/dashboard", headers=headers).json()
        assert data["totalTasks"] == 0
        assert data["upcomingEvents"] == 0
        assert data["teamSize"] == 0
