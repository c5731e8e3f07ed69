"""Tests for the dashboard HTTP API."""

from tests.conftest import OTHER_USER_ID


class TestHealthAndIdentity:
    """Tests for /health and the X-User-Id header."""

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["service"] == "life-cockpit"
        assert "X-Process-Time" in response.headers

    def test_missing_user_header(self, client):
        response = client.get("/api/habits")
        assert response.status_code == 401
        assert response.json()["status_code"] == 401

    def test_blank_user_header(self, client):
        assert client.get("/api/habits", headers={"X-User-Id": "   "}).status_code == 401

    def test_too_long_user_header(self, client):
        assert client.get("/api/habits", headers={"X-User-Id": "u" * 129}).status_code == 400

    def test_docs_disabled_without_debug(self, client):
        assert client.get("/api/docs").status_code == 404


class TestCaptureEndpoints:
    """Tests for /api/captures."""

    def test_classify_preview_does_not_store(self, client, headers):
        response = client.post("/api/captures/classify", json={"content": "* Deep Work"})
        assert response.json() == {"type": "reading", "clean_content": "Deep Work"}
        assert client.get("/api/captures", headers=headers).json() == []

    def test_capture_flow(self, client, headers):
        created = client.post("/api/captures", json={"content": "[] buy milk"}, headers=headers)
        assert created.status_code == 201
        capture = created.json()
        assert capture["content"] == "buy milk"
        assert capture["capture_type"] == "task"

        [item] = client.get("/api/captures", headers=headers).json()
        assert item["id"] == capture["id"]
        assert item["time_ago"] == "just now"

        processed = client.post(f"/api/captures/{capture['id']}/processed", headers=headers)
        assert processed.json()["processed"] is True
        assert client.get("/api/captures", headers=headers).json() == []

    def test_empty_capture_is_422_with_field(self, client, headers):
        response = client.post("/api/captures", json={"content": "#   "}, headers=headers)
        assert response.status_code == 422
        assert response.json()["field"] == "content"

    def test_foreign_capture_is_404(self, client, headers):
        capture = client.post("/api/captures", json={"content": "# mine"}, headers=headers).json()
        response = client.delete(f"/api/captures/{capture['id']}", headers={"X-User-Id": OTHER_USER_ID})
        assert response.status_code == 404


class TestHabitEndpoints:
    """Tests for /api/habits."""

    def create_habit(self, client, headers, name="Meditate"):
        response = client.post("/api/habits", json={"name": name}, headers=headers)
        assert response.status_code == 201
        return response.json()

    def test_complete_twice_same_day(self, client, headers):
        habit = self.create_habit(client, headers)

        first = client.post(f"/api/habits/{habit['id']}/complete", json={"notes": "10 min"}, headers=headers)
        assert first.status_code == 200
        assert first.json()["new_streak"] == 1
        assert first.json()["completion_id"]

        second = client.post(f"/api/habits/{habit['id']}/complete", headers=headers)
        assert second.json()["new_streak"] == 1
        assert second.json()["completion_id"] is None

        [listed] = client.get("/api/habits", headers=headers).json()
        assert listed["completed_today"] is True
        assert listed["weekly_completions"][0] is True
        assert len(listed["weekly_completions"]) == 7

    def test_stats(self, client, headers):
        habit = self.create_habit(client, headers)
        self.create_habit(client, headers, "Run")
        client.post(f"/api/habits/{habit['id']}/complete", headers=headers)

        stats = client.get("/api/habits/stats", headers=headers).json()
        assert stats == {
            "total_habits": 2,
            "total_streak": 1,
            "longest_streak": 1,
            "completed_today": 1,
            "completion_rate_today": 50,
        }

    def test_history(self, client, headers):
        habit = self.create_habit(client, headers)
        client.post(f"/api/habits/{habit['id']}/complete", headers=headers)

        history = client.get(f"/api/habits/{habit['id']}/history?days=3", headers=headers).json()
        assert history["completions"] == [True, False, False]

    def test_history_rejects_zero_days(self, client, headers):
        habit = self.create_habit(client, headers)
        response = client.get(f"/api/habits/{habit['id']}/history?days=0", headers=headers)
        assert response.status_code == 422
        assert response.json()["field"] == "days"

    def test_complete_missing_habit_is_404(self, client, headers):
        assert client.post("/api/habits/missing/complete", headers=headers).status_code == 404

    def test_blank_name_rejected(self, client, headers):
        assert client.post("/api/habits", json={"name": "  "}, headers=headers).status_code == 422

    def test_patch_rejects_unknown_fields(self, client, headers):
        habit = self.create_habit(client, headers)
        response = client.patch(f"/api/habits/{habit['id']}", json={"streak_count": 99}, headers=headers)
        assert response.status_code == 422


class TestProjectsAndTasksEndpoints:
    """Tests for /api/projects and /api/tasks."""

    def test_project_with_tasks(self, client, headers):
        project = client.post("/api/projects", json={"name": "Cockpit"}, headers=headers).json()
        task = client.post("/api/tasks", json={"title": "Ship", "project_id": project["id"], "status": "done"},
                           headers=headers).json()
        assert task["completed_at"] is not None

        stats = client.get(f"/api/projects/{project['id']}/stats", headers=headers).json()
        assert stats["total"] == 1
        assert stats["done"] == 1

        [listed] = client.get("/api/projects?with_stats=true", headers=headers).json()
        assert listed["health_score"] == 100
        assert listed["stats"]["done"] == 1

    def test_invalid_color_is_422(self, client, headers):
        response = client.post("/api/projects", json={"name": "X", "color": "red"}, headers=headers)
        assert response.status_code == 422

    def test_invalid_status_filter(self, client, headers):
        assert client.get("/api/projects?status=paused", headers=headers).status_code == 422

    def test_recent_sessions_carry_project(self, client, headers):
        project = client.post("/api/projects", json={"name": "Cockpit"}, headers=headers).json()
        client.post("/api/focus/sessions", json={"duration_minutes": 25, "started_at": "2026-10-17T09:00:00Z",
                                                 "project_id": project["id"]}, headers=headers)
        client.post("/api/focus/sessions", json={"duration_minutes": 50, "started_at": "2026-10-17T10:00:00Z"},
                    headers=headers)

        unlinked, linked = client.get("/api/focus/sessions/recent", headers=headers).json()

        assert unlinked["project_name"] is None
        assert unlinked["project_color"] is None
        assert linked["project_name"] == "Cockpit"
        assert linked["project_color"] == "#4a90e2"


class TestPlannerAndStatsEndpoints:
    """Tests for /api/planner and /api/stats."""

    def test_overlapping_allocation_is_422(self, client, headers):
        block = {"category": "work", "start_time": "09:00", "end_time": "10:00", "allocation_date": "2026-10-17"}
        assert client.post("/api/planner/allocations", json=block, headers=headers).status_code == 201

        overlapping = {**block, "start_time": "09:30", "end_time": "10:30"}
        response = client.post("/api/planner/allocations", json=overlapping, headers=headers)
        assert response.status_code == 422

        summary = client.get("/api/planner/summary?date=2026-10-17", headers=headers).json()
        assert summary == [{"category": "work", "minutes": 60}]

    def test_preferences_defaults(self, client, headers):
        prefs = client.get("/api/planner/preferences", headers=headers).json()
        assert prefs["day_start_time"] == "06:00"
        assert prefs["pomo_duration"] == 25

    def test_score(self, client):
        response = client.get("/api/stats/score?minutes=120&tasks=3&energy=5")
        assert response.json() == {"productivity_score": 45}

    def test_overview_without_data(self, client, headers):
        overview = client.get("/api/stats/overview", headers=headers).json()
        assert overview["productivity_score"] == 0
        assert overview["session_count"] == 0
