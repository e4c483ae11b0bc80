import pytest

pytest.importorskip("fastapi")
from fastapi.testclient import TestClient

from app.main import app

client = TestClient(app)


class _FakeAttendanceService:
    def __init__(self) -> None:
        self.calls: list[tuple[str, dict]] = []

    def health(self):
        return {"ok": True, "source": "attendease_service", "config_loaded": True}

    def subjects(self):
        return {"ok": True, "subjects": ["DBMS", "OS"]}

    def generate_report(self, *, subject=None):
        self.calls.append(("generate_report", {"subject": subject}))
        return {"ok": True, "report": {"subject": subject or "All"}, "error": None}

    def current_report(self):
        return {"ok": True, "report": None, "error": None}

    def query_profile(self, *, query):
        self.calls.append(("query_profile", {"query": query}))
        return {"ok": True, "entry": {"query": query}, "error": None}

    def profile_history(self):
        return {"ok": True, "history": [], "count": 0}

    def clear_profile_history(self):
        return {"ok": True, "cleared": 2}

    def check_alerts(self, *, threshold=None):
        self.calls.append(("check_alerts", {"threshold": threshold}))
        return {"ok": True, "alerts": {"threshold_percentage": threshold}, "rows": [], "error": None}

    def current_alerts(self):
        return {"ok": True, "alerts": None, "rows": [], "error": None}

    def schedule_status(self):
        return {"ok": True, "schedule": {"id": "sched_1", "state": "Active"}, "error": None}

    def toggle_schedule(self):
        return {"ok": True, "schedule": {"id": "sched_1", "state": "Paused"}, "toggled": "paused", "error": None}

    def schedule_logs(self, *, limit=None):
        self.calls.append(("schedule_logs", {"limit": limit}))
        return {"ok": True, "executions": [], "count": 0, "error": None}

    def render_text(self, *, text):
        return {"ok": True, "count": 1, "blocks": [], "html": "", "echo": text}

    def classify(self, *, severity=None, status=None):
        return {"ok": True, "severity_tier": severity, "status_tier": status}


@pytest.fixture()
def fake_service(monkeypatch):
    fake = _FakeAttendanceService()
    monkeypatch.setattr("app.main.get_attendance_service", lambda: fake)
    return fake


def test_health_endpoint_uses_attendance_service(fake_service):
    res = client.get("/health")
    assert res.status_code == 200
    assert res.json()["source"] == "attendease_service"


def test_subjects_endpoint(fake_service):
    res = client.get("/api/subjects")
    assert res.status_code == 200
    assert res.json()["subjects"] == ["DBMS", "OS"]


def test_report_endpoints(fake_service):
    res = client.post("/api/reports", json={"subject": "DBMS"})
    assert res.status_code == 200
    assert res.json()["report"]["subject"] == "DBMS"
    assert fake_service.calls[-1] == ("generate_report", {"subject": "DBMS"})

    current = client.get("/api/reports/current")
    assert current.status_code == 200
    assert current.json()["report"] is None


def test_profile_endpoints(fake_service):
    res = client.post("/api/profiles/query", json={"query": "Roll No 101"})
    assert res.status_code == 200
    assert res.json()["entry"]["query"] == "Roll No 101"

    assert client.get("/api/profiles/history").json()["count"] == 0
    assert client.post("/api/profiles/history/clear").json()["cleared"] == 2


def test_profile_query_requires_query_field(fake_service):
    res = client.post("/api/profiles/query", json={})
    assert res.status_code == 422


def test_alert_endpoints(fake_service):
    res = client.post("/api/alerts/check", json={"threshold": 80})
    assert res.status_code == 200
    assert fake_service.calls[-1] == ("check_alerts", {"threshold": 80.0})

    assert client.get("/api/alerts/current").json()["rows"] == []


def test_alert_threshold_is_validated(fake_service):
    res = client.post("/api/alerts/check", json={"threshold": 150})
    assert res.status_code == 422
    res = client.post("/api/alerts/check", json={"threshold": 0})
    assert res.status_code == 422


def test_schedule_endpoints(fake_service):
    status = client.get("/api/alerts/schedule")
    assert status.status_code == 200
    assert status.json()["schedule"]["state"] == "Active"

    toggled = client.post("/api/alerts/schedule/toggle")
    assert toggled.json()["toggled"] == "paused"

    logs = client.get("/api/alerts/schedule/logs?limit=500")
    assert logs.status_code == 200
    assert fake_service.calls[-1] == ("schedule_logs", {"limit": 100})


def test_render_and_classify_endpoints(fake_service):
    rendered = client.post("/api/render", json={"text": "## Hi"})
    assert rendered.json()["echo"] == "## Hi"

    tiers = client.post("/api/classify", json={"severity": "Severe", "status": "Good"})
    assert tiers.json()["severity_tier"] == "Severe"
    assert tiers.json()["status_tier"] == "Good"


def test_index_page_served():
    res = client.get("/")
    assert res.status_code == 200
    assert "AttendEase" in res.text
