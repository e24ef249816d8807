"""Tests for ui/app.py — the FastAPI surface."""

import base64
import os

import pytest
from fastapi.testclient import TestClient

from ui.app import app

DATE = "20260302"


@pytest.fixture
def client(workspace):
    return TestClient(app)


def test_healthz(client):
    assert client.get("/healthz").json() == {"ok": "true"}


def test_index_renders_schedule(client):
    resp = client.get(f"/?date={DATE}")
    assert resp.status_code == 200
    assert "Peak Window Deep Work" in resp.text
    assert "08:00 am" in resp.text


def test_get_settings(client):
    settings = client.get("/api/settings").json()["settings"]
    assert settings["focusGoal"] == 7
    assert settings["peakWindow"] == "Morning"


def test_update_settings_flat(client):
    resp = client.put("/api/settings", json={"startHour": "9", "startPeriod": "AM", "focusGoal": 6})
    assert resp.status_code == 200
    settings = resp.json()["settings"]
    assert settings["startTime"]["hour"] == "09"
    assert settings["focusGoal"] == 6


def test_update_settings_invalid(client):
    resp = client.put("/api/settings", json={"peakWindow": "Dawn"})
    assert resp.status_code == 400
    assert resp.json()["ok"] is False


def test_calendar_import_and_clear(client, ics_text):
    resp = client.post("/api/calendar", content=ics_text.encode("utf-8"), headers={"Content-Type": "text/calendar"})
    assert resp.status_code == 200
    assert resp.json()["count"] == 6

    listed = client.get("/api/calendar").json()
    assert listed["count"] == 6
    assert listed["events"][1]["summary"] == "Design review"

    plan = client.get(f"/api/schedule/{DATE}").json()["plan"]
    meetings = [b for b in plan["blocks"] if b["kind"] == "meeting"]
    assert [m["label"] for m in meetings][1] == "Design review"

    assert client.delete("/api/calendar").json()["cleared"] is True
    assert client.get("/api/calendar").json()["count"] == 0


def test_calendar_import_empty(client):
    resp = client.post("/api/calendar", content=b"")
    assert resp.status_code == 400


def test_calendar_import_not_utf8(client):
    resp = client.post("/api/calendar", content=b"\xff\xfe\x00")
    assert resp.status_code == 400


def test_schedule(client):
    body = client.get(f"/api/schedule/{DATE}").json()
    assert body["plan"]["date"] == DATE
    assert body["completed"] == []
    assert body["activeBlock"] is None


def test_schedule_bad_date(client):
    assert client.get("/api/schedule/yesterday").status_code == 400


def test_adjust_and_reset(client):
    plan = client.post(f"/api/schedule/{DATE}/adjust", json={"direction": "add"}).json()["plan"]
    assert plan["effectiveGoalMinutes"] == 480
    assert plan["adjustmentMinutes"] == 60

    plan = client.delete(f"/api/schedule/{DATE}/adjust").json()["plan"]
    assert plan["effectiveGoalMinutes"] == 420


def test_adjust_bad_direction(client):
    resp = client.post(f"/api/schedule/{DATE}/adjust", json={"direction": "up"})
    assert resp.status_code == 400


def test_complete_block(client):
    first = f"{DATE}-focus-480"
    resp = client.post(f"/api/schedule/{DATE}/complete/{first}")
    assert resp.json() == {"ok": True, "next": f"{DATE}-wellness-570"}

    body = client.get(f"/api/schedule/{DATE}").json()
    assert body["completed"] == [first]
    assert body["activeBlock"] == f"{DATE}-wellness-570"


def test_complete_unknown_block(client):
    assert client.post(f"/api/schedule/{DATE}/complete/nope").status_code == 404


def test_days(client):
    days = client.get("/api/days").json()["days"]
    assert len(days) == 7


def test_basic_auth_required_when_configured(client):
    os.environ["FOCUSPLAN_USERNAME"] = "me"
    os.environ["FOCUSPLAN_PASSWORD"] = "secret"
    try:
        assert client.get("/api/settings").status_code == 401
        token = base64.b64encode(b"me:secret").decode("ascii")
        resp = client.get("/api/settings", headers={"Authorization": f"Basic {token}"})
        assert resp.status_code == 200
    finally:
        del os.environ["FOCUSPLAN_USERNAME"]
        del os.environ["FOCUSPLAN_PASSWORD"]


def test_corrupt_settings_file_is_a_client_error(client, workspace):
    (workspace / "settings.yaml").write_text("focusGoal: lots\n", encoding="utf-8")
    resp = client.get("/api/settings")
    assert resp.status_code == 400
    assert "Invalid settings" in resp.json()["error"]


def test_adjusted_day_reports_on_target(client):
    plan = client.post(f"/api/schedule/{DATE}/adjust", json={"direction": "add"}).json()["plan"]
    assert plan["statedGoalMinutes"] == 420
    assert plan["goalStatus"]["onTarget"] is True
    assert plan["goalStatus"]["suggestion"] is None
