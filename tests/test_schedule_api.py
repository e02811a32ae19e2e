from datetime import datetime

import pytest


def at(hour, minute, second=0):
    return datetime(2026, 10, 19, hour, minute, second)


@pytest.mark.parametrize("method, path", [
    ("get", "/api/schedule/next-dose"),
    ("post", "/api/schedule/check"),
    ("get", "/api/feed"),
    ("post", "/api/agent/summary"),
])
def test_companion_routes_require_session(client, method, path):
    response = getattr(client, method)(path)
    assert response.status_code == 401


def test_login_rejects_wrong_code(client):
    response = client.post("/api/auth/login", json={"code": "0000"})
    assert response.status_code == 401


def test_session_info(client, auth_headers):
    response = client.get("/api/auth/me", headers=auth_headers)
    assert response.json()["subject"] == "patient"


def test_next_dose(client, auth_headers, medications):
    data = client.get("/api/schedule/next-dose", headers=auth_headers).json()

    assert data["next_dose"]["name"] == "Metformin"
    assert data["due_dose"]["name"] == "Metformin"
    assert data["phase"] == "pending"
    assert data["snooze"]["active"] is False


def test_next_dose_without_medications(client, auth_headers):
    data = client.get("/api/schedule/next-dose", headers=auth_headers).json()
    assert data["next_dose"] is None
    assert data["phase"] is None


def test_check_publishes_reminder_to_feed(client, auth_headers, medications, clock):
    clock.set(at(8, 0, 30))
    data = client.post("/api/schedule/check", headers=auth_headers).json()

    assert [e["title"] for e in data["fired"]] == ["Medication Reminder"]
    assert data["fired"][0]["body"] == "It's time for your Metformin."

    feed = client.get("/api/feed", headers=auth_headers).json()
    assert feed[0]["title"] == "Medication Reminder"
    assert feed[-1]["title"] == "Welcome to MediSafe AI"

    again = client.post("/api/schedule/check", headers=auth_headers).json()
    assert again["fired"] == []


def test_urgent_alert_requires_ack(client, auth_headers, medications, clock):
    clock.set(at(8, 15))
    fired = client.post("/api/schedule/check", headers=auth_headers).json()["fired"]

    assert fired[0]["category"] == "urgent"
    assert fired[0]["requires_ack"] is True

    entry_id = fired[0]["id"]
    response = client.post(f"/api/feed/{entry_id}/ack", params={"source": "local"}, headers=auth_headers)
    assert response.status_code == 200
    feed = client.get("/api/feed", headers=auth_headers).json()
    assert feed[0]["read"] is True

    response = client.post("/api/feed/1/ack", params={"source": "local"}, headers=auth_headers)
    assert response.status_code == 404


def test_notifications_disabled_in_settings(client, auth_headers, medications, clock):
    client.post("/api/settings", json={"notifications_enabled": False})
    clock.set(at(8, 0, 30))

    assert client.post("/api/schedule/check", headers=auth_headers).json()["fired"] == []


def test_snooze_suppresses_until_expiry(client, auth_headers, medications, clock, fake_genai):
    fake_genai.queue("Delaying Metformin may raise your blood sugar.")
    clock.set(at(8, 0, 10))

    response = client.post(
        "/api/schedule/snooze", json={"medication_id": medications[0]["id"]}, headers=auth_headers
    )
    assert response.status_code == 200
    snooze = response.json()
    assert snooze["disclaimer"] == "Delaying Metformin may raise your blood sugar."
    assert snooze["until"].startswith("2026-10-19T08:15:10")

    clock.set(at(8, 0, 30))
    data = client.post("/api/schedule/check", headers=auth_headers).json()
    assert data == {"fired": [], "snoozed": True}

    clock.set(at(8, 16))
    data = client.post("/api/schedule/check", headers=auth_headers).json()
    assert data["snoozed"] is False
    assert [e["category"] for e in data["fired"]] == ["urgent"]


def test_snooze_uses_configured_duration(client, auth_headers, medications, clock):
    client.post("/api/settings", json={"snooze_duration_minutes": 30})

    snooze = client.post(
        "/api/schedule/snooze", json={"medication_id": medications[1]["id"]}, headers=auth_headers
    ).json()
    assert snooze["until"].startswith("2026-10-19T08:29")


def test_snooze_disclaimer_fallback(client, auth_headers, medications, fake_genai):
    fake_genai.error = RuntimeError("network down")

    snooze = client.post(
        "/api/schedule/snooze", json={"medication_id": medications[0]["id"]}, headers=auth_headers
    ).json()
    assert snooze["disclaimer"].startswith("Delaying medication increases health risks.")


def test_snooze_unknown_medication(client, auth_headers):
    response = client.post("/api/schedule/snooze", json={"medication_id": 999}, headers=auth_headers)
    assert response.status_code == 404


def test_clear_snooze(client, auth_headers, medications):
    client.post("/api/schedule/snooze", json={"medication_id": medications[0]["id"]}, headers=auth_headers)
    assert client.delete("/api/schedule/snooze", headers=auth_headers).status_code == 200

    data = client.get("/api/schedule/next-dose", headers=auth_headers).json()
    assert data["snooze"] == {"active": False, "until": None, "disclaimer": None}


def test_logged_dose_stops_reminders(client, auth_headers, medications, clock):
    clock.set(at(8, 0, 30))
    client.post("/api/logs", json={"medication_id": medications[0]["id"], "status": "taken"})

    assert client.post("/api/schedule/check", headers=auth_headers).json()["fired"] == []
    clock.set(at(8, 15))
    assert client.post("/api/schedule/check", headers=auth_headers).json()["fired"] == []

    data = client.get("/api/schedule/next-dose", headers=auth_headers).json()
    assert data["due_dose"]["name"] == "Lisinopril"


def test_clear_feed(client, auth_headers, medications, clock):
    client.post("/api/ai-notifications", json={"title": "Hydrate", "body": "Drink water"})
    clock.set(at(8, 0, 30))
    client.post("/api/schedule/check", headers=auth_headers)
    assert len(client.get("/api/feed", headers=auth_headers).json()) == 3

    response = client.delete("/api/feed", headers=auth_headers)
    assert response.json() == {"success": True}
    assert client.get("/api/feed", headers=auth_headers).json() == []

    client.post("/api/ai-notifications", json={"title": "Walk", "body": "Take a short walk"})
    feed = client.get("/api/feed", headers=auth_headers).json()
    assert [e["title"] for e in feed] == ["Walk"]


def test_clear_feed_requires_session(client):
    assert client.delete("/api/feed").status_code == 401
