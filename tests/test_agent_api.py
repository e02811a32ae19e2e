import base64
from datetime import datetime

from app.services.agent_service import CHAT_FALLBACK, DISTRESS_OPENING, detect_mood
from app.services.ai_service import (
    DISTRESS_QUOTA_FALLBACK,
    INSIGHT_QUOTA_FALLBACK,
    SUMMARY_FALLBACK
)

FRAME = base64.b64encode(b"\xff\xd8\xff\xe0fake-jpeg").decode()


def test_chat_runs_agent_actions(client, auth_headers, fake_genai):
    fake_genai.queue("Remember your evening dose.", calls=[
        ("send_notification", {"title": "Hydration", "body": "Drink a glass of water.", "type": "recommendation"}),
        ("talk_to_patient", {"message": "You are doing great."}),
        ("wake_up", {"reason": "Patient spoke"}),
    ])

    data = client.post("/api/agent/chat", json={"message": "Hi there"}, headers=auth_headers).json()

    assert data["actions"] == ["send_notification", "talk_to_patient", "wake_up"]
    assert data["speech"] == "You are doing great."
    assert data["notifications_created"] == 1
    assert [m["content"] for m in data["messages"]] == [
        "Hi there",
        "I'm awake! Reason: Patient spoke. How can I help?",
        "Remember your evening dose.",
    ]
    assert data["messages"][0]["role"] == "user"

    stored = client.get("/api/ai-notifications").json()
    assert stored[0]["title"] == "Hydration"
    assert stored[0]["type"] == "recommendation"

    feed = client.get("/api/feed", headers=auth_headers).json()
    assert [(e["title"], e["source"]) for e in feed if e["source"] == "ai"] == [("Hydration", "ai")]


def test_chat_sends_tools_and_context(client, auth_headers, fake_genai, medications):
    client.post("/api/agent/chat", json={"message": "How am I doing?"}, headers=auth_headers)

    call = fake_genai.calls[-1]
    assert "Metformin, Lisinopril" in call["contents"]
    assert "User Message: How am I doing?" in call["contents"]
    names = [d.name for d in call["config"].tools[0].function_declarations]
    assert names == ["send_notification", "talk_to_patient", "wake_up"]


def test_chat_ignores_speech_when_voice_disabled(client, auth_headers, fake_genai):
    client.post("/api/settings", json={"voice_agent_enabled": False})
    fake_genai.queue(None, calls=[("talk_to_patient", {"message": "Hello"})])

    data = client.post("/api/agent/chat", json={"message": "Hi"}, headers=auth_headers).json()
    assert data["speech"] is None
    assert len(data["messages"]) == 1


def test_chat_notification_without_body_is_skipped(client, auth_headers, fake_genai):
    fake_genai.queue("Ok", calls=[("send_notification", {"title": "Empty"})])

    data = client.post("/api/agent/chat", json={"message": "Hi"}, headers=auth_headers).json()
    assert data["notifications_created"] == 0
    assert client.get("/api/ai-notifications").json() == []


def test_chat_fallback_on_error(client, auth_headers, fake_genai):
    fake_genai.error = RuntimeError("connection reset")

    data = client.post("/api/agent/chat", json={"message": "Hi"}, headers=auth_headers).json()
    assert data["messages"][-1] == {"role": "assistant", "content": CHAT_FALLBACK}
    assert data["actions"] == []


def test_chat_rejects_empty_message(client, auth_headers):
    response = client.post("/api/agent/chat", json={"message": ""}, headers=auth_headers)
    assert response.status_code == 422


def test_summary(client, auth_headers, fake_genai, settings):
    fake_genai.queue("Adherence is good.")

    data = client.post("/api/agent/summary", headers=auth_headers).json()
    assert data == {"summary": "Adherence is good."}
    assert fake_genai.calls[-1]["model"] == settings.GEMINI_SUMMARY_MODEL
    assert "Patient Profile:" in fake_genai.calls[-1]["contents"]


def test_summary_empty_and_error(client, auth_headers, fake_genai):
    fake_genai.queue("")
    assert client.post("/api/agent/summary", headers=auth_headers).json()["summary"] == "No summary generated."

    fake_genai.error = RuntimeError("invalid key")
    assert client.post("/api/agent/summary", headers=auth_headers).json()["summary"] == SUMMARY_FALLBACK


def test_insight_is_throttled(client, auth_headers, fake_genai, medications, clock):
    fake_genai.queue("Take Metformin with breakfast.")

    first = client.get("/api/agent/insight", headers=auth_headers).json()
    assert first["insight"] == "Take Metformin with breakfast."
    assert first["next_dose"]["name"] == "Metformin"
    assert first["mood"] == "Stable"
    assert first["throttled"] is False

    clock.advance(seconds=10)
    second = client.get("/api/agent/insight", headers=auth_headers).json()
    assert second["throttled"] is True
    assert second["insight"] == "Take Metformin with breakfast."
    assert len(fake_genai.calls) == 1

    clock.advance(seconds=30)
    client.get("/api/agent/insight", headers=auth_headers)
    assert len(fake_genai.calls) == 2


def test_insight_quota_and_error(client, auth_headers, fake_genai, clock):
    fake_genai.error = RuntimeError("429 RESOURCE_EXHAUSTED")
    assert client.get("/api/agent/insight", headers=auth_headers).json()["insight"] == INSIGHT_QUOTA_FALLBACK

    clock.advance(minutes=1)
    fake_genai.error = RuntimeError("timeout")
    assert client.get("/api/agent/insight", headers=auth_headers).json()["insight"] == INSIGHT_QUOTA_FALLBACK


def test_detect_mood():
    assert detect_mood("The patient is likely in Pain.") == "Pain"
    assert detect_mood("Signs of panic and fear") == "Panic"
    assert detect_mood("Breathe slowly.") == "Distressed"


def test_distress_wakes_agent(client, auth_headers, fake_genai):
    client.post("/api/profile", json={"condition": "Asthma"})
    fake_genai.queue("Sit upright and use your inhaler. Likely mood: Fear.")
    fake_genai.queue("I'm here with you.", calls=[("talk_to_patient", {"message": "Breathe slowly."})])

    data = client.post("/api/agent/distress", headers=auth_headers).json()

    assert data["handled"] is True
    assert data["message"] == "Sit upright and use your inhaler. Likely mood: Fear."
    assert data["mood"] == "Fear"
    wake_up = data["wake_up"]
    assert wake_up["messages"][0]["role"] == "assistant"
    assert wake_up["messages"][0]["content"].startswith(
        "[Autonomous Wake-up]: EMERGENCY: Distress detected for patient with Asthma."
    )
    assert wake_up["speech"] == "Breathe slowly."

    insight = client.get("/api/agent/insight", headers=auth_headers).json()
    assert insight["mood"] == "Fear"


def test_distress_cooldown(client, auth_headers, clock):
    assert client.post("/api/agent/distress", headers=auth_headers).json()["handled"] is True

    clock.advance(seconds=5)
    data = client.post("/api/agent/distress", headers=auth_headers).json()
    assert data == {"handled": False, "reason": "cooldown", "message": None, "mood": None, "wake_up": None}

    clock.advance(seconds=6)
    assert client.post("/api/agent/distress", headers=auth_headers).json()["handled"] is True


def test_distress_monitor_disabled(client, auth_headers, fake_genai):
    client.post("/api/settings", json={"distress_monitor_enabled": False})

    data = client.post("/api/agent/distress", headers=auth_headers).json()
    assert data["handled"] is False
    assert data["reason"] == "disabled"
    assert fake_genai.calls == []


def test_distress_processing_guard(client, auth_headers, runtime):
    runtime.state.distress_processing = True

    data = client.post("/api/agent/distress", headers=auth_headers).json()
    assert data["reason"] == "processing"


def test_distress_quota_error(client, auth_headers, fake_genai, runtime):
    fake_genai.error = RuntimeError("Quota exceeded for model")

    data = client.post("/api/agent/distress", headers=auth_headers).json()
    assert data["handled"] is True
    assert data["message"] == DISTRESS_QUOTA_FALLBACK
    assert data["mood"] == "Stable"
    assert data["wake_up"] is None
    assert runtime.state.distress_processing is False


def test_distress_other_error(client, auth_headers, fake_genai):
    fake_genai.error = RuntimeError("connection reset")

    data = client.post("/api/agent/distress", headers=auth_headers).json()
    assert data["message"] == DISTRESS_OPENING
    assert data["wake_up"] is None


def test_verify_logs_due_dose(client, auth_headers, fake_genai, medications, clock):
    clock.set(datetime(2026, 10, 19, 8, 5))
    client.post("/api/schedule/snooze", json={"medication_id": medications[0]["id"]}, headers=auth_headers)
    fake_genai.queue("YES")

    data = client.post("/api/agent/verify", json={"frame": FRAME}, headers=auth_headers).json()

    assert data["verified"] is True
    assert data["medication_id"] == medications[0]["id"]
    logs = client.get("/api/logs").json()
    assert logs[0]["id"] == data["log_id"]
    assert logs[0]["status"] == "taken"
    assert logs[0]["medication_name"] == "Metformin"

    next_dose = client.get("/api/schedule/next-dose", headers=auth_headers).json()
    assert next_dose["snooze"]["active"] is False
    assert next_dose["due_dose"]["name"] == "Lisinopril"

    clock.set(datetime(2026, 10, 19, 8, 15))
    assert client.post("/api/schedule/check", headers=auth_headers).json()["fired"] == []


def test_verify_sends_frame_to_vision(client, auth_headers, fake_genai):
    fake_genai.queue("NO")

    data = client.post("/api/agent/verify", json={"frame": FRAME}, headers=auth_headers).json()
    assert data == {"verified": False, "medication_id": None, "log_id": None}

    part = fake_genai.calls[-1]["contents"][1]
    assert part.inline_data.data == base64.b64decode(FRAME)
    assert part.inline_data.mime_type == "image/jpeg"
    assert client.get("/api/logs").json() == []


def test_verify_error_is_not_verified(client, auth_headers, fake_genai, medications):
    fake_genai.error = RuntimeError("vision unavailable")

    data = client.post("/api/agent/verify", json={"frame": FRAME}, headers=auth_headers).json()
    assert data["verified"] is False
    assert client.get("/api/logs").json() == []


def test_verify_rejects_invalid_frame(client, auth_headers, fake_genai):
    response = client.post("/api/agent/verify", json={"frame": "not base64!"}, headers=auth_headers)

    assert response.status_code == 400
    assert fake_genai.calls == []


def test_verify_rejects_concurrent_call(client, auth_headers, fake_genai, runtime):
    runtime.state.verifying = True

    response = client.post("/api/agent/verify", json={"frame": FRAME}, headers=auth_headers)

    assert response.status_code == 409
    assert fake_genai.calls == []
    assert runtime.state.verifying is True


def test_verify_flag_is_reset(client, auth_headers, fake_genai, runtime):
    fake_genai.error = RuntimeError("vision unavailable")
    client.post("/api/agent/verify", json={"frame": FRAME}, headers=auth_headers)

    assert runtime.state.verifying is False


def test_agent_notification_uses_runtime_clock(client, auth_headers, fake_genai):
    fake_genai.queue("Ok", calls=[("send_notification", {"title": "Hydration", "body": "Drink water."})])
    client.post("/api/agent/chat", json={"message": "Hi"}, headers=auth_headers)

    feed = client.get("/api/feed", headers=auth_headers).json()
    ai_entry = next(e for e in feed if e["source"] == "ai")
    assert ai_entry["timestamp"].startswith("2026-10-19T07:59")
