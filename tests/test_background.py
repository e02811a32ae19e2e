from datetime import datetime

from app.core.database import SessionLocal
from app.schemas.medication import MedicationCreate
from app.services.background import BackgroundJobs, medbox_tick, reminder_tick
from app.services.medbox_service import MedBoxService
from app.services.medication_service import MedicationService
from app.services.notification_service import NotificationService


class StubRandom:
    def __init__(self, value):
        self.value = value

    def random(self):
        return self.value


class BrokenSession:
    closed = False

    def query(self, *args, **kwargs):
        raise RuntimeError("database is locked")

    def close(self):
        self.closed = True


def test_medbox_tick_simulates_pill_removal(runtime, db_session):
    runtime.rng = StubRandom(0.0)

    assert medbox_tick(runtime, db_session) == 495.0

    box = MedBoxService(db_session).get_medbox()
    assert box.current_weight_grams == 495.0
    assert box.last_weight_grams == 500.0

    notification = NotificationService(db_session).get_recent()[0]
    assert notification.title == "MedBox Weight Change"
    assert notification.body == "Detected weight change: 495g. Verifying dose..."
    assert runtime.feed.entries()[0].title == "MedBox Weight Change"


def test_medbox_tick_without_change(runtime, db_session):
    runtime.rng = StubRandom(0.99)

    assert medbox_tick(runtime, db_session) is None
    assert MedBoxService(db_session).get_medbox().current_weight_grams == 500.0
    assert NotificationService(db_session).get_recent() == []


def test_reminder_tick(runtime, db_session, clock):
    MedicationService(db_session).create_medication(MedicationCreate(name="Metformin", time="08:00"))
    clock.set(datetime(2026, 10, 19, 8, 0, 30))

    fired = reminder_tick(runtime, db_session)

    assert [entry.body for entry in fired] == ["It's time for your Metformin."]
    assert runtime.feed.entries()[0] is fired[0]
    assert reminder_tick(runtime, db_session) == []


def test_reminder_tick_clears_expired_snooze(runtime, db_session, clock):
    MedicationService(db_session).create_medication(MedicationCreate(name="Metformin", time="08:00"))
    runtime.snooze.until = datetime(2026, 10, 19, 8, 10)
    clock.set(datetime(2026, 10, 19, 8, 12))

    fired = reminder_tick(runtime, db_session)

    assert runtime.snooze.until is None
    assert len(fired) == 1


def test_jobs_log_and_survive_errors(runtime):
    sessions = []

    def factory():
        sessions.append(BrokenSession())
        return sessions[-1]

    runtime.rng = StubRandom(0.0)
    jobs = BackgroundJobs(runtime, session_factory=factory)

    assert jobs.run_reminder_check() == []
    assert jobs.run_medbox_simulation() is None
    assert all(session.closed for session in sessions)
    assert len(sessions) == 2


def test_jobs_run_with_real_sessions(runtime):
    runtime.rng = StubRandom(0.0)
    jobs = BackgroundJobs(runtime, session_factory=SessionLocal)

    assert jobs.run_medbox_simulation() == 495.0
    assert jobs.run_reminder_check() == []


def test_jobs_start_and_shutdown(runtime):
    jobs = BackgroundJobs(runtime)
    jobs.start()
    try:
        assert jobs.scheduler.get_job("reminder_job") is not None
        assert jobs.scheduler.get_job("medbox_job") is not None
    finally:
        jobs.shutdown()

    assert jobs.scheduler is None


def test_medbox_tick_uses_runtime_clock(runtime, db_session, clock):
    runtime.rng = StubRandom(0.0)
    clock.set(datetime(2026, 10, 19, 13, 45))

    medbox_tick(runtime, db_session)

    assert MedBoxService(db_session).get_medbox().last_updated == datetime(2026, 10, 19, 13, 45)
    assert NotificationService(db_session).get_recent()[0].timestamp == datetime(2026, 10, 19, 13, 45)
    assert runtime.feed.entries()[0].timestamp == datetime(2026, 10, 19, 13, 45)
