"""
Temporizadores en segundo plano (APScheduler)

Dos trabajos independientes: evaluación de recordatorios y simulación de la
báscula de la MedBox. Un fallo se registra y el trabajo espera al siguiente
tick.
"""
from apscheduler.schedulers.background import BackgroundScheduler
from typing import List, Optional
import logging

from app.core.database import SessionLocal
from app.services.app_settings_service import AppSettingsService
from app.services.medbox_service import MedBoxService
from app.services.medication_service import MedicationService
from app.services.notification_feed import FeedEntry
from app.services.notification_service import NotificationService

logger = logging.getLogger(__name__)


def reminder_tick(runtime, db) -> List[FeedEntry]:
    """Evaluar las tomas de hoy y publicar los eventos en el feed"""
    medications = MedicationService(db).get_medications()
    preferences = AppSettingsService(db).get_settings()
    return runtime.run_reminder_check(medications, bool(preferences.notifications_enabled))


def medbox_tick(runtime, db) -> Optional[float]:
    """Simular un cambio de peso y refrescar el feed si hubo cambio"""
    settings = runtime.settings
    new_weight = MedBoxService(db).simulate_tick(
        runtime.rng,
        settings.MEDBOX_SIMULATION_PROBABILITY,
        settings.MEDBOX_PILL_WEIGHT_GRAMS,
        now=runtime.now()
    )
    if new_weight is not None:
        recent = NotificationService(db).get_recent(settings.AI_NOTIFICATIONS_LIMIT)
        runtime.feed.merge_persisted(recent)
    return new_weight


class BackgroundJobs:
    """Ciclo de temporizadores del acompañante"""

    def __init__(self, runtime, session_factory=SessionLocal):
        self.runtime = runtime
        self.session_factory = session_factory
        self.scheduler: Optional[BackgroundScheduler] = None

    def start(self):
        settings = self.runtime.settings
        self.scheduler = BackgroundScheduler()
        self.scheduler.add_job(
            self.run_reminder_check,
            "interval",
            seconds=settings.REMINDER_CHECK_INTERVAL,
            id="reminder_job",
            max_instances=1,
            coalesce=True
        )
        self.scheduler.add_job(
            self.run_medbox_simulation,
            "interval",
            seconds=settings.MEDBOX_SIMULATION_INTERVAL,
            id="medbox_job",
            max_instances=1,
            coalesce=True
        )
        self.scheduler.start()
        logger.info(
            f"⏱️ Temporizadores iniciados (recordatorios cada {settings.REMINDER_CHECK_INTERVAL}s, "
            f"MedBox cada {settings.MEDBOX_SIMULATION_INTERVAL}s)"
        )

    def shutdown(self):
        if self.scheduler is not None:
            self.scheduler.shutdown(wait=False)
            self.scheduler = None
            logger.info("🛑 Temporizadores detenidos")

    def run_reminder_check(self) -> List[FeedEntry]:
        db = self.session_factory()
        try:
            return reminder_tick(self.runtime, db)
        except Exception as e:
            logger.error(f"❌ Error en la evaluación de recordatorios: {e}")
            return []
        finally:
            db.close()

    def run_medbox_simulation(self) -> Optional[float]:
        db = self.session_factory()
        try:
            return medbox_tick(self.runtime, db)
        except Exception as e:
            logger.error(f"❌ Error en la simulación de MedBox: {e}")
            return None
        finally:
            db.close()
