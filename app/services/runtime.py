"""
Estado en memoria del acompañante

Un único objeto dueño del reloj, el planificador, el feed, la posposición y
las marcas de tiempo del agente. Se pierde al reiniciar el proceso.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional
import logging
import random
import threading

from app.models.dose_log import DoseStatus
from app.services.ai_service import GeminiService
from app.services.notification_feed import FeedEntry, NotificationFeed
from app.services.scheduler import DoseScheduler, SnoozeState, SystemClock

logger = logging.getLogger(__name__)


@dataclass
class CompanionState:
    """Marcas de tiempo y banderas del agente"""
    last_insight_at: Optional[datetime] = None
    last_distress_at: Optional[datetime] = None
    distress_processing: bool = False
    verifying: bool = False
    current_mood: str = "Stable"
    insight: str = "Analyzing your health patterns..."


class CompanionRuntime:
    """Dueño del estado de sesión del proceso"""

    def __init__(self, settings, clock=None, ai: Optional[GeminiService] = None, rng=None):
        self.settings = settings
        self.clock = clock or SystemClock()
        self.scheduler = DoseScheduler(
            self.clock,
            urgent_after_minutes=settings.URGENT_AFTER_MINUTES,
            catch_up_minutes=settings.URGENT_CATCH_UP_MINUTES
        )
        self.feed = NotificationFeed(self.clock, max_entries=settings.FEED_MAX_ENTRIES)
        self.snooze = SnoozeState()
        self.state = CompanionState()
        self.ai = ai or GeminiService(settings)
        self.rng = rng or random.Random()
        self.lock = threading.RLock()

    def now(self) -> datetime:
        return self.clock.now()

    def snooze_active(self) -> bool:
        return self.snooze.is_active(self.now())

    def set_snooze(self, snooze: SnoozeState):
        with self.lock:
            self.snooze = snooze
        logger.info(f"😴 Recordatorios pospuestos hasta {snooze.until:%H:%M}")

    def clear_snooze(self):
        with self.lock:
            if self.snooze.until is not None:
                logger.info("Posposición eliminada")
            self.snooze = SnoozeState()

    def clear_expired_snooze(self) -> bool:
        with self.lock:
            if self.snooze.until is not None and not self.snooze_active():
                self.clear_snooze()
                return True
            return False

    def resolve_dose(self, medication_id: Optional[int], status: DoseStatus):
        """Cerrar la toma de hoy sin pisar un tick de recordatorios en curso"""
        with self.lock:
            self.scheduler.resolve(medication_id, status)

    def run_reminder_check(self, medications, notifications_enabled: bool) -> List[FeedEntry]:
        """Un tick del temporizador de recordatorios"""
        with self.lock:
            self.clear_expired_snooze()
            events = self.scheduler.check(medications, self.snooze, notifications_enabled)
            return [self.feed.push_local(event) for event in events]
