"""
Planificador de dosis y máquina de estados de recordatorios

Funciones puras para elegir la siguiente dosis y evaluar ventanas de
recordatorio, más un planificador con estado que recuerda qué eventos ya se
dispararon por (medicamento, día) para no depender del ritmo del temporizador.

Las horas de toma son cadenas "HH:MM" comparadas lexicográficamente y
ancladas a la fecha del reloj (sin zona horaria ni cambio de día).
"""
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple
import logging

from app.models.dose_log import DoseStatus
from app.models.notification import NotificationCategory

logger = logging.getLogger(__name__)

REMINDER_TITLE = "Medication Reminder"
URGENT_TITLE = "URGENT CLINICAL ALERT"
URGENT_AFTER_MINUTES = 15


class SystemClock:
    """Reloj de pared local"""

    def now(self) -> datetime:
        return datetime.now()


class DosePhase(str, Enum):
    """Estados de una toma programada durante un día"""
    PENDING = "pending"
    REMINDER_FIRED = "reminder_fired"
    URGENT_FIRED = "urgent_fired"
    TAKEN = "taken"
    MISSED = "missed"


TERMINAL_PHASES = (DosePhase.TAKEN, DosePhase.MISSED)


@dataclass
class SnoozeState:
    """Posposición activa (solo en memoria)"""
    until: Optional[datetime] = None
    disclaimer: Optional[str] = None

    def is_active(self, now: datetime) -> bool:
        return self.until is not None and now < self.until


@dataclass
class NotificationEvent:
    """Notificación sintetizada por el planificador, nunca persistida"""
    id: int
    title: str
    body: str
    category: NotificationCategory
    medication_id: Optional[int]
    created_at: datetime
    requires_ack: bool = False


def clock_millis(now: datetime) -> int:
    return int(now.timestamp() * 1000)


def current_hhmm(now: datetime) -> str:
    return now.strftime("%H:%M")


def scheduled_instant(time_of_day: str, now: datetime) -> datetime:
    """Anclar "HH:MM" a la fecha de `now`"""
    hours, minutes = (int(part) for part in time_of_day.split(":"))
    return now.replace(hour=hours, minute=minutes, second=0, microsecond=0)


def minutes_since(time_of_day: str, now: datetime) -> float:
    return (now - scheduled_instant(time_of_day, now)).total_seconds() / 60


def select_next_dose(meds: Sequence, now: datetime):
    """
    Primera toma con hora estrictamente mayor que la actual; si todas ya
    pasaron hoy, la más temprana. None solo si la lista está vacía.
    """
    if not meds:
        return None

    ordered = sorted(meds, key=lambda med: med.time)
    current = current_hhmm(now)
    for med in ordered:
        if med.time > current:
            return med
    return ordered[0]


def reminder_event(med, now: datetime) -> NotificationEvent:
    return NotificationEvent(
        id=clock_millis(now),
        title=REMINDER_TITLE,
        body=f"It's time for your {med.name}.",
        category=NotificationCategory.INFO,
        medication_id=med.id,
        created_at=now,
    )


def urgent_event(med, now: datetime, after_minutes: int = URGENT_AFTER_MINUTES) -> NotificationEvent:
    return NotificationEvent(
        id=clock_millis(now),
        title=URGENT_TITLE,
        body=(
            f"CRITICAL: You missed your {med.name} dose {after_minutes} minutes ago. "
            "Please take it immediately."
        ),
        category=NotificationCategory.URGENT,
        medication_id=med.id,
        created_at=now,
        requires_ack=True,
    )


def apply_snooze(duration_minutes: int, now: datetime, disclaimer: Optional[str] = None) -> SnoozeState:
    return SnoozeState(until=now + timedelta(minutes=duration_minutes), disclaimer=disclaimer)


def evaluate_reminder(
        next_dose,
        now: datetime,
        snooze: Optional[SnoozeState],
        notifications_enabled: bool
) -> Optional[NotificationEvent]:
    """
    Evaluar una sola vez la siguiente dosis contra el reloj.

    Ventanas semiabiertas sobre los minutos transcurridos desde la hora
    programada: (0, 1) recordatorio informativo, [15, 16) alerta urgente.
    Con la posposición activa no se emite nada.
    """
    if not notifications_enabled or next_dose is None:
        return None
    if snooze is not None and snooze.is_active(now):
        return None

    diff = minutes_since(next_dose.time, now)
    if 0 < diff < 1:
        return reminder_event(next_dose, now)
    if URGENT_AFTER_MINUTES <= diff < URGENT_AFTER_MINUTES + 1:
        return urgent_event(next_dose, now)
    return None


@dataclass
class DoseTracker:
    """Estado disparado por (medicamento, día)"""
    phases: Dict[Tuple[int, date], DosePhase] = field(default_factory=dict)

    def phase(self, medication_id: int, day: date) -> DosePhase:
        return self.phases.get((medication_id, day), DosePhase.PENDING)

    def advance(self, medication_id: int, day: date, phase: DosePhase):
        self.phases[(medication_id, day)] = phase

    def prune(self, today: date):
        """Descartar días anteriores"""
        for key in [key for key in self.phases if key[1] < today]:
            del self.phases[key]


class DoseScheduler:
    """Planificador con estado explícito y reloj inyectado"""

    def __init__(
            self,
            clock=None,
            tracker: Optional[DoseTracker] = None,
            urgent_after_minutes: int = URGENT_AFTER_MINUTES,
            catch_up_minutes: int = 60
    ):
        self.clock = clock or SystemClock()
        self.tracker = tracker or DoseTracker()
        self.urgent_after_minutes = urgent_after_minutes
        self.catch_up_minutes = catch_up_minutes

    def now(self) -> datetime:
        return self.clock.now()

    def next_dose(self, meds: Sequence):
        return select_next_dose(meds, self.now())

    def phase(self, medication_id: int) -> DosePhase:
        return self.tracker.phase(medication_id, self.now().date())

    def due_dose(self, meds: Sequence):
        """Toma más reciente ya vencida hoy y sin resolver, o la siguiente"""
        now = self.now()
        today = now.date()
        current = current_hhmm(now)
        due = [
            med for med in meds
            if med.time <= current and self.tracker.phase(med.id, today) not in TERMINAL_PHASES
        ]
        if due:
            return max(due, key=lambda med: med.time)
        return select_next_dose(meds, now)

    def check(
            self,
            meds: Sequence,
            snooze: Optional[SnoozeState] = None,
            notifications_enabled: bool = True
    ) -> List[NotificationEvent]:
        """
        Evaluar todas las tomas de hoy.

        Cada recordatorio y cada alerta urgente se emite como máximo una vez
        por (medicamento, día), aunque el temporizador se retrase o se repita.
        Las tomas resueltas (tomada/omitida) no vuelven a notificar.
        """
        now = self.now()
        if not notifications_enabled:
            return []
        if snooze is not None and snooze.is_active(now):
            return []

        today = now.date()
        self.tracker.prune(today)

        events = []
        for med in sorted(meds, key=lambda m: m.time):
            if med.id is None:
                continue

            phase = self.tracker.phase(med.id, today)
            if phase in TERMINAL_PHASES or phase == DosePhase.URGENT_FIRED:
                continue

            diff = minutes_since(med.time, now)
            if self.urgent_after_minutes <= diff < self.catch_up_minutes:
                events.append(urgent_event(med, now, self.urgent_after_minutes))
                self.tracker.advance(med.id, today, DosePhase.URGENT_FIRED)
            elif 0 < diff < self.urgent_after_minutes and phase == DosePhase.PENDING:
                events.append(reminder_event(med, now))
                self.tracker.advance(med.id, today, DosePhase.REMINDER_FIRED)

        if events:
            logger.info(f"⏰ {len(events)} notificación(es) de dosis emitidas")
        return events

    def resolve(self, medication_id: Optional[int], status: DoseStatus):
        """Cerrar la toma de hoy como tomada u omitida"""
        if medication_id is None:
            return
        phase = DosePhase.TAKEN if status == DoseStatus.TAKEN else DosePhase.MISSED
        self.tracker.advance(medication_id, self.now().date(), phase)
