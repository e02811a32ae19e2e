"""
Feed de notificaciones en memoria

Combina las notificaciones locales del planificador (efímeras) con las del
agente persistidas en base de datos. Orden de visualización: más nuevas
primero, con un máximo de entradas; las más viejas se descartan.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, List, Optional
import threading

from app.models.notification import NotificationCategory
from app.services.scheduler import NotificationEvent, clock_millis

SOURCE_LOCAL = "local"
SOURCE_AI = "ai"

WELCOME_TITLE = "Welcome to MediSafe AI"
WELCOME_BODY = "Your agent is active and monitoring your health."
DEFAULT_MAX_ENTRIES = 100


@dataclass
class FeedEntry:
    id: int
    title: str
    body: str
    category: NotificationCategory
    source: str
    timestamp: datetime
    read: bool = False
    requires_ack: bool = False


class NotificationFeed:
    """Lista ordenada de notificaciones, sin duplicados por id"""

    def __init__(self, clock, welcome: bool = True, max_entries: int = DEFAULT_MAX_ENTRIES):
        self.clock = clock
        self.max_entries = max_entries
        self._entries: List[FeedEntry] = []
        # Mayor id persistido ya visto; los ids de la base solo crecen
        self._last_ai_id = 0
        self._lock = threading.Lock()
        if welcome:
            now = clock.now()
            self._entries.append(FeedEntry(
                id=clock_millis(now),
                title=WELCOME_TITLE,
                body=WELCOME_BODY,
                category=NotificationCategory.INFO,
                source=SOURCE_LOCAL,
                timestamp=now,
            ))

    def entries(self) -> List[FeedEntry]:
        with self._lock:
            return list(self._entries)

    def __len__(self):
        return len(self._entries)

    def _trim(self):
        del self._entries[self.max_entries:]

    def merge_persisted(self, notifications: Iterable) -> int:
        """
        Agregar notificaciones persistidas nuevas.

        Un id ya visto no vuelve a entrar aunque se haya borrado del feed
        con `clear()` o por el límite de entradas.
        """
        with self._lock:
            fresh = []
            last_id = self._last_ai_id
            for notification in sorted(notifications, key=lambda n: n.id, reverse=True):
                if notification.id <= self._last_ai_id or (fresh and notification.id == fresh[-1].id):
                    continue
                last_id = max(last_id, notification.id)
                fresh.append(FeedEntry(
                    id=notification.id,
                    title=notification.title or "",
                    body=notification.body or "",
                    category=NotificationCategory(notification.type or NotificationCategory.INFO),
                    source=SOURCE_AI,
                    timestamp=notification.timestamp or self.clock.now(),
                    read=bool(notification.is_read),
                    requires_ack=notification.type == NotificationCategory.URGENT,
                ))
            self._last_ai_id = last_id
            self._entries = fresh + self._entries
            self._trim()
            return len(fresh)

    def push_local(self, event: NotificationEvent) -> FeedEntry:
        """Agregar una notificación del planificador con id único"""
        with self._lock:
            taken = {entry.id for entry in self._entries if entry.source == SOURCE_LOCAL}
            entry_id = event.id
            while entry_id in taken:
                entry_id += 1

            entry = FeedEntry(
                id=entry_id,
                title=event.title,
                body=event.body,
                category=event.category,
                source=SOURCE_LOCAL,
                timestamp=event.created_at,
                requires_ack=event.requires_ack,
            )
            self._entries.insert(0, entry)
            self._trim()
            return entry

    def acknowledge(self, entry_id: int, source: Optional[str] = None) -> bool:
        """Marcar como leída"""
        with self._lock:
            for entry in self._entries:
                if entry.id == entry_id and (source is None or entry.source == source):
                    entry.read = True
                    return True
            return False

    def clear(self) -> int:
        """Vaciar el feed; devuelve cuántas entradas se descartaron"""
        with self._lock:
            removed = len(self._entries)
            self._entries = []
            return removed
