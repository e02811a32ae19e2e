# app/models/__init__.py

from .medication import Medication
from .dose_log import DoseLog, DoseStatus
from .profile import PatientProfile
from .medbox import MedBox
from .notification import AINotification, NotificationCategory
from .app_settings import AppSettings

__all__ = [
    "Medication",
    "DoseLog",
    "DoseStatus",
    "PatientProfile",
    "MedBox",
    "AINotification",
    "NotificationCategory",
    "AppSettings"
]
