"""
Esquemas Pydantic para el planificador de dosis
"""
from pydantic import BaseModel
from typing import List, Optional
from datetime import datetime

from app.schemas.medication import MedicationResponse
from app.schemas.notification import FeedEntryResponse


class SnoozeStateResponse(BaseModel):
    active: bool
    until: Optional[datetime] = None
    disclaimer: Optional[str] = None


class NextDoseResponse(BaseModel):
    """Siguiente toma y toma vencida pendiente"""
    next_dose: Optional[MedicationResponse] = None
    due_dose: Optional[MedicationResponse] = None
    phase: Optional[str] = None
    snooze: SnoozeStateResponse


class SnoozeRequest(BaseModel):
    medication_id: int


class SnoozeResponse(BaseModel):
    medication_id: int
    until: datetime
    disclaimer: str


class ReminderCheckResponse(BaseModel):
    fired: List[FeedEntryResponse]
    snoozed: bool
