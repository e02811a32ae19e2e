"""
Esquemas Pydantic para el historial de dosis
"""
from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime
from enum import Enum

from app.models.dose_log import DoseStatus


class MedicationState(str, Enum):
    """Estado de la referencia al medicamento en el historial"""
    ACTIVE = "active"
    ORPHANED = "orphaned"  # el medicamento fue eliminado
    GENERAL = "general"  # registro sin medicamento


class DoseLogCreate(BaseModel):
    """Esquema para registrar una toma"""
    medication_id: Optional[int] = None
    status: DoseStatus
    mood: Optional[str] = Field("Normal", max_length=50)
    notes: Optional[str] = ""


class DoseLogResponse(BaseModel):
    """Registro del historial con el nombre del medicamento"""
    id: int
    medication_id: Optional[int] = None
    medication_name: Optional[str] = None
    medication_state: MedicationState
    status: DoseStatus
    mood: Optional[str] = None
    notes: Optional[str] = None
    timestamp: Optional[datetime] = None


class HealingComparison(BaseModel):
    """Comparación de adherencia de hoy contra días anteriores"""
    today_adherence: float
    past_adherence: float
    difference: float
    message: str
