"""
Servicio del historial de dosis
"""
from sqlalchemy.orm import Session
from typing import Any, Dict, List, Optional
from datetime import date, datetime

from app.models.dose_log import DoseLog, DoseStatus
from app.models.medication import Medication
from app.schemas.dose_log import DoseLogCreate, MedicationState
import logging

logger = logging.getLogger(__name__)


def medication_state(medication_id: Optional[int], medication_name: Optional[str]) -> MedicationState:
    """Estado de la referencia del registro al medicamento"""
    if medication_id is None:
        return MedicationState.GENERAL
    if medication_name is None:
        return MedicationState.ORPHANED
    return MedicationState.ACTIVE


def adherence_percent(entries: List[Dict[str, Any]]) -> float:
    if not entries:
        return 0.0
    taken = len([e for e in entries if e["status"] == DoseStatus.TAKEN])
    return taken / len(entries) * 100


class DoseLogService:
    """Servicio para el historial de tomas (solo inserción)"""

    def __init__(self, db: Session):
        self.db = db

    def get_logs(self, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        """Historial con nombre del medicamento, más reciente primero"""

        query = self.db.query(DoseLog, Medication.name).outerjoin(
            Medication, DoseLog.medication_id == Medication.id
        ).order_by(DoseLog.timestamp.desc(), DoseLog.id.desc())

        if limit:
            query = query.limit(limit)

        return [
            {
                "id": log.id,
                "medication_id": log.medication_id,
                "medication_name": name,
                "medication_state": medication_state(log.medication_id, name),
                "status": log.status,
                "mood": log.mood,
                "notes": log.notes,
                "timestamp": log.timestamp,
            }
            for log, name in query.all()
        ]

    def create_log(self, log_data: DoseLogCreate, timestamp: Optional[datetime] = None) -> DoseLog:
        """Registrar una toma o una omisión"""

        db_log = DoseLog(
            medication_id=log_data.medication_id,
            status=log_data.status,
            mood=log_data.mood,
            notes=log_data.notes
        )
        if timestamp is not None:
            db_log.timestamp = timestamp

        self.db.add(db_log)
        self.db.commit()
        self.db.refresh(db_log)

        logger.info(f"Dosis registrada: medicamento {log_data.medication_id} -> {log_data.status.value}")
        return db_log

    def healing_comparison(self, today: date) -> Dict[str, Any]:
        """Comparar la adherencia de hoy contra la de días anteriores"""

        logs = self.get_logs()
        if len(logs) < 2:
            return {
                "today_adherence": 0.0,
                "past_adherence": 0.0,
                "difference": 0.0,
                "message": "Not enough data to compare."
            }

        today_logs = [e for e in logs if e["timestamp"] and e["timestamp"].date() == today]
        past_logs = [e for e in logs if not (e["timestamp"] and e["timestamp"].date() == today)]

        today_adherence = adherence_percent(today_logs)
        past_adherence = adherence_percent(past_logs)
        difference = today_adherence - past_adherence

        if difference > 5:
            message = f"Your healing progress is up by {round(difference)}% compared to previous days! Keep it up."
        elif difference < -5:
            message = (
                f"Your adherence is down by {round(abs(difference))}% today. "
                "MediSafe AI recommends staying on schedule for optimal healing."
            )
        else:
            message = "Your healing progress is stable and consistent with your history."

        return {
            "today_adherence": round(today_adherence, 1),
            "past_adherence": round(past_adherence, 1),
            "difference": round(difference, 1),
            "message": message
        }
