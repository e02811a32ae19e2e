"""
Endpoints del planificador de dosis
"""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.dependencies import get_runtime
from app.schemas.common import SuccessResponse
from app.schemas.schedule import (
    NextDoseResponse,
    ReminderCheckResponse,
    SnoozeRequest,
    SnoozeResponse
)
from app.services.agent_service import AgentService
from app.services.background import reminder_tick
from app.services.medication_service import MedicationService

router = APIRouter()


def snooze_payload(runtime) -> dict:
    return {
        "active": runtime.snooze_active(),
        "until": runtime.snooze.until,
        "disclaimer": runtime.snooze.disclaimer
    }


@router.get("/next-dose", response_model=NextDoseResponse)
async def get_next_dose(
        db: Session = Depends(get_db),
        runtime=Depends(get_runtime)
):
    """
    Siguiente toma programada y toma vencida pendiente
    """
    medications = MedicationService(db).get_medications()
    next_dose = runtime.scheduler.next_dose(medications)

    return {
        "next_dose": next_dose,
        "due_dose": runtime.scheduler.due_dose(medications),
        "phase": runtime.scheduler.phase(next_dose.id).value if next_dose else None,
        "snooze": snooze_payload(runtime)
    }


@router.post("/check", response_model=ReminderCheckResponse)
async def run_check(
        db: Session = Depends(get_db),
        runtime=Depends(get_runtime)
):
    """
    Ejecutar una evaluación de recordatorios ahora
    """
    fired = reminder_tick(runtime, db)
    return {"fired": fired, "snoozed": runtime.snooze_active()}


@router.post("/snooze", response_model=SnoozeResponse)
async def snooze_reminders(
        snooze_request: SnoozeRequest,
        db: Session = Depends(get_db),
        runtime=Depends(get_runtime)
):
    """
    Posponer recordatorios con advertencia médica
    """
    medication = MedicationService(db).get_medication_by_id(snooze_request.medication_id)
    if not medication:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Medicamento no encontrado"
        )

    return AgentService(runtime, db).snooze(medication)


@router.delete("/snooze", response_model=SuccessResponse)
async def clear_snooze(runtime=Depends(get_runtime)):
    """
    Cancelar la posposición
    """
    runtime.clear_snooze()
    return {"success": True}
