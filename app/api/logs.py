"""
Endpoints del historial de dosis
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List

from app.core.database import get_db
from app.core.dependencies import get_runtime
from app.schemas.common import CreatedResponse
from app.schemas.dose_log import DoseLogCreate, DoseLogResponse, HealingComparison
from app.services.dose_log_service import DoseLogService

router = APIRouter()


@router.get("", response_model=List[DoseLogResponse])
async def list_logs(db: Session = Depends(get_db)):
    """
    Historial de tomas, más reciente primero
    """
    return DoseLogService(db).get_logs()


@router.post("", response_model=CreatedResponse)
async def create_log(
        log_data: DoseLogCreate,
        db: Session = Depends(get_db),
        runtime=Depends(get_runtime)
):
    """
    Registrar una toma u omisión y cerrar la toma de hoy en el planificador
    """
    log = DoseLogService(db).create_log(log_data, timestamp=runtime.now())
    runtime.resolve_dose(log_data.medication_id, log_data.status)
    return {"id": log.id}


@router.get("/comparison", response_model=HealingComparison)
async def get_healing_comparison(
        db: Session = Depends(get_db),
        runtime=Depends(get_runtime)
):
    """
    Adherencia de hoy comparada con días anteriores
    """
    return DoseLogService(db).healing_comparison(runtime.now().date())
