"""
Endpoints de medicamentos
"""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List

from app.core.database import get_db
from app.schemas.common import CreatedResponse, SuccessResponse
from app.schemas.medication import MedicationCreate, MedicationResponse
from app.services.medication_service import MedicationService

router = APIRouter()


@router.get("", response_model=List[MedicationResponse])
async def list_medications(db: Session = Depends(get_db)):
    """
    Listar medicamentos
    """
    return MedicationService(db).get_medications()


@router.post("", response_model=CreatedResponse)
async def create_medication(
        medication_data: MedicationCreate,
        db: Session = Depends(get_db)
):
    """
    Crear nuevo medicamento (formulario o código QR)
    """
    medication = MedicationService(db).create_medication(medication_data)
    return {"id": medication.id}


@router.delete("/{medication_id}", response_model=SuccessResponse)
async def delete_medication(
        medication_id: int,
        db: Session = Depends(get_db)
):
    """
    Eliminar medicamento
    """
    if not MedicationService(db).delete_medication(medication_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Medicamento no encontrado"
        )

    return {"success": True}
