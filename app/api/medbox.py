"""
Endpoints de la MedBox
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.dependencies import get_runtime
from app.schemas.common import SuccessResponse
from app.schemas.medbox import MedBoxResponse, WeightUpdate
from app.services.medbox_service import MedBoxService

router = APIRouter()


@router.get("", response_model=MedBoxResponse)
async def get_medbox(db: Session = Depends(get_db)):
    """Estado de la MedBox (se registra con 500g por defecto)"""
    return MedBoxService(db).get_medbox()


@router.post("/weight", response_model=SuccessResponse)
async def update_weight(
        weight_data: WeightUpdate,
        db: Session = Depends(get_db),
        runtime=Depends(get_runtime)
):
    """Nueva lectura de la báscula"""
    MedBoxService(db).record_weight(weight_data.weight, timestamp=runtime.now())
    return {"success": True}
