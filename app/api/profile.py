"""
Endpoints del perfil del paciente
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.schemas.common import SuccessResponse
from app.schemas.profile import ProfileUpdate, ProfileResponse
from app.services.profile_service import ProfileService

router = APIRouter()


@router.get("", response_model=ProfileResponse)
async def get_profile(db: Session = Depends(get_db)):
    """Obtener perfil (se crea con valores por defecto)"""
    return ProfileService(db).get_profile()


@router.post("", response_model=SuccessResponse)
async def update_profile(
        profile_update: ProfileUpdate,
        db: Session = Depends(get_db)
):
    """Actualizar perfil"""
    ProfileService(db).update_profile(profile_update)
    return {"success": True}
