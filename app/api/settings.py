"""
Endpoints de configuración del paciente
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.schemas.app_settings import SettingsUpdate, SettingsResponse
from app.schemas.common import SuccessResponse
from app.services.app_settings_service import AppSettingsService

router = APIRouter()


@router.get("", response_model=SettingsResponse)
async def get_settings(db: Session = Depends(get_db)):
    return AppSettingsService(db).get_settings()


@router.post("", response_model=SuccessResponse)
async def update_settings(
        settings_update: SettingsUpdate,
        db: Session = Depends(get_db)
):
    AppSettingsService(db).update_settings(settings_update)
    return {"success": True}
