"""
Endpoints de notificaciones del agente
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List

from app.core.config import get_settings
from app.core.database import get_db
from app.core.dependencies import get_runtime
from app.schemas.common import SuccessResponse
from app.schemas.notification import AINotificationCreate, AINotificationResponse
from app.services.notification_service import NotificationService

router = APIRouter()
settings = get_settings()


@router.get("", response_model=List[AINotificationResponse])
async def list_notifications(db: Session = Depends(get_db)):
    """Últimas notificaciones, más recientes primero"""
    return NotificationService(db).get_recent(settings.AI_NOTIFICATIONS_LIMIT)


@router.post("", response_model=SuccessResponse)
async def create_notification(
        notification_data: AINotificationCreate,
        db: Session = Depends(get_db),
        runtime=Depends(get_runtime)
):
    """Crear notificación"""
    NotificationService(db).create_notification(notification_data, timestamp=runtime.now())
    return {"success": True}
