"""
Endpoints del feed de notificaciones
"""
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session
from typing import List, Optional

from app.core.database import get_db
from app.core.dependencies import get_runtime
from app.schemas.common import SuccessResponse
from app.schemas.notification import FeedEntryResponse
from app.services.notification_service import NotificationService

router = APIRouter()


@router.get("", response_model=List[FeedEntryResponse])
async def get_feed(
        db: Session = Depends(get_db),
        runtime=Depends(get_runtime)
):
    """
    Feed combinado, más reciente primero
    """
    recent = NotificationService(db).get_recent(runtime.settings.AI_NOTIFICATIONS_LIMIT)
    runtime.feed.merge_persisted(recent)
    return runtime.feed.entries()


@router.post("/{entry_id}/ack", response_model=SuccessResponse)
async def acknowledge_entry(
        entry_id: int,
        source: Optional[str] = Query(None, description="local o ai"),
        runtime=Depends(get_runtime)
):
    """
    Confirmar una notificación (las urgentes lo requieren)
    """
    if not runtime.feed.acknowledge(entry_id, source):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Notificación no encontrada"
        )
    return {"success": True}


@router.delete("", response_model=SuccessResponse)
async def clear_feed(runtime=Depends(get_runtime)):
    """
    Borrar todas las notificaciones del feed
    """
    runtime.feed.clear()
    return {"success": True}
