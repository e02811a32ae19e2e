"""
Esquemas Pydantic para Notificaciones
"""
from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime

from app.models.notification import NotificationCategory


class AINotificationCreate(BaseModel):
    """Esquema para crear notificación del agente"""
    title: str = Field(..., min_length=1, max_length=255)
    body: str = Field(..., min_length=1)
    type: Optional[NotificationCategory] = NotificationCategory.INFO


class AINotificationResponse(BaseModel):
    id: int
    title: Optional[str] = None
    body: Optional[str] = None
    type: NotificationCategory
    is_read: bool = False
    timestamp: Optional[datetime] = None

    class Config:
        from_attributes = True


class FeedEntryResponse(BaseModel):
    """Entrada del feed de notificaciones"""
    id: int
    title: str
    body: str
    category: NotificationCategory
    source: str
    timestamp: datetime
    read: bool = False
    requires_ack: bool = False

    class Config:
        from_attributes = True
