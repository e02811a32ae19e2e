"""
Modelo de Notificaciones generadas por el agente
"""
from sqlalchemy import Column, Integer, String, Text, DateTime, Boolean, Enum
from sqlalchemy.sql import func
import enum

from app.core.database import Base


class NotificationCategory(str, enum.Enum):
    """Categoría de notificación (solo afecta la presentación)"""
    INFO = "info"
    URGENT = "urgent"
    RECOMMENDATION = "recommendation"


class AINotification(Base):
    """Notificación persistida proveniente del agente o de la MedBox"""
    __tablename__ = "ai_notifications"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    title = Column(String(255), nullable=True)
    body = Column(Text, nullable=True)
    type = Column(
        Enum(NotificationCategory, values_callable=lambda e: [m.value for m in e]),
        default=NotificationCategory.INFO
    )
    is_read = Column(Boolean, default=False)
    timestamp = Column(DateTime(timezone=True), server_default=func.now(), index=True)

    def __repr__(self):
        return f"<AINotification(id={self.id}, title='{self.title}', type={self.type})>"
