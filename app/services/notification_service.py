"""
Servicio de notificaciones persistidas del agente
"""
from sqlalchemy.orm import Session
from typing import List, Optional
from datetime import datetime

from app.models.notification import AINotification, NotificationCategory
from app.schemas.notification import AINotificationCreate
import logging

logger = logging.getLogger(__name__)


class NotificationService:
    """Servicio para notificaciones del agente"""

    def __init__(self, db: Session):
        self.db = db

    def get_recent(self, limit: int = 20) -> List[AINotification]:
        """Últimas notificaciones, más recientes primero"""
        return self.db.query(AINotification).order_by(
            AINotification.timestamp.desc(),
            AINotification.id.desc()
        ).limit(limit).all()

    def create_notification(self, notification_data: AINotificationCreate,
                            timestamp: Optional[datetime] = None) -> AINotification:
        """Crear notificación con la hora local del acompañante"""
        notification = AINotification(
            title=notification_data.title,
            body=notification_data.body,
            type=notification_data.type or NotificationCategory.INFO,
            timestamp=timestamp or datetime.now()
        )

        self.db.add(notification)
        self.db.commit()
        self.db.refresh(notification)

        logger.info(f"Notificación creada: {notification.title} ({notification.type.value})")
        return notification
