"""
Servicio de la MedBox (báscula de la caja de medicamentos)
"""
from sqlalchemy.orm import Session
from typing import Optional
from datetime import datetime

from app.models.medbox import MedBox, DEFAULT_MEDBOX_WEIGHT
from app.models.notification import NotificationCategory
from app.schemas.notification import AINotificationCreate
from app.services.notification_service import NotificationService
import logging

logger = logging.getLogger(__name__)

WEIGHT_CHANGE_TITLE = "MedBox Weight Change"


class MedBoxService:
    """Servicio para la lectura de peso de la MedBox"""

    def __init__(self, db: Session):
        self.db = db

    def get_medbox(self) -> MedBox:
        """Obtener la MedBox, creándola con peso por defecto si no existe"""
        box = self.db.query(MedBox).order_by(MedBox.id).first()
        if box:
            return box

        box = MedBox(
            current_weight_grams=DEFAULT_MEDBOX_WEIGHT,
            last_weight_grams=DEFAULT_MEDBOX_WEIGHT,
            status="Connected"
        )
        self.db.add(box)
        self.db.commit()
        self.db.refresh(box)

        logger.info("MedBox registrada con peso por defecto")
        return box

    def record_weight(self, weight: float, timestamp: Optional[datetime] = None) -> MedBox:
        """Nueva lectura: la actual pasa a ser la anterior"""
        box = self.get_medbox()
        box.last_weight_grams = box.current_weight_grams
        box.current_weight_grams = weight
        box.last_updated = timestamp or datetime.now()

        self.db.commit()
        self.db.refresh(box)

        logger.info(f"Peso de MedBox: {box.last_weight_grams}g -> {box.current_weight_grams}g")
        return box

    def simulate_tick(self, rng, probability: float, pill_weight: float,
                      now: Optional[datetime] = None) -> Optional[float]:
        """
        Simular que el paciente retira una pastilla.

        Con la probabilidad dada baja el peso una pastilla y deja una
        notificación para el agente. Devuelve el nuevo peso o None.
        """
        if rng.random() >= probability:
            return None

        new_weight = (self.get_medbox().current_weight_grams or DEFAULT_MEDBOX_WEIGHT) - pill_weight
        self.record_weight(new_weight, timestamp=now)

        NotificationService(self.db).create_notification(AINotificationCreate(
            title=WEIGHT_CHANGE_TITLE,
            body=f"Detected weight change: {new_weight:g}g. Verifying dose...",
            type=NotificationCategory.INFO
        ), timestamp=now)
        return new_weight

    @staticmethod
    def to_dict(box: MedBox) -> dict:
        return {
            "current_weight_grams": box.current_weight_grams,
            "last_weight_grams": box.last_weight_grams,
            "status": box.status,
        }
