"""
Servicio de gestión de medicamentos
"""
from sqlalchemy.orm import Session
from typing import List, Optional

from app.models.medication import Medication
from app.schemas.medication import MedicationCreate
import logging

logger = logging.getLogger(__name__)


class MedicationService:
    """Servicio para gestión de medicamentos"""

    def __init__(self, db: Session):
        self.db = db

    def get_medications(self) -> List[Medication]:
        """Obtener todos los medicamentos"""
        return self.db.query(Medication).order_by(Medication.id).all()

    def get_medication_by_id(self, medication_id: int) -> Optional[Medication]:
        """Obtener medicamento por ID"""
        return self.db.query(Medication).filter(Medication.id == medication_id).first()

    def create_medication(self, medication_data: MedicationCreate) -> Medication:
        """Crear nuevo medicamento"""

        db_medication = Medication(
            name=medication_data.name,
            dosage=medication_data.dosage,
            frequency=medication_data.frequency,
            time=medication_data.time,
            qr_data=medication_data.qr_data
        )

        self.db.add(db_medication)
        self.db.commit()
        self.db.refresh(db_medication)

        logger.info(f"Medicamento creado: {db_medication.full_name} a las {db_medication.time} (ID: {db_medication.id})")
        return db_medication

    def delete_medication(self, medication_id: int) -> bool:
        """Eliminar medicamento (el historial conserva la referencia)"""

        medication = self.get_medication_by_id(medication_id)
        if not medication:
            return False

        self.db.delete(medication)
        self.db.commit()

        logger.info(f"Medicamento eliminado: {medication.full_name} (ID: {medication_id})")
        return True

    @staticmethod
    def to_dict(medication: Medication) -> dict:
        return {
            "id": medication.id,
            "name": medication.name,
            "dosage": medication.dosage,
            "frequency": medication.frequency,
            "time": medication.time,
            "qr_data": medication.qr_data,
        }
