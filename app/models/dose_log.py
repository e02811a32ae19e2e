"""
Modelo de Registro de Dosis
"""
from sqlalchemy import Column, Integer, String, Text, DateTime, Enum
from sqlalchemy.sql import func
import enum

from app.core.database import Base


class DoseStatus(str, enum.Enum):
    """Estados de dosis"""
    TAKEN = "taken"
    MISSED = "missed"


class DoseLog(Base):
    """Modelo de Registro de Dosis (solo inserción)"""
    __tablename__ = "logs"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    # Referencia débil: borrar el medicamento no toca sus registros
    medication_id = Column(Integer, nullable=True, index=True)
    status = Column(Enum(DoseStatus, values_callable=lambda e: [m.value for m in e]), nullable=False)
    mood = Column(String(50), nullable=True)
    notes = Column(Text, nullable=True)
    timestamp = Column(DateTime(timezone=True), server_default=func.now(), index=True)

    def __repr__(self):
        return f"<DoseLog(id={self.id}, medication_id={self.medication_id}, status={self.status.value})>"
