"""
Modelo de la caja de medicamentos (MedBox) con báscula
"""
from sqlalchemy import Column, Integer, String, Float, DateTime
from sqlalchemy.sql import func

from app.core.database import Base


DEFAULT_MEDBOX_WEIGHT = 500.0


class MedBox(Base):
    """Lectura de peso de la MedBox (fila única)"""
    __tablename__ = "medbox"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    current_weight_grams = Column(Float, default=DEFAULT_MEDBOX_WEIGHT)
    last_weight_grams = Column(Float, default=DEFAULT_MEDBOX_WEIGHT)
    status = Column(String(50), default="Connected")
    last_updated = Column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self):
        return f"<MedBox(id={self.id}, weight={self.current_weight_grams}g, status={self.status})>"

    @property
    def weight_delta(self) -> float:
        """Diferencia entre la lectura anterior y la actual"""
        return (self.last_weight_grams or 0.0) - (self.current_weight_grams or 0.0)
