"""
Modelo de Medicamento
"""
from sqlalchemy import Column, Integer, String, Text, DateTime
from sqlalchemy.sql import func

from app.core.database import Base


class Medication(Base):
    """Modelo de Medicamento"""
    __tablename__ = "medications"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    # Información básica
    name = Column(String(255), nullable=False, index=True)
    dosage = Column(String(100), nullable=True)
    frequency = Column(String(100), nullable=True)
    time = Column(String(5), nullable=False)  # Formato HH:MM (ej: "08:30")

    # Contenido leído del código QR de la caja
    qr_data = Column(Text, nullable=True)

    # Metadatos
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self):
        return f"<Medication(id={self.id}, name='{self.name}', time={self.time})>"

    @property
    def full_name(self) -> str:
        """Nombre completo del medicamento"""
        if self.dosage:
            return f"{self.name} ({self.dosage})"
        return self.name
