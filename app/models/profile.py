"""
Modelo de Perfil del Paciente
"""
from sqlalchemy import Column, Integer, String, Text

from app.core.database import Base


DEFAULT_PROFILE_NAME = "Patient"
DEFAULT_PROFILE_CONDITION = "Chronic Condition"


class PatientProfile(Base):
    """Perfil único del paciente"""
    __tablename__ = "patient_profile"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    name = Column(String(255), nullable=True)
    condition = Column(String(255), nullable=True)
    doctor_notes = Column(Text, nullable=True)

    def __repr__(self):
        return f"<PatientProfile(id={self.id}, name='{self.name}')>"
