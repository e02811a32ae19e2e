"""
Servicio del perfil del paciente
"""
from sqlalchemy.orm import Session

from app.models.profile import PatientProfile, DEFAULT_PROFILE_NAME, DEFAULT_PROFILE_CONDITION
from app.schemas.profile import ProfileUpdate
import logging

logger = logging.getLogger(__name__)


class ProfileService:
    """Servicio para el perfil único del paciente"""

    def __init__(self, db: Session):
        self.db = db

    def get_profile(self) -> PatientProfile:
        """Obtener el perfil, creándolo con valores por defecto si no existe"""
        profile = self.db.query(PatientProfile).order_by(PatientProfile.id).first()
        if profile:
            return profile

        profile = PatientProfile(name=DEFAULT_PROFILE_NAME, condition=DEFAULT_PROFILE_CONDITION)
        self.db.add(profile)
        self.db.commit()
        self.db.refresh(profile)

        logger.info("Perfil del paciente creado con valores por defecto")
        return profile

    def update_profile(self, profile_update: ProfileUpdate) -> PatientProfile:
        """Actualizar perfil"""
        profile = self.get_profile()

        for field, value in profile_update.dict(exclude_unset=True).items():
            setattr(profile, field, value)

        self.db.commit()
        self.db.refresh(profile)

        logger.info(f"Perfil actualizado: {profile.name}")
        return profile

    @staticmethod
    def to_dict(profile: PatientProfile) -> dict:
        return {
            "name": profile.name,
            "condition": profile.condition,
            "doctor_notes": profile.doctor_notes,
        }
