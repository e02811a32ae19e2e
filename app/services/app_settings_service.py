"""
Servicio de configuración del paciente
"""
from sqlalchemy.orm import Session

from app.models.app_settings import AppSettings, DEFAULT_MEDBOX_ID
from app.schemas.app_settings import SettingsUpdate
import logging

logger = logging.getLogger(__name__)


class AppSettingsService:
    """Servicio para la fila única de configuración"""

    def __init__(self, db: Session):
        self.db = db

    def get_settings(self) -> AppSettings:
        """Obtener configuración, creándola con valores por defecto si no existe"""
        app_settings = self.db.query(AppSettings).order_by(AppSettings.id).first()
        if app_settings:
            return app_settings

        app_settings = AppSettings(medbox_id=DEFAULT_MEDBOX_ID)
        self.db.add(app_settings)
        self.db.commit()
        self.db.refresh(app_settings)

        logger.info("Configuración creada con valores por defecto")
        return app_settings

    def update_settings(self, settings_update: SettingsUpdate) -> AppSettings:
        """Actualizar configuración"""
        app_settings = self.get_settings()

        for field, value in settings_update.dict(exclude_unset=True).items():
            if value is not None:
                setattr(app_settings, field, value)

        self.db.commit()
        self.db.refresh(app_settings)

        logger.info("Configuración actualizada")
        return app_settings
