"""
Modelo de Configuración de la aplicación (fila única)
"""
from sqlalchemy import Column, Integer, String, Boolean

from app.core.database import Base


DEFAULT_MEDBOX_ID = "MB-7892"


class AppSettings(Base):
    """Preferencias del paciente"""
    __tablename__ = "settings"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    medbox_id = Column(String(50), default=DEFAULT_MEDBOX_ID)
    snooze_duration_minutes = Column(Integer, default=15)
    notifications_enabled = Column(Boolean, default=True)
    voice_agent_enabled = Column(Boolean, default=True)
    distress_monitor_enabled = Column(Boolean, default=True)
    minhealth_sync_enabled = Column(Boolean, default=False)

    def __repr__(self):
        return f"<AppSettings(id={self.id}, medbox_id='{self.medbox_id}')>"
