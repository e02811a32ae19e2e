"""
Esquemas Pydantic para la Configuración del paciente
"""
from pydantic import BaseModel, Field
from typing import Optional


class SettingsUpdate(BaseModel):
    medbox_id: Optional[str] = Field(None, max_length=50)
    snooze_duration_minutes: Optional[int] = Field(None, ge=1, le=240)
    notifications_enabled: Optional[bool] = None
    voice_agent_enabled: Optional[bool] = None
    distress_monitor_enabled: Optional[bool] = None
    minhealth_sync_enabled: Optional[bool] = None


class SettingsResponse(BaseModel):
    id: int
    medbox_id: str
    snooze_duration_minutes: int
    notifications_enabled: bool
    voice_agent_enabled: bool
    distress_monitor_enabled: bool
    minhealth_sync_enabled: bool

    class Config:
        from_attributes = True
