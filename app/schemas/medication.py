"""
Esquemas Pydantic para Medicamentos
"""
from pydantic import BaseModel, validator, Field
from typing import Optional
from datetime import datetime


def validate_hhmm(value: str) -> str:
    """Validar hora en formato HH:MM de 24 horas"""
    value = value.strip() if value else value
    if not value or len(value) != 5 or value[2] != ":":
        raise ValueError('El tiempo debe estar en formato HH:MM')
    hours, minutes = value[:2], value[3:]
    if not (hours.isdigit() and minutes.isdigit()):
        raise ValueError('El tiempo debe estar en formato HH:MM')
    if int(hours) > 23 or int(minutes) > 59:
        raise ValueError('El tiempo debe estar en formato HH:MM')
    return value


class MedicationBase(BaseModel):
    """Base para esquemas de medicamento"""
    name: str = Field(..., min_length=1, max_length=255, description="Nombre del medicamento")
    dosage: Optional[str] = Field(None, max_length=100, description="Dosis (ej: 500mg, 1 pill)")
    frequency: Optional[str] = Field("Daily", max_length=100, description="Frecuencia")
    time: str = Field(..., description="Hora de la toma en formato HH:MM")
    qr_data: Optional[str] = Field(None, description="Contenido del código QR escaneado")

    @validator('name')
    def validate_name(cls, v):
        if not v or not v.strip():
            raise ValueError('El nombre del medicamento es requerido')
        return v.strip()

    @validator('time')
    def validate_time_format(cls, v):
        return validate_hhmm(v)


class MedicationCreate(MedicationBase):
    """Esquema para crear medicamento"""
    pass


class MedicationResponse(MedicationBase):
    """Esquema de respuesta de medicamento"""
    id: int
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
