"""
Esquemas Pydantic para el Perfil del paciente
"""
from pydantic import BaseModel, Field
from typing import Optional


class ProfileUpdate(BaseModel):
    name: Optional[str] = Field(None, max_length=255)
    condition: Optional[str] = Field(None, max_length=255)
    doctor_notes: Optional[str] = None


class ProfileResponse(BaseModel):
    id: int
    name: Optional[str] = None
    condition: Optional[str] = None
    doctor_notes: Optional[str] = None

    class Config:
        from_attributes = True
