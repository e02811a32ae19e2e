"""
Esquemas de respuesta compartidos
"""
from pydantic import BaseModel


class CreatedResponse(BaseModel):
    """Respuesta de inserción"""
    id: int


class SuccessResponse(BaseModel):
    """Respuesta de operación simple"""
    success: bool = True
